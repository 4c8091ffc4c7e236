from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.token_blacklist import BlacklistedAccessToken
from models.types import utcnow
from utils.logger import get_logger

logger = get_logger(__name__)


class AccessTokenBlacklist:
    """
    Deny-list for access tokens that must stop working before they expire.
    """

    def __init__(self, db: Session):
        self.db = db

    def add(self, token: str, user_id: int, expires_at: datetime) -> None:
        """Blacklists `token` until `expires_at`. Adding the same token twice is a no-op."""
        if self.contains(token):
            return

        self.db.add(BlacklistedAccessToken(
            user_id=user_id,
            token=token,
            expires_at=expires_at
        ))
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent logout of the same token
            self.db.rollback()
            logger.debug("Access token already blacklisted", extra={"user_id": user_id})

    def contains(self, token: str) -> bool:
        return self.db.query(
            self.db.query(BlacklistedAccessToken.id)
            .filter(BlacklistedAccessToken.token == token)
            .exists()
        ).scalar()

    def prune(self, now: Optional[datetime] = None) -> int:
        """Deletes entries whose token has expired on its own. Returns the count."""
        count = self.db.query(BlacklistedAccessToken).filter(
            BlacklistedAccessToken.expires_at <= (now or utcnow())
        ).delete(synchronize_session=False)
        self.db.commit()
        return count
