import secrets
import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from models.refresh_tokens import RefreshToken
from models.types import utcnow
from utils.logger import get_logger

logger = get_logger(__name__)

# 48 random bytes -> 64 url-safe characters, 384 bits of entropy
REFRESH_TOKEN_BYTES = 48

UNKNOWN_DEVICE = "Unknown Device"


def hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def device_label_from_user_agent(user_agent: Optional[str]) -> str:
    """
    Best-effort human label for a session list. Not a security control.

    Order matters: mobile browsers also mention Safari/Chrome, and Chrome
    also mentions Safari.
    """
    if not user_agent:
        return UNKNOWN_DEVICE
    if "Mobile" in user_agent:
        return "Mobile Device"
    if "Chrome" in user_agent:
        return "Chrome Browser"
    if "Firefox" in user_agent:
        return "Firefox Browser"
    if "Safari" in user_agent:
        return "Safari Browser"
    return "Desktop Browser"


@dataclass(frozen=True)
class PruneCounts:
    expired: int
    revoked: int


class RefreshTokenStore:
    """
    Durable per-device sessions backed by the refresh_tokens table.
    """

    def __init__(self, db: Session, refresh_ttl: timedelta):
        self.db = db
        self.refresh_ttl = refresh_ttl

    def issue(self, user_id: int, device_label: Optional[str] = None,
              origin_address: Optional[str] = None) -> Tuple[str, RefreshToken]:
        """
        Creates a new session row and returns its plaintext secret.

        The plaintext is returned exactly once; only its digest is stored.

        Returns:
            (plaintext_token, stored_record)
        """
        token = secrets.token_urlsafe(REFRESH_TOKEN_BYTES)

        record = RefreshToken(
            user_id=user_id,
            token_hash=hash_refresh_token(token),
            device_name=device_label or UNKNOWN_DEVICE,
            ip_address=origin_address,
            expires_at=utcnow() + self.refresh_ttl
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)

        logger.debug(
            "Refresh token issued",
            extra={"user_id": user_id, "refresh_token_id": record.id, "device": record.device_name}
        )
        return token, record

    def validate(self, token: str) -> Optional[RefreshToken]:
        """Returns the record for `token` if it exists and is currently valid."""
        return self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_refresh_token(token),
            RefreshToken.revoked_at.is_(None),
            RefreshToken.expires_at > utcnow()
        ).first()

    def revoke(self, record: RefreshToken) -> None:
        """Marks `record` revoked. Revoking twice keeps the first timestamp."""
        if record.revoked_at is None:
            record.revoked_at = utcnow()
            self.db.commit()

    def revoke_if_valid(self, record: RefreshToken) -> bool:
        """
        Revokes `record` only if it is still valid at the moment of the write.

        The check and the write are a single conditional UPDATE, so when two
        requests race on the same token exactly one of them gets True.
        """
        now = utcnow()
        updated = self.db.query(RefreshToken).filter(
            RefreshToken.id == record.id,
            RefreshToken.revoked_at.is_(None),
            RefreshToken.expires_at > now
        ).update({"revoked_at": now}, synchronize_session=False)
        self.db.commit()
        self.db.refresh(record)
        return updated == 1

    def revoke_all(self, user_id: int) -> int:
        """
        Revokes every unrevoked refresh token of a user (logout everywhere).

        Returns:
            Number of rows revoked
        """
        count = self.db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked_at.is_(None)
        ).update({"revoked_at": utcnow()}, synchronize_session=False)
        self.db.commit()
        return count

    def touch(self, record: RefreshToken) -> None:
        record.last_used_at = utcnow()
        self.db.commit()

    def prune(self, revoked_before: datetime) -> PruneCounts:
        """
        Deletes expired rows and rows revoked before `revoked_before`.

        Only rows already outside the validity window are touched, so this is
        safe to run next to live traffic.
        """
        revoked = self.db.query(RefreshToken).filter(
            RefreshToken.revoked_at.is_not(None),
            RefreshToken.revoked_at < revoked_before
        ).delete(synchronize_session=False)

        expired = self.db.query(RefreshToken).filter(
            RefreshToken.expires_at <= utcnow()
        ).delete(synchronize_session=False)

        self.db.commit()
        return PruneCounts(expired=expired, revoked=revoked)
