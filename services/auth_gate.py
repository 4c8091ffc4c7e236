from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from core.exceptions import Unauthorized
from models.users import User
from services.token_codec import TokenCodec
from services.token_blacklist import AccessTokenBlacklist
from utils.logger import get_logger

logger = get_logger(__name__)

MISSING_TOKEN_MESSAGE = "Unauthorized: Missing or invalid token"
INVALID_TOKEN_MESSAGE = "Unauthorized: Invalid or expired token"
REVOKED_TOKEN_MESSAGE = "Unauthorized: Token has been revoked"


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller of one request, passed explicitly to handlers."""
    user: User
    token: str
    claims: Dict[str, Any] = field(default_factory=dict)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Returns the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token


class AuthGate:
    """
    Decides whether a request may reach a protected handler.

    Runs, in order: bearer extraction, signature/expiry verification, user
    lookup, blacklist check. Any failure raises Unauthorized before the
    handler is invoked.
    """

    def __init__(self, db: Session, codec: TokenCodec, blacklist: AccessTokenBlacklist):
        self.db = db
        self.codec = codec
        self.blacklist = blacklist

    def authenticate(self, authorization: Optional[str]) -> AuthContext:
        token = extract_bearer_token(authorization)
        if token is None:
            raise Unauthorized(MISSING_TOKEN_MESSAGE)

        result = self.codec.verify(token)
        if not result.ok:
            logger.info(
                "Rejected access token",
                extra={"reason": result.failure.value}
            )
            raise Unauthorized(INVALID_TOKEN_MESSAGE)

        user = self.db.get(User, result.user_id)
        if user is None:
            logger.warning(
                "Access token for a user that no longer exists",
                extra={"user_id": result.user_id}
            )
            raise Unauthorized(INVALID_TOKEN_MESSAGE)

        if self.blacklist.contains(token):
            logger.info("Rejected blacklisted access token", extra={"user_id": user.id})
            raise Unauthorized(REVOKED_TOKEN_MESSAGE)

        return AuthContext(user=user, token=token, claims=result.claims)
