import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError

from utils.logger import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"


class TokenFailure(str, Enum):
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    NOT_YET_VALID = "not_yet_valid"
    WRONG_TYPE = "wrong_type"


@dataclass(frozen=True)
class TokenVerification:
    """
    Outcome of verifying an access token.

    Exactly one of `claims` / `failure` is set. Callers treat every failure
    the same way (unauthenticated); the kind exists for logging.
    """
    claims: Optional[Dict[str, Any]] = None
    failure: Optional[TokenFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def user_id(self) -> Optional[int]:
        return self.claims["user_id"] if self.claims else None


class TokenCodec:
    """
    Issues and verifies signed, short-lived access tokens.

    Stateless: everything needed to verify a token is in the token and the
    signing key. Rotating `secret` invalidates every outstanding token.
    """

    def __init__(self, secret: str, algorithm: str = "HS256",
                 access_ttl: timedelta = timedelta(minutes=15)):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl

    def issue(self, user, now: Optional[datetime] = None) -> str:
        """
        Creates an access token for `user`.

        Args:
            user: Anything with `id` and `email` attributes
            now: Issue time (defaults to the current time)

        Returns:
            Compact JWS string
        """
        now = now or datetime.now(timezone.utc)
        issued_at = int(now.timestamp())
        payload = {
            "user_id": user.id,
            "email": user.email,
            "iat": issued_at,
            "exp": issued_at + int(self.access_ttl.total_seconds()),
            "type": ACCESS_TOKEN_TYPE,
            # Two tokens minted in the same second must still differ
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenVerification:
        """
        Checks structure, signature, expiry, not-before and token type.

        Never raises for a bad token; returns a TokenVerification instead.
        """
        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError:
            return self._fail(TokenFailure.MALFORMED)

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            return self._fail(TokenFailure.EXPIRED)
        except JWTClaimsError:
            # exp is handled above, so this is nbf/iat in the future
            return self._fail(TokenFailure.NOT_YET_VALID)
        except JWTError:
            return self._fail(TokenFailure.BAD_SIGNATURE)

        if claims.get("type") != ACCESS_TOKEN_TYPE:
            return self._fail(TokenFailure.WRONG_TYPE)

        user_id = claims.get("user_id")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or "exp" not in claims:
            return self._fail(TokenFailure.MALFORMED)

        return TokenVerification(claims=claims)

    @staticmethod
    def expires_at(claims: Dict[str, Any]) -> datetime:
        return datetime.fromtimestamp(claims["exp"], tz=timezone.utc)

    @staticmethod
    def _fail(kind: TokenFailure) -> TokenVerification:
        logger.debug("Access token rejected", extra={"reason": kind.value})
        return TokenVerification(failure=kind)
