from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import Unauthorized, ValidationError, TokenRotationError
from models.users import User
from models.types import utcnow
from services.auth_gate import AuthContext
from services.refresh_token_store import RefreshTokenStore
from services.token_blacklist import AccessTokenBlacklist
from services.token_codec import TokenCodec
from utils.hashing import dummy_verify_password, verify_password, get_password_hash
from utils.logger import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "The provided credentials are incorrect."
INVALID_REFRESH_TOKEN_MESSAGE = "Invalid or expired refresh token"


@dataclass(frozen=True)
class ClientInfo:
    """Where a login or refresh came from; stored on the refresh token row."""
    device_label: Optional[str] = None
    ip_address: Optional[str] = None


@dataclass(frozen=True)
class IssuedSession:
    access_token: str
    refresh_token: str
    user: User


@dataclass(frozen=True)
class RefreshedTokens:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class LogoutResult:
    scope: str  # "single" or "all"
    revoked_count: int


@dataclass(frozen=True)
class PruneResult:
    expired_refresh_tokens: int
    revoked_refresh_tokens: int
    blacklisted_tokens: int


class AuthService:
    """
    Orchestrates the session lifecycle across the token codec, the refresh
    token store and the access token blacklist.

    Session states per device:

        (none) --login/register--> ACTIVE --refresh (rotate)--> ACTIVE' (new row)
                                     |   \\--refresh (no rotate)--> same row, touched
                                     \\--logout / logout_all / expiry--> REVOKED/EXPIRED
    """

    def __init__(self, db: Session, codec: TokenCodec, refresh_store: RefreshTokenStore,
                 blacklist: AccessTokenBlacklist, rotate_refresh_tokens: bool = True,
                 revoke_sessions_on_password_change: bool = True):
        self.db = db
        self.codec = codec
        self.refresh_store = refresh_store
        self.blacklist = blacklist
        self.rotate_refresh_tokens = rotate_refresh_tokens
        self.revoke_sessions_on_password_change = revoke_sessions_on_password_change

    def register(self, name: str, email: str, password: str,
                 client: Optional[ClientInfo] = None) -> IssuedSession:
        """
        Creates a user and logs them in on the calling device.

        Raises:
            ValidationError: email already taken
        """
        email = email.lower().strip()

        if self.db.query(User).filter(User.email == email).first():
            logger.warning(
                "Registration attempt with existing email",
                extra={"email": email}
            )
            raise ValidationError.for_field("email", "The email has already been taken.")

        user = User(name=name, email=email, hashed_password=get_password_hash(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent registration of the same address
            self.db.rollback()
            raise ValidationError.for_field("email", "The email has already been taken.")
        self.db.refresh(user)

        logger.info("User registered", extra={"user_id": user.id, "email": user.email})
        return self._start_session(user, client)

    def login(self, email: str, password: str, client: Optional[ClientInfo] = None) -> IssuedSession:
        """
        Password login. Unknown email and wrong password are indistinguishable.

        Raises:
            ValidationError: credentials do not match
        """
        email = email.lower().strip()
        user = self.db.query(User).filter(User.email == email).first()

        if user is None:
            # An unknown email costs one bcrypt verify, same as a wrong password
            dummy_verify_password()

        if not user or not verify_password(password, user.hashed_password):
            logger.warning(
                "Login failed - invalid credentials",
                extra={"email": email, "user_exists": user is not None}
            )
            raise ValidationError(
                {"email": [INVALID_CREDENTIALS_MESSAGE]},
                message=INVALID_CREDENTIALS_MESSAGE
            )

        logger.info("User logged in", extra={"user_id": user.id})
        return self._start_session(user, client)

    def refresh(self, refresh_token: str, client: Optional[ClientInfo] = None) -> RefreshedTokens:
        """
        Exchanges a valid refresh token for a new access token.

        With rotation the old row is revoked first (conditionally, so a
        concurrent refresh of the same token loses) and a new row is issued.
        If the new row cannot be stored the old one stays revoked and
        TokenRotationError is raised.

        Raises:
            Unauthorized: unknown, revoked or expired token, or lost race
            TokenRotationError: replacement could not be persisted
        """
        record = self.refresh_store.validate(refresh_token)
        if record is None:
            logger.info("Refresh rejected - invalid or expired token")
            raise Unauthorized(INVALID_REFRESH_TOKEN_MESSAGE)

        user = record.user

        if self.rotate_refresh_tokens:
            if not self.refresh_store.revoke_if_valid(record):
                logger.warning(
                    "Refresh rejected - token was used concurrently",
                    extra={"user_id": user.id, "refresh_token_id": record.id}
                )
                raise Unauthorized(INVALID_REFRESH_TOKEN_MESSAGE)

            client = client or ClientInfo()
            try:
                new_refresh_token, new_record = self.refresh_store.issue(
                    user.id, client.device_label, client.ip_address
                )
            except SQLAlchemyError as exc:
                user_id, record_id = user.id, record.id
                self.db.rollback()
                logger.error(
                    "Refresh token rotation failed after revoking the old token",
                    extra={"user_id": user_id, "refresh_token_id": record_id},
                    exc_info=True
                )
                raise TokenRotationError() from exc

            logger.info(
                "Refresh token rotated",
                extra={"user_id": user.id, "old_id": record.id, "new_id": new_record.id}
            )
        else:
            self.refresh_store.touch(record)
            new_refresh_token = refresh_token
            logger.info("Refresh token reused", extra={"user_id": user.id, "refresh_token_id": record.id})

        return RefreshedTokens(
            access_token=self.codec.issue(user),
            refresh_token=new_refresh_token
        )

    def logout(self, context: AuthContext, refresh_token: Optional[str] = None) -> LogoutResult:
        """
        Ends the caller's session.

        The presented access token is blacklisted until its own expiry. With a
        refresh token only that session is revoked; without one, every
        refresh token of the user is revoked (logout everywhere).
        """
        user = context.user
        self.blacklist.add(context.token, user.id, self.codec.expires_at(context.claims))

        if refresh_token:
            record = self.refresh_store.validate(refresh_token)
            revoked = 0
            if record is not None and record.user_id == user.id:
                self.refresh_store.revoke(record)
                revoked = 1
            elif record is not None:
                logger.warning(
                    "Logout presented another user's refresh token",
                    extra={"user_id": user.id, "refresh_token_id": record.id}
                )
            logger.info("User logged out", extra={"user_id": user.id, "scope": "single"})
            return LogoutResult(scope="single", revoked_count=revoked)

        revoked = self.refresh_store.revoke_all(user.id)
        logger.info(
            "User logged out from all devices",
            extra={"user_id": user.id, "scope": "all", "revoked_count": revoked}
        )
        return LogoutResult(scope="all", revoked_count=revoked)

    def logout_all(self, user: User) -> int:
        """
        Revokes every refresh token of `user`.

        Access tokens already handed to other devices keep working until they
        expire on their own.
        """
        count = self.refresh_store.revoke_all(user.id)
        logger.info("Revoked all refresh tokens", extra={"user_id": user.id, "revoked_count": count})
        return count

    def change_password(self, user: User, current_password: str, new_password: str) -> int:
        """
        Replaces the password after checking the current one.

        Returns:
            Number of refresh tokens revoked as a consequence (0 when session
            revocation on password change is disabled)

        Raises:
            ValidationError: `current_password` does not match; nothing is changed
        """
        if not verify_password(current_password, user.hashed_password):
            logger.warning("Password change rejected - wrong current password", extra={"user_id": user.id})
            raise ValidationError.for_field("current_password", "The current password is incorrect.")

        user.hashed_password = get_password_hash(new_password)
        self.db.commit()

        revoked = 0
        if self.revoke_sessions_on_password_change:
            revoked = self.refresh_store.revoke_all(user.id)

        logger.info("Password changed", extra={"user_id": user.id, "revoked_count": revoked})
        return revoked

    def prune_tokens(self, revoked_retention: timedelta) -> PruneResult:
        """Deletes token rows that can no longer authenticate anyone."""
        now = utcnow()
        refresh_counts = self.refresh_store.prune(revoked_before=now - revoked_retention)
        blacklisted = self.blacklist.prune(now)

        result = PruneResult(
            expired_refresh_tokens=refresh_counts.expired,
            revoked_refresh_tokens=refresh_counts.revoked,
            blacklisted_tokens=blacklisted
        )
        logger.info("Pruned tokens", extra=asdict(result))
        return result

    def _start_session(self, user: User, client: Optional[ClientInfo]) -> IssuedSession:
        client = client or ClientInfo()
        refresh_token, _ = self.refresh_store.issue(user.id, client.device_label, client.ip_address)
        return IssuedSession(
            access_token=self.codec.issue(user),
            refresh_token=refresh_token,
            user=user
        )
