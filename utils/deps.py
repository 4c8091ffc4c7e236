from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from core.config import settings
from core.database import SessionLocal
from services.auth_gate import AuthContext, AuthGate
from services.auth_service import AuthService, ClientInfo
from services.refresh_token_store import RefreshTokenStore, device_label_from_user_agent
from services.token_blacklist import AccessTokenBlacklist
from services.token_codec import TokenCodec


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]


@lru_cache
def get_token_codec() -> TokenCodec:
    # Built once from startup configuration; read-only afterwards
    return TokenCodec(
        secret=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

codec_dependency = Annotated[TokenCodec, Depends(get_token_codec)]


def get_auth_service(db: db_dependency, codec: codec_dependency) -> AuthService:
    return AuthService(
        db=db,
        codec=codec,
        refresh_store=RefreshTokenStore(
            db, refresh_ttl=timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)
        ),
        blacklist=AccessTokenBlacklist(db),
        rotate_refresh_tokens=settings.ROTATE_REFRESH_TOKENS,
        revoke_sessions_on_password_change=settings.REVOKE_SESSIONS_ON_PASSWORD_CHANGE
    )

auth_service_dependency = Annotated[AuthService, Depends(get_auth_service)]


def get_client_info(request: Request) -> ClientInfo:
    return ClientInfo(
        device_label=device_label_from_user_agent(request.headers.get("User-Agent")),
        ip_address=request.client.host if request.client else None
    )

client_dependency = Annotated[ClientInfo, Depends(get_client_info)]


def get_current_user(db: db_dependency, codec: codec_dependency,
                     authorization: Annotated[Optional[str], Header()] = None) -> AuthContext:
    """
    Auth gate for protected routes. Raises Unauthorized before the handler runs.
    """
    gate = AuthGate(db=db, codec=codec, blacklist=AccessTokenBlacklist(db))
    return gate.authenticate(authorization)

user_dependency = Annotated[AuthContext, Depends(get_current_user)]
