from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from core.config import settings
from services.auth_gate import extract_bearer_token
from utils.deps import get_token_codec


def get_user_id(request: Request) -> str:
    """
    Rate-limit key: the authenticated user when the bearer token verifies,
    otherwise the client address. Blacklisting is not consulted here.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token:
        result = get_token_codec().verify(token)
        if result.ok:
            return f"user:{result.user_id}"

    return get_remote_address(request)

limiter = Limiter(
    key_func=get_user_id,
    default_limits=["200/hour"],
    enabled=settings.ENV != "testing"
)
