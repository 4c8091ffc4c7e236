from typing import Optional
from fastapi import APIRouter, Request
from starlette import status
from middleware.rate_limiter import limiter
from schemas.auth_schemas import LoginRequest, LogoutRequest, RefreshTokenRequest, RegisterRequest, UserOut
from utils.deps import auth_service_dependency, client_dependency, user_dependency
from utils.responses import success_response


router = APIRouter(
    prefix="/api",
    tags=["auth"]
)


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
async def register(request: Request, body: RegisterRequest,
                   auth: auth_service_dependency, client: client_dependency):
    session = auth.register(body.name, body.email, body.password, client)

    return success_response(
        data={
            "accessToken": session.access_token,
            "refreshToken": session.refresh_token,
            "user": UserOut.model_validate(session.user),
        },
        message="User registered successfully",
        status_code=status.HTTP_201_CREATED
    )


@router.post("/login", status_code=status.HTTP_200_OK)
@limiter.limit("5/minute")
async def login(request: Request, body: LoginRequest,
                auth: auth_service_dependency, client: client_dependency):
    session = auth.login(body.email, body.password, client)

    return success_response(
        data={
            "accessToken": session.access_token,
            "refreshToken": session.refresh_token,
            "user": UserOut.model_validate(session.user),
        },
        message="Login successful"
    )


@router.post("/refresh", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def refresh_token(request: Request, body: RefreshTokenRequest,
                        auth: auth_service_dependency, client: client_dependency):
    """
    Exchange a refresh token for a new access token (and, with rotation, a new refresh token).
    """
    tokens = auth.refresh(body.refresh_token, client)

    return success_response(
        data={
            "accessToken": tokens.access_token,
            "refreshToken": tokens.refresh_token,
        },
        message="Token refreshed successfully"
    )


@router.post("/logout", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def logout(request: Request, current: user_dependency, auth: auth_service_dependency,
                 body: Optional[LogoutRequest] = None):
    """
    Revoke the current access token.

    With `refresh_token` only that session ends. Without it every session of
    the user ends; `data.scope` says which one happened.
    """
    result = auth.logout(current, body.refresh_token if body else None)

    message = "Logged out successfully" if result.scope == "single" else "Logged out from all devices"
    return success_response(
        data={"scope": result.scope, "revokedCount": result.revoked_count},
        message=message
    )


@router.post("/logout/all", status_code=status.HTTP_200_OK)
@limiter.limit("10/minute")
async def logout_all(request: Request, current: user_dependency, auth: auth_service_dependency):
    count = auth.logout_all(current.user)

    return success_response(data={"revokedCount": count}, message="Logged out from all devices")
