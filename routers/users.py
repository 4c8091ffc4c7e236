from fastapi import APIRouter, Request
from starlette import status
from middleware.rate_limiter import limiter
from schemas.auth_schemas import ChangePasswordRequest, UserOut
from utils.deps import auth_service_dependency, user_dependency
from utils.responses import success_response


router = APIRouter(
    prefix="/api",
    tags=["users"]
)


@router.get("/user", status_code=status.HTTP_200_OK)
@limiter.limit("30/minute")
async def get_user_info(request: Request, current: user_dependency):
    """
    Get the authenticated user (protected endpoint).
    """
    return success_response(
        data={"user": UserOut.model_validate(current.user)},
        message="User retrieved successfully"
    )


@router.post("/change-password", status_code=status.HTTP_200_OK)
@limiter.limit("5/minute")
async def change_password(request: Request, body: ChangePasswordRequest,
                          current: user_dependency, auth: auth_service_dependency):
    """
    Change the password of the authenticated user.

    A wrong current password is a 422 on `current_password`. Other sessions
    are logged out when REVOKE_SESSIONS_ON_PASSWORD_CHANGE is on.
    """
    revoked = auth.change_password(current.user, body.current_password, body.password)

    return success_response(
        data={"revokedCount": revoked},
        message="Password changed successfully"
    )
