from core.exceptions import Forbidden
from models.users import User
from utils.logger import get_logger

logger = get_logger(__name__)


def authorize_owner(user: User, resource, action: str) -> None:
    """
    Only the owner of a project or task may view, change or delete it.

    Raises:
        Forbidden: `resource.user_id` is not `user.id`
    """
    if resource.user_id != user.id:
        logger.warning(
            "Ownership check failed",
            extra={
                "user_id": user.id,
                "action": action,
                "resource": type(resource).__name__,
                "resource_id": resource.id
            }
        )
        raise Forbidden()
