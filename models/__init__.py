from models.users import User
from models.refresh_tokens import RefreshToken
from models.token_blacklist import BlacklistedAccessToken
from models.projects import Project
from models.tasks import Task

__all__ = ["User", "RefreshToken", "BlacklistedAccessToken", "Project", "Task"]
