"""
Domain errors raised by the service layer.

Services never raise fastapi.HTTPException. Each error carries the HTTP
status and envelope `error` kind it maps to; main.py owns the single handler
that renders them.
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    status_code: int = 400
    error: str = "Error"
    default_message: str = "An error occurred"

    def __init__(self, message: Optional[str] = None, data: Any = None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class ValidationError(AppError):
    """Input was well-formed but rejected. `errors` maps field -> messages."""

    status_code = 422
    error = "ValidationError"
    default_message = "Validation failed"

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message, data={"errors": errors})

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})


class Unauthorized(AppError):
    status_code = 401
    error = "Unauthorized"
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    error = "Forbidden"
    default_message = "You do not have permission to perform this action"


class NotFound(AppError):
    status_code = 404
    error = "NotFound"
    default_message = "Resource not found"


class TokenRotationError(AppError):
    """The old refresh token was revoked but its replacement could not be stored."""

    status_code = 500
    error = "ServerError"
    default_message = "Could not issue a new refresh token. Please log in again."
