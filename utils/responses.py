"""
Response envelope shared by every endpoint.

Success: {"status": "success", "data": ..., "message": ..., "statusCode": n}
Error:   {"status": "error", "data": ..., "message": ..., "error": kind, "statusCode": n}
"""

from typing import Any, Dict, List
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


def success_response(data: Any = None, message: str = "Operation completed successfully",
                     status_code: int = 200) -> Dict[str, Any]:
    return {
        "status": "success",
        "data": data,
        "message": message,
        "statusCode": status_code,
    }


def error_response(message: str, status_code: int, error: str = "Error", data: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "data": jsonable_encoder(data),
            "message": message,
            "error": error,
            "statusCode": status_code,
        },
    )


def validation_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """
    Flattens FastAPI's validation errors into {"field": ["message", ...]}.

    The leading "body"/"query"/"path" segment is dropped, nested fields are
    dotted ("items.0.name"), and model-level errors are keyed "body".
    """
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            field = ".".join(loc[1:]) or loc[0]
        else:
            field = ".".join(loc) or "body"

        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]

        errors.setdefault(field, []).append(message)
    return errors
