"""
Request ID middleware.

Every request gets an id (the client's X-Request-ID when provided, a UUID
otherwise). It is echoed back in the response headers, kept on
request.state, and attached to every log record emitted while the request
is served so the log lines of one request can be correlated.
"""

import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from core.logging_config import request_id_ctx

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER, "").strip()

        # Don't let clients stuff arbitrary-length values into our logs
        if not request_id or len(request_id) > MAX_REQUEST_ID_LENGTH:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id

        # A ContextVar is per-task, so concurrent requests never see each other's id
        token = request_id_ctx.set(request_id)
        try:
            response: Response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_ctx.reset(token)


def get_request_id(request: Request) -> str:
    """
    The current request's id, or "no-request-id" outside the middleware.
    """
    return getattr(request.state, "request_id", "no-request-id")
