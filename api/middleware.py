"""Request-scoped middleware for API requests."""

from uuid import UUID, uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


def _incoming_request_id(request: Request) -> str | None:
    """Client-supplied X-Request-ID, kept only if it is a UUID."""
    value = request.headers.get("X-Request-ID")
    if not value:
        return None
    try:
        return str(UUID(value))
    except ValueError:
        return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a request ID to every request, reusing a valid client-supplied one."""

    async def dispatch(self, request: Request, call_next):
        request_id = _incoming_request_id(request) or str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
