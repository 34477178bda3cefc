"""Security middleware for FastAPI - bearer token validation and identity context."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from auth.exceptions import NotAuthenticatedError
from auth.guard import AuthGuard
from api.base import error_response, request_id_of, ErrorCodes
from utils.user_context import set_current_identity, clear_current_identity


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that validates the bearer token and sets identity context.

    For protected routes:
    1. Authenticates the Authorization header via AuthGuard
    2. Sets identity in request.state and identity context
    3. Clears context after request completes

    Public paths bypass authentication entirely.
    """

    PUBLIC_PATHS = [
        "/api/users/register",
        "/api/users/login",
        "/health",
        "/docs",
        "/openapi.json",
    ]

    def __init__(self, app, guard: AuthGuard):
        super().__init__(app)
        self._guard = guard

    def _is_public_path(self, path: str) -> bool:
        """Check if path is in public paths list."""
        for public_path in self.PUBLIC_PATHS:
            if path == public_path or path.startswith(public_path + "/"):
                return True
        return False

    async def dispatch(self, request: Request, call_next):
        """Process request through middleware."""
        if self._is_public_path(request.url.path):
            return await call_next(request)

        try:
            identity = self._guard.authenticate(request.headers)
        except NotAuthenticatedError as e:
            return JSONResponse(
                status_code=401,
                headers={"WWW-Authenticate": "Bearer"},
                content=error_response(
                    ErrorCodes.NOT_AUTHENTICATED,
                    str(e),
                    request_id_of(request),
                ).model_dump(mode="json"),
            )

        set_current_identity(identity)
        request.state.identity = identity

        try:
            response = await call_next(request)
            return response
        finally:
            # Always clear context
            clear_current_identity()
