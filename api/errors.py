"""Global exception handlers for FastAPI.

Every domain error is turned into the unified error envelope here, so
routes raise and never build error responses themselves.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, request_id_of, ErrorCodes
from auth.exceptions import (
    AlreadyRegisteredError,
    EmailTakenError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    UserNotFoundError,
    WeakPasswordError,
    WrongPasswordError,
)
from core.exceptions import (
    ContactForbiddenError,
    ContactNotFoundError,
    InvalidStateError,
)

logger = logging.getLogger(__name__)


def _error(request: Request, status_code: int, code: str, message: str, headers: dict | None = None) -> JSONResponse:
    request_id = request_id_of(request)
    headers = dict(headers or {})
    # Unhandled errors are answered outside RequestIDMiddleware
    if request_id:
        headers["X-Request-ID"] = request_id
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content=error_response(code, message, request_id).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI, reveal_foreign_contacts: bool = False) -> None:
    """Register global exception handlers on the app.

    Args:
        reveal_foreign_contacts: Answer 403 for another user's contact.
            When False it gets the same 404 body as a missing contact.
    """

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
        return _error(request, 401, ErrorCodes.NOT_AUTHENTICATED, str(exc), {"WWW-Authenticate": "Bearer"})

    @app.exception_handler(InvalidCredentialsError)
    async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
        return _error(request, 401, ErrorCodes.INVALID_CREDENTIALS, str(exc))

    @app.exception_handler(WrongPasswordError)
    async def wrong_password_handler(request: Request, exc: WrongPasswordError):
        return _error(request, 401, ErrorCodes.INVALID_CREDENTIALS, str(exc))

    @app.exception_handler(WeakPasswordError)
    async def weak_password_handler(request: Request, exc: WeakPasswordError):
        return _error(request, 400, ErrorCodes.VALIDATION_ERROR, str(exc))

    @app.exception_handler(UserNotFoundError)
    async def user_not_found_handler(request: Request, exc: UserNotFoundError):
        return _error(request, 404, ErrorCodes.NOT_FOUND, str(exc))

    @app.exception_handler(AlreadyRegisteredError)
    async def already_registered_handler(request: Request, exc: AlreadyRegisteredError):
        return _error(request, 409, ErrorCodes.ALREADY_EXISTS, str(exc))

    @app.exception_handler(EmailTakenError)
    async def email_taken_handler(request: Request, exc: EmailTakenError):
        return _error(request, 409, ErrorCodes.ALREADY_EXISTS, "Email is already in use")

    @app.exception_handler(ContactNotFoundError)
    async def contact_not_found_handler(request: Request, exc: ContactNotFoundError):
        return _error(request, 404, ErrorCodes.NOT_FOUND, str(exc))

    @app.exception_handler(ContactForbiddenError)
    async def contact_forbidden_handler(request: Request, exc: ContactForbiddenError):
        if reveal_foreign_contacts:
            return _error(
                request, 403, ErrorCodes.FORBIDDEN,
                "User doesn't have permission to access other user's contact",
            )
        # Same body as a missing contact
        return _error(request, 404, ErrorCodes.NOT_FOUND, str(ContactNotFoundError(exc.contact_id)))

    @app.exception_handler(InvalidStateError)
    async def invalid_state_handler(request: Request, exc: InvalidStateError):
        return _error(request, 409, ErrorCodes.INVALID_STATE, str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error(request, 400, ErrorCodes.INVALID_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(request, 422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _error(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
