"""HTTP routes for accounts."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from auth.service import AccountService
from auth.types import (
    AccountPublic,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UpdateEmailRequest,
)
from api.base import success_response, request_id_of


def create_auth_router(account_service: AccountService) -> APIRouter:
    """Create account router with injected service.

    Domain errors propagate to the global handlers in api.errors.
    """
    router = APIRouter(tags=["users"])

    @router.post("/register")
    async def register(request: Request, body: RegisterRequest):
        account = account_service.register(body.username, body.email, body.password)
        public = AccountPublic(id=account.id, username=account.username, email=account.email)
        return JSONResponse(
            status_code=201,
            content=success_response(
                public.model_dump(mode="json"), request_id_of(request)
            ).model_dump(mode="json"),
        )

    @router.post("/login")
    async def login(request: Request, body: LoginRequest):
        result = account_service.login(body.email, body.password)
        return success_response(
            result.model_dump(mode="json"), request_id_of(request)
        ).model_dump(mode="json")

    @router.get("/current")
    async def current(request: Request):
        """Identity from token claims; the store is not consulted."""
        identity = request.state.identity
        return success_response(
            identity.to_public().model_dump(mode="json"), request_id_of(request)
        ).model_dump(mode="json")

    @router.put("/email")
    async def update_email(request: Request, body: UpdateEmailRequest):
        identity = request.state.identity
        result = account_service.update_email(identity.account_id, body.email, body.password)
        return success_response(
            {"message": "Email updated successfully", **result.model_dump(mode="json")},
            request_id_of(request),
        ).model_dump(mode="json")

    @router.put("/password")
    async def change_password(request: Request, body: ChangePasswordRequest):
        identity = request.state.identity
        account_service.change_password(
            identity.account_id, body.current_password, body.new_password
        )
        return success_response(
            {"message": "Password changed successfully"}, request_id_of(request)
        ).model_dump(mode="json")

    return router
