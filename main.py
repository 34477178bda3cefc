"""Application factory."""

import logging

from fastapi import FastAPI

from api.config import AppConfig
from api.contacts import create_contacts_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from auth.api import create_auth_router
from auth.config import AuthConfig
from auth.database import AccountStore, PostgresAccountStore
from auth.guard import AuthGuard
from auth.passwords import PasswordHasher
from auth.security_middleware import AuthMiddleware
from auth.service import AccountService
from auth.tokens import TokenService
from clients.postgres_client import PostgresClient
from clients.vault_client import get_database_url, get_token_secret
from core.services.contact_service import ContactService
from core.stores import ContactStore, PostgresContactStore

logger = logging.getLogger(__name__)


def create_app(
    auth_config: AuthConfig,
    app_config: AppConfig,
    account_store: AccountStore,
    contact_store: ContactStore,
) -> FastAPI:
    """Wire services, middleware, error handlers and routes."""
    token_service = TokenService(auth_config)
    account_service = AccountService(
        config=auth_config,
        store=account_store,
        token_service=token_service,
        hasher=PasswordHasher(auth_config.password_hash_rounds),
    )
    contact_service = ContactService(contact_store)

    app = FastAPI(title=app_config.app_name)
    # Last added runs first: request IDs exist before auth can reject
    app.add_middleware(AuthMiddleware, guard=AuthGuard(token_service))
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app, reveal_foreign_contacts=app_config.reveal_foreign_contacts)

    app.include_router(create_auth_router(account_service), prefix="/api/users")
    app.include_router(create_contacts_router(contact_service), prefix="/api")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def build_app() -> FastAPI:
    """Production app: secrets from Vault, PostgreSQL-backed stores."""
    app_config = AppConfig()
    auth_config = AuthConfig(token_secret=get_token_secret())
    postgres = PostgresClient(get_database_url(), max_retries=app_config.database_max_retries)

    logger.info("Building app with PostgreSQL stores")
    return create_app(
        auth_config,
        app_config,
        PostgresAccountStore(postgres),
        PostgresContactStore(postgres),
    )
