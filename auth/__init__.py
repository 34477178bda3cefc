"""Authentication and authorization modules."""

from auth.exceptions import (
    AuthError,
    InvalidTokenError,
    TokenExpiredError,
    NotAuthenticatedError,
    InvalidCredentialsError,
    UserNotFoundError,
    WrongPasswordError,
    WeakPasswordError,
    AlreadyRegisteredError,
    EmailTakenError,
)
from auth.types import (
    Account,
    AccountPublic,
    Identity,
    TokenClaims,
    RegisterRequest,
    LoginRequest,
    UpdateEmailRequest,
    ChangePasswordRequest,
    LoginResult,
    EmailUpdateResult,
)
from auth.config import AuthConfig
from auth.tokens import TokenService
from auth.passwords import PasswordHasher
from auth.database import AccountStore, PostgresAccountStore, InMemoryAccountStore
from auth.guard import AuthGuard
from auth.service import AccountService
from auth.security_middleware import AuthMiddleware
from auth.api import create_auth_router
