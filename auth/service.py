"""Account service - registration, login and credential changes."""

import logging
from uuid import UUID

from auth.config import AuthConfig
from auth.database import AccountStore
from auth.exceptions import (
    AlreadyRegisteredError,
    EmailTakenError,
    InvalidCredentialsError,
    UserNotFoundError,
    WeakPasswordError,
    WrongPasswordError,
)
from auth.passwords import PasswordHasher
from auth.tokens import TokenService
from auth.types import Account, EmailUpdateResult, LoginResult

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.lower().strip()


class AccountService:
    """Orchestrates account operations.

    Handles:
    - Registration (duplicate email rejected)
    - Login (one generic failure for unknown email and wrong password)
    - Email change (password re-verified, token re-issued)
    - Password change (password re-verified, minimum length enforced)
    """

    def __init__(
        self,
        config: AuthConfig,
        store: AccountStore,
        token_service: TokenService,
        hasher: PasswordHasher,
    ):
        self._config = config
        self._store = store
        self._tokens = token_service
        self._hasher = hasher

    def register(self, username: str, email: str, password: str) -> Account:
        """Create an account.

        The email lookup here is an early exit only; the store enforces
        uniqueness atomically and a lost race surfaces the same error.

        Raises:
            ValueError: If any field is empty.
            AlreadyRegisteredError: If email already has an account.
        """
        username = username.strip() if username else ""
        email = _normalize_email(email) if email else ""
        if not username or not email or not password:
            raise ValueError("Please fill in all fields")

        if self._store.get_by_email(email) is not None:
            raise AlreadyRegisteredError("User already registered")

        try:
            account = self._store.create(username, email, self._hasher.hash(password))
        except EmailTakenError as e:
            raise AlreadyRegisteredError("User already registered") from e

        logger.info(f"Registered account {account.id}")
        return account

    def login(self, email: str, password: str) -> LoginResult:
        """Verify credentials and issue a token.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password.
        """
        account = self._store.get_by_email(_normalize_email(email))

        if account is None or not self._hasher.verify(password, account.password_hash):
            logger.warning("Login failed")
            raise InvalidCredentialsError("Invalid email or password")

        logger.info(f"Login succeeded for account {account.id}")
        return LoginResult(token=self.issue_token(account))

    def update_email(self, account_id: UUID, new_email: str, current_password: str) -> EmailUpdateResult:
        """Change account email after re-verifying the password.

        Returns the new email and a fresh token, since the old token's
        email claim is now stale.

        Raises:
            UserNotFoundError: Account no longer exists.
            WrongPasswordError: current_password does not match.
            EmailTakenError: Another account already uses new_email.
        """
        account = self._require_account(account_id)
        self._require_password(account, current_password)

        new_email = _normalize_email(new_email)
        if self._store.email_in_use(new_email, exclude_id=account.id):
            raise EmailTakenError("Email is already in use")

        updated = self._store.update_email(account.id, new_email)
        if updated is None:
            raise UserNotFoundError("User not found")

        logger.info(f"Email changed for account {account.id}")
        return EmailUpdateResult(email=updated.email, token=self.issue_token(updated))

    def change_password(self, account_id: UUID, current_password: str, new_password: str) -> None:
        """Replace the password hash after re-verifying the current password.

        Raises:
            UserNotFoundError: Account no longer exists.
            WrongPasswordError: current_password does not match.
            WeakPasswordError: new_password shorter than the configured minimum.
        """
        if len(new_password) < self._config.min_password_length:
            raise WeakPasswordError(self._config.min_password_length)

        account = self._require_account(account_id)
        self._require_password(account, current_password)

        if self._store.update_password_hash(account.id, self._hasher.hash(new_password)) is None:
            raise UserNotFoundError("User not found")

        logger.info(f"Password changed for account {account.id}")

    def issue_token(self, account: Account) -> str:
        return self._tokens.issue(account.to_identity())

    def _require_account(self, account_id: UUID) -> Account:
        account = self._store.get_by_id(account_id)
        if account is None:
            raise UserNotFoundError("User not found")
        return account

    def _require_password(self, account: Account, password: str) -> None:
        if not self._hasher.verify(password, account.password_hash):
            logger.warning(f"Wrong current password for account {account.id}")
            raise WrongPasswordError("Current password is incorrect")
