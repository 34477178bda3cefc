"""Account storage.

Two implementations share the AccountStore interface: PostgreSQL for
deployments and an in-memory store for tests and local runs.

Email uniqueness is the store's job. create() and update_email() must
reject a duplicate atomically (unique index on lower(email) in Postgres,
a lock-guarded check in memory). Any pre-check done by callers is
best-effort only.
"""

import logging
import threading
from typing import Protocol
from uuid import UUID, uuid4

from psycopg2 import errors as pg_errors

from auth.exceptions import EmailTakenError
from auth.types import Account
from clients.postgres_client import PostgresClient
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class AccountStore(Protocol):
    """Keyed collection of accounts."""

    def get_by_email(self, email: str) -> Account | None: ...

    def get_by_id(self, account_id: UUID) -> Account | None: ...

    def email_in_use(self, email: str, exclude_id: UUID | None = None) -> bool: ...

    def create(self, username: str, email: str, password_hash: str) -> Account:
        """Insert a new account. Raises EmailTakenError on duplicate email."""
        ...

    def update_email(self, account_id: UUID, email: str) -> Account | None:
        """Change email. Raises EmailTakenError on duplicate; None if account missing."""
        ...

    def update_password_hash(self, account_id: UUID, password_hash: str) -> Account | None: ...


class PostgresAccountStore:
    """Database operations for accounts (users table)."""

    def __init__(self, postgres: PostgresClient):
        self._db = postgres

    def get_by_email(self, email: str) -> Account | None:
        """Find account by email (case-insensitive)."""
        row = self._db.execute_single(
            "SELECT * FROM users WHERE lower(email) = lower(%s)",
            (email,),
        )
        return Account.model_validate(row) if row else None

    def get_by_id(self, account_id: UUID) -> Account | None:
        row = self._db.execute_single(
            "SELECT * FROM users WHERE id = %s",
            (account_id,),
        )
        return Account.model_validate(row) if row else None

    def email_in_use(self, email: str, exclude_id: UUID | None = None) -> bool:
        if exclude_id is None:
            return self.get_by_email(email) is not None
        count = self._db.execute_scalar(
            "SELECT count(*) FROM users WHERE lower(email) = lower(%s) AND id <> %s",
            (email, exclude_id),
        )
        return bool(count)

    def create(self, username: str, email: str, password_hash: str) -> Account:
        now = now_utc()
        try:
            rows = self._db.execute_returning(
                """INSERT INTO users (id, username, email, password_hash, created_at, updated_at)
                   VALUES (%s, %s, lower(%s), %s, %s, %s)
                   RETURNING *""",
                (uuid4(), username, email, password_hash, now, now),
            )
        except pg_errors.UniqueViolation as e:
            raise EmailTakenError(f"Email {email} is already registered") from e
        return Account.model_validate(rows[0])

    def update_email(self, account_id: UUID, email: str) -> Account | None:
        try:
            rows = self._db.execute_returning(
                """UPDATE users SET email = lower(%s), updated_at = %s
                   WHERE id = %s
                   RETURNING *""",
                (email, now_utc(), account_id),
            )
        except pg_errors.UniqueViolation as e:
            raise EmailTakenError(f"Email {email} is already in use") from e
        return Account.model_validate(rows[0]) if rows else None

    def update_password_hash(self, account_id: UUID, password_hash: str) -> Account | None:
        rows = self._db.execute_returning(
            """UPDATE users SET password_hash = %s, updated_at = %s
               WHERE id = %s
               RETURNING *""",
            (password_hash, now_utc(), account_id),
        )
        return Account.model_validate(rows[0]) if rows else None


class InMemoryAccountStore:
    """Process-local account store. Uniqueness checks and writes share one lock."""

    def __init__(self):
        self._accounts: dict[UUID, Account] = {}
        self._lock = threading.RLock()

    def _find_email(self, email: str) -> Account | None:
        wanted = email.lower()
        for account in self._accounts.values():
            if account.email.lower() == wanted:
                return account
        return None

    def get_by_email(self, email: str) -> Account | None:
        with self._lock:
            account = self._find_email(email)
            return account.model_copy() if account else None

    def get_by_id(self, account_id: UUID) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_id)
            return account.model_copy() if account else None

    def email_in_use(self, email: str, exclude_id: UUID | None = None) -> bool:
        with self._lock:
            account = self._find_email(email)
            return account is not None and account.id != exclude_id

    def create(self, username: str, email: str, password_hash: str) -> Account:
        with self._lock:
            if self._find_email(email) is not None:
                raise EmailTakenError(f"Email {email} is already registered")
            now = now_utc()
            account = Account(
                id=uuid4(),
                username=username,
                email=email.lower(),
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            self._accounts[account.id] = account
            return account.model_copy()

    def update_email(self, account_id: UUID, email: str) -> Account | None:
        with self._lock:
            current = self._accounts.get(account_id)
            if current is None:
                return None
            holder = self._find_email(email)
            if holder is not None and holder.id != account_id:
                raise EmailTakenError(f"Email {email} is already in use")
            updated = current.model_copy(update={"email": email.lower(), "updated_at": now_utc()})
            self._accounts[account_id] = updated
            return updated.model_copy()

    def update_password_hash(self, account_id: UUID, password_hash: str) -> Account | None:
        with self._lock:
            current = self._accounts.get(account_id)
            if current is None:
                return None
            updated = current.model_copy(
                update={"password_hash": password_hash, "updated_at": now_utc()}
            )
            self._accounts[account_id] = updated
            return updated.model_copy()
