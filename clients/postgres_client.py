"""
PostgreSQL client with connection pooling and transient-failure retry.

Uses psycopg2 with ThreadedConnectionPool. Ownership is not enforced here;
stores add their own user_id predicates so the service layer can tell a
missing row from another user's row.

Only connectivity failures before commit are retried. Integrity and
programming errors are permanent for the given input and propagate
immediately. A connectivity failure during commit raises
CommitOutcomeUnknownError and is never retried, since the write may have
landed.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Tuple, TypeVar
from uuid import UUID

import psycopg2
import psycopg2.extras
import psycopg2.pool

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSIENT_ERRORS = (psycopg2.OperationalError, psycopg2.InterfaceError)


class CommitOutcomeUnknownError(Exception):
    """Connection failed during COMMIT; the statement may or may not have been applied."""


def _commit(conn) -> None:
    try:
        conn.commit()
    except _TRANSIENT_ERRORS as e:
        logger.error(f"Connection lost during commit, outcome unknown: {e}")
        raise CommitOutcomeUnknownError(str(e)) from e


class PostgresClient:
    """
    PostgreSQL client returning rows as dicts.

    Usage:
        db = PostgresClient(database_url)
        rows = db.execute("SELECT * FROM contacts WHERE user_id = %s", (user_id,))
    """

    # Class-level connection pools shared across instances
    _connection_pools: Dict[str, psycopg2.pool.ThreadedConnectionPool] = {}
    _pools_lock = threading.RLock()

    def __init__(self, database_url: str, max_retries: int = 3, retry_delay_seconds: float = 0.2):
        self._database_url = database_url
        self._max_retries = max_retries
        self._retry_delay_seconds = retry_delay_seconds
        self._ensure_connection_pool()

    def _ensure_connection_pool(self) -> None:
        """Create connection pool if it doesn't exist."""
        with self._pools_lock:
            if self._database_url not in self._connection_pools:
                pool = psycopg2.pool.ThreadedConnectionPool(
                    minconn=2,
                    maxconn=20,
                    dsn=self._database_url,
                    connect_timeout=30,
                )
                self._connection_pools[self._database_url] = pool
                logger.info("Connection pool created")

    @contextmanager
    def get_connection(self):
        """Borrow a connection; broken connections are discarded, failed transactions rolled back."""
        if self._database_url not in self._connection_pools:
            self._ensure_connection_pool()

        pool = self._connection_pools[self._database_url]
        conn = pool.getconn()
        if conn is None:
            raise RuntimeError("Could not get connection from pool")

        broken = False
        try:
            yield conn
        except (*_TRANSIENT_ERRORS, CommitOutcomeUnknownError):
            broken = True
            raise
        except Exception:
            conn.rollback()
            raise
        finally:
            pool.putconn(conn, close=broken)

    def _with_retry(self, operation: Callable[[], T]) -> T:
        """Run operation, retrying connectivity failures with linear backoff."""
        attempt = 0
        while True:
            try:
                return operation()
            except _TRANSIENT_ERRORS as e:
                attempt += 1
                if attempt > self._max_retries:
                    logger.error(f"Database unavailable after {attempt} attempts: {e}")
                    raise
                logger.warning(f"Transient database error (attempt {attempt}), retrying: {e}")
                time.sleep(self._retry_delay_seconds * attempt)

    def _convert_params(self, params: Tuple | Dict | None) -> Tuple | Dict | None:
        """Convert UUID objects to strings."""
        if params is None:
            return None

        def convert(value: Any) -> Any:
            if isinstance(value, UUID):
                return str(value)
            if isinstance(value, list):
                return [convert(v) for v in value]
            if isinstance(value, tuple):
                return tuple(convert(v) for v in value)
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(params)

    def execute(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Execute query, return list of row dicts. Empty list if no results."""
        params = self._convert_params(params)

        def run() -> List[Dict[str, Any]]:
            with self.get_connection() as conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                    cur.execute(query, params)
                    if cur.description:
                        return [dict(row) for row in cur.fetchall()]
                    _commit(conn)
                    return []

        return self._with_retry(run)

    def execute_single(self, query: str, params: Tuple | Dict | None = None) -> Dict[str, Any] | None:
        """Execute query, return first row or None."""
        results = self.execute(query, params)
        return results[0] if results else None

    def execute_scalar(self, query: str, params: Tuple | Dict | None = None) -> Any:
        """Execute query, return first value of first row or None."""
        params = self._convert_params(params)

        def run() -> Any:
            with self.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    result = cur.fetchone()
                    return result[0] if result else None

        return self._with_retry(run)

    def execute_returning(self, query: str, params: Tuple | Dict | None = None) -> List[Dict[str, Any]]:
        """Execute INSERT/UPDATE/DELETE with RETURNING and commit."""
        params = self._convert_params(params)

        def run() -> List[Dict[str, Any]]:
            with self.get_connection() as conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                    cur.execute(query, params)
                    rows = [dict(row) for row in cur.fetchall()]
                _commit(conn)
                return rows

        return self._with_retry(run)

    def close(self) -> None:
        """Close connection pool."""
        with self._pools_lock:
            if self._database_url in self._connection_pools:
                self._connection_pools[self._database_url].closeall()
                del self._connection_pools[self._database_url]

