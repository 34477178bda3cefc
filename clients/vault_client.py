"""
HashiCorp Vault access for the directory's startup secrets.

Two secrets are read, once per process: the PostgreSQL URL and the token
signing secret. Authentication is AppRole; missing configuration fails at
construction rather than on first read. Every path is resolved under the
'contacts/' prefix.
"""

import os
import logging
import threading
from typing import Any, Dict

import hvac
from hvac.exceptions import InvalidPath, Unauthorized, Forbidden

logger = logging.getLogger(__name__)

_SECRET_PREFIX = "contacts"

_vault_client_instance: "VaultClient | None" = None
_secret_cache: Dict[str, str] = {}
_instance_lock = threading.Lock()


def _ensure_vault_client() -> "VaultClient":
    global _vault_client_instance
    with _instance_lock:
        if _vault_client_instance is None:
            _vault_client_instance = VaultClient()
        return _vault_client_instance


class VaultClient:
    """AppRole-authenticated reader for KV v2 secrets under contacts/."""

    def __init__(
        self,
        vault_addr: str | None = None,
        vault_namespace: str | None = None,
        mount_point: str | None = None,
    ):
        """Read connection settings from arguments or VAULT_* environment variables."""
        self.vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        self.vault_namespace = vault_namespace or os.getenv("VAULT_NAMESPACE")
        self.mount_point = mount_point or os.getenv("VAULT_MOUNT_POINT", "secret")
        role_id = os.getenv("VAULT_ROLE_ID")
        secret_id = os.getenv("VAULT_SECRET_ID")

        if not self.vault_addr:
            raise ValueError("VAULT_ADDR environment variable is required")
        if not role_id or not secret_id:
            raise ValueError(
                "VAULT_ROLE_ID and VAULT_SECRET_ID environment variables are required"
            )

        client_kwargs = {"url": self.vault_addr}
        if self.vault_namespace:
            client_kwargs["namespace"] = self.vault_namespace
        self.client = hvac.Client(**client_kwargs)

        self._login(role_id, secret_id)
        if not self.client.is_authenticated():
            raise PermissionError("Vault authentication failed")

        logger.info(f"Vault client ready: {self.vault_addr}")

    def _login(self, role_id: str, secret_id: str) -> None:
        try:
            auth_response = self.client.auth.approle.login(role_id=role_id, secret_id=secret_id)
        except (Unauthorized, Forbidden, InvalidPath) as e:
            logger.error(f"AppRole authentication failed: {e}")
            raise PermissionError(f"AppRole authentication failed: {e}") from e
        self.client.token = auth_response["auth"]["client_token"]

    def read_secret(self, path: str) -> Dict[str, Any]:
        """
        All fields of the secret at contacts/<path>.

        Raises:
            PermissionError: Path missing or not readable with this role.
        """
        full_path = f"{_SECRET_PREFIX}/{path}"
        try:
            response = self.client.secrets.kv.v2.read_secret_version(
                path=full_path,
                mount_point=self.mount_point,
                raise_on_deleted_version=True,
            )
        except InvalidPath as e:
            logger.error(f"Secret path not found: {full_path}")
            raise PermissionError(f"Secret path '{full_path}' not found in Vault") from e
        except (Unauthorized, Forbidden) as e:
            logger.error(f"Access denied to secret {full_path}: {e}")
            raise PermissionError(f"Access denied to secret '{full_path}': {e}") from e
        return response["data"]["data"]

    def get_secret(self, path: str, field: str) -> str:
        """
        One field of the secret at contacts/<path>.

        Raises:
            PermissionError: Path missing or not readable with this role.
            KeyError: Field not present; the message lists the fields that are.
        """
        secret_data = self.read_secret(path)
        if field not in secret_data:
            raise KeyError(
                f"Field '{field}' not found in secret '{_SECRET_PREFIX}/{path}'. "
                f"Available: {', '.join(secret_data)}"
            )
        return secret_data[field]


def _cached_secret(path: str, field: str) -> str:
    cache_key = f"{path}/{field}"
    if cache_key not in _secret_cache:
        _secret_cache[cache_key] = _ensure_vault_client().get_secret(path, field)
    return _secret_cache[cache_key]


def get_database_url() -> str:
    """PostgreSQL connection URL (contacts/database, field url)."""
    return _cached_secret("database", "url")


def get_token_secret() -> str:
    """Identity-token signing secret (contacts/auth, field token_secret)."""
    return _cached_secret("auth", "token_secret")
