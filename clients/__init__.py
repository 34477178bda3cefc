# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    get_database_url,
    get_token_secret,
)
from clients.postgres_client import PostgresClient
