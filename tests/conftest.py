"""Shared test fixtures for the contacts test suite."""

import pytest
from uuid import UUID
from pathlib import Path

from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

from auth.config import AuthConfig
from auth.database import InMemoryAccountStore
from auth.passwords import PasswordHasher
from auth.service import AccountService
from auth.tokens import TokenService
from auth.types import Identity
from core.services.contact_service import ContactService
from core.stores import InMemoryContactStore
from utils.user_context import identity_context, clear_current_identity


# =============================================================================
# TEST USER CONSTANTS
# =============================================================================

# Primary test user - use for single-user tests
TEST_USER_ID = UUID("00000000-0000-0000-0000-000000000001")
TEST_USER_EMAIL = "testuser@example.com"

# Secondary test user - use for owner isolation tests
TEST_USER_B_ID = UUID("00000000-0000-0000-0000-000000000002")
TEST_USER_B_EMAIL = "testuser-b@example.com"

TEST_TOKEN_SECRET = "test-secret-that-is-at-least-32-characters-long"


# =============================================================================
# IDENTITY FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_user_context():
    """Ensure clean identity context before and after each test."""
    clear_current_identity()
    yield
    clear_current_identity()


@pytest.fixture
def test_user() -> Identity:
    """The primary test user's identity."""
    return Identity(account_id=TEST_USER_ID, username="testuser", email=TEST_USER_EMAIL)


@pytest.fixture
def test_user_b() -> Identity:
    """The secondary test user's identity (for isolation tests)."""
    return Identity(account_id=TEST_USER_B_ID, username="testuser-b", email=TEST_USER_B_EMAIL)


@pytest.fixture
def as_test_user(test_user):
    """Run the test as the primary test user."""
    with identity_context(test_user):
        yield test_user


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def auth_config() -> AuthConfig:
    """Auth config with the cheapest bcrypt cost for fast tests."""
    return AuthConfig(token_secret=TEST_TOKEN_SECRET, password_hash_rounds=4)


@pytest.fixture
def token_service(auth_config) -> TokenService:
    return TokenService(auth_config)


@pytest.fixture
def hasher(auth_config) -> PasswordHasher:
    return PasswordHasher(auth_config.password_hash_rounds)


@pytest.fixture
def account_store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def account_service(auth_config, account_store, token_service, hasher) -> AccountService:
    return AccountService(
        config=auth_config,
        store=account_store,
        token_service=token_service,
        hasher=hasher,
    )


# =============================================================================
# CONTACT FIXTURES
# =============================================================================


@pytest.fixture
def contact_store() -> InMemoryContactStore:
    return InMemoryContactStore()


@pytest.fixture
def contact_service(contact_store) -> ContactService:
    return ContactService(contact_store)
