"""API test fixtures - app from the real factory with in-memory stores."""

import pytest
from starlette.testclient import TestClient

from api.config import AppConfig
from core.stores import InMemoryContactStore
from main import create_app


# =============================================================================
# APP FIXTURES
# =============================================================================


@pytest.fixture
def app_config():
    return AppConfig()


@pytest.fixture
def app(auth_config, app_config, account_store, contact_store):
    """Full app: middleware, error handlers, account and contact routes."""
    return create_app(auth_config, app_config, account_store, contact_store)


# =============================================================================
# CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def unauthed_client(app):
    """Client without an Authorization header."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(app, token_service, test_user):
    """Client authenticated as the primary test user."""
    c = TestClient(app, raise_server_exceptions=False)
    c.headers["Authorization"] = f"Bearer {token_service.issue(test_user)}"
    return c


@pytest.fixture
def client_b(app, token_service, test_user_b):
    """Client authenticated as the secondary test user."""
    c = TestClient(app, raise_server_exceptions=False)
    c.headers["Authorization"] = f"Bearer {token_service.issue(test_user_b)}"
    return c


@pytest.fixture
def new_contact(client):
    """Create a contact through the API and return its payload."""
    def _create(name="Ann Lee", email="ann@example.com", phone="555-0100"):
        response = client.post("/api/contacts", json={"name": name, "email": email, "phone": phone})
        assert response.status_code == 201
        return response.json()["data"]
    return _create
