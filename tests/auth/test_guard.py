"""Tests for auth/guard.py - per-request authorization gate."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from auth.exceptions import InvalidTokenError, NotAuthenticatedError, TokenExpiredError
from auth.guard import AuthGuard
from auth.tokens import TokenService


@pytest.fixture
def guard(token_service):
    return AuthGuard(token_service)


class TestExtractToken:
    """Tests for AuthGuard.extract_token()."""

    def test_bearer_header(self, guard):
        assert guard.extract_token({"Authorization": "Bearer abc"}) == "abc"

    def test_lowercase_header_name(self, guard):
        assert guard.extract_token({"authorization": "Bearer abc"}) == "abc"

    def test_missing_header(self, guard):
        assert guard.extract_token({}) is None

    def test_other_scheme(self, guard):
        assert guard.extract_token({"Authorization": "Basic abc"}) is None

    def test_scheme_without_token(self, guard):
        assert guard.extract_token({"Authorization": "Bearer "}) is None


class TestAuthenticate:
    """Tests for AuthGuard.authenticate()."""

    def test_valid_token_yields_identity(self, guard, token_service, test_user):
        token = token_service.issue(test_user)

        identity = guard.authenticate({"Authorization": f"Bearer {token}"})

        assert identity == test_user

    def test_missing_token(self, guard):
        with pytest.raises(NotAuthenticatedError, match="no token"):
            guard.authenticate({})

    def test_invalid_token(self, guard):
        with pytest.raises(NotAuthenticatedError, match="Invalid or expired token"):
            guard.authenticate({"Authorization": "Bearer garbage"})

    def test_expired_token(self, guard, token_service, test_user):
        token = token_service.issue(test_user, ttl=timedelta(seconds=-1))

        with pytest.raises(NotAuthenticatedError, match="Invalid or expired token"):
            guard.authenticate({"Authorization": f"Bearer {token}"})

    def test_expired_and_invalid_are_indistinguishable(self):
        tokens = Mock(spec=TokenService)
        guard = AuthGuard(tokens)

        tokens.validate.side_effect = TokenExpiredError("expired")
        with pytest.raises(NotAuthenticatedError) as expired:
            guard.authenticate({"Authorization": "Bearer t"})

        tokens.validate.side_effect = InvalidTokenError("bad signature")
        with pytest.raises(NotAuthenticatedError) as invalid:
            guard.authenticate({"Authorization": "Bearer t"})

        assert str(expired.value) == str(invalid.value)
