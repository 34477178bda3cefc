"""Per-request authorization gate."""

import logging
from typing import Mapping

from auth.exceptions import InvalidTokenError, NotAuthenticatedError, TokenExpiredError
from auth.tokens import TokenService
from auth.types import Identity

logger = logging.getLogger(__name__)


class AuthGuard:
    """Turns request headers into an Identity or rejects the request.

    Expired and forged tokens produce the same NotAuthenticatedError;
    the cause is only logged.
    """

    HEADER = "Authorization"
    SCHEME = "Bearer"

    def __init__(self, token_service: TokenService):
        self._tokens = token_service

    def extract_token(self, headers: Mapping[str, str]) -> str | None:
        """Bearer credential from the Authorization header, or None."""
        value = headers.get(self.HEADER) or headers.get(self.HEADER.lower())
        if not value:
            return None

        scheme, _, token = value.partition(" ")
        if scheme != self.SCHEME:
            return None
        token = token.strip()
        return token or None

    def authenticate(self, headers: Mapping[str, str]) -> Identity:
        """
        Raises:
            NotAuthenticatedError: Token missing, invalid or expired.
        """
        token = self.extract_token(headers)
        if token is None:
            raise NotAuthenticatedError("Not authorized, no token")

        try:
            claims = self._tokens.validate(token)
        except TokenExpiredError:
            logger.debug("Rejected expired token")
            raise NotAuthenticatedError("Invalid or expired token")
        except InvalidTokenError as e:
            logger.debug(f"Rejected invalid token: {e}")
            raise NotAuthenticatedError("Invalid or expired token")

        return claims.to_identity()
