"""Identity token issuance and validation.

Tokens are HS256 JWTs carrying the account id (sub), username and email.
Nothing is stored server-side; a token dies at its expiry.
"""

import logging
from datetime import timedelta

import jwt
from pydantic import ValidationError

from auth.config import AuthConfig
from auth.exceptions import InvalidTokenError, TokenExpiredError
from auth.types import Identity, TokenClaims
from utils.timezone import now_utc, to_timestamp

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and validates signed, time-bound identity tokens."""

    REQUIRED_CLAIMS = ["sub", "username", "email", "iat", "exp"]

    def __init__(self, config: AuthConfig):
        self._secret = config.token_secret.get_secret_value()
        self._algorithm = config.token_algorithm
        self._ttl = timedelta(minutes=config.token_expiry_minutes)

    def issue(self, identity: Identity, ttl: timedelta | None = None) -> str:
        """Sign identity claims with an absolute expiry of now + ttl."""
        now = now_utc()
        expires_at = now + (ttl if ttl is not None else self._ttl)

        payload = {
            "sub": str(identity.account_id),
            "username": identity.username,
            "email": identity.email,
            "iat": to_timestamp(now),
            "exp": to_timestamp(expires_at),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> TokenClaims:
        """Verify signature and structure, then expiry.

        Expiry is checked against now_utc() only after the signature is
        known good, so a forged token can never surface as "expired".

        Raises:
            InvalidTokenError: Bad signature, malformed token or claims.
            TokenExpiredError: Signature valid but expiry has passed.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": self.REQUIRED_CLAIMS,
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Token rejected: {e}") from e

        try:
            claims = TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise InvalidTokenError("Token claims are malformed") from e

        if now_utc() >= claims.exp:
            raise TokenExpiredError("Token has expired")

        return claims
