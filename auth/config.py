"""Authentication configuration."""

from pydantic import BaseModel, Field, SecretStr, field_validator


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    Built once at startup and shared read-only. The signing secret lives
    here so nothing reads it from the environment ad hoc.
    """

    # Token settings
    token_secret: SecretStr = Field(
        ...,
        description="HMAC secret used to sign identity tokens",
    )
    token_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
        pattern="^HS(256|384|512)$",
    )
    token_expiry_minutes: int = Field(
        default=60,
        description="How long identity tokens remain valid",
        ge=1,
        le=1440,
    )

    # Password settings
    min_password_length: int = Field(
        default=6,
        description="Minimum length for a new password",
        ge=6,
        le=72,
    )
    password_hash_rounds: int = Field(
        default=10,
        description="bcrypt cost factor",
        ge=4,
        le=15,
    )

    @field_validator("token_secret")
    @classmethod
    def require_long_secret(cls, value: SecretStr) -> SecretStr:
        """HS256 keys shorter than the digest size are rejected."""
        if len(value.get_secret_value()) < 32:
            raise ValueError("token_secret must be at least 32 characters")
        return value
