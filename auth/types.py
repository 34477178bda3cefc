"""Pydantic models for auth domain."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field


def check_email_syntax(value: str) -> str:
    """
    Reject addresses that are not syntactically valid.

    Domain policy is not enforced: special-use names such as .local and
    .test pass, and the address is returned as typed.
    """
    value = value.strip()
    try:
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


AccountEmail = Annotated[str, AfterValidator(check_email_syntax)]


class Account(BaseModel):
    """A registered account as stored."""

    id: UUID
    username: str
    email: str
    password_hash: str = Field(..., exclude=True, repr=False)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    def to_identity(self) -> "Identity":
        return Identity(account_id=self.id, username=self.username, email=self.email)


class AccountPublic(BaseModel):
    """Account fields safe to return to clients."""

    id: UUID
    username: str
    email: str


class Identity(BaseModel):
    """
    The authenticated caller, projected from token claims.

    Read-only value; never a handle to the stored account.
    """

    account_id: UUID
    username: str
    email: str

    model_config = {"frozen": True}

    def to_public(self) -> AccountPublic:
        return AccountPublic(id=self.account_id, username=self.username, email=self.email)


class TokenClaims(BaseModel):
    """Decoded payload of an identity token."""

    sub: UUID
    username: str
    email: str
    iat: datetime
    exp: datetime

    def to_identity(self) -> Identity:
        return Identity(account_id=self.sub, username=self.username, email=self.email)


class RegisterRequest(BaseModel):
    """Request payload for registration."""

    username: str = Field(..., min_length=1, max_length=100)
    email: AccountEmail
    password: str = Field(..., min_length=1, max_length=72)

    model_config = {"str_strip_whitespace": True}


class LoginRequest(BaseModel):
    """Request payload for login."""

    email: AccountEmail
    password: str = Field(..., min_length=1, max_length=72)


class UpdateEmailRequest(BaseModel):
    """Request payload for changing the account email."""

    email: AccountEmail
    password: str = Field(..., min_length=1, description="Current password")


class ChangePasswordRequest(BaseModel):
    """Request payload for changing the account password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1, max_length=72)


class LoginResult(BaseModel):
    """Token returned after successful login."""

    token: str


class EmailUpdateResult(BaseModel):
    """New email plus a token carrying the refreshed claim."""

    email: str
    token: str
