"""Contact domain models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class ContactState(str, Enum):
    """Stored lifecycle state. A purged contact has no row at all."""

    ACTIVE = "active"
    TRASHED = "trashed"


class ContactCreate(BaseModel):
    """Data required to create a contact. All fields are mandatory; email is stored as entered."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)

    model_config = {"str_strip_whitespace": True}


class ContactUpdate(BaseModel):
    """Data that can be updated on a contact. All fields optional, none blank."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, min_length=1, max_length=50)

    model_config = {"str_strip_whitespace": True}


class Contact(BaseModel):
    """Full contact entity as stored."""

    id: UUID
    user_id: UUID
    name: str
    email: str
    phone: str
    is_favorite: bool = False
    state: ContactState = ContactState.ACTIVE
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @property
    def is_trashed(self) -> bool:
        return self.state is ContactState.TRASHED
