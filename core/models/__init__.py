"""Core domain models."""

from core.models.contact import Contact, ContactCreate, ContactUpdate, ContactState

__all__ = [
    "Contact", "ContactCreate", "ContactUpdate", "ContactState",
]
