"""Typed exceptions for contact operations."""

from uuid import UUID


class ContactError(Exception):
    """Base class for contact errors."""

    def __init__(self, contact_id: UUID, message: str):
        self.contact_id = contact_id
        super().__init__(message)


class ContactNotFoundError(ContactError):
    """No contact with this ID exists, for any owner."""

    def __init__(self, contact_id: UUID):
        super().__init__(contact_id, f"Contact with ID {contact_id} not found")


class ContactForbiddenError(ContactError):
    """
    Contact exists but belongs to another account.

    Internal distinction only. The HTTP boundary decides whether to
    reveal it as 403 or collapse it into 404.
    """

    def __init__(self, contact_id: UUID):
        super().__init__(contact_id, f"Contact with ID {contact_id} belongs to another user")


class InvalidStateError(ContactError):
    """Requested lifecycle transition is not allowed from the contact's current state."""

    def __init__(self, contact_id: UUID, message: str):
        super().__init__(contact_id, message)


class NotTrashedError(InvalidStateError):
    """Restore attempted on a contact that is not in the trash."""

    def __init__(self, contact_id: UUID):
        super().__init__(contact_id, "Contact is not in trash")
