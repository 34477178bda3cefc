"""
Contact service for owner-scoped CRUD and lifecycle transitions.

Every operation acts for the identity in the current user context.
Reads go through ContactQuery; state changes go through core.lifecycle.
"""

import logging
from uuid import UUID, uuid4

from core.exceptions import ContactForbiddenError, ContactNotFoundError, InvalidStateError
from core.lifecycle import ContactAction, apply_transition, next_state
from core.models import Contact, ContactCreate, ContactState, ContactUpdate
from core.query import ContactFilter, ContactQuery
from core.stores import ContactStore
from utils.user_context import get_current_user_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class ContactService:
    """Service for contact operations."""

    def __init__(self, store: ContactStore):
        self.store = store

    def create(self, data: ContactCreate) -> Contact:
        """
        Create a new contact owned by the current user.

        Args:
            data: Contact creation data

        Returns:
            Created contact, active and not a favorite
        """
        user_id = get_current_user_id()
        now = now_utc()

        contact = self.store.insert(Contact(
            id=uuid4(),
            user_id=user_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            is_favorite=False,
            state=ContactState.ACTIVE,
            deleted_at=None,
            created_at=now,
            updated_at=now,
        ))

        logger.info(f"Created contact {contact.id}")
        return contact

    def get_by_id(self, contact_id: UUID) -> Contact:
        """
        Get one of the current user's contacts, active or trashed.

        Raises:
            ContactNotFoundError: No such contact.
            ContactForbiddenError: Contact belongs to another user.
        """
        user_id = get_current_user_id()
        contact = self.store.get(contact_id)

        if contact is None:
            raise ContactNotFoundError(contact_id)

        if contact.user_id != user_id:
            logger.warning(f"User {user_id} denied access to contact {contact_id}")
            raise ContactForbiddenError(contact_id)

        return contact

    def list_all(self, filter: ContactFilter | None = None) -> list[Contact]:
        """
        List the current user's active contacts.

        Args:
            filter: Optional search term and sort order. Unknown sort
                values fall back to newest first.
        """
        return self.store.find(ContactQuery.active(get_current_user_id(), filter))

    def list_trash(self) -> list[Contact]:
        """List the current user's trashed contacts, most recently deleted first."""
        return self.store.find(ContactQuery.trash(get_current_user_id()))

    def update(self, contact_id: UUID, data: ContactUpdate) -> Contact:
        """
        Update contact fields.

        Args:
            contact_id: Contact UUID
            data: Fields to update (only non-None fields are changed)

        Raises:
            InvalidStateError: Contact is in trash.
        """
        current = self.get_by_id(contact_id)
        next_state(current, ContactAction.UPDATE)

        updates = data.model_dump(exclude_none=True)
        if not updates:
            return current  # Nothing to update

        return self._save(current, ContactAction.UPDATE, updates)

    def toggle_favorite(self, contact_id: UUID) -> Contact:
        """Flip is_favorite. Allowed for active and trashed contacts."""
        return self._save(self.get_by_id(contact_id), ContactAction.TOGGLE_FAVORITE)

    def soft_delete(self, contact_id: UUID) -> Contact:
        """
        Move a contact to trash.

        Raises:
            InvalidStateError: Contact is already in trash.
        """
        return self._save(self.get_by_id(contact_id), ContactAction.SOFT_DELETE)

    def restore(self, contact_id: UUID) -> Contact:
        """
        Bring a trashed contact back to the active list.

        Raises:
            NotTrashedError: Contact is not in trash.
        """
        return self._save(self.get_by_id(contact_id), ContactAction.RESTORE)

    def purge(self, contact_id: UUID) -> Contact:
        """
        Permanently delete a trashed contact.

        Returns:
            The contact as it was before removal

        Raises:
            InvalidStateError: Contact is still active.
        """
        current = self.get_by_id(contact_id)
        next_state(current, ContactAction.PURGE)

        if not self.store.delete_trashed(contact_id):
            latest = self.store.get(contact_id)
            if latest is None:
                raise ContactNotFoundError(contact_id)
            # Restored between the read and the delete
            next_state(latest, ContactAction.PURGE)
            raise InvalidStateError(contact_id, "Contact changed while being deleted")

        logger.info(f"Purged contact {contact_id}")
        return current

    def _save(self, current: Contact, action: ContactAction, changes: dict | None = None) -> Contact:
        updated = apply_transition(current, action, changes)
        saved = self.store.save(updated)
        logger.info(f"Contact {current.id}: {action.value} ({current.state.value} -> {saved.state.value})")
        return saved
