"""
Contact storage.

Stores are deliberately unscoped: get() returns a contact whatever its
owner so the service can tell "missing" from "someone else's". Owner
checks live in ContactService; list reads are scoped by ContactQuery.

Writes are whole-row saves, so two overlapping updates to one contact
resolve as last-write-wins.
"""

import logging
import threading
from typing import Protocol
from uuid import UUID

from clients.postgres_client import PostgresClient
from core.exceptions import ContactNotFoundError
from core.models import Contact, ContactState
from core.query import ContactQuery

logger = logging.getLogger(__name__)


class ContactStore(Protocol):
    """Keyed collection of contacts, indexed by owner for listing."""

    def insert(self, contact: Contact) -> Contact: ...

    def get(self, contact_id: UUID) -> Contact | None: ...

    def save(self, contact: Contact) -> Contact:
        """Persist all mutable fields. Raises ContactNotFoundError if the row is gone."""
        ...

    def delete_trashed(self, contact_id: UUID) -> bool:
        """Remove the row only if it is still trashed. False if missing or active."""
        ...

    def find(self, query: ContactQuery) -> list[Contact]: ...


class PostgresContactStore:
    """Contacts table access."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def insert(self, contact: Contact) -> Contact:
        row = self.postgres.execute_returning(
            """
            INSERT INTO contacts (
                id, user_id, name, email, phone,
                is_favorite, state, deleted_at, created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s,
                %s, %s, %s, %s, %s
            )
            RETURNING *
            """,
            (
                contact.id, contact.user_id, contact.name, contact.email, contact.phone,
                contact.is_favorite, contact.state.value, contact.deleted_at,
                contact.created_at, contact.updated_at
            )
        )[0]
        return Contact.model_validate(row)

    def get(self, contact_id: UUID) -> Contact | None:
        row = self.postgres.execute_single(
            "SELECT * FROM contacts WHERE id = %s",
            (contact_id,)
        )
        if row is None:
            return None
        return Contact.model_validate(row)

    def save(self, contact: Contact) -> Contact:
        # user_id and created_at are never written after insert
        rows = self.postgres.execute_returning(
            """
            UPDATE contacts
            SET name = %s, email = %s, phone = %s, is_favorite = %s,
                state = %s, deleted_at = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (
                contact.name, contact.email, contact.phone, contact.is_favorite,
                contact.state.value, contact.deleted_at, contact.updated_at,
                contact.id
            )
        )
        if not rows:
            raise ContactNotFoundError(contact.id)
        return Contact.model_validate(rows[0])

    def delete_trashed(self, contact_id: UUID) -> bool:
        rows = self.postgres.execute_returning(
            "DELETE FROM contacts WHERE id = %s AND state = %s RETURNING id",
            (contact_id, ContactState.TRASHED.value)
        )
        return len(rows) > 0

    def find(self, query: ContactQuery) -> list[Contact]:
        clause, params = query.to_sql()
        rows = self.postgres.execute(f"SELECT * FROM contacts {clause}", params)
        return [Contact.model_validate(row) for row in rows]


class InMemoryContactStore:
    """Process-local contact store with a per-owner index."""

    def __init__(self):
        self._contacts: dict[UUID, Contact] = {}
        self._by_owner: dict[UUID, set[UUID]] = {}
        self._lock = threading.RLock()

    def insert(self, contact: Contact) -> Contact:
        with self._lock:
            if contact.id in self._contacts:
                raise ValueError(f"Contact {contact.id} already exists")
            self._contacts[contact.id] = contact.model_copy()
            self._by_owner.setdefault(contact.user_id, set()).add(contact.id)
            return contact.model_copy()

    def get(self, contact_id: UUID) -> Contact | None:
        with self._lock:
            contact = self._contacts.get(contact_id)
            return contact.model_copy() if contact else None

    def save(self, contact: Contact) -> Contact:
        with self._lock:
            current = self._contacts.get(contact.id)
            if current is None:
                raise ContactNotFoundError(contact.id)
            saved = contact.model_copy(
                update={"user_id": current.user_id, "created_at": current.created_at}
            )
            self._contacts[contact.id] = saved
            return saved.model_copy()

    def delete_trashed(self, contact_id: UUID) -> bool:
        with self._lock:
            contact = self._contacts.get(contact_id)
            if contact is None or not contact.is_trashed:
                return False
            del self._contacts[contact_id]
            self._by_owner.get(contact.user_id, set()).discard(contact_id)
            return True

    def find(self, query: ContactQuery) -> list[Contact]:
        with self._lock:
            owned = [self._contacts[cid] for cid in self._by_owner.get(query.owner_id, ())]
            return [c.model_copy() for c in query.apply(owned)]
