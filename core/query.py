"""
Contact list queries.

A ContactQuery combines the owner filter, the trash/active split, an
optional search term and a sort order. Stores either evaluate it in
Python (apply) or render it to SQL (to_sql); both give the same rows in
the same order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable
from uuid import UUID

from pydantic import BaseModel, Field

from core.models import Contact, ContactState


class ContactSort(str, Enum):
    """Sort orders accepted by the contact list."""

    NEWEST = "date"
    OLDEST = "date-asc"
    NAME = "name"
    NAME_DESC = "name-desc"

    @classmethod
    def parse(cls, value: str | None) -> "ContactSort":
        """Unknown or missing values fall back to newest-first."""
        try:
            return cls(value)
        except ValueError:
            return cls.NEWEST


class ContactFilter(BaseModel):
    """Client-supplied list options."""

    search: str | None = Field(None, max_length=255)
    sort: str | None = None


_SQL_ORDER = {
    ContactSort.NEWEST: "created_at DESC",
    ContactSort.OLDEST: "created_at ASC",
    ContactSort.NAME: "lower(name) ASC, created_at DESC",
    ContactSort.NAME_DESC: "lower(name) DESC, created_at DESC",
}

_SEARCH_FIELDS = ("name", "email", "phone")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class ContactQuery:
    """One scoped read over the contacts collection."""

    owner_id: UUID
    search: str | None = None
    sort: ContactSort = ContactSort.NEWEST
    trashed: bool = False

    @classmethod
    def active(cls, owner_id: UUID, filter: ContactFilter | None = None) -> "ContactQuery":
        filter = filter or ContactFilter()
        search = filter.search.strip() if filter.search else None
        return cls(
            owner_id=owner_id,
            search=search or None,
            sort=ContactSort.parse(filter.sort),
        )

    @classmethod
    def trash(cls, owner_id: UUID) -> "ContactQuery":
        """Trash view: fixed order by deletion time, no search."""
        return cls(owner_id=owner_id, trashed=True)

    @property
    def state(self) -> ContactState:
        return ContactState.TRASHED if self.trashed else ContactState.ACTIVE

    def matches(self, contact: Contact) -> bool:
        if contact.user_id != self.owner_id or contact.state is not self.state:
            return False
        if self.search is None:
            return True
        needle = self.search.casefold()
        return any(needle in getattr(contact, field).casefold() for field in _SEARCH_FIELDS)

    def order(self, contacts: Iterable[Contact]) -> list[Contact]:
        if self.trashed:
            return sorted(contacts, key=lambda c: c.deleted_at, reverse=True)

        # Newest first is the tie-breaker for name sorts; sorted() is stable.
        by_date = sorted(contacts, key=lambda c: c.created_at, reverse=self.sort is not ContactSort.OLDEST)
        if self.sort is ContactSort.NAME:
            return sorted(by_date, key=lambda c: c.name.casefold())
        if self.sort is ContactSort.NAME_DESC:
            return sorted(by_date, key=lambda c: c.name.casefold(), reverse=True)
        return by_date

    def apply(self, contacts: Iterable[Contact]) -> list[Contact]:
        """Evaluate against an iterable of contacts."""
        return self.order(c for c in contacts if self.matches(c))

    def to_sql(self) -> tuple[str, tuple]:
        """Render as WHERE and ORDER BY clauses for the contacts table.

        Returns:
            Tuple of (sql_fragment, params). The fragment starts at WHERE.
        """
        conditions = ["user_id = %s", "state = %s"]
        params: list = [self.owner_id, self.state.value]

        if self.search is not None:
            pattern = f"%{_escape_like(self.search)}%"
            conditions.append(
                "(" + " OR ".join(f"{field} ILIKE %s ESCAPE '\\'" for field in _SEARCH_FIELDS) + ")"
            )
            params.extend([pattern] * len(_SEARCH_FIELDS))

        order_by = "deleted_at DESC" if self.trashed else _SQL_ORDER[self.sort]
        return f"WHERE {' AND '.join(conditions)} ORDER BY {order_by}", tuple(params)
