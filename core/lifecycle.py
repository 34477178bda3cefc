"""
Contact lifecycle state machine.

    active --soft_delete--> trashed --restore--> active
                            trashed --purge----> (row removed)

toggle_favorite keeps the current state and is allowed in both.
update is only allowed while active. Purge is only reachable from
trashed; purging an active contact must go through the trash first.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from core.exceptions import InvalidStateError, NotTrashedError
from core.models import Contact, ContactState
from utils.timezone import now_utc


class ContactAction(str, Enum):
    """Operations that touch an existing contact."""

    UPDATE = "update"
    TOGGLE_FAVORITE = "toggle_favorite"
    SOFT_DELETE = "soft_delete"
    RESTORE = "restore"
    PURGE = "purge"


# (from_state, action) -> to_state. None means the record is removed.
_TRANSITIONS: dict[tuple[ContactState, ContactAction], ContactState | None] = {
    (ContactState.ACTIVE, ContactAction.UPDATE): ContactState.ACTIVE,
    (ContactState.ACTIVE, ContactAction.TOGGLE_FAVORITE): ContactState.ACTIVE,
    (ContactState.TRASHED, ContactAction.TOGGLE_FAVORITE): ContactState.TRASHED,
    (ContactState.ACTIVE, ContactAction.SOFT_DELETE): ContactState.TRASHED,
    (ContactState.TRASHED, ContactAction.RESTORE): ContactState.ACTIVE,
    (ContactState.TRASHED, ContactAction.PURGE): None,
}

_REJECTIONS = {
    ContactAction.UPDATE: "Contact is in trash and cannot be edited",
    ContactAction.SOFT_DELETE: "Contact is already in trash",
    ContactAction.PURGE: "Contact must be moved to trash before it can be permanently deleted",
}


def is_allowed(state: ContactState, action: ContactAction) -> bool:
    return (state, action) in _TRANSITIONS


def next_state(contact: Contact, action: ContactAction) -> ContactState | None:
    """
    Target state for action, or None if the action removes the contact.

    Raises:
        NotTrashedError: restore on a contact that is not trashed.
        InvalidStateError: any other transition missing from the table.
    """
    key = (contact.state, action)
    if key not in _TRANSITIONS:
        if action is ContactAction.RESTORE:
            raise NotTrashedError(contact.id)
        raise InvalidStateError(
            contact.id,
            _REJECTIONS.get(action, f"Cannot {action.value} a {contact.state.value} contact"),
        )
    return _TRANSITIONS[key]


def apply_transition(
    contact: Contact,
    action: ContactAction,
    changes: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> Contact | None:
    """
    Return the contact as it looks after action, without persisting it.

    Returns None for purge. `changes` carries field values for UPDATE
    and is ignored otherwise.
    """
    target = next_state(contact, action)
    if target is None:
        return None

    now = now or now_utc()
    updates: dict[str, Any] = {"state": target, "updated_at": now}

    if action is ContactAction.UPDATE:
        updates.update(changes or {})
    elif action is ContactAction.TOGGLE_FAVORITE:
        updates["is_favorite"] = not contact.is_favorite
    elif action is ContactAction.SOFT_DELETE:
        updates["deleted_at"] = now
    elif action is ContactAction.RESTORE:
        updates["deleted_at"] = None

    return contact.model_copy(update=updates)
