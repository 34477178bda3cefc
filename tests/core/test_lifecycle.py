"""Tests for core/lifecycle.py - contact state machine."""

from datetime import timedelta
from uuid import uuid4

import pytest

from core.exceptions import InvalidStateError, NotTrashedError
from core.lifecycle import ContactAction, apply_transition, is_allowed, next_state
from core.models import Contact, ContactState
from utils.timezone import now_utc


def _contact(state=ContactState.ACTIVE, **overrides) -> Contact:
    now = now_utc() - timedelta(days=1)
    data = {
        "id": uuid4(),
        "user_id": uuid4(),
        "name": "Ann",
        "email": "ann@example.com",
        "phone": "555-0100",
        "state": state,
        "deleted_at": now if state is ContactState.TRASHED else None,
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return Contact(**data)


class TestTransitionTable:
    """Which actions are allowed from which state."""

    @pytest.mark.parametrize("state,action,allowed", [
        (ContactState.ACTIVE, ContactAction.UPDATE, True),
        (ContactState.ACTIVE, ContactAction.TOGGLE_FAVORITE, True),
        (ContactState.ACTIVE, ContactAction.SOFT_DELETE, True),
        (ContactState.ACTIVE, ContactAction.RESTORE, False),
        (ContactState.ACTIVE, ContactAction.PURGE, False),
        (ContactState.TRASHED, ContactAction.UPDATE, False),
        (ContactState.TRASHED, ContactAction.TOGGLE_FAVORITE, True),
        (ContactState.TRASHED, ContactAction.SOFT_DELETE, False),
        (ContactState.TRASHED, ContactAction.RESTORE, True),
        (ContactState.TRASHED, ContactAction.PURGE, True),
    ])
    def test_is_allowed(self, state, action, allowed):
        assert is_allowed(state, action) is allowed


class TestNextState:
    """Tests for next_state() rejections."""

    def test_restore_active_raises_not_trashed(self):
        with pytest.raises(NotTrashedError):
            next_state(_contact(), ContactAction.RESTORE)

    def test_purge_active_raises_invalid_state(self):
        with pytest.raises(InvalidStateError) as exc_info:
            next_state(_contact(), ContactAction.PURGE)
        assert not isinstance(exc_info.value, NotTrashedError)

    def test_update_trashed_raises(self):
        with pytest.raises(InvalidStateError, match="cannot be edited"):
            next_state(_contact(ContactState.TRASHED), ContactAction.UPDATE)

    def test_soft_delete_trashed_raises(self):
        with pytest.raises(InvalidStateError, match="already in trash"):
            next_state(_contact(ContactState.TRASHED), ContactAction.SOFT_DELETE)

    def test_purge_trashed_removes(self):
        assert next_state(_contact(ContactState.TRASHED), ContactAction.PURGE) is None


class TestApplyTransition:
    """Tests for apply_transition() field effects."""

    def test_soft_delete_sets_deleted_at(self):
        now = now_utc()
        trashed = apply_transition(_contact(), ContactAction.SOFT_DELETE, now=now)

        assert trashed.state is ContactState.TRASHED
        assert trashed.deleted_at == now
        assert trashed.updated_at == now

    def test_restore_clears_deleted_at(self):
        restored = apply_transition(_contact(ContactState.TRASHED), ContactAction.RESTORE)

        assert restored.state is ContactState.ACTIVE
        assert restored.deleted_at is None

    def test_restore_keeps_fields(self):
        original = _contact(ContactState.TRASHED, is_favorite=True)

        restored = apply_transition(original, ContactAction.RESTORE)

        assert restored.name == original.name
        assert restored.is_favorite is True
        assert restored.created_at == original.created_at

    def test_toggle_favorite_keeps_state(self):
        trashed = _contact(ContactState.TRASHED)

        toggled = apply_transition(trashed, ContactAction.TOGGLE_FAVORITE)

        assert toggled.is_favorite is True
        assert toggled.state is ContactState.TRASHED
        assert toggled.deleted_at == trashed.deleted_at

    def test_double_toggle_is_identity(self):
        original = _contact()

        twice = apply_transition(
            apply_transition(original, ContactAction.TOGGLE_FAVORITE),
            ContactAction.TOGGLE_FAVORITE,
        )

        assert twice.is_favorite is original.is_favorite

    def test_update_applies_changes(self):
        updated = apply_transition(_contact(), ContactAction.UPDATE, {"phone": "555-0199"})

        assert updated.phone == "555-0199"
        assert updated.name == "Ann"

    def test_purge_returns_none(self):
        assert apply_transition(_contact(ContactState.TRASHED), ContactAction.PURGE) is None

    def test_original_is_not_mutated(self):
        original = _contact()

        apply_transition(original, ContactAction.SOFT_DELETE)

        assert original.state is ContactState.ACTIVE
        assert original.deleted_at is None
