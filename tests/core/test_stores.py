"""Tests for core/stores.py - contact storage."""

from datetime import datetime, timezone
from unittest.mock import Mock
from uuid import uuid4

import pytest

from clients.postgres_client import PostgresClient
from core.exceptions import ContactNotFoundError
from core.models import Contact, ContactState
from core.query import ContactQuery
from core.stores import InMemoryContactStore, PostgresContactStore

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _contact(owner, **overrides) -> Contact:
    data = {
        "id": uuid4(),
        "user_id": owner,
        "name": "Ann",
        "email": "ann@example.com",
        "phone": "555-0100",
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return Contact(**data)


class TestInMemoryContactStore:
    """Tests for the process-local store."""

    def test_insert_and_get(self, contact_store, test_user):
        contact = contact_store.insert(_contact(test_user.account_id))

        assert contact_store.get(contact.id) == contact

    def test_get_is_unscoped(self, contact_store, test_user_b):
        contact = contact_store.insert(_contact(test_user_b.account_id))

        assert contact_store.get(contact.id).user_id == test_user_b.account_id

    def test_duplicate_insert_rejected(self, contact_store, test_user):
        contact = _contact(test_user.account_id)
        contact_store.insert(contact)

        with pytest.raises(ValueError):
            contact_store.insert(contact)

    def test_save_missing_raises(self, contact_store, test_user):
        with pytest.raises(ContactNotFoundError):
            contact_store.save(_contact(test_user.account_id))

    def test_save_never_changes_owner_or_created_at(self, contact_store, test_user, test_user_b):
        contact = contact_store.insert(_contact(test_user.account_id))

        saved = contact_store.save(contact.model_copy(update={
            "user_id": test_user_b.account_id,
            "created_at": datetime(2030, 1, 1, tzinfo=timezone.utc),
            "name": "Annie",
        }))

        assert saved.name == "Annie"
        assert saved.user_id == test_user.account_id
        assert saved.created_at == NOW

    def test_delete_trashed(self, contact_store, test_user):
        contact = contact_store.insert(
            _contact(test_user.account_id, state=ContactState.TRASHED, deleted_at=NOW)
        )

        assert contact_store.delete_trashed(contact.id) is True
        assert contact_store.get(contact.id) is None
        assert contact_store.delete_trashed(contact.id) is False

    def test_delete_trashed_keeps_active_contact(self, contact_store, test_user):
        contact = contact_store.insert(_contact(test_user.account_id))

        assert contact_store.delete_trashed(contact.id) is False
        assert contact_store.get(contact.id) == contact

    def test_find_scoped_to_owner(self, contact_store, test_user, test_user_b):
        mine = contact_store.insert(_contact(test_user.account_id))
        contact_store.insert(_contact(test_user_b.account_id))

        result = contact_store.find(ContactQuery.active(test_user.account_id))

        assert [c.id for c in result] == [mine.id]

    def test_find_splits_active_and_trash(self, contact_store, test_user):
        active = contact_store.insert(_contact(test_user.account_id))
        trashed = contact_store.insert(
            _contact(test_user.account_id, state=ContactState.TRASHED, deleted_at=NOW)
        )

        assert [c.id for c in contact_store.find(ContactQuery.active(test_user.account_id))] == [active.id]
        assert [c.id for c in contact_store.find(ContactQuery.trash(test_user.account_id))] == [trashed.id]

    def test_returned_contacts_are_copies(self, contact_store, test_user):
        contact = contact_store.insert(_contact(test_user.account_id))
        contact.name = "Mallory"

        assert contact_store.get(contact.id).name == "Ann"


class TestPostgresContactStore:
    """Tests for the SQL store against a mocked client."""

    @pytest.fixture
    def db(self):
        return Mock(spec=PostgresClient)

    @pytest.fixture
    def store(self, db):
        return PostgresContactStore(db)

    def _row(self, contact: Contact) -> dict:
        row = contact.model_dump()
        row["state"] = contact.state.value
        return row

    def test_insert(self, store, db, test_user):
        contact = _contact(test_user.account_id)
        db.execute_returning.return_value = [self._row(contact)]

        assert store.insert(contact) == contact
        params = db.execute_returning.call_args[0][1]
        assert params[0] == contact.id
        assert params[6] == "active"

    def test_get_missing(self, store, db):
        db.execute_single.return_value = None

        assert store.get(uuid4()) is None

    def test_save_missing_raises(self, store, db, test_user):
        db.execute_returning.return_value = []

        with pytest.raises(ContactNotFoundError):
            store.save(_contact(test_user.account_id))

    def test_save_does_not_write_owner(self, store, db, test_user):
        contact = _contact(test_user.account_id)
        db.execute_returning.return_value = [self._row(contact)]

        store.save(contact)

        query = db.execute_returning.call_args[0][0]
        assert "user_id" not in query
        assert "created_at" not in query

    def test_delete_trashed(self, store, db):
        db.execute_returning.return_value = [{"id": uuid4()}]
        assert store.delete_trashed(uuid4()) is True

        db.execute_returning.return_value = []
        assert store.delete_trashed(uuid4()) is False

    def test_delete_trashed_guards_state(self, store, db):
        db.execute_returning.return_value = []
        contact_id = uuid4()

        store.delete_trashed(contact_id)

        sql, params = db.execute_returning.call_args[0]
        assert "state = %s" in sql
        assert params == (contact_id, "trashed")

    def test_find_renders_query(self, store, db, test_user):
        contact = _contact(test_user.account_id)
        db.execute.return_value = [self._row(contact)]

        result = store.find(ContactQuery.active(test_user.account_id))

        assert result == [contact]
        sql, params = db.execute.call_args[0]
        assert sql.startswith("SELECT * FROM contacts WHERE user_id = %s")
        assert params == (test_user.account_id, "active")
