# tests/test_store.py
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from storefront.data.store import (
    ADMIN_LOGGED_IN,
    CART,
    CATEGORIES,
    LOGGED_IN_USER,
    ORDERS,
    USERS,
    LocalStore,
    build_store,
)
from storefront.domain.errors import PersistenceError


def test_read_missing_returns_defaults(store):
    assert store.read(USERS) == []
    assert store.read(CART) == []
    assert store.read(CATEGORIES) is None
    assert store.read(LOGGED_IN_USER) is None
    assert store.read(ADMIN_LOGGED_IN) == "false"


def test_defaults_are_not_shared(store):
    store.read(CART).append({"categoryId": 1})
    assert store.read(CART) == []


def test_write_then_read(store):
    store.write(USERS, [{"username": "alice"}])
    assert store.read(USERS) == [{"username": "alice"}]

    store.write(USERS, [{"username": "bob"}])
    assert store.read(USERS) == [{"username": "bob"}]


def test_write_none_deletes_record(store):
    store.write(LOGGED_IN_USER, "alice")
    assert store.read(LOGGED_IN_USER) == "alice"

    store.write(LOGGED_IN_USER, None)
    assert store.read(LOGGED_IN_USER) is None


def test_write_many_persists_all_records(store):
    store.write_many({USERS: [{"username": "alice"}], ORDERS: [{"id": 1}]})

    assert store.read(USERS) == [{"username": "alice"}]
    assert store.read(ORDERS) == [{"id": 1}]


def test_read_failure_returns_default(caplog):
    session = Mock()
    session.get.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    failing = LocalStore(session_factory=lambda: session)

    assert failing.read(USERS) == []
    assert "returning default" in caplog.text


def test_write_failure_is_dropped_and_rolled_back(caplog):
    session = Mock()
    session.get.return_value = None
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
    failing = LocalStore(session_factory=lambda: session)

    failing.write_many({USERS: [], ORDERS: []})

    session.rollback.assert_called_once()
    session.close.assert_called_once()
    assert "write dropped" in caplog.text


def test_build_store_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_store("carrier-pigeon")


def test_fetch_returns_none_on_miss(store):
    assert store.fetch(USERS) is None
    assert store.fetch(CATEGORIES) is None

    store.write(CATEGORIES, [])
    assert store.fetch(CATEGORIES) == []


def test_fetch_raises_on_storage_failure():
    session = Mock()
    session.get.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    failing = LocalStore(session_factory=lambda: session)

    with pytest.raises(PersistenceError):
        failing.fetch(CATEGORIES)
    session.close.assert_called_once()
