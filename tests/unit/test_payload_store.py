"""Tests for the SQLite payload store."""

import asyncio
import sqlite3
from pathlib import Path

import pytest

from frametext.config import PAYLOAD_DB_NAME
from frametext.core.database.schema import migrate_schema
from frametext.core.store.payload_store import (
    SqlitePayloadStore,
    open_payload_store,
    try_open_payload_store,
)
from frametext.errors import PersistenceError
from frametext.protocols import PayloadStore


@pytest.fixture
def store() -> SqlitePayloadStore:
    conn = sqlite3.connect(":memory:")
    migrate_schema(conn)
    return SqlitePayloadStore(conn)


def test_store_satisfies_protocol(store: SqlitePayloadStore) -> None:
    assert isinstance(store, PayloadStore)


def test_get_missing_key_returns_none(store: SqlitePayloadStore) -> None:
    assert asyncio.run(store.get("copyPayload")) is None


def test_put_replaces_previous_value(store: SqlitePayloadStore) -> None:
    async def scenario() -> dict | None:
        await store.put("copyPayload", {"sourceFrameName": "A", "items": [1]})
        await store.put("copyPayload", {"sourceFrameName": "B"})
        return await store.get("copyPayload")

    assert asyncio.run(scenario()) == {"sourceFrameName": "B"}


def test_clear_removes_value(store: SqlitePayloadStore) -> None:
    async def scenario() -> dict | None:
        await store.put("copyPayload", {"x": 1})
        await store.clear("copyPayload")
        await store.clear("copyPayload")
        return await store.get("copyPayload")

    assert asyncio.run(scenario()) is None


def test_unserializable_value_raises_persistence_error(store: SqlitePayloadStore) -> None:
    with pytest.raises(PersistenceError, match="not serializable"):
        asyncio.run(store.put("copyPayload", {"bad": object()}))


def test_corrupt_row_raises_persistence_error(store: SqlitePayloadStore) -> None:
    store.conn.execute(
        "INSERT INTO payloads (key, value, stored_at) VALUES ('copyPayload', 'not json', 0)"
    )
    with pytest.raises(PersistenceError, match="corrupt"):
        asyncio.run(store.get("copyPayload"))


def test_closed_connection_raises_persistence_error(store: SqlitePayloadStore) -> None:
    store.close()
    with pytest.raises(PersistenceError):
        asyncio.run(store.get("copyPayload"))


def test_open_payload_store_persists_across_connections(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    first = open_payload_store(data_dir)
    asyncio.run(first.put("copyPayload", {"sourceFrameName": "Hero"}))
    first.close()

    second = open_payload_store(data_dir)
    try:
        assert asyncio.run(second.get("copyPayload")) == {"sourceFrameName": "Hero"}
    finally:
        second.close()
    assert (data_dir / PAYLOAD_DB_NAME).exists()


def test_try_open_payload_store_returns_none_for_unusable_dir(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    assert try_open_payload_store(blocker / "data") is None


def test_try_open_payload_store_opens_usable_dir(tmp_path: Path) -> None:
    store = try_open_payload_store(tmp_path / "data")
    assert store is not None
    store.close()
