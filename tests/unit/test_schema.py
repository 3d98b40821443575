"""Tests for database schema."""

import sqlite3

from frametext.core.database.schema import (
    SCHEMA_VERSION,
    create_schema,
    get_metadata,
    get_schema_version,
    migrate_schema,
    set_metadata,
)


def test_create_schema_creates_payloads_table() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='payloads'")
    assert cursor.fetchone() is not None


def test_create_schema_is_idempotent() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    conn.execute("INSERT INTO payloads (key, value, stored_at) VALUES ('k', '{}', 1)")
    create_schema(conn)
    assert conn.execute("SELECT COUNT(*) FROM payloads").fetchone()[0] == 1


def test_migrate_schema_on_empty_db_creates_schema_and_sets_version() -> None:
    conn = sqlite3.connect(":memory:")
    assert get_schema_version(conn) is None
    migrate_schema(conn)
    assert get_schema_version(conn) == SCHEMA_VERSION


def test_metadata_round_trip() -> None:
    conn = sqlite3.connect(":memory:")
    migrate_schema(conn)
    assert get_metadata(conn, "last_copy") is None
    set_metadata(conn, "last_copy", "Hero")
    set_metadata(conn, "last_copy", "Footer")
    assert get_metadata(conn, "last_copy") == "Footer"


def test_migrate_schema_upgrades_older_version() -> None:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    set_metadata(conn, "schema_version", "0")

    migrate_schema(conn)

    assert get_schema_version(conn) == SCHEMA_VERSION
