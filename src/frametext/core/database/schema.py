"""SQLite schema for the payload database."""

import sqlite3

from loguru import logger

SCHEMA_VERSION = 1

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS payloads (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    stored_at INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the payload and metadata tables and stamp the current version."""
    conn.executescript(_SCHEMA_SQL)
    set_metadata(conn, "schema_version", str(SCHEMA_VERSION))


def get_metadata(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute("SELECT value FROM metadata WHERE key = ?", (key,)).fetchone()
    return row[0] if row else None


def set_metadata(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute("INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)", (key, value))
    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """Stored schema version; None for a fresh database."""
    try:
        version = get_metadata(conn, "schema_version")
    except sqlite3.OperationalError:
        return None
    return int(version) if version is not None else None


def migrate_schema(conn: sqlite3.Connection) -> None:
    """Bring the database up to SCHEMA_VERSION, creating it when empty."""
    version = get_schema_version(conn)
    if version is None or version < SCHEMA_VERSION:
        logger.debug("Creating payload database schema v{}", SCHEMA_VERSION)
        create_schema(conn)
