"""SQLite-backed store for the last copied payload."""

import json
import sqlite3
import time
from pathlib import Path
from typing import Any

from loguru import logger

from frametext.config import PAYLOAD_DB_NAME
from frametext.core.database.schema import migrate_schema
from frametext.errors import PersistenceError


class SqlitePayloadStore:
    """Key-value payload store. A put fully replaces the previous value."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    async def put(self, key: str, value: dict[str, Any]) -> None:
        try:
            encoded = json.dumps(value, sort_keys=True)
        except (TypeError, ValueError) as e:
            msg = f"Payload for {key!r} is not serializable: {e}"
            raise PersistenceError(msg) from e
        try:
            self.conn.execute(
                "INSERT OR REPLACE INTO payloads (key, value, stored_at) VALUES (?, ?, ?)",
                (key, encoded, int(time.time() * 1000)),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            msg = f"Could not store payload {key!r}: {e}"
            raise PersistenceError(msg) from e
        logger.debug("Stored payload {!r} ({} bytes)", key, len(encoded))

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            row = self.conn.execute(
                "SELECT value FROM payloads WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            msg = f"Could not read payload {key!r}: {e}"
            raise PersistenceError(msg) from e
        if row is None:
            return None
        try:
            value = json.loads(row[0])
        except json.JSONDecodeError as e:
            msg = f"Stored payload {key!r} is corrupt: {e}"
            raise PersistenceError(msg) from e
        return value if isinstance(value, dict) else None

    async def clear(self, key: str) -> None:
        try:
            self.conn.execute("DELETE FROM payloads WHERE key = ?", (key,))
            self.conn.commit()
        except sqlite3.Error as e:
            msg = f"Could not clear payload {key!r}: {e}"
            raise PersistenceError(msg) from e
        logger.debug("Cleared payload {!r}", key)

    def close(self) -> None:
        self.conn.close()


def open_payload_store(data_dir: Path) -> SqlitePayloadStore:
    """Open (creating if needed) the payload database in ``data_dir``."""
    data_dir.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(data_dir / PAYLOAD_DB_NAME))
    migrate_schema(conn)
    return SqlitePayloadStore(conn)


def try_open_payload_store(data_dir: Path) -> SqlitePayloadStore | None:
    """Open the payload store, or return None when it cannot be opened.

    Without a store, copies are kept in memory only.
    """
    try:
        return open_payload_store(data_dir)
    except (OSError, sqlite3.Error) as e:
        logger.warning("Payload store in {} unavailable, keeping copies in memory: {}", data_dir, e)
        return None
