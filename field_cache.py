"""Durable key-value caching of form field values."""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, MutableMapping, Protocol

logger = logging.getLogger(__name__)

FIELD_CACHE_DB_PATH = Path("field_cache.db")
_TABLE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS cached_fields (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at_utc TEXT NOT NULL
);
"""


class LocalStorage(Protocol):
    """Minimal ``localStorage``-style interface."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class SqliteLocalStorage:
    """``LocalStorage`` backed by a single SQLite table."""

    def __init__(self, db_path: Path = FIELD_CACHE_DB_PATH) -> None:
        self.db_path = Path(db_path)
        self._initialized = False

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_table(self, conn: sqlite3.Connection) -> None:
        if self._initialized:
            return
        conn.execute(_TABLE_SCHEMA_SQL)
        conn.commit()
        self._initialized = True

    def get_item(self, key: str) -> str | None:
        with self._connect() as conn:
            self._ensure_table(conn)
            row = conn.execute("SELECT value FROM cached_fields WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row["value"])

    def set_item(self, key: str, value: str) -> None:
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
        with self._connect() as conn:
            self._ensure_table(conn)
            conn.execute(
                """
                INSERT INTO cached_fields (key, value, updated_at_utc)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at_utc = excluded.updated_at_utc
                """,
                (key, value, timestamp),
            )
            conn.commit()


class FieldCache:
    """Mirror designated form fields into durable storage.

    Storage failures never propagate: the cache logs them and behaves as if
    nothing had been persisted.
    """

    def __init__(self, storage: LocalStorage | None, keys: Iterable[str]) -> None:
        self.storage = storage
        self.keys = tuple(keys)

    def is_cached(self, key: str) -> bool:
        return key in self.keys

    def restore(self, fields: MutableMapping[str, Any]) -> dict[str, str]:
        """Copy stored values into ``fields`` and return what was restored."""

        restored: dict[str, str] = {}
        if self.storage is None:
            return restored
        for key in self.keys:
            try:
                value = self.storage.get_item(key)
            except (sqlite3.Error, OSError) as exc:
                logger.warning("Field cache unavailable while reading %s: %s", key, exc)
                return restored
            if value is None:
                continue
            fields[key] = value
            restored[key] = value
        return restored

    def store(self, key: str, value: Any) -> bool:
        """Persist a changed field value; returns False when skipped."""

        if self.storage is None or not self.is_cached(key):
            return False
        text = "" if value is None else str(value)
        try:
            self.storage.set_item(key, text)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Field cache unavailable while writing %s: %s", key, exc)
            return False
        return True


__all__ = ["FIELD_CACHE_DB_PATH", "FieldCache", "LocalStorage", "SqliteLocalStorage"]
