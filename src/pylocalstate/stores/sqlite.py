"""Durable store backed by an SQLite database."""

from __future__ import annotations

import logging
import os
import sqlite3
from typing import Any

from pylocalstate._redact import preview_for_log
from pylocalstate.exceptions import StoreError

_logger = logging.getLogger(__name__)

_SCHEMA = "CREATE TABLE IF NOT EXISTS records (key TEXT PRIMARY KEY, value TEXT NOT NULL)"


class SqliteStore:
    """Store records in a ``records(key, value)`` table.

    The connection runs in autocommit mode, so each ``set``/``remove`` is
    durable by the time it returns.

    Usage::

        with SqliteStore("state.sqlite3") as store:
            binding = ReactiveBinding(store, "name", initial="Test1")
    """

    def __init__(self, path: os.PathLike[str] | str = ":memory:") -> None:
        self._path = str(path)
        try:
            self._conn: sqlite3.Connection | None = sqlite3.connect(self._path, isolation_level=None)
            self._conn.execute(_SCHEMA)
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open SQLite store {self._path}: {exc}", operation="open") from exc

    def __enter__(self) -> SqliteStore:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _connection(self, key: str, operation: str) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError(f"SQLite store {self._path} is closed", key=key, operation=operation)
        return self._conn

    def get(self, key: str) -> str | None:
        conn = self._connection(key, "get")
        try:
            row = conn.execute("SELECT value FROM records WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite get failed for {key!r}: {exc}", key=key, operation="get") from exc
        return None if row is None else str(row[0])

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(f"Records must be str, got {type(value).__name__}", key=key, operation="set")
        conn = self._connection(key, "set")
        try:
            conn.execute(
                "INSERT INTO records (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite set failed for {key!r}: {exc}", key=key, operation="set") from exc
        _logger.debug("Wrote %s to %s: %s", key, self._path, preview_for_log(value))

    def remove(self, key: str) -> None:
        conn = self._connection(key, "remove")
        try:
            conn.execute("DELETE FROM records WHERE key = ?", (key,))
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite remove failed for {key!r}: {exc}", key=key, operation="remove") from exc

    def keys(self) -> list[str]:
        conn = self._connection("", "keys")
        try:
            return [str(row[0]) for row in conn.execute("SELECT key FROM records ORDER BY key")]
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite key listing failed: {exc}", operation="keys") from exc

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
