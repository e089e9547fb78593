"""Durable key/value stores backing the observation cache."""

from __future__ import annotations

import os
import sqlite3
import threading
from abc import ABC, abstractmethod
from datetime import datetime

from metarwatch.models.cache_entry import CacheEntry


class CacheStore(ABC):
    """Key/value storage for serialized observations.

    Entries are immutable; ``put`` replaces the whole entry for its key, so a
    reader sees either the old entry or the new one.
    """

    @abstractmethod
    def get_by_key(self, key: str) -> CacheEntry | None: ...

    @abstractmethod
    def put(self, entry: CacheEntry) -> CacheEntry: ...

    @abstractmethod
    def keys(self) -> list[str]: ...

    def close(self) -> None:
        """Release storage resources, if any."""


class InMemoryCacheStore(CacheStore):
    """Process-local store; contents are lost on exit."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def get_by_key(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def put(self, entry: CacheEntry) -> CacheEntry:
        self._entries[entry.key] = entry
        return entry

    def keys(self) -> list[str]:
        return sorted(self._entries)


class SQLiteCacheStore(CacheStore):
    """Store entries in a ``weather_product`` table of a SQLite database."""

    def __init__(self, path: str = ":memory:") -> None:
        if path != ":memory:":
            path = os.path.abspath(path)
        self.path = path
        self._lock = threading.Lock()
        self._connection = sqlite3.connect(path, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._run_migrations()

    def _run_migrations(self) -> None:
        with self._lock:
            self._connection.execute(
                """
                CREATE TABLE IF NOT EXISTS weather_product (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    k VARCHAR(100) NOT NULL UNIQUE,
                    v VARCHAR(4000) NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            self._connection.commit()

    @staticmethod
    def _entry_from_row(row: sqlite3.Row) -> CacheEntry:
        return CacheEntry(
            key=row["k"],
            value=row["v"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def get_by_key(self, key: str) -> CacheEntry | None:
        with self._lock:
            row = self._connection.execute(
                "SELECT k, v, created_at, updated_at FROM weather_product WHERE k = ?",
                (key,),
            ).fetchone()
        if row is None:
            return None
        return self._entry_from_row(row)

    def put(self, entry: CacheEntry) -> CacheEntry:
        with self._lock:
            try:
                self._connection.execute(
                    """
                    INSERT INTO weather_product (k, v, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(k) DO UPDATE SET
                        v = excluded.v,
                        updated_at = excluded.updated_at
                    """,
                    (
                        entry.key,
                        entry.value,
                        entry.created_at.isoformat(),
                        entry.updated_at.isoformat(),
                    ),
                )
                self._connection.commit()
            except sqlite3.Error:
                self._connection.rollback()
                raise
        return entry

    def keys(self) -> list[str]:
        with self._lock:
            rows = self._connection.execute(
                "SELECT k FROM weather_product ORDER BY k",
            ).fetchall()
        return [row["k"] for row in rows]

    def close(self) -> None:
        with self._lock:
            self._connection.close()
