"""
Local key-value storage for persisted state.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import os
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path


class KeyValueStore(ABC):
    """String key to string value storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get a value, or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Create or overwrite a value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass

    def close(self) -> None:
        pass


class MemoryStore(KeyValueStore):
    """In-process store, lost on exit."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SQLiteStore(KeyValueStore):
    """SQLite-backed store in a single owner-only file."""

    def __init__(self, db_path: str | Path):
        """Initialize SQLite store.

        Args:
            db_path: Database file path (parent directories are created)
        """
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # Access is serialized by the owner (HistoryCache holds a lock)
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)

            # Set secure file permissions
            os.chmod(self.db_path, 0o600)

            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            self._conn.commit()
        return self._conn

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> str | None:
        row = self._connect().execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._connect()
        conn.execute(
            "INSERT INTO kv (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )
        conn.commit()

    def remove(self, key: str) -> None:
        conn = self._connect()
        conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        conn.commit()
