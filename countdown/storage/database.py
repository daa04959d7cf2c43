"""Simple SQLite key-value store for the chosen target date."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from countdown.core.validation import parse_instant

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for store failures."""

    code = "STORE_FAILURE"


class StoreReadError(StoreError):
    code = "STORE_READ_FAILURE"


class StoreWriteError(StoreError):
    code = "STORE_WRITE_FAILURE"


class KeyValueStore:
    """String key-value store backed by SQLite, in the spirit of localStorage."""

    def __init__(self, db_path: str = "data/countdown.db"):
        """Initialize database."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create the storage table if it doesn't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS items (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        logger.info(f"Store initialized at {self.db_path}")

    def get_item(self, key: str) -> Optional[str]:
        """Get value by key, None if absent."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("SELECT value FROM items WHERE key = ?", (key,))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"Could not read {key!r}: {e}") from e

        return row[0] if row else None

    def set_item(self, key: str, value: str):
        """Insert or replace a value."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO items (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, datetime.now().isoformat()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreWriteError(f"Could not write {key!r}: {e}") from e

    def remove_item(self, key: str):
        """Delete a key if present."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("DELETE FROM items WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as e:
            raise StoreWriteError(f"Could not remove {key!r}: {e}") from e


class TargetDateStore:
    """Persists the target date as an ISO-8601 string under a single key."""

    def __init__(self, store: KeyValueStore, key: str = "retirementDate"):
        self.store = store
        self.key = key

    def load(self) -> Optional[datetime]:
        """
        Load the saved target date.

        Returns:
            Saved datetime, or None if nothing usable is stored

        Raises:
            StoreReadError: If the underlying store could not be read
        """
        raw = self.store.get_item(self.key)
        if raw is None:
            return None

        target = parse_instant(raw)
        if target is None:
            logger.warning(f"Ignoring invalid saved target date: {raw!r}")
        return target

    def save(self, target: datetime):
        """
        Save the target date.

        Raises:
            StoreWriteError: If the underlying store could not be written
        """
        self.store.set_item(self.key, target.isoformat(timespec="milliseconds"))
        logger.info(f"Saved target date: {target.isoformat(timespec='minutes')}")

    def clear(self):
        self.store.remove_item(self.key)
