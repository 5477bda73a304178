"""
SQLitePartition: durable backing partition stored in a SQLite file.

Many partitions may share one database file; rows are keyed by
(partition, key). Each row holds:
- Partition name (qualified with the namespace)
- Item key
- orjson payload
- Last write timestamp
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from bucketcache.exceptions import PartitionError
from bucketcache.partition.base import BackingPartition


class SQLitePartition(BackingPartition):
    """SQLite-backed partition that survives process restarts.

    Thread-safe for single-writer, multiple-reader scenarios.
    """

    def __init__(
        self,
        db_path: Path | str,
        name: str,
        item_size_limit: int,
        *,
        enabled: bool = True,
    ) -> None:
        """Initialize SQLitePartition.

        Args:
            db_path: Path to the database file.
            name: Qualified partition name.
            item_size_limit: Maximum encoded size of one item, in bytes.
            enabled: Whether the partition reports itself available.
        """
        super().__init__(name, item_size_limit, enabled=enabled)
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._initialized = False

    def init(self) -> None:
        """Initialize the database schema.

        Creates the items table if it doesn't exist. Safe to call multiple times.
        """
        if self._initialized:
            return

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = self._get_conn()
            conn.execute("""
                CREATE TABLE IF NOT EXISTS items (
                    partition TEXT NOT NULL,
                    key TEXT NOT NULL,
                    payload BLOB NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (partition, key)
                )
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise PartitionError(
                f"Failed to initialize partition store: {e}",
                {"partition": self.name, "db_path": str(self.db_path)},
            ) from e

        self._initialized = True

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(
                str(self.db_path),
                timeout=30.0,
                isolation_level="DEFERRED",
            )
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._initialized = False

    def _read(self, key: str) -> bytes | None:
        self.init()
        try:
            row = self._get_conn().execute(
                "SELECT payload FROM items WHERE partition = ? AND key = ?",
                (self.name, key),
            ).fetchone()
        except sqlite3.Error as e:
            raise PartitionError(
                f"Failed to read item: {e}", {"partition": self.name, "key": key}
            ) from e
        return bytes(row[0]) if row is not None else None

    def _write(self, key: str, payload: bytes) -> None:
        self.init()
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO items (partition, key, payload, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (partition, key)
                DO UPDATE SET payload = excluded.payload, updated_at = excluded.updated_at
                """,
                (self.name, key, payload, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PartitionError(
                f"Failed to write item: {e}", {"partition": self.name, "key": key}
            ) from e

    def _delete(self, key: str) -> bool:
        self.init()
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                "DELETE FROM items WHERE partition = ? AND key = ?",
                (self.name, key),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PartitionError(
                f"Failed to delete item: {e}", {"partition": self.name, "key": key}
            ) from e
        return cursor.rowcount > 0

    def clear(self) -> None:
        self.init()
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM items WHERE partition = ?", (self.name,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PartitionError(
                f"Failed to clear partition: {e}", {"partition": self.name}
            ) from e

    def keys(self) -> list[str]:
        """List item keys stored in this partition."""
        self.init()
        try:
            rows = self._get_conn().execute(
                "SELECT key FROM items WHERE partition = ? ORDER BY key",
                (self.name,),
            ).fetchall()
        except sqlite3.Error as e:
            raise PartitionError(
                f"Failed to list items: {e}", {"partition": self.name}
            ) from e
        return [row[0] for row in rows]
