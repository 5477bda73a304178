"""
In-memory backing partition.

Stores encoded payloads in a dict, so every read returns a fresh object.
Suited to session-scoped partitions and tests.
"""

from __future__ import annotations

from bucketcache.partition.base import BackingPartition


class InMemoryPartition(BackingPartition):
    """Dict-backed partition living for the lifetime of the process."""

    def __init__(self, name: str, item_size_limit: int, *, enabled: bool = True) -> None:
        super().__init__(name, item_size_limit, enabled=enabled)
        self._items: dict[str, bytes] = {}

    def set_enabled(self, enabled: bool) -> None:
        """Switch availability on or off."""
        self._enabled = enabled

    def raw_size(self, key: str) -> int | None:
        """Get the stored payload size of ``key`` in bytes."""
        payload = self._items.get(key)
        return len(payload) if payload is not None else None

    def __len__(self) -> int:
        return len(self._items)

    def _read(self, key: str) -> bytes | None:
        return self._items.get(key)

    def _write(self, key: str, payload: bytes) -> None:
        self._items[key] = payload

    def _delete(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def clear(self) -> None:
        self._items.clear()
