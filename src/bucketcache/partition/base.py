"""
Backing partition interface.

A backing partition is a key-value store with a fixed per-item size limit.
Values are serialized with orjson; an item's size is the byte length of its
encoding. Writes report a PutOutcome instead of raising so that callers can
branch on overflow explicitly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import orjson

from bucketcache.exceptions import InvalidKeyError, ItemSizeLimitExceeded, PartitionError
from bucketcache.logging import get_logger
from bucketcache.types import PutOutcome

logger = get_logger(__name__)


def validate_key(key: Any) -> str:
    """Ensure a cache key is a string."""
    if not isinstance(key, str):
        raise InvalidKeyError("Cache keys must be strings", {"key": key})
    return key


class BackingPartition(ABC):
    """Abstract size-limited key-value partition.

    Subclasses implement raw byte storage; this class handles availability,
    serialization and the size check.
    """

    def __init__(self, name: str, item_size_limit: int, *, enabled: bool = True) -> None:
        if item_size_limit <= 0:
            raise ValueError(f"item_size_limit must be positive, got {item_size_limit}")
        self._name = name
        self._item_size_limit = item_size_limit
        self._enabled = enabled

    @property
    def name(self) -> str:
        """Qualified partition name."""
        return self._name

    @property
    def item_size_limit(self) -> int:
        """Maximum serialized size of one item, in bytes."""
        return self._item_size_limit

    def is_available(self) -> bool:
        """Whether the partition currently accepts reads and writes."""
        return self._enabled

    def serialized_size(self, value: Any) -> int:
        """Get the stored size of ``value`` in bytes."""
        return len(orjson.dumps(value))

    def normalize(self, value: Any) -> Any:
        """Get ``value`` as it reads back after being stored.

        Tuples become lists, datetimes ISO strings and NaN null, and the
        result shares no mutable state with ``value``.

        Raises:
            PartitionError: If the value cannot be serialized.
        """
        try:
            return orjson.loads(orjson.dumps(value))
        except orjson.JSONEncodeError as e:
            raise PartitionError(
                f"Value is not serializable: {e}", {"partition": self._name}
            ) from e

    def get(self, key: str) -> Any | None:
        """Get a stored value, or None when absent or unavailable.

        Raises:
            PartitionError: If the store fails or the item cannot be decoded.
        """
        validate_key(key)
        if not self.is_available():
            return None
        payload = self._read(key)
        if payload is None:
            return None
        try:
            return orjson.loads(payload)
        except orjson.JSONDecodeError as e:
            raise PartitionError(
                f"Stored item is not valid JSON: {e}", {"partition": self._name, "key": key}
            ) from e

    def put(self, key: str, value: Any) -> PutOutcome:
        """Store a value.

        Returns:
            STORED on success, OVERFLOWED when the encoded value exceeds the
            item size limit, REJECTED when the partition is unavailable or the
            value cannot be serialized.

        Raises:
            PartitionError: If the underlying store fails.
        """
        validate_key(key)
        if not self.is_available():
            return PutOutcome.REJECTED

        payload = self._encode(key, value)
        if payload is None:
            return PutOutcome.REJECTED
        if len(payload) > self._item_size_limit:
            return PutOutcome.OVERFLOWED

        self._write(key, payload)
        return PutOutcome.STORED

    def put_strict(self, key: str, value: Any) -> None:
        """Store a value, raising instead of reporting an outcome.

        Raises:
            ItemSizeLimitExceeded: If the encoded value is over the limit.
            PartitionError: If the partition is unavailable, the value cannot
                be serialized, or the underlying store fails.
        """
        validate_key(key)
        if not self.is_available():
            raise PartitionError("Partition unavailable", {"partition": self._name})

        payload = self._encode(key, value)
        if payload is None:
            raise PartitionError(
                "Value is not serializable", {"partition": self._name, "key": key}
            )
        if len(payload) > self._item_size_limit:
            raise ItemSizeLimitExceeded(
                "Item exceeds partition size limit",
                {
                    "partition": self._name,
                    "key": key,
                    "size": len(payload),
                    "limit": self._item_size_limit,
                },
            )
        self._write(key, payload)

    def delete(self, key: str) -> bool:
        """Remove an item. Returns True if it existed."""
        validate_key(key)
        if not self.is_available():
            return False
        return self._delete(key)

    def _encode(self, key: str, value: Any) -> bytes | None:
        try:
            return orjson.dumps(value)
        except orjson.JSONEncodeError as e:
            logger.warning(
                f"Cannot serialize value for {key}: {e}",
                partition=self._name,
                key=key,
            )
            return None

    @abstractmethod
    def _read(self, key: str) -> bytes | None:
        """Read the raw payload for ``key``."""
        ...

    @abstractmethod
    def _write(self, key: str, payload: bytes) -> None:
        """Write the raw payload for ``key``."""
        ...

    @abstractmethod
    def _delete(self, key: str) -> bool:
        """Delete ``key``, returning whether it existed."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every item in this partition."""
        ...
