"""
Tests for backing partitions.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from bucketcache.exceptions import InvalidKeyError, ItemSizeLimitExceeded, PartitionError
from bucketcache.partition import InMemoryPartition, SQLitePartition
from bucketcache.types import PutOutcome


class TestInMemoryPartition:
    """Test the in-memory partition."""

    def test_put_and_get(self, partition: InMemoryPartition) -> None:
        """Test storing and retrieving an item."""
        assert partition.put("item", {"a": [1, 2]}) is PutOutcome.STORED
        assert partition.get("item") == {"a": [1, 2]}

    def test_get_returns_copy(self, partition: InMemoryPartition) -> None:
        """Test that reads do not alias stored state."""
        partition.put("item", {"a": 1})

        first = partition.get("item")
        first["a"] = 99

        assert partition.get("item") == {"a": 1}

    def test_overflow_not_written(self, partition: InMemoryPartition) -> None:
        """Test that an oversized item leaves the previous value in place."""
        partition.put("item", "small")

        outcome = partition.put("item", "x" * 100)

        assert outcome is PutOutcome.OVERFLOWED
        assert partition.get("item") == "small"

    def test_limit_is_inclusive(self) -> None:
        """Test that an item of exactly the limit size is accepted."""
        partition = InMemoryPartition("local.Exact", 10)
        value = "x" * 8  # encodes to 10 bytes with quotes

        assert partition.serialized_size(value) == 10
        assert partition.put("item", value) is PutOutcome.STORED

    def test_unserializable_rejected(self, partition: InMemoryPartition) -> None:
        """Test that values orjson cannot encode are rejected."""
        assert partition.put("item", object()) is PutOutcome.REJECTED
        assert partition.get("item") is None

    def test_unavailable(self) -> None:
        """Test that a disabled partition rejects writes and misses reads."""
        partition = InMemoryPartition("local.Off", 64)
        partition.put("item", 1)
        partition.set_enabled(False)

        assert not partition.is_available()
        assert partition.put("other", 1) is PutOutcome.REJECTED
        assert partition.get("item") is None
        assert partition.delete("item") is False

    def test_delete_and_clear(self, partition: InMemoryPartition) -> None:
        """Test removing items."""
        partition.put("a", 1)
        partition.put("b", 2)

        assert partition.delete("a") is True
        assert partition.delete("a") is False
        partition.clear()
        assert len(partition) == 0

    def test_invalid_key(self, partition: InMemoryPartition) -> None:
        """Test that non-string keys are refused and empty strings accepted."""
        with pytest.raises(InvalidKeyError):
            partition.get(7)  # type: ignore[arg-type]

        assert partition.put("", 1) is PutOutcome.STORED
        assert partition.get("") == 1

    def test_normalize_returns_stored_form(self, partition: InMemoryPartition) -> None:
        """Test that normalize yields what a read would return."""
        original = {"t": (1, 2), "nested": [1]}

        normalized = partition.normalize(original)
        normalized["nested"].append(2)

        assert normalized == {"t": [1, 2], "nested": [1, 2]}
        assert original["nested"] == [1]

    def test_normalize_unserializable(self, partition: InMemoryPartition) -> None:
        """Test that normalize refuses values orjson cannot encode."""
        with pytest.raises(PartitionError):
            partition.normalize({1, 2})

    def test_invalid_limit(self) -> None:
        """Test that the size limit must be positive."""
        with pytest.raises(ValueError):
            InMemoryPartition("local.Bad", 0)


class TestPutStrict:
    """Test the raising write API."""

    def test_raises_on_overflow(self, partition: InMemoryPartition) -> None:
        """Test that strict writes raise with size context."""
        with pytest.raises(ItemSizeLimitExceeded) as exc_info:
            partition.put_strict("item", "x" * 100)

        assert exc_info.value.context["limit"] == 64
        assert exc_info.value.context["size"] == 102
        assert "limit=64" in str(exc_info.value)

    def test_raises_when_unavailable(self) -> None:
        """Test that strict writes raise when disabled."""
        partition = InMemoryPartition("local.Off", 64, enabled=False)

        with pytest.raises(PartitionError):
            partition.put_strict("item", 1)

    def test_stores_when_fits(self, partition: InMemoryPartition) -> None:
        """Test that strict writes store values that fit."""
        partition.put_strict("item", [1, 2, 3])

        assert partition.get("item") == [1, 2, 3]


class TestSQLitePartition:
    """Test the SQLite partition."""

    def test_put_and_get(self, sqlite_partition: SQLitePartition) -> None:
        """Test storing and retrieving an item."""
        assert sqlite_partition.put("cache0", {"a": 1}) is PutOutcome.STORED
        assert sqlite_partition.get("cache0") == {"a": 1}

    def test_get_missing(self, sqlite_partition: SQLitePartition) -> None:
        """Test that a missing item reads as None."""
        assert sqlite_partition.get("cache0") is None

    def test_overwrite(self, sqlite_partition: SQLitePartition) -> None:
        """Test that writes replace existing items."""
        sqlite_partition.put("cache0", {"a": 1})
        sqlite_partition.put("cache0", {"a": 2})

        assert sqlite_partition.get("cache0") == {"a": 2}
        assert sqlite_partition.keys() == ["cache0"]

    def test_survives_reopen(self, temp_dir: Path) -> None:
        """Test that items persist across connections."""
        db_path = temp_dir / "partitions.db"
        first = SQLitePartition(db_path, "local.Test", 64)
        first.put("cache0", {"a": 1})
        first.close()

        second = SQLitePartition(db_path, "local.Test", 64)
        assert second.get("cache0") == {"a": 1}
        second.close()

    def test_partitions_isolated(self, temp_dir: Path) -> None:
        """Test that partitions sharing a file do not see each other."""
        db_path = temp_dir / "partitions.db"
        one = SQLitePartition(db_path, "local.One", 64)
        two = SQLitePartition(db_path, "local.Two", 64)

        one.put("cache0", {"a": 1})

        assert two.get("cache0") is None
        two.put("cache0", {"b": 2})
        one.clear()
        assert one.get("cache0") is None
        assert two.get("cache0") == {"b": 2}
        one.close()
        two.close()

    def test_delete(self, sqlite_partition: SQLitePartition) -> None:
        """Test deleting items."""
        sqlite_partition.put("cache0", {"a": 1})

        assert sqlite_partition.delete("cache0") is True
        assert sqlite_partition.delete("cache0") is False

    def test_overflow(self, sqlite_partition: SQLitePartition) -> None:
        """Test that oversized items are not written."""
        assert sqlite_partition.put("cache0", {"a": "x" * 100}) is PutOutcome.OVERFLOWED
        assert sqlite_partition.keys() == []
