"""
BucketedCache: packs many key-value pairs into size-limited partition items.

Pairs are grouped into buckets. Bucket ``i`` is persisted as one partition
item under ``"cache<i>"``. New keys go into the last bucket; when a write
would push a bucket past the partition's item size limit, the bucket is
rolled back and the pair moves to a new bucket appended at the end. A pair
that does not fit even in an empty bucket is dropped.

Cache failures never reach callers: an unavailable partition turns writes
into no-ops and reads into misses, and store errors are logged and dropped.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, Mapping

from bucketcache.exceptions import PartitionError
from bucketcache.logging import get_logger, log_context
from bucketcache.partition.base import BackingPartition
from bucketcache.types import Bucket, PutOutcome, bucket_key

logger = get_logger(__name__)


class BucketedCache:
    """Key-value cache over a size-limited backing partition.

    Buckets are loaded from the partition on construction. Call ``reload()``
    to pick up changes written by other instances.
    """

    def __init__(self, partition: BackingPartition) -> None:
        self._partition = partition
        self._buckets: list[Bucket] = []
        # key -> index of the bucket holding it
        self._owners: dict[str, int] = {}
        self.reload()

    @property
    def name(self) -> str:
        """Name of the backing partition."""
        return self._partition.name

    @property
    def partition(self) -> BackingPartition:
        return self._partition

    @property
    def bucket_count(self) -> int:
        """Number of resident buckets."""
        return len(self._buckets)

    def contains(self, key: str) -> bool:
        """Check whether any resident bucket holds ``key``."""
        return self._partition.is_available() and key in self._owners

    def get(self, key: str, default: Any = None) -> Any:
        """Get a copy of the cached value for ``key``, or ``default`` when absent."""
        if not self._partition.is_available():
            return default
        index = self._owners.get(key)
        if index is None:
            return default
        return self._partition.normalize(self._buckets[index][key])

    def put(self, key: str, value: Any) -> BucketedCache:
        """Insert or update ``key``.

        Existing keys are updated in their current bucket; new keys go into
        the last bucket. Overflowing writes spill into a new bucket, and pairs
        too large for an empty bucket are dropped. The value is cached in its
        stored form, so later changes to ``value`` are not seen.

        Returns:
            The cache itself, for chaining.
        """
        if not self._partition.is_available():
            return self

        with log_context(partition=self.name):
            if not isinstance(key, str):
                logger.warning(f"Dropping cache write for non-string key {key!r}")
                return self
            try:
                value = self._partition.normalize(value)
                index = self._owners.get(key)
                if index is not None:
                    self._put_into(index, key, value)
                elif self._buckets:
                    self._put_into(len(self._buckets) - 1, key, value)
                else:
                    self._append_bucket(key, value)
            except PartitionError as e:
                logger.error(f"Dropping cache write for {key}: {e}", key=key)
        return self

    def reload(self) -> None:
        """Rebuild the bucket sequence from the backing partition.

        Reads ``cache0``, ``cache1``, ... and stops at the first missing
        bucket. Leaves the cache empty when the partition is unavailable.
        """
        self._buckets = []
        self._owners = {}
        if not self._partition.is_available():
            return

        with log_context(partition=self.name):
            try:
                while True:
                    stored = self._partition.get(bucket_key(len(self._buckets)))
                    if stored is None:
                        break
                    if not isinstance(stored, dict):
                        logger.warning(
                            f"Stopping reload at {bucket_key(len(self._buckets))}: "
                            f"stored item is {type(stored).__name__}, not a bucket"
                        )
                        break
                    self._buckets.append(stored)
            except PartitionError as e:
                logger.error(f"Reload stopped after {len(self._buckets)} buckets: {e}")

            for index, bucket in enumerate(self._buckets):
                for key in bucket:
                    self._owners.setdefault(key, index)

            logger.debug(
                f"Loaded {len(self._buckets)} buckets holding {len(self._owners)} keys"
            )

    def keys(self) -> Iterator[str]:
        """Iterate over cached keys."""
        return iter(self._owners)

    def bucket_index(self, key: str) -> int | None:
        """Get the index of the bucket holding ``key``."""
        return self._owners.get(key)

    def buckets(self) -> list[Mapping[str, Any]]:
        """Get read-only views of the resident buckets, in index order."""
        return [MappingProxyType(bucket) for bucket in self._buckets]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def __len__(self) -> int:
        return len(self._owners)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(partition={self.name!r}, "
            f"buckets={len(self._buckets)}, keys={len(self._owners)})"
        )

    def _persist(self, index: int, bucket: Bucket) -> PutOutcome:
        return self._partition.put(bucket_key(index), bucket)

    def _put_into(self, index: int, key: str, value: Any) -> None:
        """Write ``key`` into an existing bucket, spilling on overflow."""
        bucket = self._buckets[index]
        updating = key in bucket
        previous = bucket.get(key)
        bucket[key] = value

        try:
            outcome = self._persist(index, bucket)
        except PartitionError:
            self._undo(bucket, key, updating, previous)
            raise

        if outcome is PutOutcome.STORED:
            self._owners[key] = index
            return

        if outcome is PutOutcome.REJECTED:
            # Nothing was written; restore the resident copy and drop the pair.
            self._undo(bucket, key, updating, previous)
            logger.warning(f"Partition rejected write of {key}", key=key, bucket=index)
            return

        # Overflow: the key leaves this bucket and moves to a fresh one.
        del bucket[key]
        self._owners.pop(key, None)
        try:
            restore = self._persist(index, bucket)
        except PartitionError:
            # The overflowing write stored nothing, so the store still holds
            # the bucket as it was before this put.
            if updating:
                bucket[key] = previous
                self._owners[key] = index
            raise
        if restore is not PutOutcome.STORED:
            logger.warning(
                f"Could not re-persist {bucket_key(index)} after rollback: {restore.value}",
                bucket=index,
            )
        logger.debug(
            f"{bucket_key(index)} overflowed on {key}, spilling to new bucket",
            key=key,
            bucket=index,
        )
        self._append_bucket(key, value)

    @staticmethod
    def _undo(bucket: Bucket, key: str, updating: bool, previous: Any) -> None:
        if updating:
            bucket[key] = previous
        else:
            del bucket[key]

    def _append_bucket(self, key: str, value: Any) -> None:
        """Store ``key`` alone in a new bucket at the end of the sequence."""
        index = len(self._buckets)
        bucket: Bucket = {key: value}

        outcome = self._persist(index, bucket)
        if outcome is PutOutcome.STORED:
            self._buckets.append(bucket)
            self._owners[key] = index
            return

        logger.warning(
            f"Dropping {key}: too large for an empty bucket"
            if outcome is PutOutcome.OVERFLOWED
            else f"Partition rejected new bucket for {key}",
            key=key,
            outcome=outcome.value,
        )
