"""
Core types for bucketcache.

- PutOutcome: result of writing one item to a backing partition
- PartitionScope: which scope a partition is bound to
- Bucket helpers: storage key derivation
"""

from __future__ import annotations

from enum import Enum
from typing import Any

BUCKET_KEY_PREFIX = "cache"

# One bucket: many cached pairs stored as a single backing item.
Bucket = dict[str, Any]


class PutOutcome(str, Enum):
    """Result of a single backing partition write."""

    STORED = "stored"
    OVERFLOWED = "overflowed"  # Serialized value exceeds the item size limit
    REJECTED = "rejected"  # Partition unavailable or value not serializable


class PartitionScope(str, Enum):
    """Lifetime scope of a backing partition."""

    ORG = "org"
    SESSION = "session"


def bucket_key(index: int) -> str:
    """Get the storage key of the bucket at ``index``."""
    if index < 0:
        raise ValueError(f"Bucket index must be non-negative, got {index}")
    return f"{BUCKET_KEY_PREFIX}{index}"
