"""
Backing partitions: size-limited key-value stores beneath the bucketed cache.

- base.py: BackingPartition interface and serialization
- memory.py: In-memory partition (session scope, tests)
- sqlite.py: SQLite partition (durable, org scope)
"""

from bucketcache.partition.base import BackingPartition, validate_key
from bucketcache.partition.memory import InMemoryPartition
from bucketcache.partition.sqlite import SQLitePartition

__all__ = ["BackingPartition", "InMemoryPartition", "SQLitePartition", "validate_key"]
