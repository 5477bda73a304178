"""
NamedCacheFacade: org-wide and session-scoped caches behind one lookup.

Session entries shadow org entries with the same key.
"""

from __future__ import annotations

from typing import Any

from uuid6 import uuid7

from bucketcache.cache.bucketed import BucketedCache
from bucketcache.config import Settings, get_settings
from bucketcache.logging import get_logger, log_context, set_log_level
from bucketcache.namespace import NamespaceResolver
from bucketcache.partition.base import BackingPartition
from bucketcache.partition.memory import InMemoryPartition
from bucketcache.partition.sqlite import SQLitePartition
from bucketcache.types import PartitionScope

logger = get_logger(__name__)

_MISSING = object()


class NamedCacheFacade:
    """Union of a session cache and an org cache, session first."""

    def __init__(self, org: BucketedCache, session: BucketedCache) -> None:
        self.org = org
        self.session = session

    def cache_for(self, scope: PartitionScope) -> BucketedCache:
        """Get the cache bound to ``scope``."""
        return self.session if scope is PartitionScope.SESSION else self.org

    def contains(self, key: str) -> bool:
        return self.session.contains(key) or self.org.contains(key)

    def get(self, key: str, default: Any = None) -> Any:
        """Get ``key`` from the session cache, falling back to the org cache."""
        value = self.session.get(key, _MISSING)
        if value is not _MISSING:
            return value
        return self.org.get(key, default)

    def reload(self) -> None:
        """Resynchronize both caches with their partitions."""
        self.session.reload()
        self.org.reload()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)


def generate_session_id() -> str:
    """Generate a time-ordered session ID."""
    return f"sess_{uuid7().hex}"


def build_facade(
    partition_name: str,
    *,
    settings: Settings | None = None,
    resolver: NamespaceResolver | None = None,
    session_id: str | None = None,
    session_partition: BackingPartition | None = None,
) -> NamedCacheFacade:
    """Wire a facade over a durable org partition and an in-memory session one.

    Args:
        partition_name: Unqualified partition name.
        settings: Settings to use. Defaults to the cached settings singleton.
        resolver: Namespace resolver. Defaults to one reading CACHE_NAMESPACE.
        session_id: Session identifier. A new one is generated when omitted.
        session_partition: Existing session partition to reuse across requests
            of the same session. A fresh in-memory one is created when omitted.

    Returns:
        A facade whose caches are already loaded.
    """
    settings = settings or get_settings()
    resolver = resolver or NamespaceResolver.from_settings(settings)
    qualified = resolver.qualify(partition_name)
    session_id = session_id or generate_session_id()

    set_log_level(settings.LOG_LEVEL)
    settings.ensure_directories()
    org_partition = SQLitePartition(
        settings.CACHE_DB_PATH,
        qualified,
        settings.CACHE_ITEM_SIZE_LIMIT,
        enabled=settings.CACHE_ENABLED,
    )
    if session_partition is None:
        session_partition = InMemoryPartition(
            f"{qualified}.{PartitionScope.SESSION.value}.{session_id}",
            settings.CACHE_ITEM_SIZE_LIMIT,
            enabled=settings.CACHE_ENABLED,
        )

    with log_context(partition=qualified, session_id=session_id):
        logger.debug("Building cache facade", enabled=settings.CACHE_ENABLED)
        return NamedCacheFacade(
            org=BucketedCache(org_partition),
            session=BucketedCache(session_partition),
        )
