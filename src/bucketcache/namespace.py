"""
Namespace prefix resolution for partition names.

The prefix keeps partitions of different deployments apart. It is looked up
once per resolver and reused for the resolver's lifetime.
"""

from __future__ import annotations

from typing import Callable

from bucketcache.config import DEFAULT_NAMESPACE, Settings
from bucketcache.exceptions import ConfigurationError

NamespaceLookup = Callable[[], str | None]


class NamespaceResolver:
    """Resolves and caches the namespace prefix.

    Args:
        lookup: Callable returning the deployment namespace, or None when the
            deployment has none. Called at most once.
        default: Namespace used when the lookup yields nothing.
    """

    def __init__(
        self,
        lookup: NamespaceLookup | None = None,
        default: str = DEFAULT_NAMESPACE,
    ) -> None:
        self._lookup = lookup
        self._default = default
        self._resolved: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> NamespaceResolver:
        """Create a resolver that reads CACHE_NAMESPACE from settings."""
        return cls(lookup=lambda: settings.namespace)

    def resolve(self) -> str:
        """Get the namespace prefix, performing the lookup on first call."""
        if self._resolved is None:
            value = self._lookup() if self._lookup is not None else None
            value = value.strip() if value else ""
            self._resolved = value or self._default
        return self._resolved

    def qualify(self, partition_name: str) -> str:
        """Prefix a partition name with the namespace.

        Raises:
            ConfigurationError: If the partition name is blank.
        """
        name = partition_name.strip()
        if not name:
            raise ConfigurationError("Partition name must not be blank")
        return f"{self.resolve()}.{name}"
