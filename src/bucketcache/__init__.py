"""
bucketcache: pack many small key-value pairs into size-limited cache items.
"""

from bucketcache.cache.bucketed import BucketedCache
from bucketcache.cache.facade import NamedCacheFacade, build_facade
from bucketcache.namespace import NamespaceResolver
from bucketcache.types import PartitionScope, PutOutcome

__version__ = "0.1.0"

__all__ = [
    "BucketedCache",
    "NamedCacheFacade",
    "NamespaceResolver",
    "PartitionScope",
    "PutOutcome",
    "build_facade",
    "__version__",
]
