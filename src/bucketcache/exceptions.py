"""
Custom exception hierarchy for bucketcache.

All exceptions inherit from CacheError, which provides optional context
for structured error handling and logging.
"""

from __future__ import annotations

from typing import Any


class CacheError(Exception):
    """Base exception for all bucketcache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(CacheError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Blank partition name
        - Namespace containing a separator character
    """

    pass


class PartitionError(CacheError):
    """Raised when the backing store fails for a reason other than size.

    Context should include:
        - partition: The qualified partition name
        - key: The item key being read or written
    """

    pass


class ItemSizeLimitExceeded(CacheError):
    """Raised by strict partition writes when a value is too large.

    Context should include:
        - partition: The qualified partition name
        - key: The item key
        - size: Serialized size in bytes
        - limit: The partition's per-item limit in bytes
    """

    pass


class InvalidKeyError(CacheError):
    """Raised when a cache key is not a non-empty string."""

    pass
