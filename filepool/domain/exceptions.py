"""Custom exceptions for the cache domain."""


class CacheError(Exception):
    """Base exception for cache errors."""

    pass


class InvalidKeyError(CacheError, ValueError):
    """Raised when a cache key is not a legal value."""

    def __init__(self, key: object, reason: str) -> None:
        """Initialize error.

        Args:
            key: The offending key
            reason: Why the key was rejected
        """
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid cache key {key!r}: {reason}")


class CodecError(CacheError):
    """Raised when an item state cannot be encoded or decoded."""

    pass
