"""Interface for the byte store backing a cache pool.

Defines the contract for key-addressed blob storage so the pool can stay
independent of the concrete medium (local directory, in-memory, remote).
"""

import abc
from typing import List

from ..models.common import CacheKey


class CacheStorage(abc.ABC):
    """Abstract Base Class for key-addressable blob storage."""

    @abc.abstractmethod
    def exists(self, key: CacheKey) -> bool:
        """Checks whether a blob is stored under the key.

        Args:
            key: The key to check.

        Returns:
            True if the blob exists, False otherwise.
        """
        pass

    @abc.abstractmethod
    def read(self, key: CacheKey) -> bytes:
        """Reads the full blob stored under the key.

        Args:
            key: The key to read.

        Returns:
            The stored bytes.

        Raises:
            FileNotFoundError: If no blob is stored under the key.
            OSError: For other storage errors.
        """
        pass

    @abc.abstractmethod
    def write_exclusive(self, key: CacheKey, data: bytes) -> bool:
        """Writes the blob so no reader sees a partial or interleaved write.

        Args:
            key: The key to write.
            data: The bytes to store, replacing any previous blob.

        Returns:
            True if the write succeeded, False otherwise.
        """
        pass

    @abc.abstractmethod
    def remove(self, key: CacheKey) -> bool:
        """Removes the blob stored under the key.

        Returns:
            True if a blob was removed, False if removal failed (including
            when no blob existed).
        """
        pass

    @abc.abstractmethod
    def list_keys(self) -> List[CacheKey]:
        """Enumerates the keys currently stored. Order is not guaranteed.

        Raises:
            OSError: If the store cannot be enumerated.
        """
        pass
