"""Interfaces for cache items and cache item pools.

Defines the contract for a single cached value (with hit state and
expiration) and for the pool that persists, retrieves and deletes items.
Alternative backends (memory, remote key-value stores) implement the same
pool contract.
"""

import abc
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Optional, Union

from ..models.common import CacheKey


class CacheItemInterface(abc.ABC):
    """Abstract Base Class for a single cache item."""

    @abc.abstractmethod
    def get_key(self) -> CacheKey:
        """Returns the key for the current cache item."""
        pass

    @abc.abstractmethod
    def get(self) -> Any:
        """Retrieves the value of the item.

        Returns None when is_hit() is False. None is also a legitimate cached
        value, so use is_hit() to tell "None was found" from "nothing was
        found".
        """
        pass

    @abc.abstractmethod
    def is_hit(self) -> bool:
        """Confirms if the item holds a value that has not expired.

        There is no race between calling is_hit() and calling get().
        """
        pass

    @abc.abstractmethod
    def set(self, value: Any) -> "CacheItemInterface":
        """Sets the value represented by this item.

        Args:
            value: Any serializable value.

        Returns:
            The item itself, for chaining.
        """
        pass

    @abc.abstractmethod
    def expires_at(self, expiration: Optional[datetime]) -> "CacheItemInterface":
        """Sets the absolute point in time after which the item is expired.

        Args:
            expiration: The expiration instant, or None to clear it.

        Returns:
            The item itself, for chaining.
        """
        pass

    @abc.abstractmethod
    def expires_after(self, time: Union[int, timedelta, None]) -> "CacheItemInterface":
        """Sets the expiration relative to now.

        Args:
            time: Seconds (int) or a timedelta from now, or None to clear it.

        Returns:
            The item itself, for chaining.
        """
        pass


class CacheItemPool(abc.ABC):
    """Abstract Base Class for a pool of cache items."""

    @abc.abstractmethod
    def get_item(self, key: str) -> CacheItemInterface:
        """Returns the item for the given key; never None, even on a miss.

        Raises:
            InvalidKeyError: If the key is not a legal value.
        """
        pass

    @abc.abstractmethod
    def get_items(self, keys: Iterable[str] = ()) -> Dict[str, CacheItemInterface]:
        """Returns one item per requested key, keyed by that key.

        Raises:
            InvalidKeyError: If any of the keys is not a legal value.
        """
        pass

    @abc.abstractmethod
    def has_item(self, key: str) -> bool:
        """Confirms if the pool contains the item.

        This MAY avoid retrieving the value and can race with get(); use
        is_hit() on the item for the authoritative answer.
        """
        pass

    @abc.abstractmethod
    def clear(self) -> bool:
        """Deletes all items in the pool. False if there was an error."""
        pass

    @abc.abstractmethod
    def delete_item(self, key: str) -> bool:
        """Removes the item from the pool. False if there was an error."""
        pass

    @abc.abstractmethod
    def delete_items(self, keys: Iterable[str]) -> bool:
        """Removes multiple items from the pool. False if there was an error."""
        pass

    @abc.abstractmethod
    def save(self, item: CacheItemInterface) -> bool:
        """Persists a cache item immediately. False if there was an error."""
        pass

    @abc.abstractmethod
    def save_deferred(self, item: CacheItemInterface) -> bool:
        """Sets a cache item to be persisted later by commit()."""
        pass

    @abc.abstractmethod
    def commit(self) -> bool:
        """Persists any deferred items. True if all were saved or there were none."""
        pass
