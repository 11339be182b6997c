"""File-backed cache item pool.

Maps each key to one blob in a CacheStorage, encodes full item state with an
ItemCodec, and batches deferred saves until commit().
"""

import logging
from typing import Dict, Iterable, List

from filepool.core.cache_item import CacheItem
from filepool.core.keys import validate_key, validate_keys
from filepool.domain.exceptions import CodecError, InvalidKeyError
from filepool.domain.interfaces.cache import CacheItemInterface, CacheItemPool
from filepool.domain.interfaces.codec import ItemCodec
from filepool.domain.interfaces.storage import CacheStorage
from filepool.domain.models.common import CacheItemState, CacheKey

logger = logging.getLogger(__name__)


class FileCachePool(CacheItemPool):
    """Cache pool persisting one blob per key.

    A key is present iff its blob exists; presence says nothing about
    expiry. Mutating operations report storage failures by returning False,
    only illegal keys raise (InvalidKeyError).
    """

    def __init__(self, storage: CacheStorage, codec: ItemCodec):
        """Initializes the pool.

        Args:
            storage: The blob store backing every item.
            codec: Item state serializer.
        """
        self.storage = storage
        self.codec = codec
        self._deferred: List[CacheItem] = []
        logger.debug(f"FileCachePool initialized with storage={storage!r}")

    @property
    def deferred_count(self) -> int:
        """Number of items waiting for commit()."""
        return len(self._deferred)

    def keys(self) -> List[CacheKey]:
        """Stored keys that are legal cache keys, sorted.

        Raises:
            OSError: If the storage cannot be enumerated.
        """
        legal = []
        for key in self.storage.list_keys():
            try:
                legal.append(validate_key(key))
            except InvalidKeyError:
                logger.debug(f"Skipping stored name that is not a cache key: {key!r}")
        return sorted(legal)

    # --- Retrieval ---

    def has_item(self, key: str) -> bool:
        """Existence check only; the blob is neither decoded nor checked for expiry."""
        return self.storage.exists(validate_key(key))

    def get_item(self, key: str) -> CacheItem:
        """Returns the stored item, or an empty miss placeholder.

        Unreadable or corrupt blobs are treated as misses.
        """
        key = validate_key(key)
        if not self.storage.exists(key):
            logger.debug(f"Cache miss for key: {key}")
            return CacheItem(key)

        try:
            data = self.storage.read(key)
        except OSError as e:
            # Deleted or replaced between the existence check and the read
            logger.warning(f"Failed to read cache blob for key {key}: {e}. Treating as miss.")
            return CacheItem(key)

        try:
            state = self.codec.decode(data)
        except CodecError as e:
            logger.warning(f"Failed to decode cache blob for key {key}: {e}. Treating as miss.")
            return CacheItem(key)

        if state.key != key:
            logger.warning(
                f"Cache blob for key {key} holds state for key {state.key!r}. Treating as miss."
            )
            return CacheItem(key)

        item = CacheItem.from_state(state)
        logger.debug(f"Loaded cache item: {item!r}")
        return item

    def get_items(self, keys: Iterable[str] = ()) -> Dict[str, CacheItem]:
        checked = validate_keys(keys)
        return {key: self.get_item(key) for key in checked}

    # --- Deletion ---

    def delete_item(self, key: str) -> bool:
        """Removes the blob. Deleting an absent key reports False."""
        return self._remove(validate_key(key))

    def delete_items(self, keys: Iterable[str]) -> bool:
        """Deletes keys in order, stopping at the first failure.

        Keys before the failing one stay deleted; keys after it are not
        attempted.
        """
        for key in validate_keys(keys):
            if not self.delete_item(key):
                logger.warning(f"Bulk delete stopped at key {key}")
                return False
        return True

    def clear(self) -> bool:
        """Deletes every stored item; True for an empty store.

        Unlike delete_items, stored names are removed through the storage
        directly rather than via delete_item: they are not validated as keys,
        so blobs placed in the directory by other tools are cleared too.
        Returns False when the store cannot be enumerated.
        """
        try:
            stored = self.storage.list_keys()
        except OSError as e:
            logger.error(f"Failed to clear cache: could not list {self.storage!r}: {e}")
            return False

        for key in stored:
            if not self._remove(key):
                logger.error(f"Failed to clear cache: could not delete key {key}")
                return False
        logger.info(f"Cleared cache pool at {self.storage!r}")
        return True

    # --- Persistence ---

    def save(self, item: CacheItemInterface) -> bool:
        """Encodes the item's full state and writes it exclusively."""
        state = self._state_of(item)
        try:
            data = self.codec.encode(state)
        except CodecError as e:
            logger.error(f"Failed to encode cache item {state.key}: {e}")
            return False

        saved = self.storage.write_exclusive(state.key, data)
        if saved:
            logger.debug(f"Saved cache item: {item!r}")
        return saved

    def save_deferred(self, item: CacheItemInterface) -> bool:
        """Queues the item for commit(); nothing touches storage yet."""
        # Queue a snapshot so later mutations of the caller's item are not persisted
        self._deferred.append(CacheItem.from_state(self._state_of(item)))
        return True

    def commit(self) -> bool:
        """Saves deferred items in insertion order.

        Each item leaves the queue before it is saved, so a failed item is
        dropped while the items behind it stay queued.
        """
        while self._deferred:
            item = self._deferred.pop(0)
            if not self.save(item):
                logger.warning(
                    f"Commit stopped at key {item.get_key()}; {len(self._deferred)} item(s) remain queued"
                )
                return False
        return True

    def _remove(self, key: CacheKey) -> bool:
        removed = self.storage.remove(key)
        if removed:
            logger.debug(f"Deleted cache item: key={key}")
        return removed

    def _state_of(self, item: CacheItemInterface) -> CacheItemState:
        if not isinstance(item, CacheItem):
            raise TypeError(f"FileCachePool only persists CacheItem, got {type(item).__name__}")
        state = item.state()
        validate_key(state.key)
        return state

    def __repr__(self) -> str:
        return f"FileCachePool(storage={self.storage!r}, deferred={len(self._deferred)})"
