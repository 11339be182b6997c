"""filepool: a persistent cache pool storing one file per key in a directory."""

from pathlib import Path
from typing import Optional, Union

from filepool.core.cache_item import CacheItem
from filepool.core.cache_pool import FileCachePool
from filepool.domain.exceptions import CacheError, CodecError, InvalidKeyError
from filepool.domain.interfaces.cache import CacheItemInterface, CacheItemPool
from filepool.domain.interfaces.codec import ItemCodec
from filepool.domain.interfaces.storage import CacheStorage
from filepool.domain.models.common import CacheItemState
from filepool.infrastructure.filesystem.local_storage import LocalDirectoryStorage
from filepool.infrastructure.serialization.pickle_codec import PickleCodec

__version__ = "0.1.0"


def open_pool(directory: Union[str, Path], codec: Optional[ItemCodec] = None) -> FileCachePool:
    """Creates a pool backed by ``directory`` (created if missing), pickling items by default."""
    return FileCachePool(LocalDirectoryStorage(directory), codec or PickleCodec())


__all__ = [
    "open_pool",
    # Items and pools
    "CacheItem",
    "CacheItemInterface",
    "CacheItemPool",
    "CacheItemState",
    "FileCachePool",
    # Collaborators
    "CacheStorage",
    "ItemCodec",
    "LocalDirectoryStorage",
    "PickleCodec",
    # Exceptions
    "CacheError",
    "CodecError",
    "InvalidKeyError",
]
