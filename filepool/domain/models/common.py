"""Defines common Value Objects used across the cache domain.

These objects represent simple values like cache keys and the snapshot of an
item's state that is handed to the serialization codec.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, NewType, Optional

# === Caching Context ===
CacheKey = NewType("CacheKey", str)      # Unique key for a cache entry within a pool

# Characters a key may not contain (also unsafe as file names on some platforms)
RESERVED_KEY_CHARACTERS = "{}()/\\@:"


@dataclass(frozen=True)
class CacheItemState:
    """Full, serializable state of a cache item.

    This is what the codec encodes and decodes; the expiration metadata
    travels with the value so a restored item evaluates expiry exactly as the
    saved one did.
    """
    key: CacheKey
    value: Any = None
    hit: bool = False
    expiration: Optional[datetime] = None
