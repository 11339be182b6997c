"""Cache key legality rules.

Keys double as file names, so besides the reserved characters they must not
be empty, contain NUL, start with a dot (hidden names are used for in-flight
temporary files) or exceed the common file name limit.
"""

import os
from typing import Iterable, List

from filepool.domain.exceptions import InvalidKeyError
from filepool.domain.models.common import RESERVED_KEY_CHARACTERS, CacheKey

# NAME_MAX on common Linux and macOS file systems
MAX_KEY_BYTES = 255


def validate_key(key: object) -> CacheKey:
    """Checks a single key and returns it as a CacheKey.

    Raises:
        InvalidKeyError: If the key is not a legal value.
    """
    if not isinstance(key, str):
        raise InvalidKeyError(key, f"expected str, got {type(key).__name__}")
    if not key:
        raise InvalidKeyError(key, "key is empty")
    if key.startswith("."):
        raise InvalidKeyError(key, "key must not start with '.'")
    if "\0" in key:
        raise InvalidKeyError(key, "key contains a NUL character")
    reserved = sorted({ch for ch in key if ch in RESERVED_KEY_CHARACTERS})
    if reserved:
        raise InvalidKeyError(key, f"key contains reserved characters {''.join(reserved)!r}")
    try:
        encoded = os.fsencode(key)
    except UnicodeEncodeError:
        raise InvalidKeyError(key, "key cannot be encoded as a file name") from None
    if len(encoded) > MAX_KEY_BYTES:
        raise InvalidKeyError(key, f"key is longer than {MAX_KEY_BYTES} bytes once encoded")
    return CacheKey(key)


def validate_keys(keys: Iterable[object]) -> List[CacheKey]:
    """Checks every key before any of them is used."""
    return [validate_key(key) for key in keys]
