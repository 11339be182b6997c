"""Pickle-based codec for cache item state.

Pickle round-trips arbitrary Python values, including None and aware
datetimes, which is what the pool needs to restore items exactly. Only read
blobs written by a trusted process: unpickling runs code.
"""

import pickle

from filepool.domain.exceptions import CodecError
from filepool.domain.interfaces.codec import ItemCodec
from filepool.domain.models.common import CacheItemState


class PickleCodec(ItemCodec):
    """Encodes CacheItemState with pickle."""

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol

    def encode(self, state: CacheItemState) -> bytes:
        try:
            return pickle.dumps(state, protocol=self.protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise CodecError(f"Cannot serialize value for key {state.key!r}: {e}") from e

    def decode(self, data: bytes) -> CacheItemState:
        try:
            state = pickle.loads(data)
        except (
            pickle.UnpicklingError,
            EOFError,
            AttributeError,
            ImportError,
            IndexError,
            KeyError,
            OverflowError,
            TypeError,
            ValueError,
        ) as e:
            raise CodecError(f"Corrupt cache blob: {e}") from e

        if not isinstance(state, CacheItemState):
            raise CodecError(f"Cache blob holds {type(state).__name__}, not CacheItemState")
        return state
