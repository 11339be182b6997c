"""Interface for serializing cache item state to bytes."""

import abc

from ..models.common import CacheItemState


class ItemCodec(abc.ABC):
    """Abstract Base Class for reversible item state encoding.

    decode(encode(state)) must equal state for every valid state, including
    a None value and a None expiration.
    """

    @abc.abstractmethod
    def encode(self, state: CacheItemState) -> bytes:
        """Encodes the full item state.

        Raises:
            CodecError: If the state cannot be serialized.
        """
        pass

    @abc.abstractmethod
    def decode(self, data: bytes) -> CacheItemState:
        """Reconstructs an item state from bytes.

        Raises:
            CodecError: If the bytes are not a valid encoded state.
        """
        pass
