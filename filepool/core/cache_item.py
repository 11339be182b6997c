"""Concrete cache item: one value, its key, hit flag and expiration.

The stored ``hit`` flag is never cleared when the expiration passes; the
expiry-adjusted hit state is recomputed on every read.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Tuple, Union

from filepool.domain.interfaces.cache import CacheItemInterface
from filepool.domain.models.common import CacheItemState, CacheKey

LATEST_EXPIRATION = datetime.max.replace(tzinfo=timezone.utc)
EARLIEST_EXPIRATION = datetime.min.replace(tzinfo=timezone.utc)


def _utcnow() -> datetime:
    """Current instant, timezone-aware. Patched by tests to freeze time."""
    return datetime.now(timezone.utc)


def _as_aware(moment: datetime) -> datetime:
    # Naive datetimes are taken as local time
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment


class CacheItem(CacheItemInterface):
    """In-memory cache item handed out and accepted by a pool."""

    def __init__(self, key: str):
        self._key = CacheKey(key)
        self._value: Any = None
        self._hit = False
        self._expiration: Optional[datetime] = None

    @classmethod
    def from_state(cls, state: CacheItemState) -> "CacheItem":
        """Rebuilds an item exactly as it was when its state was captured."""
        item = cls(state.key)
        item._value = state.value
        item._hit = state.hit
        item._expiration = state.expiration
        return item

    def state(self) -> CacheItemState:
        """Snapshot of the full item state for serialization."""
        return CacheItemState(
            key=self._key,
            value=self._value,
            hit=self._hit,
            expiration=self._expiration,
        )

    @property
    def expiration(self) -> Optional[datetime]:
        return self._expiration

    def get_key(self) -> CacheKey:
        return self._key

    def _lookup(self) -> Tuple[bool, Any]:
        # Hit decision and value come from the same evaluation instant
        now = _utcnow()
        hit = self._hit and (self._expiration is None or self._expiration > now)
        return hit, (self._value if hit else None)

    def get(self) -> Any:
        _, value = self._lookup()
        return value

    def is_hit(self) -> bool:
        hit, _ = self._lookup()
        return hit

    def set(self, value: Any) -> "CacheItem":
        self._hit = True
        self._value = value
        return self

    def expires_at(self, expiration: Optional[datetime]) -> "CacheItem":
        """Sets the absolute expiration.

        Args:
            expiration: An aware or naive (local time) datetime, or None to
                make the item non-expiring.

        Raises:
            TypeError: If expiration is neither a datetime nor None.
        """
        if expiration is not None and not isinstance(expiration, datetime):
            raise TypeError(
                f"expiration must be a datetime or None, got {type(expiration).__name__}"
            )
        self._expiration = _as_aware(expiration) if expiration is not None else None
        return self

    def expires_after(self, time: Union[int, timedelta, None]) -> "CacheItem":
        """Sets the expiration relative to now.

        Args:
            time: Number of seconds, a timedelta, or None to clear. Offsets
                past the datetime range clamp to LATEST_EXPIRATION or
                EARLIEST_EXPIRATION.

        Raises:
            TypeError: If time is not an int, a timedelta or None.
        """
        if time is None:
            return self.expires_at(None)

        if isinstance(time, bool) or not isinstance(time, (int, timedelta)):
            raise TypeError(
                f"time must be an int number of seconds, a timedelta or None, got {type(time).__name__}"
            )
        forward = time > (0 if isinstance(time, int) else timedelta(0))
        try:
            if isinstance(time, int):
                time = timedelta(seconds=time)
            expiration = _utcnow() + time
        except OverflowError:
            # Beyond the datetime range, clamp to the last or first instant
            expiration = LATEST_EXPIRATION if forward else EARLIEST_EXPIRATION
        return self.expires_at(expiration)

    def __repr__(self) -> str:
        return (
            f"CacheItem(key={self._key!r}, hit={self._hit}, "
            f"expiration={self._expiration.isoformat() if self._expiration else None})"
        )
