# src/cryptoquote/infrastructure/cache.py
import time
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """
    A simple in-memory cache where every entry lives for a fixed Time-To-Live.

    Expiry is lazy: nothing sweeps the store in the background, an expired
    entry is dropped the next time it is read (or overwritten by ``set``).
    """

    def __init__(self, ttl_ms: int, clock: Callable[[], float] = time.time):
        """
        :param ttl_ms: Lifespan of every entry, in milliseconds. Must be positive.
        :param clock: Returns the current time in seconds. Defaults to ``time.time``.
        """
        if isinstance(ttl_ms, bool) or not isinstance(ttl_ms, int):
            raise TypeError(f"ttl_ms must be an integer, got {type(ttl_ms).__name__}")
        if ttl_ms <= 0:
            raise ValueError(f"ttl_ms must be positive, got {ttl_ms}")
        self._ttl_ms = ttl_ms
        self._clock = clock
        # { key: (expiry_timestamp, value) }
        self._store: Dict[str, Tuple[float, V]] = {}

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    def get(self, key: str) -> Optional[V]:
        """
        Retrieves an item if it exists and has not expired, otherwise ``None``.
        """
        item = self._store.get(key)
        if item is None:
            return None

        expires_at, value = item
        if self._clock() >= expires_at:
            self._store.pop(key, None)
            return None

        return value

    def set(self, key: str, value: V) -> None:
        """
        Stores ``value`` under ``key``, replacing any previous entry and its expiry.
        """
        expires_at = self._clock() + self._ttl_ms / 1000.0
        self._store[key] = (expires_at, value)

    def __len__(self) -> int:
        # Physically stored entries, stale ones included.
        return len(self._store)
