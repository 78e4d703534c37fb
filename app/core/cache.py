"""
Bounded in-memory cache with per-entry TTL.
Backs the optional verified-principal cache; entries never outlive the
TTL they were stored with.
"""
import time
from collections import OrderedDict
from threading import Lock
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class CacheEntry(Generic[T]):
    """Single cache entry with expiration tracking."""

    __slots__ = ("value", "expires_at")

    def __init__(self, value: T, expires_at: float) -> None:
        self.value = value
        self.expires_at = expires_at

    def is_expired(self) -> bool:
        """Check if entry has expired."""
        return time.monotonic() >= self.expires_at


class TTLCache(Generic[T]):
    """
    Thread-safe TTL cache with a size bound (oldest entries evicted first).

    Usage:
        cache: TTLCache[Principal] = TTLCache(max_entries=1024)
        cache.set(token_digest, principal, ttl_seconds=60)
    """

    def __init__(self, max_entries: int = 1024) -> None:
        self._store: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._max_entries = max_entries
        self._lock = Lock()

    def get(self, key: str) -> Optional[T]:
        """Get value by key, returns None if not found or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired():
                del self._store[key]
                return None
            return entry.value

    def set(self, key: str, value: T, ttl_seconds: float) -> None:
        """Store value for ``ttl_seconds``; non-positive TTLs are not stored."""
        if ttl_seconds <= 0:
            return
        expires_at = time.monotonic() + ttl_seconds
        with self._lock:
            self._store[key] = CacheEntry(value, expires_at)
            self._store.move_to_end(key)
            while len(self._store) > self._max_entries:
                self._store.popitem(last=False)
