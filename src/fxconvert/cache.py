"""
Rate Cache

Any object with get/set (and optionally delete/clear) can serve as the
converter's rate cache; methods may be plain or async. SimpleCache is the
in-process default with a fixed TTL and lazy expiry.
"""

import inspect
import threading
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Generic, Protocol, TypeVar, runtime_checkable

from fxconvert.models import CacheEntry

T = TypeVar("T")


@runtime_checkable
class RateCache(Protocol):
    """Contract for rate caches. delete() and clear() are optional."""

    def get(self, key: str) -> Any | Awaitable[Any]: ...

    def set(self, key: str, value: Any) -> None | Awaitable[None]: ...


async def maybe_await(value: Any) -> Any:
    """Resolve value if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def make_cache_key(from_currency: str, to_currency: str, date: datetime) -> str:
    """
    Build the cache key for a currency pair on a UTC calendar day.

    Example:
        >>> make_cache_key("USD", "EUR", datetime(2025, 10, 1, 15, tzinfo=timezone.utc))
        'USD_EUR_2025-10-01'
    """
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    day = date.astimezone(timezone.utc).date().isoformat()
    return f"{from_currency}_{to_currency}_{day}"


class SimpleCache(Generic[T]):
    """
    In-memory TTL cache.

    Entries expire ttl_minutes after their last set(). Expired entries are
    dropped when read; there is no background sweep. A lock guards the store
    so one instance can be shared between threads.
    """

    def __init__(self, ttl_minutes: float = 60):
        self._ttl = ttl_minutes * 60
        self._store: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    # Internal --------------------------------------------------
    def _is_expired(self, entry: CacheEntry[T]) -> bool:
        return time.monotonic() > entry.expires_at

    # Public API -----------------------------------------------
    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._is_expired(entry):
                del self._store[key]
                return None
            return entry.value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=time.monotonic() + self._ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
