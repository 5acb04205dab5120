"""Thread-safe in-memory cache for lookup adapters.

Distance lookups are shared between concurrent route computations, so
the cache is guarded by an RLock and evicts the least recently used
entry once ``max_size`` is reached. Entries can expire after a TTL.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class InMemoryCache(Generic[T]):
    """LRU cache with optional TTL, implementing CachePort.

    Attributes:
        default_ttl_seconds: Default time-to-live for entries (None = no expiry)
        max_size: Maximum number of entries (None = unlimited)
        name: Cache name, used in the logger name

    Example:
        cache = InMemoryCache[LegMeasurement](name="distance", default_ttl_seconds=3600)
        leg = cache.get_or_compute("SE1 4AA|EC1A 1BB", lambda: lookup(...))
    """

    default_ttl_seconds: Optional[float] = None
    max_size: Optional[int] = None
    name: str = "cache"

    _store: "OrderedDict[str, Tuple[Any, float]]" = field(
        default_factory=OrderedDict, repr=False
    )
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)
    _evictions: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"smartquote.cache.{self.name}")

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None

            value, expiry = entry
            if time.monotonic() > expiry:
                del self._store[key]
                self._logger.debug("Cache entry expired", extra={"key": key})
                self._misses += 1
                return None

            self._store.move_to_end(key)
            self._hits += 1
            return value

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        """Store a value, evicting the least recently used entry when full.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Optional TTL override for this entry.
        """
        with self._lock:
            if key in self._store:
                self._store.move_to_end(key)
            elif self.max_size is not None and len(self._store) >= self.max_size:
                evicted, _ = self._store.popitem(last=False)
                self._evictions += 1
                self._logger.debug("Cache evicted entry", extra={"key": evicted})

            effective_ttl = ttl if ttl is not None else self.default_ttl_seconds
            expiry = (
                time.monotonic() + effective_ttl
                if effective_ttl is not None
                else float("inf")
            )
            self._store[key] = (value, expiry)

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Return the cached value or compute, store and return it.

        A None result is returned but not stored, so an unknown lookup is
        retried next time. Exceptions from compute_fn propagate uncached.
        """
        value = self.get(key)
        if value is not None:
            return value

        # Computed outside the lock so slow lookups do not serialize callers
        computed = compute_fn()
        if computed is not None:
            self.set(key, computed)
        return computed

    def clear(self) -> int:
        """Drop every entry and reset statistics; return the entry count."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = self._misses = self._evictions = 0
            self._logger.info("Cache cleared", extra={"entries_cleared": count})
            return count

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, Any]:
        """Return size, hit/miss/eviction counts and hit rate."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate_percent": round(self._hits / total * 100, 1) if total else 0.0,
            }
