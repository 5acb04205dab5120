"""Cache port - Injectable caching abstraction.

Adapters that talk to slow lookups (distance tables, catalogue files)
take a CachePort instead of keeping module-level dictionaries, so tests
can swap in a NullCache and production can bound size and age.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for caching.

    Implementations:
    - adapters/cache/memory_cache.py (InMemoryCache) - Production
    - adapters/cache/null_cache.py (NullCache) - Testing
    """

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None if missing or expired."""
        ...

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        """Store a value, optionally overriding the default TTL."""
        ...

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Get from cache or compute and cache the value.

        Args:
            key: The cache key.
            compute_fn: Function to compute the value if not cached.

        Returns:
            The cached or computed value.
        """
        ...

    def clear(self) -> int:
        """Clear all entries and return how many were removed."""
        ...

    def invalidate(self, key: str) -> bool:
        """Remove one entry; True if it existed."""
        ...

    def size(self) -> int:
        """Return the number of entries in the cache."""
        ...
