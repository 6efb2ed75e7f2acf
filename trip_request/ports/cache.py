"""Cache port - Injectable caching abstraction.

Used by the geocoder adapter so repeated lookups of the same text do
not hit the provider again.
"""

from __future__ import annotations

from typing import Optional, Protocol, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for caching.

    Implementation: adapters/cache/memory_cache.py (InMemoryCache)
    """

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None if missing or expired."""
        ...

    def set(self, key: str, value: T) -> None:
        """Store a value."""
        ...

    def contains(self, key: str) -> bool:
        """True if a live entry exists, even one caching a None value."""
        ...

    def clear(self) -> int:
        """Drop every entry and return how many were dropped."""
        ...
