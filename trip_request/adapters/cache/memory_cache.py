"""Thread-safe in-memory cache with optional TTL.

Used by the geocoder adapter. Misses are cached too (as None), so
``contains`` distinguishes "cached as not found" from "never asked".
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class InMemoryCache(Generic[T]):
    """In-memory cache implementing CachePort.

    Attributes:
        default_ttl_seconds: Time-to-live for entries (None = no expiry)
        max_size: Maximum number of entries (None = unlimited)
        name: Cache name for logging

    Example:
        cache = InMemoryCache[GeoLocation](name="geocode", default_ttl_seconds=3600)
    """

    default_ttl_seconds: Optional[float] = None
    max_size: Optional[int] = None
    name: str = "cache"

    _store: Dict[str, Tuple[Any, float]] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    def _live_entry(self, key: str) -> Optional[Tuple[Any, float]]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if time.monotonic() > entry[1]:
            del self._store[key]
            self._logger.debug("Cache entry expired", extra={"key": key})
            return None
        return entry

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry[0]

    def contains(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def set(self, key: str, value: Optional[T], ttl: Optional[float] = None) -> None:
        with self._lock:
            if (
                self.max_size is not None
                and len(self._store) >= self.max_size
                and key not in self._store
            ):
                # FIFO eviction
                oldest_key = next(iter(self._store))
                del self._store[oldest_key]
                self._logger.debug(
                    "Cache evicted entry",
                    extra={"key": oldest_key, "reason": "max_size"},
                )

            effective_ttl = ttl if ttl is not None else self.default_ttl_seconds
            expiry = (
                time.monotonic() + effective_ttl
                if effective_ttl is not None
                else float("inf")
            )
            self._store[key] = (value, expiry)

    def clear(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._logger.info("Cache cleared", extra={"entries_cleared": count})
            return count

    def stats(self) -> Dict[str, int]:
        """Return size, hits, misses and hit rate (percent)."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": int(self._hits * 100 / total) if total else 0,
            }
