"""Nominatim geocoder adapter.

Resolves free-text endpoints through OpenStreetMap's Nominatim with:
- Rate limiting and retries (geopy RateLimiter)
- Caching via CachePort, misses included
- Typed errors when the service cannot be reached
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from geopy.exc import GeocoderRateLimited, GeocoderServiceError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from ...config import GeocodingConfig, get_config
from ...domain.errors import GeocodingError
from ...domain.models import GeoLocation
from ...ports.cache import CachePort
from ..cache.memory_cache import InMemoryCache


@dataclass
class NominatimGeocoderAdapter:
    """Nominatim geocoder adapter implementing GeocoderPort.

    Attributes:
        config: Geocoding configuration
        cache: Cache for geocoding results
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    cache: Optional[CachePort[Optional[GeoLocation]]] = None

    _geolocator: Optional[Nominatim] = field(default=None, repr=False)
    _geocode_fn: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if self.cache is None:
            self.cache = InMemoryCache(
                name="geocode", default_ttl_seconds=self.config.cache_ttl_seconds
            )

    def _get_geocoder(self) -> Any:
        """Get or initialize the geocoder with rate limiting."""
        if self._geocode_fn is not None:
            return self._geocode_fn

        self._logger.debug(
            "Initializing Nominatim geocoder",
            extra={
                "user_agent": self.config.user_agent,
                "timeout": self.config.timeout_seconds,
            },
        )

        self._geolocator = Nominatim(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout_seconds,
        )

        self._geocode_fn = RateLimiter(
            self._geolocator.geocode,
            min_delay_seconds=self.config.rate_limit_delay,
            max_retries=self.config.max_retries,
            error_wait_seconds=self.config.error_wait_seconds,
            swallow_exceptions=False,
        )

        return self._geocode_fn

    def geocode(self, query: str) -> Optional[GeoLocation]:
        """Geocode a free-text location.

        Args:
            query: The location text.

        Returns:
            The coordinate of the best match, or None if not found.

        Raises:
            GeocodingError: If Nominatim could not be queried.
        """
        if not query or not query.strip():
            return None

        cache_key = query.strip().lower()
        assert self.cache is not None
        if self.cache.contains(cache_key):
            self._logger.debug("Geocode cache hit", extra={"query": query})
            return self.cache.get(cache_key)

        kwargs: dict[str, Any] = {"exactly_one": True}
        if self.config.country_codes:
            kwargs["country_codes"] = self.config.country_codes

        try:
            location = self._get_geocoder()(query.strip(), **kwargs)
        except GeocoderRateLimited as e:
            self._logger.warning(
                "Geocode rate limited",
                extra={"query": query, "error": str(e)},
            )
            raise GeocodingError(
                "Geocoder rate limit reached",
                query=query,
                is_rate_limited=True,
                cause=e,
            )
        except GeocoderServiceError as e:
            self._logger.warning(
                "Geocode service error",
                extra={"query": query, "error": str(e)},
            )
            raise GeocodingError("Geocoder unavailable", query=query, cause=e)

        if location is None:
            self._logger.debug("Geocode returned no result", extra={"query": query})
            # Cache the miss to avoid repeated lookups
            self.cache.set(cache_key, None)
            return None

        try:
            result = GeoLocation(
                latitude=float(location.latitude),
                longitude=float(location.longitude),
            )
        except (TypeError, ValueError) as e:
            raise GeocodingError("Geocoder returned an invalid coordinate", query=query, cause=e)

        self._logger.debug(
            "Geocode success",
            extra={"query": query, "lat": result.latitude, "lon": result.longitude},
        )
        self.cache.set(cache_key, result)
        return result
