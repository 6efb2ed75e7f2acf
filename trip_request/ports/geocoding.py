"""Geocoding port - Abstraction for resolving free text to coordinates.

The coordinator only needs a coordinate (or nothing) for a query;
any provider (Nominatim, Pelias, a stop index...) can sit behind it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import GeoLocation


class GeocoderPort(Protocol):
    """Port for geocoding services.

    Implementation: adapters/geocoding/nominatim_adapter.py
    """

    def geocode(self, query: str) -> Optional[GeoLocation]:
        """Geocode a free-text location.

        Args:
            query: The location text (address, intersection, landmark).

        Returns:
            The best matching coordinate, or None if nothing matched.

        Raises:
            GeocodingError: If the provider could not be queried.
        """
        ...
