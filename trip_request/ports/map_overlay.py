"""Map overlay port - Abstraction for the map/POI layer.

The coordinator never reads anything back from the map; it only keeps
the endpoint markers in step with the request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import Endpoint, GeoLocation


class MapOverlayPort(Protocol):
    """Port for the map/POI overlay.

    Implementation: adapters/rendering/folium_overlay.py
    """

    def set_endpoint(
        self,
        endpoint: Endpoint,
        location: GeoLocation,
        label: Optional[str] = None,
    ) -> None:
        """Place (or move) the marker of one endpoint."""
        ...

    def reverse_styles(self) -> None:
        """Swap the origin/destination marker styles after a reverse."""
        ...

    def clear_trip(self) -> None:
        """Remove any previously drawn trip."""
        ...
