"""Folium map overlay adapter.

Keeps the origin/destination markers the coordinator sends and renders
them to an interactive HTML map, joined by a straight dashed line.
Itinerary legs are not drawn, so clear_trip() has nothing to remove.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from ...domain.errors import RenderingError
from ...domain.models import Endpoint, GeoLocation

_STYLES = {Endpoint.ORIGIN: "green", Endpoint.DESTINATION: "red"}


@dataclass
class FoliumMapOverlay:
    """Folium-based map overlay.

    Attributes:
        zoom_start: Initial zoom of rendered maps
        markers: Current marker per endpoint as (location, label)
        reversed_styles: True after an odd number of reverse_styles() calls
    """

    zoom_start: int = 13
    markers: Dict[Endpoint, Tuple[GeoLocation, Optional[str]]] = field(
        default_factory=dict
    )
    reversed_styles: bool = False

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def set_endpoint(
        self,
        endpoint: Endpoint,
        location: GeoLocation,
        label: Optional[str] = None,
    ) -> None:
        self.markers[endpoint] = (location, label)
        self._logger.debug(
            "Marker placed",
            extra={
                "endpoint": endpoint.value,
                "lat": location.latitude,
                "lon": location.longitude,
            },
        )

    def reverse_styles(self) -> None:
        # the old origin marker is now drawn as the destination and vice versa
        self.markers = {
            endpoint.other: marker for endpoint, marker in self.markers.items()
        }
        self.reversed_styles = not self.reversed_styles

    def clear_trip(self) -> None:
        # no itinerary layer; endpoint markers stay
        self._logger.debug("Trip cleared from map")

    def color(self, endpoint: Endpoint) -> str:
        return _STYLES[endpoint]

    def render(self, output_path: Path) -> Path:
        """Render the current markers to an HTML file.

        Raises:
            RenderingError: If there is nothing to draw or Folium fails.
        """
        if not self.markers:
            raise RenderingError(
                "No endpoint markers to render",
                output_path=str(output_path),
                renderer_type="folium",
            )

        try:
            import folium

            lats = [loc.latitude for loc, _ in self.markers.values()]
            lons = [loc.longitude for loc, _ in self.markers.values()]
            center = [sum(lats) / len(lats), sum(lons) / len(lons)]

            m = folium.Map(location=center, zoom_start=self.zoom_start)
            for endpoint, (loc, label) in self.markers.items():
                folium.Marker(
                    location=[loc.latitude, loc.longitude],
                    popup=label or loc.as_param(),
                    tooltip=endpoint.value,
                    icon=folium.Icon(color=self.color(endpoint)),
                ).add_to(m)

            if len(self.markers) == 2:
                folium.PolyLine(
                    [
                        [loc.latitude, loc.longitude]
                        for loc, _ in (
                            self.markers[Endpoint.ORIGIN],
                            self.markers[Endpoint.DESTINATION],
                        )
                    ],
                    weight=2,
                    color="blue",
                    opacity=0.6,
                    dash_array="5",
                ).add_to(m)

            output_path.parent.mkdir(parents=True, exist_ok=True)
            m.save(str(output_path))
            self._logger.info("Map rendered", extra={"output_path": str(output_path)})
            return output_path

        except ImportError as e:
            raise RenderingError(
                "Folium not installed",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            )
        except Exception as e:
            self._logger.error(
                "Map rendering failed",
                extra={"error": str(e), "output_path": str(output_path)},
            )
            raise RenderingError(
                f"Map rendering failed: {e}",
                output_path=str(output_path),
                renderer_type="folium",
                cause=e,
            )
