"""Parser for OpenTripPlanner JSON plan responses.

Reads ``plan.itineraries[]`` and their ``legs[]``. A payload without
itineraries (including one carrying an ``error`` object) parses to None.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ...domain.models import Itinerary, Leg, TripPlan


def _place_name(place: Any) -> str:
    if isinstance(place, Mapping):
        return str(place.get("name") or "")
    return ""


@dataclass
class ItineraryParser:
    """Plan parser implementing TripPlanParserPort."""

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def parse(
        self, payload: Any, request_params: Mapping[str, str]
    ) -> Optional[TripPlan]:
        if not isinstance(payload, Mapping):
            self._logger.debug("Plan payload is not an object")
            return None

        plan = payload.get("plan")
        if not isinstance(plan, Mapping):
            return None

        itineraries = []
        for raw in plan.get("itineraries") or ():
            try:
                itineraries.append(self._parse_itinerary(raw))
            except (TypeError, ValueError, AttributeError) as e:
                self._logger.warning(
                    "Skipping malformed itinerary",
                    extra={"error": str(e)},
                )

        if not itineraries:
            return None

        self._logger.info(
            "Trip plan parsed",
            extra={"itineraries": len(itineraries)},
        )
        return TripPlan(
            itineraries=tuple(itineraries),
            request_params=tuple(sorted(request_params.items())),
        )

    def _parse_itinerary(self, raw: Mapping[str, Any]) -> Itinerary:
        legs = tuple(
            Leg(
                mode=str(leg.get("mode", "")),
                from_name=_place_name(leg.get("from")),
                to_name=_place_name(leg.get("to")),
                route=leg.get("route") or None,
                distance_m=float(leg.get("distance") or 0.0),
                duration_s=float(leg.get("duration") or 0.0),
            )
            for leg in raw.get("legs") or ()
        )
        start = raw.get("startTime")
        end = raw.get("endTime")
        return Itinerary(
            duration_s=float(raw.get("duration") or 0.0),
            start_time=int(start) if start is not None else None,
            end_time=int(end) if end is not None else None,
            walk_distance_m=float(raw.get("walkDistance") or 0.0),
            transfers=int(raw.get("transfers") or 0),
            legs=legs,
        )
