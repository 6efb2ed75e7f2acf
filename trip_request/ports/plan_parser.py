"""Trip-plan parser port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import TripPlan


class TripPlanParserPort(Protocol):
    """Turns a successful service payload into a TripPlan.

    Implementation: adapters/parsing/itinerary_parser.py
    """

    def parse(
        self, payload: Any, request_params: Mapping[str, str]
    ) -> Optional[TripPlan]:
        """Parse a payload.

        Returns:
            A TripPlan, or a falsy value when the payload holds no usable
            plan (the caller then treats the response as an error).
        """
        ...
