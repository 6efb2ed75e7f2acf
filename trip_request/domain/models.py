"""Domain models for the trip request coordinator.

Value objects (coordinates, weights, plans, messages) are frozen
dataclasses with slots. The canonical TripRequest is deliberately
mutable: there is exactly one per coordinator and it is patched in
place by the normalizer and by user edits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

BLANK_LAT_LON = "0.0,0.0"
TRIANGLE_TOTAL = 1.0


class Endpoint(Enum):
    """The two ends of a trip."""

    ORIGIN = "from"
    DESTINATION = "to"

    @property
    def other(self) -> Endpoint:
        return Endpoint.DESTINATION if self is Endpoint.ORIGIN else Endpoint.ORIGIN


class GeocodeState(Enum):
    """Geocoding status of one endpoint."""

    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


class SubmissionState(Enum):
    """States of a single submission attempt."""

    IDLE = "idle"
    VALIDATING = "validating"
    BLOCKED = "blocked"
    WAITING_GEOCODE = "waiting_geocode"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TravelMode(str, Enum):
    """Travel mode combinations understood by the planning service."""

    TRANSIT = "TRANSIT,WALK"
    BUS = "BUSISH,WALK"
    TRAIN = "TRAINISH,WALK"
    WALK = "WALK"
    BICYCLE = "BICYCLE"
    TRANSIT_BICYCLE = "TRANSIT,BICYCLE"

    @classmethod
    def parse(cls, value: str) -> TravelMode:
        """Parse a mode from its wire value or enum name (case-insensitive)."""
        key = value.strip().upper().replace(" ", "")
        for mode in cls:
            if key in (mode.value, mode.name):
                return mode
        raise ValueError(f"Unknown travel mode: {value!r}")


class OptimizeType(str, Enum):
    """Optimization strategies; TRIANGLE requires TriangleWeights."""

    QUICK = "QUICK"
    SAFE = "SAFE"
    FLAT = "FLAT"
    GREENWAYS = "GREENWAYS"
    TRIANGLE = "TRIANGLE"
    TRANSFERS = "TRANSFERS"

    @classmethod
    def parse(cls, value: str) -> OptimizeType:
        return cls(value.strip().upper())


@dataclass(frozen=True, slots=True)
class GeoLocation:
    """GPS coordinates representing a geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )

    @classmethod
    def parse(cls, text: str) -> GeoLocation:
        """Parse a ``"lat,lon"`` string.

        Raises:
            ValueError: If the text is not two comma separated numbers
                within range.
        """
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 2:
            raise ValueError(f"Not a coordinate pair: {text!r}")
        return cls(latitude=float(parts[0]), longitude=float(parts[1]))

    @property
    def is_blank(self) -> bool:
        """True for the ``0.0,0.0`` placeholder that stands for 'no coordinate'."""
        return self.latitude == 0.0 and self.longitude == 0.0

    def as_param(self) -> str:
        return f"{self.latitude},{self.longitude}"


@dataclass(slots=True)
class Location:
    """One trip endpoint: display text and/or coordinate.

    Attributes:
        text: Free text as typed or received (kept for redisplay)
        coordinate: Coordinate to submit, when known
    """

    text: Optional[str] = None
    coordinate: Optional[GeoLocation] = None

    @property
    def has_real_coordinate(self) -> bool:
        return self.coordinate is not None and not self.coordinate.is_blank


@dataclass(frozen=True, slots=True)
class TriangleWeights:
    """Safety / slope / time weights of the TRIANGLE optimization.

    The three factors always sum to TRIANGLE_TOTAL.
    """

    safety: float = 1 / 3
    slope: float = 1 / 3
    time: float = 1 / 3

    @classmethod
    def from_factors(cls, safety: float, slope: float, time: float) -> TriangleWeights:
        """Build weights from raw factors, rescaling them to TRIANGLE_TOTAL.

        Raises:
            ValueError: On negative factors or an all-zero triangle.
        """
        if min(safety, slope, time) < 0:
            raise ValueError("Triangle factors must not be negative")
        total = safety + slope + time
        if total <= 0:
            raise ValueError("Triangle factors must not all be zero")
        scale = TRIANGLE_TOTAL / total
        return cls(safety=safety * scale, slope=slope * scale, time=time * scale)

    def as_params(self) -> dict[str, str]:
        return {
            "triangleSafetyFactor": str(self.safety),
            "triangleSlopeFactor": str(self.slope),
            "triangleTimeFactor": str(self.time),
        }


@dataclass(slots=True)
class TripRequest:
    """The canonical, mutable trip request.

    Attributes:
        origin: Start of the trip
        destination: End of the trip
        date: Service date, ``MM/DD/YYYY``
        time: Service time, ``h:mm am``
        arrive_by: None until resolved; True means "arrive by time"
        mode: Travel mode
        optimize: Optimization strategy
        triangle: Weights used when optimize is TRIANGLE
        max_walk_distance: Maximum walk distance in metres
        wheelchair_accessible: Only set when the feature is enabled
        router_id: Backend routing graph identifier
    """

    origin: Location = field(default_factory=Location)
    destination: Location = field(default_factory=Location)
    date: str = ""
    time: str = ""
    arrive_by: Optional[bool] = None
    mode: TravelMode = TravelMode.TRANSIT
    optimize: OptimizeType = OptimizeType.QUICK
    triangle: TriangleWeights = field(default_factory=TriangleWeights)
    max_walk_distance: float = 840.0
    wheelchair_accessible: Optional[bool] = None
    router_id: Optional[str] = None

    def location(self, endpoint: Endpoint) -> Location:
        return self.origin if endpoint is Endpoint.ORIGIN else self.destination


@dataclass(frozen=True, slots=True)
class Leg:
    """One leg of an itinerary."""

    mode: str
    from_name: str
    to_name: str
    route: Optional[str] = None
    distance_m: float = 0.0
    duration_s: float = 0.0


@dataclass(frozen=True, slots=True)
class Itinerary:
    """One alternative returned by the planning service.

    Attributes:
        duration_s: Total duration in seconds
        start_time: Epoch milliseconds
        end_time: Epoch milliseconds
        walk_distance_m: Total walking distance
        transfers: Number of transfers
        legs: Ordered legs
    """

    duration_s: float
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    walk_distance_m: float = 0.0
    transfers: int = 0
    legs: tuple[Leg, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class TripPlan:
    """A parsed, successful planning response.

    Attributes:
        itineraries: Alternatives, in service order
        request_params: The parameters that produced this plan
    """

    itineraries: tuple[Itinerary, ...]
    request_params: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return len(self.itineraries) > 0


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class UserMessage:
    """A message surfaced to the user (validation block or trip error)."""

    title: str
    text: str
    severity: Severity = Severity.ERROR
