"""Parameter normalization.

Turns an unordered bag of string parameters (deep link, restored
session, programmatic caller) into a TripRequestPatch. The accepted
aliases are an ordered table of rules; rules sharing a group compete
and the first one that yields a value wins. Values that cannot be
interpreted are skipped, never reported.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple
from urllib.parse import parse_qsl

from ..dates import date_from_month_day, normalize_date, normalize_time
from ..domain.errors import ParameterError
from ..domain.models import (
    Endpoint,
    GeoLocation,
    OptimizeType,
    TravelMode,
    TriangleWeights,
    TripRequest,
)

PLACEHOLDER_MARKER = "true"
_AUTOCOMPLETE_LABEL = re.compile(r"Address, .*Stop ID")

# Substring markers for the free-form arrive/depart aliases. A value
# matching both is read as "arrive" (the arrive test runs first).
ARRIVE_MARKERS = ("rive", "arriv")
DEPART_MARKERS = ("part",)

_TRUE_WORDS = frozenset({"true", "on", "yes", "1"})
_FALSE_WORDS = frozenset({"false", "off", "no", "0"})


@dataclass(frozen=True)
class LocationHint:
    """What the parameters said about one endpoint.

    Attributes:
        text: Display text, if an alias supplied one
        coordinate: Coordinate parsed from the text or given explicitly
    """

    text: Optional[str] = None
    coordinate: Optional[GeoLocation] = None


@dataclass
class TripRequestPatch:
    """Partial update of a TripRequest; None means "leave untouched"."""

    origin: Optional[LocationHint] = None
    destination: Optional[LocationHint] = None
    origin_coordinate: Optional[GeoLocation] = None
    destination_coordinate: Optional[GeoLocation] = None
    date: Optional[str] = None
    time: Optional[str] = None
    arrive_by: Optional[bool] = None
    mode: Optional[TravelMode] = None
    optimize: Optional[OptimizeType] = None
    triangle: Optional[TriangleWeights] = None
    max_walk_distance: Optional[float] = None
    wheelchair_accessible: Optional[bool] = None
    router_id: Optional[str] = None
    resolved_groups: Set[str] = field(default_factory=set)

    def location(self, endpoint: Endpoint) -> Optional[LocationHint]:
        """Merged hint for an endpoint; an explicit coordinate wins."""
        if endpoint is Endpoint.ORIGIN:
            hint, override = self.origin, self.origin_coordinate
        else:
            hint, override = self.destination, self.destination_coordinate

        if override is None:
            return hint
        return LocationHint(text=hint.text if hint else None, coordinate=override)

    def apply_to(self, request: TripRequest) -> None:
        """Merge every non-location field into ``request``.

        Endpoints are applied by the geocoding coordinator, which also
        owns their status.
        """
        if self.date is not None:
            request.date = self.date
        if self.time is not None:
            request.time = self.time
        if self.arrive_by is not None:
            request.arrive_by = self.arrive_by
        if self.mode is not None:
            request.mode = self.mode
        if self.optimize is not None:
            request.optimize = self.optimize
        if self.triangle is not None and request.optimize is OptimizeType.TRIANGLE:
            request.triangle = self.triangle
        if self.max_walk_distance is not None:
            request.max_walk_distance = self.max_walk_distance
        if self.wheelchair_accessible is not None:
            request.wheelchair_accessible = self.wheelchair_accessible
        if self.router_id is not None:
            request.router_id = self.router_id


@dataclass(frozen=True)
class ParameterRule:
    """One alias source.

    Attributes:
        group: Target field group; first rule of a group to succeed wins
        keys: Parameter keys; all must be present and non-empty
        parse: Receives the raw values, raises ValueError to reject
        apply: Writes the parsed value into the patch
    """

    group: str
    keys: Tuple[str, ...]
    parse: Callable[..., Any]
    apply: Callable[[TripRequestPatch, Any], None]


def is_placeholder(value: str) -> bool:
    """True for values that must never be written into the model."""
    return value == PLACEHOLDER_MARKER or _AUTOCOMPLETE_LABEL.search(value) is not None


def parse_location(value: str) -> LocationHint:
    if is_placeholder(value):
        raise ParameterError("Placeholder location", value=value)
    text = value.strip()
    coordinate = None
    if "," in text and len(text) >= 3:
        try:
            coordinate = GeoLocation.parse(text)
        except ValueError:
            coordinate = None  # plain text such as "Portland, OR"
    return LocationHint(text=text, coordinate=coordinate)


def parse_coordinate_override(value: str) -> GeoLocation:
    value = value.strip()
    if value.startswith("0.0"):
        raise ParameterError("Blank coordinate", value=value)
    coordinate = GeoLocation.parse(value)
    if coordinate.is_blank:
        raise ParameterError("Blank coordinate", value=value)
    return coordinate


def parse_arrive_by(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered == "true" or any(m in lowered for m in ARRIVE_MARKERS):
        return True
    if lowered == "false" or any(m in lowered for m in DEPART_MARKERS):
        return False
    raise ValueError(f"Neither arrive nor depart: {value!r}")


def parse_flag(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def parse_distance(value: str) -> float:
    distance = float(value)
    if not math.isfinite(distance) or distance <= 0:
        raise ValueError(f"Invalid distance: {value!r}")
    return distance


def parse_router_id(value: str) -> str:
    if is_placeholder(value):
        raise ParameterError("Placeholder router id", value=value)
    return value.strip()


def parse_triangle(safety: str, slope: str, time: str) -> TriangleWeights:
    return TriangleWeights.from_factors(float(safety), float(slope), float(time))


def parse_query_string(query: str) -> Dict[str, str]:
    """Decode a deep-link query string; the first occurrence of a key wins."""
    params: Dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        params.setdefault(key, value)
    return params


def _set(attr: str) -> Callable[[TripRequestPatch, Any], None]:
    def apply(patch: TripRequestPatch, value: Any) -> None:
        setattr(patch, attr, value)

    return apply


def _set_time(arrive_by: Optional[bool]) -> Callable[[TripRequestPatch, Any], None]:
    def apply(patch: TripRequestPatch, value: str) -> None:
        patch.time = value
        if arrive_by is not None:
            patch.arrive_by = arrive_by

    return apply


def _hour_minute_ampm(hour: str, minute: str, am_pm: str) -> str:
    return normalize_time(f"{hour}:{minute} {am_pm.lower()}".replace(".", ""))


def build_rules(
    today: Callable[[], date],
    wheelchair_enabled: bool = True,
) -> List[ParameterRule]:
    """The alias table, in evaluation order."""
    rules = [
        ParameterRule("origin", ("Orig",), parse_location, _set("origin")),
        ParameterRule("origin", ("from",), parse_location, _set("origin")),
        ParameterRule("origin", ("fromPlace",), parse_location, _set("origin")),
        ParameterRule("destination", ("Dest",), parse_location, _set("destination")),
        ParameterRule("destination", ("to",), parse_location, _set("destination")),
        ParameterRule("destination", ("toPlace",), parse_location, _set("destination")),
        ParameterRule(
            "origin_coordinate", ("fromCoord",), parse_coordinate_override,
            _set("origin_coordinate"),
        ),
        ParameterRule(
            "destination_coordinate", ("toCoord",), parse_coordinate_override,
            _set("destination_coordinate"),
        ),
        ParameterRule("date", ("date",), normalize_date, _set("date")),
        ParameterRule("date", ("on",), normalize_date, _set("date")),
        ParameterRule(
            "date", ("month", "day"),
            lambda month, day: date_from_month_day(month, day, today()),
            _set("date"),
        ),
        ParameterRule("arrive_by", ("arrParam",), parse_arrive_by, _set("arrive_by")),
        ParameterRule("arrive_by", ("arr",), parse_arrive_by, _set("arrive_by")),
        ParameterRule("arrive_by", ("Arr",), parse_arrive_by, _set("arrive_by")),
        ParameterRule("time", ("after",), normalize_time, _set_time(False)),
        ParameterRule("time", ("by",), normalize_time, _set_time(True)),
        ParameterRule("time", ("time",), normalize_time, _set_time(None)),
        ParameterRule(
            "time", ("Hour", "Minute", "AmPm"), _hour_minute_ampm, _set_time(None)
        ),
        ParameterRule("mode", ("mode",), TravelMode.parse, _set("mode")),
        ParameterRule("optimize", ("opt",), OptimizeType.parse, _set("optimize")),
        ParameterRule("optimize", ("min",), OptimizeType.parse, _set("optimize")),
        ParameterRule(
            "triangle",
            ("triangleSafetyFactor", "triangleSlopeFactor", "triangleTimeFactor"),
            parse_triangle,
            _set("triangle"),
        ),
        ParameterRule(
            "max_walk_distance", ("maxWalkDistance",), parse_distance,
            _set("max_walk_distance"),
        ),
        ParameterRule("router_id", ("routerId",), parse_router_id, _set("router_id")),
    ]
    if wheelchair_enabled:
        rules.append(
            ParameterRule(
                "wheelchair", ("wheelchair",), parse_flag, _set("wheelchair_accessible")
            )
        )
    return rules


@dataclass
class ParameterNormalizer:
    """Applies the alias table to a parameter bag.

    Attributes:
        today: Clock used to place a month/day without a year
        wheelchair_enabled: Whether the wheelchair parameter is honoured
        rules: Rule table (built from the two settings above by default)
    """

    today: Callable[[], date] = date.today
    wheelchair_enabled: bool = True
    rules: Sequence[ParameterRule] = field(default_factory=list)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if not self.rules:
            self.rules = build_rules(self.today, self.wheelchair_enabled)

    def normalize(self, params: Mapping[str, Any]) -> TripRequestPatch:
        """Build a patch from ``params``; unknown keys are ignored."""
        patch = TripRequestPatch()

        for rule in self.rules:
            if rule.group in patch.resolved_groups:
                continue

            values = [params.get(key) for key in rule.keys]
            if any(v is None or str(v).strip() == "" for v in values):
                continue

            try:
                value = rule.parse(*(str(v) for v in values))
            except (ValueError, ParameterError) as e:
                self._logger.debug(
                    "Skipping parameter",
                    extra={"keys": list(rule.keys), "reason": str(e)},
                )
                continue

            rule.apply(patch, value)
            patch.resolved_groups.add(rule.group)

        self._logger.debug(
            "Parameters normalized",
            extra={"groups": sorted(patch.resolved_groups)},
        )
        return patch
