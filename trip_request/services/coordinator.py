"""Trip request coordinator - Main orchestrator.

Owns the single TripRequest and wires the normalizer, the geocoding
gate and the submission state machine together. Consumers receive the
coordinator instance explicitly; there is no global lookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from ..config import FormConfig, ServiceConfig, SubmissionConfig, get_config
from ..dates import format_date, format_time
from ..domain.models import (
    Endpoint,
    GeoLocation,
    OptimizeType,
    SubmissionState,
    TripPlan,
    TripRequest,
)
from ..ports.geocoding import GeocoderPort
from ..ports.map_overlay import MapOverlayPort
from ..ports.notifier import NotifierPort
from ..ports.plan_parser import TripPlanParserPort
from ..ports.scheduler import SchedulerPort
from ..ports.trip_service import TripPlannerServicePort
from .error_mapper import ErrorMapper
from .geocoding_coordinator import GeocodingCoordinator
from .normalizer import ParameterNormalizer, parse_query_string
from .submission import SubmissionStateMachine


@dataclass
class TripRequestCoordinator:
    """Facade over the trip request and its submission.

    Attributes:
        service: Remote trip-planning service
        parser: Plan parser
        scheduler: Timer source shared by all components
        geocoder: Optional client-side geocoder
        map_overlay: Optional map/POI collaborator
        notifier: Optional user-message surface
        form: Form defaults and feature switches
        service_config: Supplies the default router id
        submission_config: Submission timing
        error_mapper: Error payload to message
        clock: Source of "now" for default date/time and year roll-over
    """

    service: TripPlannerServicePort
    parser: TripPlanParserPort
    scheduler: SchedulerPort
    geocoder: Optional[GeocoderPort] = None
    map_overlay: Optional[MapOverlayPort] = None
    notifier: Optional[NotifierPort] = None
    form: FormConfig = field(default_factory=lambda: get_config().form)
    service_config: ServiceConfig = field(default_factory=lambda: get_config().service)
    submission_config: SubmissionConfig = field(
        default_factory=lambda: get_config().submission
    )
    error_mapper: ErrorMapper = field(default_factory=ErrorMapper)
    clock: Callable[[], datetime] = datetime.now

    request: TripRequest = field(init=False)
    normalizer: ParameterNormalizer = field(init=False, repr=False)
    geocoding: GeocodingCoordinator = field(init=False, repr=False)
    submission: SubmissionStateMachine = field(init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.request = self._initial_request()
        self.normalizer = ParameterNormalizer(
            today=lambda: self.clock().date(),
            wheelchair_enabled=self.form.show_wheelchair,
        )
        self.geocoding = GeocodingCoordinator(
            request=self.request,
            scheduler=self.scheduler,
            geocoder=self.geocoder,
            map_overlay=self.map_overlay,
        )
        self.submission = SubmissionStateMachine(
            geocoding=self.geocoding,
            serialize=self.request_params,
            service=self.service,
            parser=self.parser,
            scheduler=self.scheduler,
            error_mapper=self.error_mapper,
            notifier=self.notifier,
            config=self.submission_config,
            on_success=self._plan_received,
        )

    def _initial_request(self) -> TripRequest:
        now = self.clock()
        return TripRequest(
            date=format_date(now.date()),
            time=format_time(now),
            mode=self.form.default_mode,
            optimize=self.form.default_optimize,
            max_walk_distance=self.form.default_max_walk_distance,
            wheelchair_accessible=False if self.form.show_wheelchair else None,
            router_id=self.service_config.router_id,
        )

    @property
    def state(self) -> SubmissionState:
        return self.submission.state

    @property
    def last_plan(self) -> Optional[TripPlan]:
        return self.submission.last_plan

    @property
    def last_error(self) -> Optional[str]:
        return self.submission.last_error

    # -- incoming parameters -------------------------------------------------

    def populate(self, params: Mapping[str, Any]) -> None:
        """Merge a parameter bag into the request.

        Prior endpoint coordinates and geocoding status are cleared
        first; other fields only change where the bag has data.
        Endpoints given as text only are sent to the geocoder.
        """
        patch = self.normalizer.normalize(params)

        for endpoint in Endpoint:
            self.geocoding.reset(endpoint)
        patch.apply_to(self.request)

        for endpoint in Endpoint:
            hint = patch.location(endpoint)
            if hint is None:
                continue
            if hint.text is not None:
                self.geocoding.edit(endpoint, hint.text)
            if hint.coordinate is not None and not hint.coordinate.is_blank:
                self.geocoding.resolve(endpoint, hint.coordinate, label=hint.text)
            elif hint.text:
                self.geocoding.dispatch(endpoint)

        self._logger.info(
            "Trip request populated",
            extra={"groups": sorted(patch.resolved_groups)},
        )

    def populate_query_string(self, query: str) -> None:
        """Deep-link entry point: ``fromPlace=...&toPlace=...``."""
        self.populate(parse_query_string(query))

    # -- user edits ------------------------------------------------------------

    def edit_location(self, endpoint: Endpoint, text: Optional[str]) -> None:
        """The user typed into an endpoint field."""
        self.geocoding.edit(endpoint, text)

    def set_location(
        self,
        endpoint: Endpoint,
        text: Optional[str],
        lat: Optional[float],
        lon: Optional[float],
        notify: bool = True,
    ) -> bool:
        """Set an endpoint from text plus coordinate (map click, picked suggestion).

        Returns:
            False, leaving the endpoint untouched, when the coordinate is
            missing, blank or out of range.
        """
        if lat is None or lon is None:
            return False
        try:
            coordinate = GeoLocation(latitude=float(lat), longitude=float(lon))
        except (TypeError, ValueError):
            self._logger.debug(
                "Ignoring invalid coordinate",
                extra={"endpoint": endpoint.value, "lat": lat, "lon": lon},
            )
            return False
        if coordinate.is_blank:
            return False

        label = text if text is not None else coordinate.as_param()
        self.geocoding.resolve(endpoint, coordinate, label=label, notify=notify)
        return True

    def reverse(self) -> None:
        """Swap origin and destination."""
        self.geocoding.swap()

    def clear(self) -> None:
        """Forget both endpoints and any visible message."""
        self.submission.dismiss_messages()
        for endpoint in Endpoint:
            self.geocoding.reset(endpoint, clear_text=True)

    def restore_markers(self) -> None:
        """Put the endpoint markers back on the map (panel re-activated)."""
        self.geocoding.restore_markers()

    # -- submission ------------------------------------------------------------

    def submit(self) -> bool:
        """Start a submission attempt.

        Free text that was never geocoded is dispatched on every check,
        so the attempt waits for it, including text edited mid-attempt.

        Returns:
            False if an attempt is already running.
        """
        return self.submission.submit()

    def _plan_received(self, plan: TripPlan) -> None:
        if self.map_overlay is not None:
            self.map_overlay.clear_trip()

    # -- serialization ---------------------------------------------------------

    def request_params(self) -> Dict[str, str]:
        """The flat parameter set sent to the planning service."""
        request = self.request
        params = {
            "fromPlace": self.geocoding.get(Endpoint.ORIGIN) or "",
            "toPlace": self.geocoding.get(Endpoint.DESTINATION) or "",
            "date": request.date,
            "time": request.time.replace(".", ""),
            "arriveBy": "true" if request.arrive_by else "false",
            "optimize": request.optimize.value,
            "routerId": request.router_id or "",
            "maxWalkDistance": str(request.max_walk_distance),
            "mode": request.mode.value,
        }
        if self.form.show_wheelchair:
            params["wheelchair"] = "true" if request.wheelchair_accessible else "false"
        if request.optimize is OptimizeType.TRIANGLE:
            params.update(request.triangle.as_params())
        return params

    def form_data(self) -> Dict[str, str]:
        """The request as a shareable parameter bag.

        Keys are ones ``populate`` understands, so feeding the result
        back reproduces the same request.
        """
        request = self.request
        data: Dict[str, str] = {
            "date": request.date,
            "time": request.time.replace(".", ""),
            "arr": "true" if request.arrive_by else "false",
            "opt": request.optimize.value,
            "mode": request.mode.value,
            "maxWalkDistance": str(request.max_walk_distance),
        }
        if request.router_id:
            data["routerId"] = request.router_id
        if self.form.show_wheelchair:
            data["wheelchair"] = "true" if request.wheelchair_accessible else "false"
        if request.optimize is OptimizeType.TRIANGLE:
            data.update(request.triangle.as_params())

        for endpoint, place_key, coord_key, prefix in (
            (Endpoint.ORIGIN, "fromPlace", "fromCoord", "from"),
            (Endpoint.DESTINATION, "toPlace", "toCoord", "to"),
        ):
            location = request.location(endpoint)
            place = location.text or self.geocoding.get(endpoint)
            if place:
                data[place_key] = place
            coordinate = self.geocoding.coordinate(endpoint)
            if coordinate is not None:
                data[coord_key] = coordinate.as_param()
                data[f"{prefix}Lat"] = str(coordinate.latitude)
                data[f"{prefix}Lon"] = str(coordinate.longitude)
        return data
