"""Per-endpoint geocoding status and location values.

Tracks whether each endpoint is idle, waiting for the geocoder,
resolved or failed; supplies the value submitted for each endpoint;
and keeps the map overlay's markers in step with the request.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from ..domain.errors import GeocodingError
from ..domain.models import Endpoint, GeocodeState, GeoLocation, TripRequest
from ..messages import GEOCODER_NOT_FOUND, GEOCODER_UNAVAILABLE, LOCATION_MISSING
from ..ports.geocoding import GeocoderPort
from ..ports.map_overlay import MapOverlayPort
from ..ports.scheduler import ResultFuture, SchedulerPort


@dataclass
class EndpointStatus:
    """Geocoding status of one endpoint.

    Attributes:
        state: Current state
        error: Validation message while failed
        token: Identifies the latest dispatch; results carrying another
            token are stale
    """

    state: GeocodeState = GeocodeState.IDLE
    error: Optional[str] = None
    token: int = 0


@dataclass
class GeocodingCoordinator:
    """Geocoding gate for the two trip endpoints.

    The coordinator receives the TripRequest from its owner and mutates
    only the endpoint locations.

    Attributes:
        request: The owner's trip request
        scheduler: Runs geocoder calls outside the caller's stack
        geocoder: Geocoder; None disables client-side geocoding
        map_overlay: Optional map/POI collaborator
    """

    request: TripRequest
    scheduler: SchedulerPort
    geocoder: Optional[GeocoderPort] = None
    map_overlay: Optional[MapOverlayPort] = None

    _status: Dict[Endpoint, EndpointStatus] = field(init=False, repr=False)
    _cached: Dict[Endpoint, GeoLocation] = field(init=False, repr=False)
    _tokens: Iterator[int] = field(init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._status = {endpoint: EndpointStatus() for endpoint in Endpoint}
        self._cached = {}
        self._tokens = itertools.count(1)

    @property
    def enabled(self) -> bool:
        return self.geocoder is not None

    def status(self, endpoint: Endpoint) -> GeocodeState:
        return self._status[endpoint].state

    def error(self, endpoint: Endpoint) -> Optional[str]:
        return self._status[endpoint].error

    def is_pending(self) -> bool:
        return any(s.state is GeocodeState.PENDING for s in self._status.values())

    def _restart(self, endpoint: Endpoint, state: GeocodeState) -> EndpointStatus:
        status = self._status[endpoint]
        status.state = state
        status.error = None
        status.token = next(self._tokens)
        return status

    def needs_geocoding(self, endpoint: Endpoint) -> bool:
        """True for free text that was never sent to the geocoder."""
        location = self.request.location(endpoint)
        return (
            self.enabled
            and bool(location.text)
            and not location.has_real_coordinate
            and self.status(endpoint) is GeocodeState.IDLE
        )

    def dispatch(self, endpoint: Endpoint, text: Optional[str] = None) -> bool:
        """Send the endpoint's text to the geocoder.

        Args:
            endpoint: Which endpoint to resolve.
            text: New text; defaults to the text already in the request.

        Returns:
            True if a lookup was scheduled.
        """
        location = self.request.location(endpoint)
        text = text or location.text
        if not self.enabled or not text:
            return False

        location.text = text
        location.coordinate = None
        token = self._restart(endpoint, GeocodeState.PENDING).token
        self._logger.debug(
            "Geocode dispatched",
            extra={"endpoint": endpoint.value, "query": text, "token": token},
        )
        self.scheduler.call_later(0, lambda: self._run_geocode(token, text))
        return True

    def dispatch_pending(self) -> int:
        """Dispatch every endpoint whose text has not been geocoded yet.

        Returns:
            Number of lookups scheduled.
        """
        return sum(
            1
            for endpoint in Endpoint
            if self.needs_geocoding(endpoint) and self.dispatch(endpoint)
        )

    def _endpoint_for(self, token: int) -> Optional[Endpoint]:
        # the token follows its status through swaps
        for endpoint, status in self._status.items():
            if status.token == token and status.state is GeocodeState.PENDING:
                return endpoint
        return None

    def _run_geocode(self, token: int, text: str) -> None:
        if self._endpoint_for(token) is None:
            self._logger.debug("Discarding stale geocode", extra={"query": text})
            return

        geocoder = self.geocoder
        assert geocoder is not None
        self.scheduler.run_blocking(
            lambda: geocoder.geocode(text),
            lambda future: self._geocode_done(token, text, future),
        )

    def _geocode_done(self, token: int, text: str, future: ResultFuture) -> None:
        outcome: Optional[GeoLocation] = None
        try:
            coordinate = future.result()
        except GeocodingError as e:
            self._logger.warning(
                "Geocoding failed",
                extra={"query": text, "error": str(e)},
            )
            message = GEOCODER_UNAVAILABLE
        except Exception:
            self._logger.exception("Unexpected geocoder error", extra={"query": text})
            message = GEOCODER_UNAVAILABLE
        else:
            if coordinate is not None and not coordinate.is_blank:
                outcome = coordinate
            message = GEOCODER_NOT_FOUND

        # the endpoint may have been edited or swapped while the lookup ran
        endpoint = self._endpoint_for(token)
        if endpoint is None:
            self._logger.debug("Discarding stale geocode", extra={"query": text})
            return

        if outcome is None:
            self.fail(endpoint, message)
        else:
            self.resolve(endpoint, outcome, label=text)

    def resolve(
        self,
        endpoint: Endpoint,
        coordinate: GeoLocation,
        label: Optional[str] = None,
        notify: bool = True,
    ) -> None:
        """Mark an endpoint resolved with ``coordinate``.

        Args:
            endpoint: Endpoint to resolve.
            coordinate: A real (non-blank) coordinate.
            label: Display text to keep alongside the coordinate.
            notify: Whether to move the map marker.

        Raises:
            ValueError: If ``coordinate`` is the blank placeholder.
        """
        if coordinate.is_blank:
            raise ValueError("The blank coordinate cannot resolve an endpoint")

        location = self.request.location(endpoint)
        location.coordinate = coordinate
        if label is not None:
            location.text = label
        self._restart(endpoint, GeocodeState.RESOLVED)
        self._cached[endpoint] = coordinate

        self._logger.info(
            "Endpoint resolved",
            extra={
                "endpoint": endpoint.value,
                "lat": coordinate.latitude,
                "lon": coordinate.longitude,
            },
        )
        if notify:
            self._notify(endpoint)

    def fail(self, endpoint: Endpoint, message: Optional[str] = None) -> None:
        """Mark an endpoint failed; it blocks submission until edited."""
        self.request.location(endpoint).coordinate = None
        status = self._restart(endpoint, GeocodeState.FAILED)
        status.error = message or GEOCODER_NOT_FOUND
        self._logger.info(
            "Endpoint geocoding failed",
            extra={"endpoint": endpoint.value, "error": status.error},
        )

    def edit(self, endpoint: Endpoint, text: Optional[str]) -> None:
        """The user changed the endpoint text: forget its coordinate and status."""
        location = self.request.location(endpoint)
        location.text = text or None
        location.coordinate = None
        self._restart(endpoint, GeocodeState.IDLE)

    def reset(self, endpoint: Endpoint, clear_text: bool = False) -> None:
        """Drop the endpoint's coordinate and status (and text, if asked)."""
        location = self.request.location(endpoint)
        location.coordinate = None
        if clear_text:
            location.text = None
            self._cached.pop(endpoint, None)
        self._restart(endpoint, GeocodeState.IDLE)

    def get(self, endpoint: Endpoint) -> Optional[str]:
        """The value to submit for an endpoint.

        A real coordinate first, then the free text, then the coordinate
        of an earlier successful geocode.
        """
        location = self.request.location(endpoint)
        if location.has_real_coordinate:
            assert location.coordinate is not None
            return location.coordinate.as_param()
        if location.text:
            return location.text
        cached = self._cached.get(endpoint)
        if cached is not None:
            return cached.as_param()
        return None

    def coordinate(self, endpoint: Endpoint) -> Optional[GeoLocation]:
        """Best known real coordinate of an endpoint, if any."""
        location = self.request.location(endpoint)
        if location.has_real_coordinate:
            return location.coordinate
        if not location.text:
            return self._cached.get(endpoint)
        return None

    def validation_errors(self) -> Dict[Endpoint, str]:
        """Endpoints that must be fixed before submission, with a message."""
        errors: Dict[Endpoint, str] = {}
        for endpoint in Endpoint:
            status = self._status[endpoint]
            if status.state is GeocodeState.FAILED:
                errors[endpoint] = status.error or GEOCODER_NOT_FOUND
            elif self.get(endpoint) is None:
                errors[endpoint] = LOCATION_MISSING
        return errors

    def swap(self) -> None:
        """Exchange origin and destination in one step.

        Text, coordinates, statuses and cached coordinates move together;
        the map only gets a single reverse_styles() call.
        """
        origin, destination = self.request.origin, self.request.destination
        self.request.origin, self.request.destination = destination, origin

        self._status = {
            Endpoint.ORIGIN: self._status[Endpoint.DESTINATION],
            Endpoint.DESTINATION: self._status[Endpoint.ORIGIN],
        }
        self._cached = {
            endpoint.other: coordinate for endpoint, coordinate in self._cached.items()
        }

        if self.map_overlay is not None:
            self.map_overlay.reverse_styles()
        self._logger.debug("Endpoints reversed")

    def restore_markers(self) -> None:
        """Re-send every real endpoint coordinate to the map."""
        for endpoint in Endpoint:
            if self.request.location(endpoint).has_real_coordinate:
                self._notify(endpoint)

    def _notify(self, endpoint: Endpoint) -> None:
        if self.map_overlay is None:
            return
        location = self.request.location(endpoint)
        if location.coordinate is None or location.coordinate.is_blank:
            return
        self.map_overlay.set_endpoint(endpoint, location.coordinate, location.text)
