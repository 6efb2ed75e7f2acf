"""Submission state machine.

One attempt runs::

    idle -> validating -> waiting_geocode -> validating ... (polled)
                       -> blocked                          -> idle
                       -> submitting -> succeeded | failed -> idle

Waiting for the geocoder is a bounded, scheduled re-check, not a
blocking wait. The service call runs off the caller's thread through
the scheduler, so at most one request is ever in flight and the
submitting state is observable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..config import SubmissionConfig, get_config
from ..domain.errors import TripServiceError
from ..domain.models import Endpoint, Severity, SubmissionState, TripPlan, UserMessage
from ..messages import ERROR_TITLE, GEOCODER_CONTENT, GEOCODER_TIMEOUT, GEOCODER_TITLE
from ..ports.notifier import NotifierPort
from ..ports.plan_parser import TripPlanParserPort
from ..ports.scheduler import ResultFuture, SchedulerPort, TimerHandle
from ..ports.trip_service import TripPlannerServicePort
from .error_mapper import ErrorMapper
from .geocoding_coordinator import GeocodingCoordinator

TransitionListener = Callable[[SubmissionState, SubmissionState], None]

_LABELS = {Endpoint.ORIGIN: "From", Endpoint.DESTINATION: "To"}


@dataclass
class SubmissionStateMachine:
    """Drives one submission attempt at a time.

    Attributes:
        geocoding: Gate consulted before every submission
        serialize: Produces the request parameters; only called on the
            transition to submitting
        service: Remote trip-planning service
        parser: Turns a successful payload into a TripPlan
        scheduler: Timer source for polling, the call and message dismissal
        error_mapper: Error payload to message
        notifier: Optional user-message surface
        config: Timing settings
        on_success: Called with the plan of a successful attempt
        on_failure: Called with the message of a failed or blocked attempt
    """

    geocoding: GeocodingCoordinator
    serialize: Callable[[], Dict[str, str]]
    service: TripPlannerServicePort
    parser: TripPlanParserPort
    scheduler: SchedulerPort
    error_mapper: ErrorMapper = field(default_factory=ErrorMapper)
    notifier: Optional[NotifierPort] = None
    config: SubmissionConfig = field(default_factory=lambda: get_config().submission)
    on_success: Optional[Callable[[TripPlan], None]] = None
    on_failure: Optional[Callable[[str], None]] = None

    state: SubmissionState = field(default=SubmissionState.IDLE, init=False)
    last_plan: Optional[TripPlan] = field(default=None, init=False)
    last_error: Optional[str] = field(default=None, init=False)

    _listeners: List[TransitionListener] = field(default_factory=list, init=False, repr=False)
    _polls: int = field(default=0, init=False, repr=False)
    _message_timer: Optional[TimerHandle] = field(default=None, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def is_idle(self) -> bool:
        return self.state is SubmissionState.IDLE

    def add_listener(self, listener: TransitionListener) -> None:
        """Register a callback receiving ``(previous, current)`` on every transition."""
        self._listeners.append(listener)

    def _transition(self, new_state: SubmissionState) -> None:
        previous, self.state = self.state, new_state
        self._logger.debug(
            "Submission transition",
            extra={"from_state": previous.value, "to_state": new_state.value},
        )
        for listener in list(self._listeners):
            listener(previous, new_state)

    def submit(self) -> bool:
        """Start an attempt.

        Returns:
            False (and does nothing) if an attempt is already running.
        """
        if not self.is_idle:
            self._logger.debug(
                "Submit ignored, attempt in progress",
                extra={"state": self.state.value},
            )
            return False

        self._polls = 0
        self._validate()
        return True

    def _validate(self) -> None:
        self._transition(SubmissionState.VALIDATING)
        # text typed since the last check has not been sent to the geocoder yet
        self.geocoding.dispatch_pending()

        if self.geocoding.is_pending():
            if self._polls >= self.config.max_geocode_polls:
                self._logger.warning(
                    "Gave up waiting for the geocoder",
                    extra={"polls": self._polls},
                )
                self._block(GEOCODER_TIMEOUT)
                return
            self._polls += 1
            self._transition(SubmissionState.WAITING_GEOCODE)
            self.scheduler.call_later(
                self.config.geocode_poll_interval_seconds, self._validate
            )
            return

        errors = self.geocoding.validation_errors()
        if errors:
            details = "; ".join(
                f"{_LABELS[endpoint]}: {message}" for endpoint, message in errors.items()
            )
            self._block(f"{GEOCODER_CONTENT} ({details})")
            return

        params = self.serialize()
        self.dismiss_messages()
        self._transition(SubmissionState.SUBMITTING)
        self._logger.info(
            "Submitting trip request",
            extra={"fromPlace": params.get("fromPlace"), "toPlace": params.get("toPlace")},
        )
        self.scheduler.run_blocking(
            lambda: self.service.plan(params),
            lambda future: self._finish(params, future),
        )

    def _block(self, text: str) -> None:
        self._transition(SubmissionState.BLOCKED)
        self.last_error = text
        self._announce(
            UserMessage(GEOCODER_TITLE, text, Severity.WARNING),
            self.config.blocked_message_seconds,
        )
        try:
            if self.on_failure is not None:
                self.on_failure(text)
        finally:
            self._transition(SubmissionState.IDLE)

    def _finish(self, params: Mapping[str, str], future: ResultFuture) -> None:
        try:
            try:
                payload = future.result()
            except TripServiceError as e:
                self._logger.warning(
                    "Trip request transport failure",
                    extra={"error": str(e), "status": e.status_code},
                )
                self._fail(e.payload)
                return
            except Exception:
                self._logger.exception("Unexpected error calling the trip planning service")
                self._fail(None)
                return

            try:
                plan = self.parser.parse(payload, params)
            except (KeyError, TypeError, ValueError) as e:
                self._logger.warning("Trip plan parsing failed", extra={"error": str(e)})
                plan = None

            if not plan:
                self._fail(payload)
                return

            self._succeed(plan)
        finally:
            if not self.is_idle:
                self._transition(SubmissionState.IDLE)

    def _succeed(self, plan: TripPlan) -> None:
        self._transition(SubmissionState.SUCCEEDED)
        self.last_plan = plan
        self.last_error = None
        self._logger.info(
            "Trip request succeeded",
            extra={"itineraries": len(plan.itineraries)},
        )
        if self.on_success is not None:
            self.on_success(plan)
        self._transition(SubmissionState.IDLE)

    def _fail(self, payload: Any) -> None:
        message = self.error_mapper.map(payload)
        self._transition(SubmissionState.FAILED)
        self.last_error = message
        self._announce(
            UserMessage(ERROR_TITLE, message, Severity.ERROR),
            self.config.error_message_seconds,
        )
        if self.on_failure is not None:
            self.on_failure(message)
        self._transition(SubmissionState.IDLE)

    def _announce(self, message: UserMessage, seconds: float) -> None:
        self.dismiss_messages()
        if self.notifier is None:
            return
        self.notifier.show(message)
        self._message_timer = self.scheduler.call_later(seconds, self._expire_message)

    def _expire_message(self) -> None:
        self._message_timer = None
        if self.notifier is not None:
            self.notifier.hide()

    def dismiss_messages(self) -> None:
        """Hide any visible message and cancel its dismissal timer."""
        if self._message_timer is not None:
            self._message_timer.cancel()
            self._message_timer = None
            if self.notifier is not None:
                self.notifier.hide()
