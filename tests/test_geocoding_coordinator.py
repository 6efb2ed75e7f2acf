"""Tests for the per-endpoint geocoding gate."""

import pytest

from conftest import FakeGeocoder, RecordingOverlay

from trip_request.adapters.scheduling import ManualScheduler
from trip_request.domain.errors import GeocodingError
from trip_request.domain.models import Endpoint, GeocodeState, GeoLocation, TripRequest
from trip_request.messages import GEOCODER_NOT_FOUND, GEOCODER_UNAVAILABLE, LOCATION_MISSING
from trip_request.services.geocoding_coordinator import GeocodingCoordinator

PIONEER = GeoLocation(45.5189, -122.6793)
AIRPORT = GeoLocation(45.5898, -122.5951)

ORIGIN = Endpoint.ORIGIN
DESTINATION = Endpoint.DESTINATION


@pytest.fixture
def geocoder():
    return FakeGeocoder(
        {
            "Pioneer Square": PIONEER,
            "Airport": AIRPORT,
            "Nowhere": None,
            "Offline": GeocodingError("down", query="Offline"),
            "Broken": RuntimeError("boom"),
        }
    )


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def overlay():
    return RecordingOverlay()


@pytest.fixture
def gate(scheduler, geocoder, overlay):
    return GeocodingCoordinator(
        request=TripRequest(), scheduler=scheduler, geocoder=geocoder, map_overlay=overlay
    )


class TestDispatch:
    def test_resolves_asynchronously(self, gate, scheduler, overlay):
        assert gate.dispatch(ORIGIN, "Pioneer Square")
        assert gate.status(ORIGIN) is GeocodeState.PENDING
        assert gate.is_pending()

        scheduler.run_until_idle()

        assert gate.status(ORIGIN) is GeocodeState.RESOLVED
        assert gate.request.origin.coordinate == PIONEER
        assert gate.request.origin.text == "Pioneer Square"
        assert overlay.markers[ORIGIN] == PIONEER
        assert not gate.is_pending()

    def test_not_found(self, gate, scheduler):
        gate.dispatch(DESTINATION, "Nowhere")
        scheduler.run_until_idle()

        assert gate.status(DESTINATION) is GeocodeState.FAILED
        assert gate.error(DESTINATION) == GEOCODER_NOT_FOUND
        assert gate.validation_errors()[DESTINATION] == GEOCODER_NOT_FOUND

    def test_geocoder_error(self, gate, scheduler):
        gate.dispatch(ORIGIN, "Offline")
        scheduler.run_until_idle()

        assert gate.status(ORIGIN) is GeocodeState.FAILED
        assert gate.error(ORIGIN) == GEOCODER_UNAVAILABLE

    def test_unexpected_geocoder_exception_fails_endpoint(self, gate, scheduler):
        gate.dispatch(ORIGIN, "Broken")
        scheduler.run_until_idle()

        assert not gate.is_pending()
        assert gate.status(ORIGIN) is GeocodeState.FAILED
        assert gate.error(ORIGIN) == GEOCODER_UNAVAILABLE

    def test_disabled_without_geocoder(self, scheduler):
        gate = GeocodingCoordinator(request=TripRequest(), scheduler=scheduler)
        gate.edit(ORIGIN, "Pioneer Square")

        assert not gate.enabled
        assert not gate.needs_geocoding(ORIGIN)
        assert not gate.dispatch(ORIGIN)
        assert scheduler.pending == 0

    def test_needs_geocoding_only_for_untouched_text(self, gate, scheduler):
        gate.edit(ORIGIN, "Pioneer Square")
        assert gate.needs_geocoding(ORIGIN)
        assert not gate.needs_geocoding(DESTINATION)

        gate.dispatch(ORIGIN)
        assert not gate.needs_geocoding(ORIGIN)

    def test_dispatch_pending_sends_only_untouched_text(self, gate, scheduler, geocoder):
        gate.edit(ORIGIN, "Pioneer Square")
        gate.resolve(DESTINATION, AIRPORT, label="Airport")

        assert gate.dispatch_pending() == 1
        assert gate.dispatch_pending() == 0
        scheduler.run_until_idle()

        assert geocoder.calls == ["Pioneer Square"]
        assert gate.request.origin.coordinate == PIONEER


class TestStaleResults:
    def test_edit_discards_pending_result(self, gate, scheduler, geocoder):
        gate.dispatch(ORIGIN, "Pioneer Square")
        gate.edit(ORIGIN, "Somewhere else")
        scheduler.run_until_idle()

        assert geocoder.calls == []
        assert gate.status(ORIGIN) is GeocodeState.IDLE
        assert gate.request.origin.text == "Somewhere else"
        assert gate.request.origin.coordinate is None

    def test_latest_dispatch_wins(self, gate, scheduler, geocoder):
        gate.dispatch(ORIGIN, "Pioneer Square")
        gate.dispatch(ORIGIN, "Airport")
        scheduler.run_until_idle()

        assert geocoder.calls == ["Airport"]
        assert gate.request.origin.coordinate == AIRPORT

    def test_result_follows_swap(self, gate, scheduler):
        gate.dispatch(ORIGIN, "Pioneer Square")
        gate.swap()
        scheduler.run_until_idle()

        assert gate.status(DESTINATION) is GeocodeState.RESOLVED
        assert gate.request.destination.coordinate == PIONEER
        assert gate.request.origin.coordinate is None


class TestResolve:
    def test_blank_coordinate_is_rejected(self, gate):
        with pytest.raises(ValueError):
            gate.resolve(ORIGIN, GeoLocation(0.0, 0.0))

    def test_notify_false_leaves_map_alone(self, gate, overlay):
        gate.resolve(ORIGIN, PIONEER, label="Pioneer Square", notify=False)

        assert gate.status(ORIGIN) is GeocodeState.RESOLVED
        assert overlay.calls == []

    def test_fail_then_edit_clears_error(self, gate):
        gate.fail(ORIGIN)
        assert gate.error(ORIGIN) == GEOCODER_NOT_FOUND

        gate.edit(ORIGIN, "Pioneer Square")
        assert gate.status(ORIGIN) is GeocodeState.IDLE
        assert gate.error(ORIGIN) is None


class TestGet:
    def test_real_coordinate_first(self, gate):
        gate.resolve(ORIGIN, PIONEER, label="Pioneer Square")
        assert gate.get(ORIGIN) == PIONEER.as_param()

    def test_text_when_no_coordinate(self, gate):
        gate.edit(ORIGIN, "Pioneer Square")
        assert gate.get(ORIGIN) == "Pioneer Square"

    def test_cached_coordinate_when_field_is_empty(self, gate):
        gate.resolve(ORIGIN, PIONEER)
        gate.reset(ORIGIN)

        assert gate.request.origin.text is None
        assert gate.get(ORIGIN) == PIONEER.as_param()
        assert gate.coordinate(ORIGIN) == PIONEER

    def test_reset_with_text_forgets_cache(self, gate):
        gate.resolve(ORIGIN, PIONEER, label="Pioneer Square")
        gate.reset(ORIGIN, clear_text=True)

        assert gate.get(ORIGIN) is None
        assert gate.validation_errors() == {ORIGIN: LOCATION_MISSING, DESTINATION: LOCATION_MISSING}


class TestSwap:
    def test_swaps_everything_and_restyles_once(self, gate, overlay):
        gate.resolve(ORIGIN, PIONEER, label="Pioneer Square")
        gate.fail(DESTINATION)
        overlay.calls.clear()

        gate.swap()

        assert gate.request.destination.coordinate == PIONEER
        assert gate.status(DESTINATION) is GeocodeState.RESOLVED
        assert gate.status(ORIGIN) is GeocodeState.FAILED
        assert overlay.calls == [("reverse_styles",)]

    def test_double_swap_is_identity(self, gate):
        gate.resolve(ORIGIN, PIONEER, label="Pioneer Square")
        gate.edit(DESTINATION, "Airport")

        gate.swap()
        gate.swap()

        assert gate.get(ORIGIN) == PIONEER.as_param()
        assert gate.get(DESTINATION) == "Airport"


def test_restore_markers(gate, overlay):
    gate.resolve(ORIGIN, PIONEER, notify=False)
    gate.edit(DESTINATION, "Airport")

    gate.restore_markers()

    assert overlay.calls == [("set_endpoint", ORIGIN)]
