"""Shared fixtures: fake ports and a coordinator driven by a virtual clock."""

import os
import sys
from datetime import datetime

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from trip_request.adapters.notify import LoggingNotifier
from trip_request.adapters.parsing import ItineraryParser
from trip_request.adapters.scheduling import ManualScheduler
from trip_request.config import FormConfig, ServiceConfig, SubmissionConfig
from trip_request.services import TripRequestCoordinator

NOW = datetime(2024, 6, 15, 14, 30)


class FakeGeocoder:
    """GeocoderPort answering from a dict; exceptions in the dict are raised."""

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.calls = []

    def geocode(self, query):
        self.calls.append(query)
        result = self.results.get(query)
        if isinstance(result, Exception):
            raise result
        return result


class FakeService:
    """TripPlannerServicePort replaying canned responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def plan(self, params):
        self.calls.append(dict(params))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class RecordingOverlay:
    """MapOverlayPort remembering every call."""

    def __init__(self):
        self.markers = {}
        self.calls = []

    def set_endpoint(self, endpoint, location, label=None):
        self.markers[endpoint] = location
        self.calls.append(("set_endpoint", endpoint))

    def reverse_styles(self):
        self.calls.append(("reverse_styles",))

    def clear_trip(self):
        self.calls.append(("clear_trip",))


def plan_payload():
    return {
        "plan": {
            "itineraries": [
                {
                    "duration": 1260,
                    "startTime": 1718487000000,
                    "endTime": 1718488260000,
                    "walkDistance": 410.5,
                    "transfers": 1,
                    "legs": [
                        {
                            "mode": "WALK",
                            "from": {"name": "Origin"},
                            "to": {"name": "SW 5th & Oak"},
                            "distance": 210.0,
                            "duration": 180,
                        },
                        {
                            "mode": "BUS",
                            "route": "12",
                            "from": {"name": "SW 5th & Oak"},
                            "to": {"name": "Destination"},
                            "distance": 4200.0,
                            "duration": 1080,
                        },
                    ],
                }
            ]
        }
    }


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def notifier():
    return LoggingNotifier()


@pytest.fixture
def overlay():
    return RecordingOverlay()


@pytest.fixture
def make_coordinator(scheduler, notifier, overlay):
    """Build a coordinator; keyword arguments override the defaults."""

    def factory(service=None, geocoder=None, **kwargs):
        options = dict(
            service=service or FakeService(),
            parser=ItineraryParser(),
            scheduler=scheduler,
            geocoder=geocoder,
            map_overlay=overlay,
            notifier=notifier,
            form=FormConfig(show_wheelchair=True),
            service_config=ServiceConfig(router_id=None),
            submission_config=SubmissionConfig(),
            clock=lambda: NOW,
        )
        options.update(kwargs)
        return TripRequestCoordinator(**options)

    return factory
