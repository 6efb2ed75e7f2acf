"""Tests for the command-line entry point."""

import asyncio
import logging
from unittest.mock import patch

import pytest

from conftest import FakeService, plan_payload

from trip_request.adapters.parsing import ItineraryParser
from trip_request.adapters.scheduling import AsyncioScheduler
from trip_request.adapters.service import OTPServiceClient
from trip_request.cli import build_parser, format_plan, main, run
from trip_request.config import reset_config
from trip_request.services import TripRequestCoordinator

QUERY = "fromPlace=45.52,-122.68&toPlace=45.5898,-122.5951&mode=TRANSIT,WALK"


@pytest.fixture(autouse=True)
def isolated(monkeypatch):
    monkeypatch.setenv("TRIP_GEO_ENABLED", "false")
    reset_config()
    yield
    reset_config()
    logger = logging.getLogger("trip_request")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_parser_options():
    args = build_parser().parse_args(
        ["fromPlace=a", "--no-geocode", "--map", "out.html", "--log-level", "DEBUG"]
    )
    assert args.query == "fromPlace=a"
    assert args.no_geocode
    assert str(args.map) == "out.html"
    assert args.log_level == "DEBUG"


def test_format_plan():
    plan = ItineraryParser().parse(plan_payload(), {})
    text = format_plan(plan)

    assert text.startswith("Option 1:")
    assert "21 min" in text
    assert "BUS 12: SW 5th & Oak -> Destination" in text


def test_run_on_asyncio_loop():
    service = FakeService(plan_payload())
    coordinator = TripRequestCoordinator(
        service=service, parser=ItineraryParser(), scheduler=AsyncioScheduler()
    )

    assert asyncio.run(run(coordinator, QUERY)) is True
    assert service.calls[0]["toPlace"] == "45.5898,-122.5951"


def test_run_reports_blocked_attempt():
    coordinator = TripRequestCoordinator(
        service=FakeService(), parser=ItineraryParser(), scheduler=AsyncioScheduler()
    )

    assert asyncio.run(run(coordinator, "toPlace=45.5,-122.6")) is False
    assert coordinator.last_error is not None


def test_main_success_renders_map(tmp_path, capsys):
    output = tmp_path / "trip.html"
    with patch.object(OTPServiceClient, "plan", return_value=plan_payload()):
        code = main([QUERY, "--no-geocode", "--map", str(output)])

    assert code == 0
    assert output.exists()
    assert "Option 1" in capsys.readouterr().out


def test_main_failure_exit_code(capsys):
    with patch.object(OTPServiceClient, "plan", return_value={"error": {"id": 404}}):
        code = main([QUERY, "--no-geocode"])

    assert code == 1
    assert "Error:" in capsys.readouterr().err
