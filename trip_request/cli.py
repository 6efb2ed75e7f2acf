"""Command-line entry point.

Populates a trip request from a deep-link query string, submits it and
prints the itineraries (or the error) once the attempt settles::

    trip-request "fromPlace=45.52,-122.68&toPlace=45.50,-122.65&mode=WALK"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .config import AppConfig, get_config
from .container import Container
from .domain.errors import RenderingError
from .domain.models import Itinerary, SubmissionState, TripPlan
from .logging_setup import configure_logging
from .ports.map_overlay import MapOverlayPort
from .services import TripRequestCoordinator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trip-request",
        description="Submit a trip request built from a deep-link query string.",
    )
    parser.add_argument("query", help="Query string, e.g. 'fromPlace=...&toPlace=...'")
    parser.add_argument(
        "--no-geocode",
        action="store_true",
        help="Disable client-side geocoding of free-text endpoints",
    )
    parser.add_argument(
        "--map",
        type=Path,
        metavar="OUTPUT.html",
        help="Render the endpoint markers to an HTML map",
    )
    parser.add_argument("--service-url", help="Trip-planning service URL")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    return parser


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.no_geocode:
        config.geocoding.enabled = False
    if args.service_url:
        config.service.url = args.service_url
    if args.log_level:
        config.observability.level = args.log_level
    return config


def _format_time(epoch_ms: Optional[int]) -> str:
    if epoch_ms is None:
        return "?"
    return datetime.fromtimestamp(epoch_ms / 1000).strftime("%H:%M")


def format_itinerary(index: int, itinerary: Itinerary) -> str:
    """Human-readable summary of one itinerary."""
    lines = [
        f"Option {index}: {_format_time(itinerary.start_time)} -> "
        f"{_format_time(itinerary.end_time)}, "
        f"{itinerary.duration_s / 60:.0f} min, "
        f"{itinerary.transfers} transfer(s), "
        f"walk {itinerary.walk_distance_m:.0f} m"
    ]
    for leg in itinerary.legs:
        route = f" {leg.route}" if leg.route else ""
        lines.append(f"   {leg.mode}{route}: {leg.from_name} -> {leg.to_name}")
    return "\n".join(lines)


def format_plan(plan: TripPlan) -> str:
    return "\n".join(
        format_itinerary(i, itinerary)
        for i, itinerary in enumerate(plan.itineraries, start=1)
    )


async def run(coordinator: TripRequestCoordinator, query: str) -> bool:
    """Populate, submit and wait for the attempt to return to idle.

    Returns:
        True if the attempt produced a plan.
    """
    loop = asyncio.get_running_loop()
    settled: asyncio.Future[None] = loop.create_future()

    def on_transition(previous: SubmissionState, current: SubmissionState) -> None:
        if current is SubmissionState.IDLE and not settled.done():
            settled.set_result(None)

    coordinator.populate_query_string(query)
    coordinator.submission.add_listener(on_transition)
    if not coordinator.submit():
        return False

    await settled
    return coordinator.last_plan is not None and coordinator.last_error is None


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = _apply_overrides(get_config().model_copy(deep=True), args)
    configure_logging(config.observability)

    container = Container.create_default(config)
    coordinator = container.resolve(TripRequestCoordinator)

    succeeded = asyncio.run(run(coordinator, args.query))

    if succeeded:
        assert coordinator.last_plan is not None
        print(format_plan(coordinator.last_plan))
    else:
        print(f"Error: {coordinator.last_error}", file=sys.stderr)

    if args.map is not None:
        overlay = container.resolve(MapOverlayPort)
        try:
            overlay.render(args.map)
        except RenderingError as e:
            logger.error("Could not render map", extra={"error": str(e)})
            return 1
        print(f"Map written to {args.map}")

    return 0 if succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
