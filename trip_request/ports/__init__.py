"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the coordinator core and its
external collaborators, following the Hexagonal Architecture pattern.
"""

from .cache import CachePort
from .geocoding import GeocoderPort
from .map_overlay import MapOverlayPort
from .notifier import NotifierPort
from .plan_parser import TripPlanParserPort
from .scheduler import ResultFuture, SchedulerPort, TimerHandle
from .trip_service import TripPlannerServicePort

__all__ = [
    # Geocoding
    "GeocoderPort",
    # Planning service
    "TripPlannerServicePort",
    "TripPlanParserPort",
    # Map
    "MapOverlayPort",
    # Timing and messages
    "SchedulerPort",
    "TimerHandle",
    "ResultFuture",
    "NotifierPort",
    # Cache
    "CachePort",
]
