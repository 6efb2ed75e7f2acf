"""Domain layer - Core models and errors.

This module contains the trip request model, its value objects and
the typed errors used throughout the application. No external
dependencies.
"""

from .errors import (
    GeocodingError,
    ParameterError,
    RenderingError,
    TripRequestError,
    TripServiceError,
)
from .models import (
    BLANK_LAT_LON,
    TRIANGLE_TOTAL,
    Endpoint,
    GeocodeState,
    GeoLocation,
    Itinerary,
    Leg,
    Location,
    OptimizeType,
    Severity,
    SubmissionState,
    TravelMode,
    TriangleWeights,
    TripPlan,
    TripRequest,
    UserMessage,
)

__all__ = [
    # Models
    "BLANK_LAT_LON",
    "TRIANGLE_TOTAL",
    "Endpoint",
    "GeocodeState",
    "GeoLocation",
    "Itinerary",
    "Leg",
    "Location",
    "OptimizeType",
    "Severity",
    "SubmissionState",
    "TravelMode",
    "TriangleWeights",
    "TripPlan",
    "TripRequest",
    "UserMessage",
    # Errors
    "TripRequestError",
    "ParameterError",
    "GeocodingError",
    "TripServiceError",
    "RenderingError",
]
