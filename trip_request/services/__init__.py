"""Services layer - Trip request coordination.

Available services:
- TripRequestCoordinator: Owns the trip request; main entry point
- ParameterNormalizer: Parameter bag to request patch
- GeocodingCoordinator: Per-endpoint geocoding status and gating
- SubmissionStateMachine: Validation, geocode wait, service call
- ErrorMapper: Error payload to user message
"""

from .coordinator import TripRequestCoordinator
from .error_mapper import ErrorMapper
from .geocoding_coordinator import GeocodingCoordinator
from .normalizer import ParameterNormalizer, TripRequestPatch
from .submission import SubmissionStateMachine

__all__ = [
    "TripRequestCoordinator",
    "ParameterNormalizer",
    "TripRequestPatch",
    "GeocodingCoordinator",
    "SubmissionStateMachine",
    "ErrorMapper",
]
