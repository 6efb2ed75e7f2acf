"""Typed domain errors for the trip request coordinator.

All errors inherit from TripRequestError and can optionally wrap a
root cause exception for debugging. Normalization errors never leave
the normalizer; the others are raised by adapters and handled by the
submission state machine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TripRequestError(Exception):
    """Base error for the trip request domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ParameterError(TripRequestError):
    """An incoming parameter could not be interpreted.

    Raised by individual normalizer rules and absorbed by the
    normalizer itself.

    Attributes:
        value: The raw value
    """

    value: Optional[str] = None


@dataclass
class GeocodingError(TripRequestError):
    """Failed to geocode a location.

    Attributes:
        query: The location query that failed
        is_rate_limited: Whether the failure was due to rate limiting
    """

    query: str = ""
    is_rate_limited: bool = False


@dataclass
class TripServiceError(TripRequestError):
    """The trip-planning service could not be reached or answered with an error.

    Attributes:
        status_code: HTTP status code, if a response was received
        payload: Decoded response body, if any (handed to the error mapper)
    """

    status_code: Optional[int] = None
    payload: Any = field(default=None, repr=False)


@dataclass
class RenderingError(TripRequestError):
    """Map overlay rendering failed.

    Attributes:
        output_path: Path where rendering was attempted
        renderer_type: Type of renderer that failed
    """

    output_path: Optional[str] = None
    renderer_type: str = ""
