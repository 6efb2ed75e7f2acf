"""Default (English) user-facing strings.

Localization lookup is an external concern; these are the fallbacks
the coordinator ships with. Codes follow the planning service's
``error.id`` values.
"""

from __future__ import annotations

from typing import Dict

SERVER_ERROR_CODE = 500

MESSAGE_CODES: Dict[int, str] = {
    200: "Plan OK.",
    340: "The 'From' location is ambiguous. Please pick one of the suggested places.",
    350: "The 'To' location is ambiguous. Please pick one of the suggested places.",
    360: "Both the 'From' and 'To' locations are ambiguous. Please pick suggested places.",
    370: "All of the triangle values must be set.",
    371: "The triangle values must sum to 1.",
    372: "The triangle values must be between 0 and 1.",
    373: "The triangle values can only be used with the bicycle mode.",
    400: "Trip is out of the service area.",
    404: (
        "Trip not possible. Your trip may be outside the service area, "
        "or the origin and destination may be too close together."
    ),
    406: (
        "No transit times available. The date may be in the past or too far "
        "in the future, or there may not be transit service at the time you chose."
    ),
    408: "The trip planner request timed out.",
    409: "The origin is within walking distance of the destination.",
    413: "Invalid trip request parameter.",
    440: "The 'From' location was not found. Please try a different address or intersection.",
    450: "The 'To' location was not found. Please try a different address or intersection.",
    460: "Neither the 'From' nor the 'To' location was found.",
    470: "The 'From' or 'To' location is not wheelchair accessible.",
    SERVER_ERROR_CODE: "The trip planner encountered a server error. Please try again.",
}

NOT_RESPONDING = (
    "The trip planner is currently not responding. "
    "Please wait a few minutes and try again."
)

ERROR_TITLE = "Trip planner error"

GEOCODER_TITLE = "Location problem"
GEOCODER_CONTENT = "Please correct the highlighted locations before planning your trip."
GEOCODER_NOT_FOUND = "We could not find this location."
GEOCODER_UNAVAILABLE = "The location service is unavailable. Please try again."
GEOCODER_TIMEOUT = "Looking up your locations is taking too long. Please try again."
LOCATION_MISSING = "Please enter a location."
