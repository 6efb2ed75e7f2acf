"""Top-level package for the trip request coordinator.

Normalizes trip parameters from links, saved sessions and form edits
into one trip request, waits for free-text locations to be geocoded,
submits the request to a trip-planning service and turns its answer
into a plan or a user-facing error message.
"""

from .services import TripRequestCoordinator

__all__ = ["TripRequestCoordinator"]
