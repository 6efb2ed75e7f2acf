"""Trip-planning service port.

The transport (HTTP method, encoding) belongs to the adapter; the
coordinator hands over a flat parameter mapping and receives the
decoded response payload.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol


class TripPlannerServicePort(Protocol):
    """Port for the remote trip-planning service.

    Implementation: adapters/service/otp_client.py
    """

    def plan(self, params: Mapping[str, str]) -> Any:
        """Request a trip plan.

        Args:
            params: Flat request parameters (fromPlace, toPlace, date...).

        Returns:
            The decoded response payload.

        Raises:
            TripServiceError: On transport failure or an HTTP error status.
                The error carries whatever payload could be decoded.
        """
        ...
