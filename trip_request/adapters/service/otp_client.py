"""HTTP client for an OpenTripPlanner-style ``/plan`` endpoint.

The request is a plain GET with the flat trip parameters; the answer is
JSON. Planning errors usually come back as HTTP 200 with an ``error``
object, which is left to the plan parser and error mapper; transport
failures and error statuses raise TripServiceError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests

from ...config import ServiceConfig, get_config
from ...domain.errors import TripServiceError


@dataclass
class OTPServiceClient:
    """Trip-planning service client implementing TripPlannerServicePort.

    Attributes:
        config: Service configuration (URL, timeout)
        session: HTTP session, injectable for tests
    """

    config: ServiceConfig = field(default_factory=lambda: get_config().service)
    session: Optional[requests.Session] = None

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if self.session is None:
            self.session = requests.Session()

    def plan(self, params: Mapping[str, str]) -> Any:
        """Send a planning request and return the decoded JSON payload.

        Raises:
            TripServiceError: On connection problems, error statuses or
                a body that is not JSON.
        """
        assert self.session is not None
        self._logger.info(
            "Requesting trip plan",
            extra={
                "url": self.config.url,
                "fromPlace": params.get("fromPlace"),
                "toPlace": params.get("toPlace"),
            },
        )

        try:
            response = self.session.get(
                self.config.url,
                params=dict(params),
                headers={"Accept": "application/json"},
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            self._logger.warning(
                "Trip planning service unreachable",
                extra={"url": self.config.url, "error": str(e)},
            )
            raise TripServiceError("Trip planning service unreachable", cause=e)

        payload = self._decode(response)

        if response.status_code >= 400:
            self._logger.warning(
                "Trip planning service returned an error status",
                extra={"status": response.status_code},
            )
            raise TripServiceError(
                f"Trip planning service returned HTTP {response.status_code}",
                status_code=response.status_code,
                payload=payload,
            )

        if payload is None:
            raise TripServiceError(
                "Trip planning service returned a non-JSON body",
                status_code=response.status_code,
            )

        self._logger.debug(
            "Trip plan response received",
            extra={"status": response.status_code},
        )
        return payload

    def _decode(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            self._logger.debug(
                "Response body is not JSON",
                extra={"status": response.status_code},
            )
            return None
