"""Maps planning-service error payloads to user-facing messages.

The payload is the decoded service response (or whatever was decoded
from a failed request). It is expected to carry
``{"error": {"id": <code>, "msg": <text>}}`` but may be partial,
malformed or missing entirely; the mapper always returns a non-empty
message.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from ..messages import MESSAGE_CODES, NOT_RESPONDING, SERVER_ERROR_CODE


@dataclass
class ErrorMapper:
    """Turns an error payload into a display message.

    Attributes:
        codes: Code to message table
        default_code: Code whose entry is used for unknown/unparseable codes
        fallback: Message used when the payload cannot be read at all
    """

    codes: Mapping[int, str] = field(default_factory=lambda: dict(MESSAGE_CODES))
    default_code: int = SERVER_ERROR_CODE
    fallback: str = NOT_RESPONDING

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if not self.codes.get(self.default_code):
            raise ValueError(f"No message for default code {self.default_code}")
        if not self.fallback:
            raise ValueError("Fallback message must not be empty")

    def map(self, payload: Any) -> str:
        """Return the message to show for ``payload``."""
        try:
            code, message = self._extract(payload)
        except (KeyError, TypeError, ValueError) as e:
            self._logger.warning(
                "Unreadable error payload",
                extra={"error": str(e), "payload_type": type(payload).__name__},
            )
            return self.fallback

        if message:
            return message

        resolved = self._parse_code(code)
        self._logger.info(
            "Trip request error",
            extra={"code": code, "resolved_code": resolved},
        )
        return self.codes.get(resolved) or self.codes[self.default_code]

    def _extract(self, payload: Any) -> Tuple[Any, Optional[str]]:
        if isinstance(payload, (str, bytes)):
            payload = json.loads(payload)
        if not isinstance(payload, Mapping):
            raise TypeError("Error payload is not an object")

        error = payload["error"]
        if not isinstance(error, Mapping):
            raise TypeError("Error structure is not an object")

        message = error.get("msg")
        if message is not None:
            message = str(message).strip()
        return error.get("id"), message or None

    def _parse_code(self, code: Any) -> int:
        if code is None or isinstance(code, bool):
            return self.default_code
        try:
            return int(str(code).strip())
        except ValueError:
            return self.default_code
