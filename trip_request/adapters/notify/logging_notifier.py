"""Notifier that writes user messages to the log."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from ...domain.models import Severity, UserMessage

_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass
class LoggingNotifier:
    """NotifierPort that logs messages and remembers the visible one.

    Attributes:
        current: The message currently shown, if any
        history_size: How many recent messages ``history`` keeps
        history: Most recent messages shown, oldest first
    """

    current: Optional[UserMessage] = None
    history_size: int = 50
    history: Deque[UserMessage] = field(init=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.history = deque(maxlen=self.history_size)

    def show(self, message: UserMessage) -> None:
        self.current = message
        self.history.append(message)
        self._logger.log(
            _LEVELS[message.severity],
            "%s: %s",
            message.title,
            message.text,
        )

    def hide(self) -> None:
        if self.current is not None:
            self._logger.debug("Message dismissed", extra={"title": self.current.title})
        self.current = None
