"""Notifier port - Surface for user-facing messages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import UserMessage


class NotifierPort(Protocol):
    """Shows and hides the single ephemeral message box.

    Implementation: adapters/notify/logging_notifier.py
    """

    def show(self, message: UserMessage) -> None:
        ...

    def hide(self) -> None:
        ...
