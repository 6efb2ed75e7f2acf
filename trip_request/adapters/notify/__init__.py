"""Notifier adapters - Implementations of NotifierPort."""

from .logging_notifier import LoggingNotifier

__all__ = ["LoggingNotifier"]
