"""Scheduler port - Timer abstraction for cooperative, single-threaded work.

Every asynchronous step of a submission (geocode polling, the service
call, message auto-dismiss) goes through the scheduler so the same
code runs on an asyncio loop or on a manual clock in tests. Blocking
I/O (geocoder, planning service) goes through ``run_blocking`` so it
never stalls the timers.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> Any:
        ...


class ResultFuture(Protocol):
    """The finished call handed to a ``run_blocking`` callback."""

    def result(self) -> Any:
        """Return the call's value, or raise the exception it raised."""
        ...


class SchedulerPort(Protocol):
    """Port for deferred callbacks.

    Implementations:
    - adapters/scheduling/asyncio_scheduler.py (AsyncioScheduler) - Production
    - adapters/scheduling/manual_scheduler.py (ManualScheduler) - Testing
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` after ``delay`` seconds on the scheduler's thread."""
        ...

    def run_blocking(
        self,
        func: Callable[[], Any],
        callback: Callable[[ResultFuture], None],
    ) -> TimerHandle:
        """Run ``func`` off the scheduler's thread.

        ``callback`` receives the finished future back on the scheduler's
        thread; calling ``result()`` on it re-raises any exception.
        """
        ...
