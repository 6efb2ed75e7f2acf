"""Deterministic scheduler driven by a virtual clock.

Nothing runs until ``advance`` or ``run_until_idle`` is called, which
makes every intermediate submission state observable.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple


@dataclass
class ManualTimer:
    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """SchedulerPort whose time only moves when told to.

    Attributes:
        now: Current virtual time in seconds
    """

    now: float = 0.0

    _queue: List[Tuple[float, int, ManualTimer]] = field(default_factory=list, repr=False)
    _counter: itertools.count = field(default_factory=itertools.count, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(due=self.now + max(delay, 0.0), callback=callback)
        heapq.heappush(self._queue, (timer.due, next(self._counter), timer))
        return timer

    def run_blocking(
        self,
        func: Callable[[], Any],
        callback: Callable[[Future], None],
    ) -> ManualTimer:
        """Run ``func`` and ``callback`` together on the next zero-delay tick."""

        def run() -> None:
            future: Future = Future()
            try:
                future.set_result(func())
            except Exception as e:
                future.set_exception(e)
            callback(future)

        return self.call_later(0, run)

    @property
    def pending(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def _pop_due(self, until: float) -> bool:
        while self._queue and self._queue[0][0] <= until:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = max(self.now, due)
            timer.callback()
            return True
        return False

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every timer that falls due.

        Returns:
            Number of callbacks run.
        """
        target = self.now + seconds
        ran = 0
        while self._pop_due(target):
            ran += 1
        self.now = target
        return ran

    def run_until_idle(self, max_steps: int = 10_000) -> int:
        """Run timers in due order until none are left.

        Raises:
            RuntimeError: If ``max_steps`` callbacks ran and work remains.
        """
        ran = 0
        while self.pending:
            if ran >= max_steps:
                raise RuntimeError(f"Scheduler still busy after {max_steps} callbacks")
            if self._pop_due(float("inf")):
                ran += 1
        return ran
