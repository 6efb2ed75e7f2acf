"""Asyncio-backed scheduler."""

from __future__ import annotations

import asyncio
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class AsyncioScheduler:
    """SchedulerPort on top of ``loop.call_later`` and ``run_in_executor``.

    When no loop is given, the running loop is looked up on each call,
    so the scheduler can be built before ``asyncio.run`` starts.

    Attributes:
        loop: Event loop to use (default: the running loop)
        executor: Executor for blocking calls (default: the loop's)
    """

    loop: Optional[asyncio.AbstractEventLoop] = None
    executor: Optional[Executor] = None

    def _loop(self) -> asyncio.AbstractEventLoop:
        return self.loop or asyncio.get_running_loop()

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        return self._loop().call_later(max(delay, 0.0), callback)

    def run_blocking(
        self,
        func: Callable[[], Any],
        callback: Callable[[asyncio.Future[Any]], None],
    ) -> asyncio.Future[Any]:
        future = self._loop().run_in_executor(self.executor, func)
        future.add_done_callback(callback)
        return future
