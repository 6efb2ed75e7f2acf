"""Scheduler adapters - Implementations of SchedulerPort.

Available implementations:
- AsyncioScheduler: timers on an asyncio event loop
- ManualScheduler: virtual clock advanced explicitly (tests, replays)
"""

from .asyncio_scheduler import AsyncioScheduler
from .manual_scheduler import ManualScheduler

__all__ = ["AsyncioScheduler", "ManualScheduler"]
