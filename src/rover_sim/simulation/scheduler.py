"""
Cancellable repeating callbacks on an asyncio event loop.

The simulation runs two periodic tasks, a fixed-rate control task and a
display-rate render task. Both are plain callbacks scheduled with
loop.call_at(), so they execute on the loop's thread one at a time and never
preempt each other. A callback that overruns its period delays the next
invocation instead of overlapping it.
"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RepeatingTask:
    """
    Invokes a callback every `interval` seconds until cancelled.

    The callback receives the loop time of the invocation. Cancellation only
    prevents future invocations; a callback that is already running finishes
    normally.

    Attributes:
        interval: Period between nominal invocation times [s]
        name: Label used in log messages
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float,
                 callback: Callable[[float], None], name: str = "task"):
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")

        self.interval = interval
        self.name = name
        self._loop = loop
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._next_time = 0.0
        self._cancelled = True

    @property
    def active(self) -> bool:
        return not self._cancelled

    def start(self, delay: Optional[float] = None) -> None:
        """Schedule the first invocation `delay` seconds from now (default: one interval)."""
        if self.active:
            raise RuntimeError(f"Task '{self.name}' is already scheduled")

        self._cancelled = False
        self._next_time = self._loop.time() + (self.interval if delay is None else delay)
        self._handle = self._loop.call_at(self._next_time, self._run)

    def cancel(self) -> None:
        """Stop future invocations. Safe to call repeatedly."""
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self) -> None:
        self._handle = None
        if self._cancelled:
            return

        now = self._loop.time()
        try:
            self._callback(now)
        finally:
            if not self._cancelled:
                # Stay on the nominal grid; after an overrun fire as soon as possible
                self._next_time = max(self._next_time + self.interval, now)
                self._handle = self._loop.call_at(self._next_time, self._run)
