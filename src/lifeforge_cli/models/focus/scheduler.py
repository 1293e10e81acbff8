"""Cancellable timers and the clock the focus engine runs on.

The engine never sleeps or reads the wall clock directly. It asks a
Scheduler for ``now()`` and for one-shot callbacks, and keeps the returned
handles so it can cancel them on every transition that makes them stale.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    """Handle for a scheduled callback."""

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Source of time and one-shot deferred callbacks."""

    def now(self) -> datetime:
        """Current time as an aware datetime."""
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run *callback* once after *delay* seconds."""
        ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop.

    ``asyncio.TimerHandle`` already satisfies the TimerHandle protocol.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)
