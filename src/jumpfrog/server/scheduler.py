"""Timer scheduling for room state (continuation ticks, disconnect grace)."""

import asyncio
import time
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """What the room logic needs from an event loop."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...

    def now_ms(self) -> int: ...


class LoopScheduler:
    """
    Scheduler backed by the running asyncio loop.

    Callbacks run on the loop thread between other handlers, so a callback
    never observes a half-updated room.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay_ms / 1000.0, callback)

    def now_ms(self) -> int:
        """Wall-clock milliseconds; expiresAt is sent to clients as-is."""
        return int(time.time() * 1000)
