"""Time source used by the pollers.

Waiters never call ``time`` or ``asyncio.sleep`` directly; they receive a
``Clock`` so tests can drive them with a clock that advances instantly.
"""

import asyncio
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Current instant in seconds."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the calling task for ``seconds``."""
        ...


class SystemClock:
    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


def elapsed_seconds(clock: Clock, started_at: float) -> float:
    """Seconds since ``started_at``, rounded to one decimal."""
    return round(clock.now() - started_at, 1)
