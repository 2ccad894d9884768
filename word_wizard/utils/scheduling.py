"""Delayed callbacks on the running asyncio event loop."""

import asyncio
from collections.abc import Callable


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_later``.

    The loop is looked up when a callback is scheduled, so the scheduler
    can be created outside of a running loop.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)
