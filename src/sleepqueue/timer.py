# src/sleepqueue/timer.py

from __future__ import annotations

import asyncio
from collections.abc import Callable

from .ports import TimerHandle


class AsyncioTimer:
    """Timer port backed by the running event loop's call_later."""

    def after(self, ms: float, callback: Callable[[], None]) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(max(0.0, float(ms)) / 1000.0, callback)

    def cancel(self, handle: TimerHandle) -> None:
        handle.cancel()
