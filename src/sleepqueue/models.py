# src/sleepqueue/models.py

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

TaskFn = Callable[[], Any]
# Zero-argument callable; may return a plain value or an awaitable of one.


class QueueState(StrEnum):
    """
    Scheduling state of a SleepQueue.

    Notes:
    - "scheduled" means exactly one loop tick is pending on the timer.
    - "stopped" is reported after stop() until new work restarts the loop.
    """

    IDLE = "idle"
    SCHEDULED = "scheduled"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(slots=True)
class QueueEntry:
    seq: int
    task: TaskFn
    future: asyncio.Future[Any]

    def settle(self, *, result: Any = None, error: BaseException | None = None) -> bool:
        """Settle the result handle once. Returns False if it was already done."""
        if self.future.done():
            return False
        if isinstance(error, StopIteration):
            # Futures refuse StopIteration.
            wrapped = RuntimeError(f"task raised {error!r}")
            wrapped.__cause__ = error
            error = wrapped
        if error is not None:
            self.future.set_exception(error)
        else:
            self.future.set_result(result)
        return True
