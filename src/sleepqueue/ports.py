# src/sleepqueue/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the queue.

The queue depends on a Protocol for its timer instead of the event loop directly.
This keeps the delay source swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Timer(Protocol):
    """Delay primitive: run a callback after N milliseconds, cancellable."""

    def after(self, ms: float, callback: Callable[[], None]) -> TimerHandle: ...
    def cancel(self, handle: TimerHandle) -> None: ...
