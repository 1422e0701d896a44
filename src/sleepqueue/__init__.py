"""
Throttled sequential task queue.

Components:
- queue.py: SleepQueue (one task at a time, `interval` ms apart) + create_queue()
- events.py: owned observer table used for "empty" / "error"
- models.py: data structures (QueueEntry, QueueState)
- ports.py / timer.py: timer port and its asyncio implementation
- config.py: QueueConfig (mapping or environment)
- logging_setup.py: optional logging configuration for hosts
"""

from .config import QueueConfig
from .errors import InvalidConfigError, QueueStopped, SleepQueueError
from .events import EventEmitter
from .models import QueueEntry, QueueState
from .queue import SleepQueue, create_queue
from .timer import AsyncioTimer

__all__ = [
    "AsyncioTimer",
    "EventEmitter",
    "InvalidConfigError",
    "QueueConfig",
    "QueueEntry",
    "QueueState",
    "QueueStopped",
    "SleepQueue",
    "SleepQueueError",
    "create_queue",
]
