# src/sleepqueue/errors.py

from __future__ import annotations


class SleepQueueError(Exception):
    """Base class for errors raised by the queue itself (never for task errors)."""


class QueueStopped(SleepQueueError):
    """Set on discarded result handles when the queue fails them on stop()."""


class InvalidConfigError(SleepQueueError, ValueError):
    pass
