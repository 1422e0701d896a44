# src/sleepqueue/queue.py

from __future__ import annotations

"""
Sequential delay queue.

A self-rescheduling loop that:
- pops one entry per tick,
- runs its task and settles the entry's future,
- waits `interval` ms after settlement before the next tick,
- emits "empty" when a tick finds nothing, and "error" + stop() on a task failure.

Only one tick is ever pending and only one task is ever in flight.
"""

import asyncio
import inspect
import itertools
import logging
from collections import deque
from collections.abc import Mapping
from typing import Any

from .config import QueueConfig, validate_interval
from .errors import QueueStopped
from .events import EventEmitter, Listener
from .models import QueueEntry, QueueState, TaskFn
from .ports import Timer, TimerHandle
from .timer import AsyncioTimer

logger = logging.getLogger(__name__)


class SleepQueue:
    """
    Runs enqueued tasks one at a time, `interval` ms apart.

    Every task failure reaches two places:
    - the future returned to the caller,
    - the queue itself, which emits "error" and stops (pending entries are discarded).

    Callers that want the queue to keep going must recover inside the task.
    """

    def __init__(
        self,
        interval: int = 0,
        *,
        timer: Timer | None = None,
        fail_pending_on_stop: bool = False,
    ) -> None:
        self._interval_ms = validate_interval(interval)
        self._timer: Timer = timer or AsyncioTimer()
        self._fail_pending_on_stop = bool(fail_pending_on_stop)

        self._entries: deque[QueueEntry] = deque()
        self._events = EventEmitter()
        self._seq = itertools.count(1)

        self._handle: TimerHandle | None = None
        self._scheduled = False
        self._runner: asyncio.Task[None] | None = None
        self._runner_generation: int | None = None
        # Bumped by stop(); a runner from an older generation never re-arms the loop.
        self._generation = 0
        self._stopped = False

    # ---- public API ----

    @property
    def interval(self) -> int:
        return self._interval_ms

    @property
    def state(self) -> QueueState:
        if self._scheduled:
            return QueueState.SCHEDULED
        if self._runner is not None and self._runner_generation == self._generation:
            return QueueState.RUNNING
        if self._stopped:
            return QueueState.STOPPED
        return QueueState.IDLE

    def enqueue_tail(self, task: TaskFn) -> asyncio.Future[Any]:
        """Append task; it runs after everything already pending."""
        return self._enqueue(task, at_head=False)

    def enqueue_head(self, task: TaskFn) -> asyncio.Future[Any]:
        """Insert task at the front; it runs as soon as the in-flight task (if any) is done."""
        return self._enqueue(task, at_head=True)

    push = enqueue_tail
    unshift = enqueue_head

    def stop(self) -> None:
        """
        Cancel the pending tick and discard pending entries.

        An in-flight task still runs to completion and settles its own future.
        """
        self._clear_timer()
        self._scheduled = False
        self._generation += 1
        self._stopped = True

        discarded = list(self._entries)
        self._entries.clear()
        logger.info("Queue stopped; discarded %d pending task(s)", len(discarded))

        if self._fail_pending_on_stop:
            for entry in discarded:
                if entry.settle(error=QueueStopped(f"queue stopped before task #{entry.seq} ran")):
                    # Retrieved here so unawaited handles do not log "exception was never retrieved".
                    entry.future.exception()

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def on(self, event: str, listener: Listener) -> Listener:
        return self._events.on(event, listener)

    def once(self, event: str, listener: Listener) -> Listener:
        return self._events.once(event, listener)

    def off(self, event: str, listener: Listener) -> bool:
        return self._events.off(event, listener)

    def wait_for(self, event: str) -> asyncio.Future[tuple[Any, ...]]:
        return self._events.wait_for(event)

    # ---- loop ----

    def _enqueue(self, task: TaskFn, *, at_head: bool) -> asyncio.Future[Any]:
        if not callable(task):
            raise TypeError(f"task must be callable, got {type(task).__name__}")

        loop = asyncio.get_running_loop()
        entry = QueueEntry(seq=next(self._seq), task=task, future=loop.create_future())

        was_empty = not self._entries
        if at_head:
            self._entries.appendleft(entry)
        else:
            self._entries.append(entry)
        self._stopped = False

        logger.debug(
            "Enqueued task #%s at %s (pending=%d)",
            entry.seq,
            "head" if at_head else "tail",
            len(self._entries),
        )

        if was_empty:
            self._start()
        return entry.future

    def _start(self) -> None:
        if self._scheduled or self._runner is not None:
            return
        self._clear_timer()
        self._schedule(0)

    def _schedule(self, delay_ms: int) -> None:
        self._scheduled = True
        self._handle = self._timer.after(delay_ms, self._tick)

    def _clear_timer(self) -> None:
        if self._handle is not None:
            self._timer.cancel(self._handle)
            self._handle = None

    def _tick(self) -> None:
        self._handle = None
        self._scheduled = False

        if not self._entries:
            logger.debug("Queue empty")
            self._events.emit("empty")
            return

        entry = self._entries.popleft()
        self._runner_generation = self._generation
        self._runner = asyncio.get_running_loop().create_task(
            self._run(entry, self._generation),
            name=f"sleepqueue-task-{entry.seq}",
        )

    async def _run(self, entry: QueueEntry, generation: int) -> None:
        error: BaseException | None = None
        try:
            result = entry.task()
            if inspect.isawaitable(result):
                result = await result
        except asyncio.CancelledError:
            entry.future.cancel()
            self._runner = None
            if generation == self._generation:
                logger.warning("Task #%s was cancelled; stopping queue", entry.seq)
                self.stop()
            else:
                self._rearm_after_stop()
            raise
        except GeneratorExit:
            raise
        except BaseException as exc:
            error = exc
            if entry.settle(error=exc):
                # The queue reports the failure itself through "error".
                entry.future.exception()
        else:
            entry.settle(result=result)
        finally:
            self._runner = None

        self._after_settle(entry, generation, error)
        if isinstance(error, (KeyboardInterrupt, SystemExit)):
            raise error

    def _rearm_after_stop(self) -> None:
        # Stopped while in flight: only work enqueued since stop() may re-arm the loop.
        if self._entries and not self._scheduled:
            self._schedule(self._interval_ms)

    def _after_settle(self, entry: QueueEntry, generation: int, error: BaseException | None) -> None:
        if generation != self._generation:
            if error is not None:
                logger.warning("Task #%s failed after the queue was stopped: %r", entry.seq, error)
            self._rearm_after_stop()
            return

        if error is not None:
            logger.warning("Task #%s failed: %r; stopping queue", entry.seq, error)
            if not self._events.emit("error", error):
                logger.error("Uncaught error in task #%s", entry.seq, exc_info=error)
            self.stop()
            return

        logger.debug("Task #%s done; next tick in %d ms", entry.seq, self._interval_ms)
        self._schedule(self._interval_ms)


def create_queue(
    config: QueueConfig | Mapping[str, Any] | None = None,
    *,
    timer: Timer | None = None,
    **overrides: Any,
) -> SleepQueue:
    """
    Build a SleepQueue from a QueueConfig or a plain options mapping ({"interval": 20}).

    Keyword overrides win over config: create_queue({"interval": 5}, fail_pending_on_stop=True).
    """
    if isinstance(config, QueueConfig):
        cfg = config
    else:
        cfg = QueueConfig.from_mapping(config or {})
    if overrides:
        cfg = cfg.with_options(overrides)

    return SleepQueue(
        cfg.interval_ms,
        timer=timer,
        fail_pending_on_stop=cfg.fail_pending_on_stop,
    )
