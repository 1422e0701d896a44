# src/sleepqueue/events.py

"""
Owned observer table.

The queue holds one EventEmitter instead of inheriting event behaviour:
- listeners are kept per event name, in registration order,
- once-listeners are dropped before they run,
- a listener that raises is logged and does not stop the others.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

Listener = Callable[..., Any]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Subscription:
    listener: Listener
    once: bool


class EventEmitter:
    def __init__(self) -> None:
        self._listeners: dict[str, list[_Subscription]] = {}

    def on(self, event: str, listener: Listener) -> Listener:
        self._listeners.setdefault(event, []).append(_Subscription(listener, once=False))
        return listener

    def once(self, event: str, listener: Listener) -> Listener:
        self._listeners.setdefault(event, []).append(_Subscription(listener, once=True))
        return listener

    def off(self, event: str, listener: Listener) -> bool:
        """Remove the first registration of listener. Returns False if it was not registered."""
        subs = self._listeners.get(event)
        if not subs:
            return False
        for i, sub in enumerate(subs):
            if sub.listener == listener:
                del subs[i]
                return True
        return False

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Call every listener of event with args.

        Returns True if at least one listener was registered.
        Listeners added while emitting are not called by this emit.
        """
        subs = self._listeners.get(event)
        if not subs:
            return False

        snapshot = list(subs)
        self._listeners[event] = [s for s in subs if not s.once]

        for sub in snapshot:
            try:
                sub.listener(*args)
            except Exception:
                logger.exception("Listener for %r failed", event)
        return True

    def wait_for(self, event: str) -> asyncio.Future[tuple[Any, ...]]:
        """Future resolved with the args of the next emit of event."""
        fut: asyncio.Future[tuple[Any, ...]] = asyncio.get_running_loop().create_future()

        def _resolve(*args: Any) -> None:
            if not fut.done():
                fut.set_result(args)

        self.once(event, _resolve)
        return fut
