# src/task_trigger/core/events.py

from __future__ import annotations

"""
Change notification.

An EventEmitter is an explicit subscription channel owned by whoever produces
the event (tree model, configuration, task provider). Listeners subscribe via
`emitter.event(listener)` and get a Disposable back.

Listeners may be plain callables or coroutine functions. Awaitables returned by
a listener are scheduled on the running loop; their failures are logged.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], Any]


class Disposable:
    def __init__(self, on_dispose: Callable[[], None]) -> None:
        self._on_dispose: Callable[[], None] | None = on_dispose

    def dispose(self) -> None:
        cb, self._on_dispose = self._on_dispose, None
        if cb is not None:
            cb()


class EventEmitter(Generic[T]):
    def __init__(self, name: str = "event") -> None:
        self.name = name
        self._listeners: list[Listener[T]] = []
        self._pending: set[asyncio.Task[Any]] = set()

    def event(self, listener: Listener[T]) -> Disposable:
        """Subscribe `listener`; dispose the returned handle to unsubscribe."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Disposable(_remove)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def fire(self, payload: T) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(payload)
            except Exception:
                logger.exception("%s listener failed", self.name)
                continue

            if inspect.isawaitable(result):
                self._schedule(result)

    def _schedule(self, awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: nothing can drive the coroutine. Close it to avoid "never awaited".
            logger.warning("%s fired outside an event loop; async listener skipped", self.name)
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            return

        task = loop.create_task(_await(awaitable))
        self._pending.add(task)
        task.add_done_callback(self._on_listener_done)

    def _on_listener_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("%s async listener failed", self.name, exc_info=exc)

    async def drain(self) -> None:
        """Wait for async listeners scheduled so far (used by tests and shutdown)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def dispose(self) -> None:
        self._listeners.clear()


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable
