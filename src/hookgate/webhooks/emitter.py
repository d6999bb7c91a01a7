"""Multi-key event emitter for validated webhook deliveries.

Listeners register under a key: the wildcard ``"*"``, an event type such as
``"push"``, a repository name, or ``"error"`` for rejected deliveries.
Listeners for a key run in registration order. Coroutine listeners are
scheduled on the running loop and not awaited.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

WILDCARD = "*"
ERROR = "error"

Listener = Callable[..., Any]


class _Once:
    """Wrapper marking a listener for removal after its first call."""

    def __init__(self, listener: Listener) -> None:
        self.listener = listener

    def __call__(self, *args: Any) -> Any:
        return self.listener(*args)


class EventEmitter:
    """Registry mapping keys to ordered listener lists."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._tasks: set[asyncio.Task] = set()

    def on(self, key: str, listener: Listener | None = None):
        """Register ``listener`` under ``key``.

        Without a listener, returns a decorator::

            @emitter.on("push")
            def handle_push(payload): ...
        """
        if listener is None:
            def decorator(func: Listener) -> Listener:
                self.on(key, func)
                return func

            return decorator

        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.setdefault(key, []).append(listener)
        return listener

    def once(self, key: str, listener: Listener) -> Listener:
        """Register a listener that is removed after its first invocation."""
        self.on(key, _Once(listener))
        return listener

    def off(self, key: str, listener: Listener) -> None:
        """Remove the earliest registration of ``listener`` under ``key``."""
        registered = self._listeners.get(key)
        if not registered:
            return
        for index, candidate in enumerate(registered):
            # == so bound methods match a fresh reference to the same method
            if candidate == listener or (isinstance(candidate, _Once) and candidate.listener == listener):
                del registered[index]
                break
        if not registered:
            del self._listeners[key]

    def _discard(self, key: str, entry: Listener) -> None:
        registered = self._listeners.get(key, [])
        for index, candidate in enumerate(registered):
            if candidate is entry:
                del registered[index]
                break
        if not registered:
            self._listeners.pop(key, None)

    def remove_all_listeners(self, key: str | None = None) -> None:
        if key is None:
            self._listeners.clear()
        else:
            self._listeners.pop(key, None)

    def listeners(self, key: str) -> list[Listener]:
        return [
            entry.listener if isinstance(entry, _Once) else entry
            for entry in self._listeners.get(key, [])
        ]

    def listener_count(self, key: str) -> int:
        return len(self._listeners.get(key, []))

    def keys(self) -> list[str]:
        return list(self._listeners)

    @property
    def pending_tasks(self) -> int:
        """Number of coroutine listeners still running."""
        return len(self._tasks)

    def emit(self, key: str, *args: Any) -> bool:
        """Invoke every listener registered under ``key`` with ``args``.

        Returns True if the key had listeners.
        """
        registered = self._listeners.get(key)
        if not registered:
            if key == ERROR:
                error = args[0] if args else None
                logger.warning("Unhandled webhook error (no 'error' listeners): %s", error)
            return False

        for listener in list(registered):
            if isinstance(listener, _Once):
                self._discard(key, listener)
            try:
                result = listener(*args)
            except Exception:
                logger.exception("Webhook listener failed for key %r", key)
                continue
            if inspect.isawaitable(result):
                self._schedule(key, result)
        return True

    def _schedule(self, key: str, awaitable) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Coroutine listener for key %r dropped: no running event loop", key)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        task = loop.create_task(_run_listener(awaitable), name=f"hookgate-listener:{key}")
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Async webhook listener failed (%s)", task.get_name(), exc_info=exc
            )

    async def wait_for_listeners(self) -> None:
        """Wait until every scheduled coroutine listener has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


async def _run_listener(awaitable) -> Any:
    return await awaitable
