# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory event bus with notify (``emit``) and collect (``call``) modes.

One bus instance lives for one shell session. Listeners are plain callables
or coroutine functions held in registration order per event name.

Features:
    - ``emit``: fire-and-forget. Synchronous listeners run inline; awaitable
      results are scheduled on the running loop and not waited for.
    - ``call``: request/response fan-out. Every listener is invoked and every
      result is awaited; the caller gets the list of results in registration
      order.
    - Locking: while locked, ``on``/``add_listener`` raise BusLockedError.
      Removal keeps working so teardown is always possible.
    - Failure isolation: a failing listener is logged and never prevents the
      remaining listeners from running.

Usage:
    ```python
    bus = InMemoryEventBus()

    async def has_auth() -> bool:
        return token is not None

    bus.on("auth:query", has_auth)
    answers = await bus.call("auth:query")   # [True]

    bus.emit(EnumCoreEvent.SYNC_SETTINGS)
    await bus.wait_idle()
    ```

Event Names:
    Event names are strings. ``EnumCoreEvent`` members are accepted anywhere
    a name is and are keyed by their value.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import partial
from typing import Any, Optional, Union

from omnishell.errors import BusLockedError, ModelShellErrorContext

logger = logging.getLogger(__name__)

EventName = Union[str, Enum]
Listener = Callable[..., Any]


def event_key(event: EventName) -> str:
    """Return the dictionary key used for an event name or enum member."""
    if isinstance(event, Enum):
        return str(event.value)
    return str(event)


class InMemoryEventBus:
    """In-process event emitter for plugins and the shell host.

    Attributes:
        is_locked: Whether new listeners are currently refused.

    Example:
        ```python
        bus = InMemoryEventBus()
        bus.on("greet", lambda name: print(f"hi {name}"))
        bus.emit("greet", "ada")

        bus.lock()
        bus.on("greet", other)   # raises BusLockedError
        ```
    """

    def __init__(self, max_history: int = 1000) -> None:
        """Initialize the bus.

        Args:
            max_history: Maximum number of emitted event names kept for
                debugging via ``get_event_history``.
        """
        self._max_history = max_history

        # Event name -> listeners in registration order
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

        # Names of emitted/called events, most recent last
        self._event_history: list[str] = []

        # Strong refs to tasks spawned by emit() for awaitable results
        self._pending: set[asyncio.Future[Any]] = set()

        self._locked = False

    @property
    def is_locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        """Refuse new listeners until ``unlock`` is called."""
        if not self._locked:
            self._locked = True
            logger.debug("Event bus locked")

    def unlock(self) -> None:
        if self._locked:
            self._locked = False
            logger.debug("Event bus unlocked")

    # =========================================================================
    # Subscription
    # =========================================================================

    def on(self, event: EventName, listener: Listener) -> None:
        """Register ``listener`` for ``event``.

        Raises:
            BusLockedError: If the bus is locked.
        """
        name = event_key(event)
        if self._locked:
            raise BusLockedError(
                context=ModelShellErrorContext(
                    operation="add_listener",
                    target_name=name,
                ),
            )
        self._listeners[name].append(listener)
        logger.debug("Listener added", extra={"event_name": name})

    add_listener = on

    def remove_listener(self, event: EventName, listener: Listener) -> bool:
        """Remove the first registration of ``listener`` for ``event``.

        Matching is by identity. Works while locked.

        Returns:
            True if a listener was removed.
        """
        name = event_key(event)
        listeners = self._listeners.get(name)
        if not listeners:
            return False
        for idx, existing in enumerate(listeners):
            if existing is listener:
                del listeners[idx]
                if not listeners:
                    del self._listeners[name]
                logger.debug("Listener removed", extra={"event_name": name})
                return True
        return False

    def remove_all_listeners(self, event: Optional[EventName] = None) -> None:
        """Remove every listener for ``event``, or for all events when None."""
        if event is None:
            self._listeners.clear()
            logger.debug("All listeners removed")
            return
        self._listeners.pop(event_key(event), None)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def emit(self, event: EventName, *args: Any) -> bool:
        """Notify every listener of ``event`` without waiting on async ones.

        Returns:
            True if the event had at least one listener.
        """
        name = event_key(event)
        self._record(name)
        listeners = list(self._listeners.get(name, ()))

        for listener in listeners:
            try:
                result = listener(*args)
            except Exception as e:
                # Log but don't fail other listeners
                logger.exception(
                    "Event listener failed",
                    extra={"event_name": name, "error": str(e)},
                )
                continue
            if inspect.isawaitable(result):
                self._schedule(name, result)

        return bool(listeners)

    async def call(self, event: EventName, *args: Any) -> list[Any]:
        """Invoke every listener of ``event`` and collect the results.

        All listeners are invoked in registration order before any result is
        awaited. Results are returned in registration order regardless of
        how long each awaitable takes. The result buffer belongs to this
        invocation only, so concurrent calls of the same event never see
        each other's values.

        Returns:
            One result per listener registered when the call started.

        Raises:
            Exception: The first listener failure (in registration order),
                after every other listener has settled.
        """
        name = event_key(event)
        self._record(name)
        listeners = list(self._listeners.get(name, ()))
        if not listeners:
            return []

        settled = await asyncio.gather(
            *(self._invoke(listener, args) for listener in listeners)
        )

        failures = [value for ok, value in settled if not ok]
        for failure in failures:
            logger.warning(
                "Event listener failed during call",
                extra={"event_name": name, "error": str(failure)},
            )
        if failures:
            raise failures[0]

        return [value for _, value in settled]

    async def wait_idle(self) -> None:
        """Wait until every task spawned by ``emit`` has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @staticmethod
    async def _invoke(
        listener: Listener, args: tuple[Any, ...]
    ) -> tuple[bool, Any]:
        try:
            result = listener(*args)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            return False, e
        return True, result

    def _schedule(self, name: str, awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "Async listener result dropped: no running event loop",
                extra={"event_name": name},
            )
            close = getattr(awaitable, "close", None)
            if callable(close):
                close()
            return

        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(task)
        task.add_done_callback(partial(self._on_task_done, name))

    def _on_task_done(self, name: str, task: asyncio.Future[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Async event listener failed",
                exc_info=error,
                extra={"event_name": name, "error": str(error)},
            )

    def _record(self, name: str) -> None:
        self._event_history.append(name)
        if len(self._event_history) > self._max_history:
            self._event_history.pop(0)

    # =========================================================================
    # Debugging/Observability Methods
    # =========================================================================

    def listener_count(self, event: EventName) -> int:
        return len(self._listeners.get(event_key(event), ()))

    def listeners(self, event: EventName) -> list[Listener]:
        """Return a copy of the listeners registered for ``event``."""
        return list(self._listeners.get(event_key(event), ()))

    def event_names(self) -> list[str]:
        """Return event names with at least one listener."""
        return [name for name, listeners in self._listeners.items() if listeners]

    def get_event_history(
        self,
        limit: int = 100,
        event: Optional[EventName] = None,
    ) -> list[str]:
        """Get recently dispatched event names (most recent last)."""
        history = self._event_history[-limit:]
        if event is not None:
            name = event_key(event)
            history = [entry for entry in history if entry == name]
        return list(history)

    def clear_event_history(self) -> None:
        """Clear event history.

        Useful for test isolation between test cases.
        """
        self._event_history.clear()

    def health_check(self) -> dict[str, object]:
        """Summarize bus state for diagnostics."""
        return {
            "healthy": True,
            "locked": self._locked,
            "listener_count": sum(len(ls) for ls in self._listeners.values()),
            "event_count": len(self.event_names()),
            "pending_tasks": len(self._pending),
            "history_size": len(self._event_history),
        }


__all__: list[str] = ["EventName", "InMemoryEventBus", "Listener", "event_key"]
