# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bus manager: per-plugin registration records over events and chains.

The bus manager is the ``bus`` capability plugins receive. It pairs the
InMemoryEventBus with the ChainRegistry and remembers, per plugin ``ref``,
exactly which listeners it added, so ``unregister`` can reverse them.

Chain Initiation:
    Plugins start a chain by emitting ``EnumCoreEvent.MIDDLEWARE_EXECUTE``
    with a ModelChainInitiation. ``init()`` wires that event to
    ``execute_chain``. Failures on that path cannot reach the emitter, so
    they are logged and shown on the display. Callers that want the error
    await ``execute_chain`` directly.

Locking:
    While the underlying bus is locked, ``register_events`` and
    ``register_middleware`` raise BusLockedError before touching anything.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from omnishell.chain import ChainRegistry, MiddlewareLink
from omnishell.enums import EnumCoreEvent
from omnishell.errors import BusLockedError, ModelShellErrorContext
from omnishell.event_bus.inmemory_event_bus import (
    EventName,
    InMemoryEventBus,
    Listener,
    event_key,
)
from omnishell.models import (
    ModelChainInitiation,
    ModelEventRegistration,
    ModelPluginRegistrationRecord,
)
from omnishell.protocols import ProtocolDisplay, ProtocolPlugin

logger = logging.getLogger(__name__)


class BusManager:
    """Event bus plus chain registry, with per-plugin bookkeeping.

    Example:
        ```python
        bus = BusManager()
        bus.init()

        bus.register_events(
            plugin,
            ModelEventRegistration(receives={"chat:message": plugin.on_message}),
        )
        bus.register_middleware(plugin, {"chat:twitch": [plugin.parse]})

        bus.unregister(plugin)   # removes exactly the above
        ```
    """

    def __init__(
        self,
        events: Optional[InMemoryEventBus] = None,
        chains: Optional[ChainRegistry] = None,
        display: Optional[ProtocolDisplay] = None,
    ) -> None:
        """Initialize the bus manager.

        Args:
            events: Event bus to wrap (a fresh one by default).
            chains: Chain registry to wrap (a fresh one by default).
            display: Where event-initiated chain failures are shown.
        """
        self._events = events if events is not None else InMemoryEventBus()
        self._chains = chains if chains is not None else ChainRegistry()
        self._display = display

        # plugin ref -> (event name, listener) pairs the plugin added
        self._event_records: dict[object, list[tuple[str, Listener]]] = {}
        self._plugin_names: dict[object, str] = {}
        self._initialized = False
        # Bound once so removal by identity finds the same object
        self._execute_listener = self._on_middleware_execute

    @property
    def events(self) -> InMemoryEventBus:
        return self._events

    @property
    def chains(self) -> ChainRegistry:
        return self._chains

    @property
    def is_locked(self) -> bool:
        return self._events.is_locked

    def lock(self) -> None:
        self._events.lock()

    def unlock(self) -> None:
        self._events.unlock()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def init(self) -> None:
        """Route MIDDLEWARE_EXECUTE to the chain registry. Idempotent."""
        if self._initialized:
            return
        self._events.on(EnumCoreEvent.MIDDLEWARE_EXECUTE, self._execute_listener)
        self._initialized = True
        logger.debug("Bus manager initialized")

    def reset(self) -> None:
        """Drop every plugin record, every chain, and the initiation route.

        Host listeners not added through ``register_events`` are kept.
        """
        for records in self._event_records.values():
            for name, listener in records:
                self._events.remove_listener(name, listener)
        self._event_records.clear()
        self._plugin_names.clear()
        self._chains.reset()

        if self._initialized:
            self._events.remove_listener(
                EnumCoreEvent.MIDDLEWARE_EXECUTE, self._execute_listener
            )
            self._initialized = False
        logger.debug("Bus manager reset")

    # =========================================================================
    # Plugin registration
    # =========================================================================

    def register_events(
        self,
        plugin: ProtocolPlugin,
        registration: Union[ModelEventRegistration, Mapping[str, Any]],
    ) -> None:
        """Subscribe ``plugin``'s listeners and record them.

        Args:
            plugin: The registering plugin.
            registration: ModelEventRegistration, or a mapping with
                ``receives``/``sends`` keys.

        Raises:
            BusLockedError: If the bus is locked.
        """
        if not isinstance(registration, ModelEventRegistration):
            registration = ModelEventRegistration.model_validate(dict(registration))

        self._ensure_unlocked(plugin, "register_events")
        records = self._event_records.setdefault(plugin.ref, [])
        self._plugin_names[plugin.ref] = plugin.name

        for event, listener in registration.receives.items():
            name = event_key(event)
            self._events.on(name, listener)
            records.append((name, listener))

        logger.debug(
            "Registered events",
            extra={
                "plugin_name": plugin.name,
                "receives": list(registration.receives),
                "sends": registration.sends,
            },
        )

    def register_middleware(
        self,
        plugin: ProtocolPlugin,
        mapping: Mapping[str, Iterable[MiddlewareLink]],
    ) -> None:
        """Contribute links to named chains on behalf of ``plugin``.

        Raises:
            BusLockedError: If the bus is locked.
        """
        self._ensure_unlocked(plugin, "register_middleware")
        self._plugin_names[plugin.ref] = plugin.name
        self._chains.register_middleware(plugin, mapping)

    def unregister(self, plugin: ProtocolPlugin) -> None:
        """Reverse every listener and link ``plugin`` added.

        Works while locked. A plugin that added nothing is a no-op.
        """
        records = self._event_records.pop(plugin.ref, [])
        for name, listener in records:
            self._events.remove_listener(name, listener)
        self._chains.unregister(plugin)
        self._plugin_names.pop(plugin.ref, None)

        if records:
            logger.debug(
                "Unregistered events",
                extra={"plugin_name": plugin.name, "listener_count": len(records)},
            )

    def registration_record(
        self, plugin: ProtocolPlugin
    ) -> ModelPluginRegistrationRecord:
        """Return a snapshot of what ``plugin`` currently has registered."""
        return ModelPluginRegistrationRecord(
            plugin_name=plugin.name,
            events=list(self._event_records.get(plugin.ref, [])),
            chains=self._chains.contributions_of(plugin),
        )

    def plugin_name_for(self, ref: object) -> Optional[str]:
        """Return the display name recorded for ``ref``, if any."""
        return self._plugin_names.get(ref)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def on(self, event: EventName, listener: Listener) -> None:
        """Add a host listener (not recorded against any plugin)."""
        self._events.on(event, listener)

    def remove_listener(self, event: EventName, listener: Listener) -> bool:
        return self._events.remove_listener(event, listener)

    def emit(self, event: EventName, *args: Any) -> bool:
        return self._events.emit(event, *args)

    async def call(self, event: EventName, *args: Any) -> list[Any]:
        return await self._events.call(event, *args)

    async def execute_chain(self, initiation: ModelChainInitiation) -> None:
        """Execute a chain, raising any failure to the caller.

        Raises:
            ChainNotFoundError: Unknown chain.
            UnauthorizedInitiatorError: Initiator does not lead the chain.
            Exception: Any non-silent error escaping the chain.
        """
        await self._chains.execute(initiation)

    async def _on_middleware_execute(self, initiation: ModelChainInitiation) -> None:
        try:
            await self.execute_chain(initiation)
        except Exception as e:
            logger.exception(
                "Chain initiated by event failed",
                extra={"chain_name": initiation.chain_name, "error": str(e)},
            )
            if self._display is not None:
                self._display.show_error(e)

    def _ensure_unlocked(self, plugin: ProtocolPlugin, operation: str) -> None:
        if self._events.is_locked:
            raise BusLockedError(
                context=ModelShellErrorContext(
                    operation=operation,
                    plugin_name=plugin.name,
                ),
            )


__all__: list[str] = ["BusManager"]
