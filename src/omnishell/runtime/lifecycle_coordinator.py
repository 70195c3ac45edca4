# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lifecycle coordinator: glues lifecycle events to the shell's lock.

The coordinator is the one place that reacts to load, unload, renderer
start and plugin-list changes, so subsystems never reference each other
directly.

Reactions:
    PLUGINS_LOADED (plugin bus):
        Route chain initiation (``bus.init()``) and show every ``bad`` entry.
    PLUGINS_UNLOADED (plugin bus):
        ``bus.reset()``.
    RENDERER_STARTED (host bus):
        Forward the event to plugins, listen for PLUGINS_CHANGED on the
        renderer's bus, then lock.
    PLUGINS_CHANGED (renderer bus):
        Unlock, run a full load pass, restart the renderer, announce
        RENDERER_STARTED again (which locks).

States:
    See EnumLifecycleState. The locked flag is mirrored onto the plugin bus,
    which is also the lock holder every collaborator reads.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from omnishell.enums import EnumCoreEvent, EnumLifecycleState, EnumRenderMode
from omnishell.errors import BusLockedError
from omnishell.event_bus import BusManager, InMemoryEventBus
from omnishell.models import ModelImportResult, ModelRendererStarted
from omnishell.protocols import ProtocolDisplay, ProtocolRenderer
from omnishell.runtime.plugin_registry import PluginRegistry

logger = logging.getLogger(__name__)


class LifecycleCoordinator:
    """Owns the lifecycle state machine.

    Example:
        ```python
        coordinator = LifecycleCoordinator(bus, registry, display, host_events)
        coordinator.attach()

        await registry.register_all_plugins()
        host_events.emit(EnumCoreEvent.RENDERER_STARTED, started)
        assert coordinator.is_locked
        ```
    """

    def __init__(
        self,
        bus: BusManager,
        registry: PluginRegistry,
        display: ProtocolDisplay,
        host_events: InMemoryEventBus,
    ) -> None:
        self._bus = bus
        self._registry = registry
        self._display = display
        self._host_events = host_events

        self._state = EnumLifecycleState.UNLOCKED
        self._attached = False
        self._renderer: Optional[ProtocolRenderer] = None
        self._render_mode: Optional[EnumRenderMode] = None
        self._renderer_ctx: Any = None

        # Bound once so removal by identity finds the same objects
        self._plugins_loaded_listener = self._on_plugins_loaded
        self._plugins_unloaded_listener = self._on_plugins_unloaded
        self._renderer_started_listener = self._on_renderer_started
        self._plugins_changed_listener = self._on_plugins_changed

    @property
    def state(self) -> EnumLifecycleState:
        return self._state

    @property
    def is_locked(self) -> bool:
        return self._state.is_locked

    @property
    def renderer(self) -> Optional[ProtocolRenderer]:
        return self._renderer

    @property
    def render_mode(self) -> Optional[EnumRenderMode]:
        return self._render_mode

    def attach(self) -> None:
        """Subscribe to lifecycle events. Idempotent; call while unlocked."""
        if self._attached:
            return
        self._bus.on(EnumCoreEvent.PLUGINS_LOADED, self._plugins_loaded_listener)
        self._bus.on(EnumCoreEvent.PLUGINS_UNLOADED, self._plugins_unloaded_listener)
        self._host_events.on(
            EnumCoreEvent.RENDERER_STARTED, self._renderer_started_listener
        )
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        self._bus.remove_listener(EnumCoreEvent.PLUGINS_LOADED, self._plugins_loaded_listener)
        self._bus.remove_listener(
            EnumCoreEvent.PLUGINS_UNLOADED, self._plugins_unloaded_listener
        )
        self._host_events.remove_listener(
            EnumCoreEvent.RENDERER_STARTED, self._renderer_started_listener
        )
        self._bind_renderer(None)
        self._attached = False

    def lock(self) -> None:
        self._transition(EnumLifecycleState.LOCKED)
        self._bus.lock()

    def unlock(self) -> None:
        self._transition(EnumLifecycleState.UNLOCKED)
        self._bus.unlock()

    async def reconfigure(self) -> Optional[ModelImportResult]:
        """Reload every plugin and restart the renderer.

        A BusLockedError raised while reloading is expected during
        reconfiguration: it is shown on the display and the shell re-locks.

        Returns:
            The new import result, or None if the reload hit a locked subsystem.
        """
        self._transition(EnumLifecycleState.RECONFIGURING)
        self._bus.unlock()

        try:
            result = await self._registry.register_all_plugins()
            if self._renderer is not None:
                await self._renderer.init()
        except BusLockedError as e:
            logger.warning(
                "Reconfiguration hit a locked subsystem",
                extra={"error": str(e)},
            )
            self._display.show_error(e)
            self.lock()
            return None
        except Exception:
            self.lock()
            raise

        if self._renderer is not None and self._render_mode is not None:
            self._host_events.emit(
                EnumCoreEvent.RENDERER_STARTED,
                ModelRendererStarted(
                    renderer=self._renderer,
                    render_mode=self._render_mode,
                    ctx=self._renderer_ctx,
                ),
            )
        else:
            self.lock()
        return result

    def _on_plugins_loaded(self, result: ModelImportResult) -> None:
        self._bus.init()
        if result.bad:
            self._display.show_error(list(result.bad))

    def _on_plugins_unloaded(self) -> None:
        self._bus.reset()

    def _on_renderer_started(self, started: ModelRendererStarted) -> None:
        self._bus.emit(EnumCoreEvent.RENDERER_STARTED, started)
        self._bind_renderer(started.renderer)
        self._render_mode = started.render_mode
        self._renderer_ctx = started.ctx
        self.lock()

    async def _on_plugins_changed(self, *args: Any) -> None:
        await self.reconfigure()

    def _bind_renderer(self, renderer: Optional[ProtocolRenderer]) -> None:
        if renderer is self._renderer:
            return
        if self._renderer is not None:
            self._renderer.events.remove_listener(
                EnumCoreEvent.PLUGINS_CHANGED, self._plugins_changed_listener
            )
        if renderer is not None:
            renderer.events.on(EnumCoreEvent.PLUGINS_CHANGED, self._plugins_changed_listener)
        self._renderer = renderer

    def _transition(self, target: EnumLifecycleState) -> None:
        if target is self._state:
            return
        logger.info(
            "Lifecycle transition",
            extra={"from_state": self._state.value, "to_state": target.value},
        )
        self._state = target


__all__: list[str] = ["LifecycleCoordinator"]
