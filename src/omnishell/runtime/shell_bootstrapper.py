# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shell bootstrapper: builds and starts one shell session.

Construction Order:
    display -> bus manager -> collaborators (lock holder: the bus) ->
    plugin registry -> lifecycle coordinator

Startup (``init``):
    1. Attach the lifecycle coordinator.
    2. Run the first load pass.
    3. Pick the render mode: CONFIGURE when ``force_show_settings`` is set
       or ``validate_settings()`` is not True, APP otherwise.
    4. Build the renderer through ``renderer_factory``, await its ``init``,
       and emit RENDERER_STARTED on the host bus (which locks the shell).

Without a ``renderer_factory`` the session stays headless and unlocked,
which is what the CLI uses to inspect plugins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Optional

from omnishell.collaborators import (
    DisplayLogger,
    SettingsRegistry,
    StylesheetRegistry,
    TemplateRegistry,
)
from omnishell.enums import EnumCoreEvent, EnumLifecycleState, EnumRenderMode
from omnishell.event_bus import BusManager, InMemoryEventBus
from omnishell.models import (
    ModelContextProviders,
    ModelImportResult,
    ModelRendererStarted,
    ModelShellConfig,
)
from omnishell.plugins import PluginCore
from omnishell.protocols import ProtocolDisplay, ProtocolModuleResolver, ProtocolRenderer
from omnishell.runtime.lifecycle_coordinator import LifecycleCoordinator
from omnishell.runtime.plugin_registry import (
    SETTINGS_CUSTOM_PLUGINS_KEY,
    SETTINGS_PLUGINS_KEY,
    PluginRegistry,
)

logger = logging.getLogger(__name__)

RendererFactory = Callable[[EnumRenderMode, ModelContextProviders], ProtocolRenderer]


class ShellBootstrapper:
    """Owns every subsystem of one shell session.

    Example:
        ```python
        shell = ShellBootstrapper(
            config=load_shell_config("shell.yaml"),
            renderer_factory=lambda mode, ctx: MyRenderer(mode, ctx),
        )
        result = await shell.init()
        assert shell.is_locked
        ```
    """

    def __init__(
        self,
        config: Optional[ModelShellConfig] = None,
        renderer_factory: Optional[RendererFactory] = None,
        resolver: Optional[ProtocolModuleResolver] = None,
        display: Optional[ProtocolDisplay] = None,
        default_plugin: Optional[Callable[..., Any]] = PluginCore,
        settings_values: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Build every subsystem (nothing is loaded until ``init``).

        Args:
            config: Session configuration (defaults when None).
            renderer_factory: Builds the renderer for the chosen mode.
            resolver: Module resolver passed to the plugin registry.
            display: Message surface (DisplayLogger by default).
            default_plugin: Constructor loaded before configured plugins.
            settings_values: Extra initial settings, merged over the
                plugin lists taken from ``config``.
        """
        self._config = config or ModelShellConfig()
        self._renderer_factory = renderer_factory

        self.events = InMemoryEventBus()
        self.display: ProtocolDisplay = display or DisplayLogger()
        self.bus = BusManager(display=self.display)

        initial: dict[str, Any] = {
            SETTINGS_PLUGINS_KEY: list(self._config.plugins),
            SETTINGS_CUSTOM_PLUGINS_KEY: list(self._config.custom_plugins),
        }
        initial.update(settings_values or {})
        self.settings = SettingsRegistry(
            lock_holder=self.bus,
            initial=initial,
            events=self.bus.events,
        )
        self.templates = TemplateRegistry(lock_holder=self.bus)
        self.stylesheets = StylesheetRegistry(lock_holder=self.bus)

        self.registry = PluginRegistry(
            bus=self.bus,
            settings=self.settings,
            template=self.templates,
            stylesheets=self.stylesheets,
            display=self.display,
            config=self._config,
            resolver=resolver,
            default_plugin=default_plugin,
        )
        self.coordinator = LifecycleCoordinator(
            bus=self.bus,
            registry=self.registry,
            display=self.display,
            host_events=self.events,
        )

        self.renderer: Optional[ProtocolRenderer] = None
        self.render_mode: Optional[EnumRenderMode] = None

    @property
    def config(self) -> ModelShellConfig:
        return self._config

    @property
    def is_locked(self) -> bool:
        return self.coordinator.is_locked

    @property
    def state(self) -> EnumLifecycleState:
        return self.coordinator.state

    def choose_render_mode(self) -> EnumRenderMode:
        if self._config.force_show_settings:
            return EnumRenderMode.CONFIGURE
        if self.registry.validate_settings() is not True:
            return EnumRenderMode.CONFIGURE
        return EnumRenderMode.APP

    async def init(self) -> Optional[ModelImportResult]:
        """Load plugins and start the renderer.

        Failures are shown on the display rather than raised.

        Returns:
            The first load pass's import result, or None if startup failed
            before it completed.
        """
        result: Optional[ModelImportResult] = None
        try:
            self.coordinator.attach()
            result = await self.registry.register_all_plugins()
            self.render_mode = self.choose_render_mode()
            logger.info(
                "Render mode selected",
                extra={"render_mode": self.render_mode.value},
            )

            if self._renderer_factory is not None:
                ctx = self.registry.context_providers
                renderer = self._renderer_factory(self.render_mode, ctx)
                await renderer.init()
                self.renderer = renderer
                self.events.emit(
                    EnumCoreEvent.RENDERER_STARTED,
                    ModelRendererStarted(
                        renderer=renderer,
                        render_mode=self.render_mode,
                        ctx=ctx,
                    ),
                )
        except Exception as e:
            logger.exception("Shell startup failed", extra={"error": str(e)})
            self.display.show_error(e)
        return result

    async def shutdown(self) -> None:
        """Unregister every plugin and release resolver resources."""
        self.coordinator.unlock()
        await self.registry.unregister_all_plugins()
        self.coordinator.detach()
        close = getattr(self.registry.resolver, "aclose", None)
        if close is not None:
            await close()


__all__: list[str] = ["RendererFactory", "ShellBootstrapper"]
