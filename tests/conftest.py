# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for omnishell tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from omnishell.collaborators import (
    DisplayLogger,
    SettingsRegistry,
    StylesheetRegistry,
    TemplateRegistry,
)
from omnishell.event_bus import BusManager, InMemoryEventBus
from omnishell.models import (
    ModelContextProviders,
    ModelEventRegistration,
    ModelPluginOptions,
    ModelShellConfig,
)
from omnishell.plugins import PluginBase
from omnishell.runtime import PluginRegistry
from omnishell.testing import ModuleResolverInMemory

# =============================================================================
# Duck Typing Conformance Helpers
# =============================================================================


def assert_has_methods(
    obj: object,
    required_methods: list[str],
    *,
    protocol_name: str | None = None,
) -> None:
    """Assert that an object has all required methods (duck typing conformance).

    Protocol conformance is verified by checking for method presence and
    callability rather than isinstance checks against Protocol types.

    Example:
        >>> assert_has_methods(
        ...     registry,
        ...     ["register", "unregister"],
        ...     protocol_name="ProtocolTemplateProvider",
        ... )
    """
    name = protocol_name or obj.__class__.__name__
    for method_name in required_methods:
        assert hasattr(obj, method_name), f"{name} must have '{method_name}' method"
        # __len__ and __iter__ are special - they are callable via len()/iter()
        if not method_name.startswith("__"):
            assert callable(
                getattr(obj, method_name)
            ), f"{name}.{method_name} must be callable"


def assert_has_async_methods(
    obj: object,
    required_methods: list[str],
    *,
    protocol_name: str | None = None,
) -> None:
    """Assert that an object has all required async methods."""
    name = protocol_name or obj.__class__.__name__
    for method_name in required_methods:
        assert hasattr(obj, method_name), f"{name} must have '{method_name}' method"
        method = getattr(obj, method_name)
        assert callable(method), f"{name}.{method_name} must be callable"
        assert asyncio.iscoroutinefunction(
            method
        ), f"{name}.{method_name} must be async (coroutine function)"


# =============================================================================
# Plugin Doubles
# =============================================================================

PING_EVENT = "test:ping"


class StubPlugin(PluginBase):
    """Configurable plugin double.

    Class attributes drive behavior so tests can build variants with
    ``type(...)`` (see the ``plugin_class`` fixture).
    """

    name = "stub"
    version = "1.0.0"
    chain_name: str | None = None
    fail_register = False
    fail_unregister = False
    fail_init = False
    configured: Any = True

    def __init__(self, options: ModelPluginOptions) -> None:
        if self.fail_init:
            raise RuntimeError(f"{self.name} constructor failed")
        super().__init__(options)
        self.calls: list[str] = []
        self.received: list[tuple[Any, ...]] = []

    async def register(self, ctx: ModelContextProviders) -> None:
        self.calls.append("register")
        ctx.bus.register_events(
            self,
            ModelEventRegistration(receives={PING_EVENT: self.on_ping}),
        )
        if self.chain_name:
            ctx.bus.register_middleware(self, {self.chain_name: [self.link]})
        await ctx.settings.register(self, f"https://example.test/{self.name}/settings.json")
        await ctx.template.register(self, f"https://example.test/{self.name}/view.html")
        ctx.stylesheets.register(self, f"https://example.test/{self.name}/style.css")
        if self.fail_register:
            raise RuntimeError(f"{self.name} register failed")

    def unregister(self) -> None:
        self.calls.append("unregister")
        if self.fail_unregister:
            raise RuntimeError(f"{self.name} unregister failed")

    def is_configured(self) -> Any:
        return self.configured

    def on_ping(self, *args: Any) -> str:
        self.received.append(args)
        return self.name

    async def link(self, context: Any, next_link: Any, error: Any = None) -> None:
        context.setdefault("trace", []).append(self.name)
        await next_link(error)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def display() -> DisplayLogger:
    return DisplayLogger()


@pytest.fixture
def bus_manager(display: DisplayLogger) -> BusManager:
    return BusManager(display=display)


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def settings(bus_manager: BusManager) -> SettingsRegistry:
    return SettingsRegistry(
        lock_holder=bus_manager,
        initial={"plugins": [], "custom_plugins": []},
        events=bus_manager.events,
    )


@pytest.fixture
def templates(bus_manager: BusManager) -> TemplateRegistry:
    return TemplateRegistry(lock_holder=bus_manager)


@pytest.fixture
def stylesheets(bus_manager: BusManager) -> StylesheetRegistry:
    return StylesheetRegistry(lock_holder=bus_manager)


@pytest.fixture
def resolver() -> ModuleResolverInMemory:
    return ModuleResolverInMemory()


@pytest.fixture
def shell_config() -> ModelShellConfig:
    return ModelShellConfig(plugins_base_path="plugins")


@pytest.fixture
def plugin_registry(
    bus_manager: BusManager,
    settings: SettingsRegistry,
    templates: TemplateRegistry,
    stylesheets: StylesheetRegistry,
    display: DisplayLogger,
    shell_config: ModelShellConfig,
    resolver: ModuleResolverInMemory,
) -> PluginRegistry:
    """Registry without a default plugin, resolving from memory."""
    return PluginRegistry(
        bus=bus_manager,
        settings=settings,
        template=templates,
        stylesheets=stylesheets,
        display=display,
        config=shell_config,
        resolver=resolver,
        default_plugin=None,
    )


@pytest.fixture
def plugin_options(
    bus_manager: BusManager,
    settings: SettingsRegistry,
    display: DisplayLogger,
) -> ModelPluginOptions:
    return ModelPluginOptions(bus=bus_manager, settings=settings, display=display)


@pytest.fixture
def plugin_class() -> Callable[..., type[StubPlugin]]:
    """Factory for StubPlugin subclasses.

    Example:
        >>> Chat = plugin_class("chat", priority=5, chain_name="x")
    """

    def _make(name: str, priority: int | None = None, **attrs: Any) -> type[StubPlugin]:
        return type(
            f"Stub_{name.replace('-', '_')}",
            (StubPlugin,),
            {"name": name, "priority": priority, **attrs},
        )

    return _make


@pytest.fixture
def make_plugin(
    plugin_class: Callable[..., type[StubPlugin]],
    plugin_options: ModelPluginOptions,
) -> Callable[..., StubPlugin]:
    """Instantiate a StubPlugin variant directly (no registry involved)."""

    def _make(name: str, priority: int | None = None, **attrs: Any) -> StubPlugin:
        return plugin_class(name, priority, **attrs)(plugin_options)

    return _make

