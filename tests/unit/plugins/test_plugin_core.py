# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Tests for PluginBase helpers and the built-in core plugin."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from omnishell.collaborators import SettingsRegistry
from omnishell.errors import ChainNotFoundError, UnauthorizedInitiatorError
from omnishell.event_bus import BusManager
from omnishell.models import ModelContextProviders, ModelPluginOptions
from omnishell.plugins import CORE_CHAIN, CORE_PLUGIN_PRIORITY, PluginBase, PluginCore
from omnishell.protocols import PluginRef, ProtocolPlugin
from omnishell.runtime import PluginRegistry

pytestmark = pytest.mark.unit


class TestPluginBase:
    """Tests for PluginBase identity and helpers."""

    def test_identity(self, plugin_options: ModelPluginOptions) -> None:
        first = PluginBase(plugin_options)
        second = PluginBase(plugin_options)

        assert isinstance(first, ProtocolPlugin)
        assert isinstance(first.ref, PluginRef)
        assert first.ref != second.ref
        assert first.name == second.name == "plugin"
        assert first.priority is None

    def test_capabilities_come_from_options(
        self, plugin_options: ModelPluginOptions, bus_manager: BusManager
    ) -> None:
        plugin = PluginBase(plugin_options)

        assert plugin.bus is bus_manager
        assert plugin.settings is plugin_options.settings
        assert plugin.display is plugin_options.display

    def test_default_hooks(self, plugin_options: ModelPluginOptions) -> None:
        plugin = PluginBase(plugin_options)

        assert plugin.is_configured() is True
        assert plugin.unregister() is None
        assert repr(plugin) == "PluginBase(name='plugin', version='0.0.0')"

    @pytest.mark.asyncio
    async def test_execute_chain_requires_leadership(
        self,
        bus_manager: BusManager,
        make_plugin: Callable[..., Any],
    ) -> None:
        leader = make_plugin("leader")
        follower = make_plugin("follower")
        bus_manager.register_middleware(leader, {"x": [leader.link]})
        bus_manager.register_middleware(follower, {"x": [follower.link]})

        context = await leader.execute_chain("x", {})
        assert context["trace"] == ["leader", "follower"]

        with pytest.raises(UnauthorizedInitiatorError):
            await follower.execute_chain("x", {})
        with pytest.raises(ChainNotFoundError):
            await leader.execute_chain("nope", {})

    @pytest.mark.asyncio
    async def test_initiate_chain_is_fire_and_forget(
        self,
        bus_manager: BusManager,
        make_plugin: Callable[..., Any],
    ) -> None:
        leader = make_plugin("leader")
        bus_manager.register_middleware(leader, {"x": [leader.link]})
        bus_manager.init()
        context: dict[str, Any] = {}

        leader.initiate_chain("x", context)
        await bus_manager.events.wait_idle()

        assert context["trace"] == ["leader"]


class TestPluginCore:
    """Tests for the built-in core plugin."""

    @pytest.fixture
    def core(self, plugin_options: ModelPluginOptions) -> PluginCore:
        return PluginCore(plugin_options)

    @pytest.fixture
    def ctx(self, plugin_registry: PluginRegistry) -> ModelContextProviders:
        return plugin_registry.context_providers

    def test_identity(self, core: PluginCore) -> None:
        assert core.name == "core"
        assert core.priority == CORE_PLUGIN_PRIORITY

    def test_unconfigured_without_plugins(self, core: PluginCore) -> None:
        assert core.is_configured() == {"plugins": "Enable at least one plugin"}

    def test_configured_with_plugins(
        self, core: PluginCore, settings: SettingsRegistry
    ) -> None:
        settings.update({"plugins": ["chat"]})

        assert core.is_configured() is True

    @pytest.mark.asyncio
    async def test_register_leads_core_chain(
        self,
        core: PluginCore,
        ctx: ModelContextProviders,
        bus_manager: BusManager,
    ) -> None:
        await core.register(ctx)

        assert bus_manager.chains.leader_of(CORE_CHAIN) is core.ref

    @pytest.mark.asyncio
    async def test_process_stamps_payload(
        self, core: PluginCore, ctx: ModelContextProviders
    ) -> None:
        await core.register(ctx)

        result = await core.process({"text": "hi"})

        assert result["payload"] == {"text": "hi"}
        datetime.fromisoformat(result["meta"]["received_at"])

    @pytest.mark.asyncio
    async def test_other_plugins_extend_core_chain(
        self,
        core: PluginCore,
        ctx: ModelContextProviders,
        bus_manager: BusManager,
        make_plugin: Callable[..., Any],
    ) -> None:
        await core.register(ctx)
        emotes = make_plugin("emotes")

        async def shout(context: Any, next_link: Any, error: Any = None) -> None:
            context["payload"] = context["payload"].upper()
            await next_link(error)

        bus_manager.register_middleware(emotes, {CORE_CHAIN: [shout]})

        result = await core.process("hello")

        assert result["payload"] == "HELLO"
        assert "received_at" in result["meta"]
