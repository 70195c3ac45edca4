# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for ChainRegistry leader election, execution and teardown."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from omnishell.chain import ChainRegistry, error_boundary_link
from omnishell.errors import (
    ChainNotFoundError,
    SilentChainAbort,
    UnauthorizedInitiatorError,
)
from omnishell.models import ModelChainInitiation
from omnishell.protocols import PluginRef

pytestmark = pytest.mark.unit


class FakePlugin:
    def __init__(self, name: str) -> None:
        self.name = name
        self.version = "1.0.0"
        self.ref = PluginRef(name)


def initiation(chain: str, plugin: FakePlugin, ctx: Any = None) -> ModelChainInitiation:
    return ModelChainInitiation(
        chain_name=chain,
        initial_context=ctx if ctx is not None else {},
        initiating_plugin=plugin,
    )


def tracing(name: str):  # type: ignore[no-untyped-def]
    async def link(ctx: dict[str, Any], next_link: Any, error: Any = None) -> None:
        ctx.setdefault("trace", []).append(name)
        await next_link(error)

    return link


@pytest.fixture
def registry() -> ChainRegistry:
    return ChainRegistry()


@pytest.fixture
def plugin_a() -> FakePlugin:
    return FakePlugin("a")


@pytest.fixture
def plugin_b() -> FakePlugin:
    return FakePlugin("b")


class TestChainRegistryLeadership:
    """Test first-writer leader election and authorization."""

    def test_first_registrant_leads(
        self, registry: ChainRegistry, plugin_a: FakePlugin, plugin_b: FakePlugin
    ) -> None:
        registry.register_middleware(plugin_a, {"x": [tracing("l1")]})
        registry.register_middleware(plugin_b, {"x": [tracing("l2")]})

        assert registry.leader_of("x") is plugin_a.ref

    @pytest.mark.asyncio
    async def test_non_leader_rejected_regardless_of_contribution(
        self, registry: ChainRegistry, plugin_a: FakePlugin, plugin_b: FakePlugin
    ) -> None:
        registry.register_middleware(plugin_a, {"x": [tracing("l1")]})
        registry.register_middleware(plugin_b, {"x": [tracing("l2")]})

        with pytest.raises(UnauthorizedInitiatorError) as exc_info:
            await registry.execute(initiation("x", plugin_b))

        assert exc_info.value.chain_name == "x"
        assert exc_info.value.plugin_name == "b"

    @pytest.mark.asyncio
    async def test_same_name_different_ref_rejected(
        self, registry: ChainRegistry, plugin_a: FakePlugin
    ) -> None:
        impostor = FakePlugin("a")
        registry.register_middleware(plugin_a, {"x": [tracing("l1")]})

        with pytest.raises(UnauthorizedInitiatorError):
            await registry.execute(initiation("x", impostor))

    @pytest.mark.asyncio
    async def test_leader_runs_links_in_order_then_boundary(
        self, registry: ChainRegistry, plugin_a: FakePlugin, plugin_b: FakePlugin
    ) -> None:
        registry.register_middleware(plugin_a, {"x": [tracing("l1")]})
        registry.register_middleware(plugin_b, {"x": [tracing("l2")]})
        ctx: dict[str, Any] = {}

        await registry.execute(initiation("x", plugin_a, ctx))

        assert ctx["trace"] == ["l1", "l2"]
        chain = registry.get_chain("x")
        assert chain is not None
        assert chain.links[-1] is error_boundary_link

    @pytest.mark.asyncio
    async def test_unknown_chain(self, registry: ChainRegistry, plugin_a: FakePlugin) -> None:
        with pytest.raises(ChainNotFoundError, match="does not exist: nope"):
            await registry.execute(initiation("nope", plugin_a))


class TestChainRegistryBoundary:
    """Test the single terminal boundary link."""

    def test_boundary_added_once_per_chain(
        self, registry: ChainRegistry, plugin_a: FakePlugin, plugin_b: FakePlugin
    ) -> None:
        registry.register_middleware(plugin_a, {"x": [tracing("l1")], "y": [tracing("y1")]})
        for _ in range(3):
            registry.register_middleware(plugin_b, {"x": [tracing("more")]})

        for name in ("x", "y"):
            chain = registry.get_chain(name)
            assert chain is not None
            boundaries = [link for link in chain.links if link is error_boundary_link]
            assert len(boundaries) == 1
            assert chain.links[-1] is error_boundary_link

    @pytest.mark.asyncio
    async def test_forwarded_error_reaches_boundary_and_rejects(
        self, registry: ChainRegistry, plugin_a: FakePlugin
    ) -> None:
        boom = ValueError("unhandled")

        async def forward(ctx: Any, next_link: Any, error: Any = None) -> None:
            await next_link(boom)

        registry.register_middleware(plugin_a, {"x": [forward]})

        with pytest.raises(ValueError) as exc_info:
            await registry.execute(initiation("x", plugin_a))
        assert exc_info.value is boom

    @pytest.mark.asyncio
    async def test_absorbed_error_does_not_reject(
        self, registry: ChainRegistry, plugin_a: FakePlugin
    ) -> None:
        async def forward(ctx: Any, next_link: Any, error: Any = None) -> None:
            await next_link(ValueError("handled later"))

        async def handler(ctx: Any, next_link: Any, error: Any = None) -> None:
            ctx["handled"] = error is not None
            await next_link()

        registry.register_middleware(plugin_a, {"x": [forward, handler]})
        ctx: dict[str, Any] = {}

        await registry.execute(initiation("x", plugin_a, ctx))

        assert ctx["handled"] is True


class TestChainRegistrySilentAbort:
    """Test the silent-fail marker."""

    @pytest.mark.asyncio
    async def test_raised_silent_abort_is_swallowed(
        self,
        registry: ChainRegistry,
        plugin_a: FakePlugin,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        async def stop(ctx: Any, next_link: Any, error: Any = None) -> None:
            raise SilentChainAbort("nothing to do")

        registry.register_middleware(plugin_a, {"x": [stop, tracing("never")]})
        ctx: dict[str, Any] = {}

        with caplog.at_level(logging.INFO):
            await registry.execute(initiation("x", plugin_a, ctx))

        assert "trace" not in ctx
        assert "silently aborted" in caplog.text

    @pytest.mark.asyncio
    async def test_forwarded_silent_abort_is_swallowed(
        self, registry: ChainRegistry, plugin_a: FakePlugin
    ) -> None:
        async def stop(ctx: Any, next_link: Any, error: Any = None) -> None:
            await next_link(SilentChainAbort())

        registry.register_middleware(plugin_a, {"x": [stop, tracing("still-runs")]})
        ctx: dict[str, Any] = {}

        await registry.execute(initiation("x", plugin_a, ctx))

        assert ctx["trace"] == ["still-runs"]

    @pytest.mark.asyncio
    async def test_custom_marker_attribute_is_honored(
        self, registry: ChainRegistry, plugin_a: FakePlugin
    ) -> None:
        class QuietStop(Exception):
            silently_fail_chain = True

        async def stop(ctx: Any, next_link: Any, error: Any = None) -> None:
            raise QuietStop()

        registry.register_middleware(plugin_a, {"x": [stop]})

        await registry.execute(initiation("x", plugin_a))

    @pytest.mark.asyncio
    async def test_non_marker_error_propagates(
        self, registry: ChainRegistry, plugin_a: FakePlugin
    ) -> None:
        async def explode(ctx: Any, next_link: Any, error: Any = None) -> None:
            raise RuntimeError("real failure")

        registry.register_middleware(plugin_a, {"x": [explode]})

        with pytest.raises(RuntimeError, match="real failure"):
            await registry.execute(initiation("x", plugin_a))


class TestChainRegistryTeardown:
    """Test unregister and reset."""

    @pytest.mark.asyncio
    async def test_unregister_follower_removes_only_its_links(
        self, registry: ChainRegistry, plugin_a: FakePlugin, plugin_b: FakePlugin
    ) -> None:
        l2 = tracing("l2")
        registry.register_middleware(plugin_a, {"x": [tracing("l1")]})
        registry.register_middleware(plugin_b, {"x": [l2]})

        registry.unregister(plugin_b)

        chain = registry.get_chain("x")
        assert chain is not None
        assert l2 not in chain
        assert registry.leader_of("x") is plugin_a.ref
        ctx: dict[str, Any] = {}
        await registry.execute(initiation("x", plugin_a, ctx))
        assert ctx["trace"] == ["l1"]

    @pytest.mark.asyncio
    async def test_unregister_leader_allows_fresh_election(
        self, registry: ChainRegistry, plugin_a: FakePlugin, plugin_b: FakePlugin
    ) -> None:
        registry.register_middleware(plugin_a, {"x": [tracing("l1")]})
        registry.register_middleware(plugin_b, {"x": [tracing("l2")]})

        registry.unregister(plugin_a)

        assert "x" not in registry
        assert registry.leader_of("x") is None
        assert registry.contributions_of(plugin_b) == {}

        registry.register_middleware(plugin_b, {"x": [tracing("l3")]})
        assert registry.leader_of("x") is plugin_b.ref
        ctx: dict[str, Any] = {}
        await registry.execute(initiation("x", plugin_b, ctx))
        assert ctx["trace"] == ["l3"]

    def test_unregister_without_contribution_is_noop(
        self, registry: ChainRegistry, plugin_a: FakePlugin, plugin_b: FakePlugin
    ) -> None:
        registry.register_middleware(plugin_a, {"x": [tracing("l1")]})

        registry.unregister(plugin_b)

        assert registry.chain_names() == ["x"]

    @pytest.mark.asyncio
    async def test_reregister_after_unregister_matches_first_time(
        self, registry: ChainRegistry, plugin_a: FakePlugin
    ) -> None:
        link = tracing("l1")
        registry.register_middleware(plugin_a, {"x": [link]})
        before = registry.get_chain("x")
        assert before is not None
        before_links = before.links

        registry.unregister(plugin_a)
        registry.register_middleware(plugin_a, {"x": [link]})

        after = registry.get_chain("x")
        assert after is not None
        assert after.links == before_links
        assert registry.leader_of("x") is plugin_a.ref

    def test_reset_drops_everything(
        self, registry: ChainRegistry, plugin_a: FakePlugin
    ) -> None:
        registry.register_middleware(plugin_a, {"x": [tracing("l1")], "y": []})

        registry.reset()

        assert len(registry) == 0
        assert registry.leader_of("x") is None
        assert registry.contributions_of(plugin_a) == {}
