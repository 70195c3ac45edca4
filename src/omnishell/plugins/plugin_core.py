# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Built-in core plugin.

Always loaded first and registered first (highest priority), so it leads
the core message chain other plugins extend. It also reports the shell as
unconfigured while no plugin is enabled, which sends the bootstrapper to
the configuration view.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from omnishell.enums import EnumCoreEvent
from omnishell.models import ModelContextProviders, ModelEventRegistration
from omnishell.plugins.plugin_base import PluginBase

logger = logging.getLogger(__name__)

CORE_CHAIN = "core:message"
CORE_PLUGIN_PRIORITY = 1_000_000


class PluginCore(PluginBase):
    """Leads ``core:message`` and validates that plugins are enabled."""

    name = "core"
    version = "1.0.0"
    priority = CORE_PLUGIN_PRIORITY

    async def register(self, ctx: ModelContextProviders) -> None:
        ctx.bus.register_events(
            self,
            ModelEventRegistration(
                receives={EnumCoreEvent.SYNC_SETTINGS.value: self.on_sync_settings},
                sends=[EnumCoreEvent.MIDDLEWARE_EXECUTE.value],
            ),
        )
        ctx.bus.register_middleware(self, {CORE_CHAIN: [self.stamp_received]})

    def is_configured(self) -> bool | dict[str, str]:
        if not self.settings.get().get("plugins"):
            return {"plugins": "Enable at least one plugin"}
        return True

    async def process(self, payload: Any) -> dict[str, Any]:
        """Run ``payload`` through the core chain and return the context."""
        context: dict[str, Any] = {"payload": payload, "meta": {}}
        return await self.execute_chain(CORE_CHAIN, context)

    async def stamp_received(self, context: Any, next_link: Any, error: Any = None) -> None:
        context["meta"].setdefault("received_at", datetime.now(UTC).isoformat())
        await next_link(error)

    def on_sync_settings(self, values: Any) -> None:
        logger.debug("Settings synced", extra={"keys": sorted(values or {})})


__all__: list[str] = ["CORE_CHAIN", "CORE_PLUGIN_PRIORITY", "PluginCore"]
