# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Convenience base class for plugins.

Subclassing is optional: the registry only needs ``name``, ``version`` and
``ref``, and probes for the optional hooks with ``getattr``. PluginBase
provides those, no-op hooks, and helpers for initiating chains.

Example:
    ```python
    class Plugin(PluginBase):
        name = "emotes"
        version = "1.2.0"
        priority = 10

        async def register(self, ctx: ModelContextProviders) -> None:
            ctx.bus.register_middleware(self, {"core:message": [self.render]})
            await ctx.template.register(self, "https://cdn.example/emotes.html")

        async def render(self, context, next, error=None):
            context["payload"] = expand_emotes(context["payload"])
            await next(error)
    ```
"""

from __future__ import annotations

from typing import Any, Optional

from omnishell.enums import EnumCoreEvent
from omnishell.models import (
    ModelChainInitiation,
    ModelContextProviders,
    ModelPluginOptions,
)
from omnishell.protocols import PluginRef


class PluginBase:
    """Base plugin with identity, options and no-op lifecycle hooks.

    Attributes:
        name: Display name. Not an identity.
        version: Plugin version string.
        priority: Higher registers first; None sorts after every number.
        ref: Identity token, fresh per instance.
    """

    name: str = "plugin"
    version: str = "0.0.0"
    priority: Optional[int] = None

    def __init__(self, options: ModelPluginOptions) -> None:
        self.options = options
        self.ref = PluginRef(self.name)

    @property
    def bus(self) -> Any:
        return self.options.bus

    @property
    def settings(self) -> Any:
        return self.options.settings

    @property
    def display(self) -> Any:
        return self.options.display

    def register(self, ctx: ModelContextProviders) -> Any:
        """Register events, middleware and collaborator URLs. No-op by default."""
        return None

    def unregister(self) -> Any:
        """Release plugin-side resources. No-op by default."""
        return None

    def is_configured(self) -> bool | dict[str, str]:
        return True

    def initiate_chain(self, chain_name: str, context: Any) -> None:
        """Fire-and-forget chain initiation through MIDDLEWARE_EXECUTE.

        Failures are logged and shown by the bus manager.
        """
        self.bus.emit(
            EnumCoreEvent.MIDDLEWARE_EXECUTE,
            ModelChainInitiation(
                chain_name=chain_name,
                initial_context=context,
                initiating_plugin=self,
            ),
        )

    async def execute_chain(self, chain_name: str, context: Any) -> Any:
        """Run a chain this plugin leads and return the (mutated) context.

        Raises:
            ChainNotFoundError: Unknown chain.
            UnauthorizedInitiatorError: This plugin does not lead the chain.
        """
        await self.bus.execute_chain(
            ModelChainInitiation(
                chain_name=chain_name,
                initial_context=context,
                initiating_plugin=self,
            )
        )
        return context

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, version={self.version!r})"


__all__: list[str] = ["PluginBase"]
