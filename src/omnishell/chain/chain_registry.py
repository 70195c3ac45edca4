# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Named chain registry: chain name -> (MiddlewareChain, leader ref).

The registry mediates two different rights over a chain:

    - Contribution: any plugin may append links to any chain by name.
    - Execution: only the chain's leader may initiate it.

Leader Election:
    The first plugin to register links under a chain name becomes its leader.
    Leadership is kept in an explicit ``chain name -> ref`` map and is only
    cleared by ``reset()`` or by the leader's own ``unregister()``. A later
    registration under the same name then elects a fresh leader.

Error Boundary:
    Every chain gets exactly one terminal boundary link when it is created.
    Links contributed later are inserted before it, so the boundary always
    runs last and re-raises any error still in flight.

Silent Abort:
    An error carrying the silent-fail marker (see SilentChainAbort) that
    reaches ``execute`` is logged and swallowed. Any other error propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Optional
from uuid import uuid4

from omnishell.chain.middleware_chain import MiddlewareChain, MiddlewareLink
from omnishell.errors import (
    ChainNotFoundError,
    ModelShellErrorContext,
    UnauthorizedInitiatorError,
    is_silent_chain_abort,
)
from omnishell.models.model_chain_initiation import ModelChainInitiation
from omnishell.protocols.protocol_plugin import ProtocolPlugin

logger = logging.getLogger(__name__)


async def error_boundary_link(context, next_link, error=None) -> None:  # type: ignore[no-untyped-def]
    """Terminal link: re-raise an unhandled error, otherwise finish the chain."""
    if error is not None:
        raise error
    await next_link()


class ChainRegistry:
    """Owns named chains, their leaders, and each plugin's contributions.

    Example:
        ```python
        registry = ChainRegistry()
        registry.register_middleware(core_plugin, {"chat": [parse_message]})
        registry.register_middleware(emote_plugin, {"chat": [render_emotes]})

        await registry.execute(
            ModelChainInitiation(
                chain_name="chat",
                initial_context={"message": "hi"},
                initiating_plugin=core_plugin,
            )
        )
        ```
    """

    def __init__(self) -> None:
        self._chains: dict[str, MiddlewareChain] = {}
        self._leaders: dict[str, object] = {}
        # plugin ref -> chain name -> links contributed by that plugin
        self._contributions: dict[object, dict[str, list[MiddlewareLink]]] = {}

    def __len__(self) -> int:
        return len(self._chains)

    def __contains__(self, chain_name: object) -> bool:
        return chain_name in self._chains

    def chain_names(self) -> list[str]:
        """Return registered chain names in creation order."""
        return list(self._chains)

    def get_chain(self, chain_name: str) -> Optional[MiddlewareChain]:
        return self._chains.get(chain_name)

    def leader_of(self, chain_name: str) -> Optional[object]:
        """Return the ref of the plugin leading ``chain_name``, if any."""
        return self._leaders.get(chain_name)

    def contributions_of(self, plugin: ProtocolPlugin) -> dict[str, list[MiddlewareLink]]:
        """Return a copy of the chain -> links map contributed by ``plugin``."""
        contributed = self._contributions.get(plugin.ref, {})
        return {name: list(links) for name, links in contributed.items()}

    def register_middleware(
        self,
        plugin: ProtocolPlugin,
        mapping: Mapping[str, Iterable[MiddlewareLink]],
    ) -> None:
        """Append ``plugin``'s links to each named chain.

        Creates missing chains with ``plugin`` as leader and a single boundary
        link. Links are inserted before the boundary, in the given order.

        Args:
            plugin: The contributing plugin.
            mapping: Chain name -> links to append.
        """
        contributed = self._contributions.setdefault(plugin.ref, {})

        for chain_name, links in mapping.items():
            link_list = list(links)
            chain = self._chains.get(chain_name)

            if chain is None:
                chain = MiddlewareChain()
                chain.use(error_boundary_link)
                self._chains[chain_name] = chain
                self._leaders[chain_name] = plugin.ref
                logger.info(
                    "Registering '%s' as leader of chain: %s",
                    plugin.name,
                    chain_name,
                    extra={"plugin_name": plugin.name, "chain_name": chain_name},
                )

            chain.insert_before(error_boundary_link, *link_list)
            contributed.setdefault(chain_name, []).extend(link_list)

            logger.debug(
                "Added %d link(s) to chain %s",
                len(link_list),
                chain_name,
                extra={
                    "plugin_name": plugin.name,
                    "chain_name": chain_name,
                    "link_count": len(link_list),
                },
            )

    async def execute(self, initiation: ModelChainInitiation) -> None:
        """Execute a chain on behalf of its leader.

        Raises:
            ChainNotFoundError: ``chain_name`` is not registered.
            UnauthorizedInitiatorError: The initiating plugin is not the leader.
            BaseException: Any non-silent error escaping the chain.
        """
        chain_name = initiation.chain_name
        plugin = initiation.initiating_plugin
        plugin_name = getattr(plugin, "name", repr(plugin))

        chain = self._chains.get(chain_name)
        if chain is None:
            raise ChainNotFoundError(
                chain_name,
                context=ModelShellErrorContext(
                    operation="execute_chain",
                    target_name=chain_name,
                    plugin_name=plugin_name,
                ),
            )

        if self._leaders.get(chain_name) is not getattr(plugin, "ref", None):
            raise UnauthorizedInitiatorError(
                chain_name,
                plugin_name,
                context=ModelShellErrorContext(
                    operation="execute_chain",
                    target_name=chain_name,
                    plugin_name=plugin_name,
                ),
            )

        correlation_id = str(uuid4())
        log_extra = {
            "chain_name": chain_name,
            "plugin_name": plugin_name,
            "correlation_id": correlation_id,
        }

        logger.debug("Starting chain: %s", chain_name, extra=log_extra)
        try:
            await chain.execute(initiation.initial_context)
        except Exception as e:
            if is_silent_chain_abort(e):
                logger.info(
                    "Chain silently aborted: %s (%s)",
                    chain_name,
                    e,
                    extra=log_extra,
                )
                return
            logger.warning(
                "Error in chain %s: %s",
                chain_name,
                e,
                extra={**log_extra, "error": str(e)},
            )
            raise
        logger.debug("Ending chain: %s", chain_name, extra=log_extra)

    def unregister(self, plugin: ProtocolPlugin) -> None:
        """Reverse exactly what ``plugin`` contributed.

        Removes the plugin's links from every chain it touched. Chains it leads
        are dropped entirely so the name can elect a fresh leader. A plugin
        that contributed nothing is a no-op.
        """
        contributed = self._contributions.pop(plugin.ref, None)
        if not contributed:
            return

        for chain_name, links in contributed.items():
            chain = self._chains.get(chain_name)
            if chain is None:
                continue
            for link in links:
                chain.unuse(link)

        led = [name for name, ref in self._leaders.items() if ref is plugin.ref]
        for chain_name in led:
            self._drop_chain(chain_name)

        logger.debug(
            "Unregistered chain contributions",
            extra={
                "plugin_name": plugin.name,
                "chains": sorted(contributed),
                "dropped_chains": led,
            },
        )

    def reset(self) -> None:
        """Drop every chain, leader record, and contribution record."""
        self._chains.clear()
        self._leaders.clear()
        self._contributions.clear()

    def _drop_chain(self, chain_name: str) -> None:
        self._chains.pop(chain_name, None)
        self._leaders.pop(chain_name, None)
        # Other contributors' records for this name now point at a dead chain
        for contributed in self._contributions.values():
            contributed.pop(chain_name, None)
        logger.info(
            "Dropped chain after leader unregistered: %s",
            chain_name,
            extra={"chain_name": chain_name},
        )


__all__: list[str] = ["ChainRegistry", "error_boundary_link"]
