# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol for renderers started by the shell bootstrapper.

Renderers (the main view, the configuration view) are host collaborators.
The core only needs to initialize them and to listen on their event bus for
``EnumCoreEvent.PLUGINS_CHANGED`` during configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from omnishell.event_bus.inmemory_event_bus import InMemoryEventBus


@runtime_checkable
class ProtocolRenderer(Protocol):
    """A renderer instance presented to the user."""

    @property
    def events(self) -> InMemoryEventBus:
        """Event bus the renderer emits PLUGINS_CHANGED on."""
        ...

    async def init(self) -> None:
        """(Re)start the renderer."""
        ...


__all__: list[str] = ["ProtocolRenderer"]
