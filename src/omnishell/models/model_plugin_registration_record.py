# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Plugin Registration Record Model.

Snapshot of everything one plugin added to the bus, used for diagnostics
and for asserting that teardown reverses exactly what was added.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelPluginRegistrationRecord(BaseModel):
    """Events and chain links contributed by one plugin.

    Attributes:
        plugin_name: Display name of the plugin.
        events: (event name, listener) pairs in registration order.
        chains: Chain name -> links contributed, in registration order.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    plugin_name: str = Field(..., description="Display name of the plugin")
    events: list[tuple[str, Callable[..., Any]]] = Field(
        default_factory=list,
        description="Event listeners added by the plugin",
    )
    chains: dict[str, list[Callable[..., Any]]] = Field(
        default_factory=dict,
        description="Chain links added by the plugin",
    )

    @property
    def is_empty(self) -> bool:
        return not self.events and not any(self.chains.values())


__all__ = ["ModelPluginRegistrationRecord"]
