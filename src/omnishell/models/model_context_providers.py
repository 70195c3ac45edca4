# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Context Providers Model.

The capability object handed to a plugin's ``register(ctx)`` hook. It exposes
exactly the registration surfaces a plugin may touch and nothing else.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelContextProviders(BaseModel):
    """Registration surfaces available to a plugin.

    Attributes:
        bus: BusManager (``register_events``, ``register_middleware``).
        settings: ProtocolSettingsProvider.
        template: ProtocolTemplateProvider.
        stylesheets: ProtocolStylesheetProvider.
        display: ProtocolDisplay.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    bus: Any = Field(..., description="Bus manager for events and middleware")
    settings: Any = Field(..., description="Settings schema collaborator")
    template: Any = Field(..., description="Template collaborator")
    stylesheets: Any = Field(..., description="Stylesheet collaborator")
    display: Any = Field(..., description="User-facing message surface")


__all__ = ["ModelContextProviders"]
