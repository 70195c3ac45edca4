# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Plugin constructor options."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelPluginOptions(BaseModel):
    """The single argument every plugin constructor receives.

    Attributes:
        bus: BusManager, for emitting events and initiating chains.
        settings: ProtocolSettingsProvider, for reading current settings.
        display: ProtocolDisplay, for user-facing messages.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    bus: Any = Field(..., description="Bus manager shared by all plugins")
    settings: Any = Field(..., description="Settings collaborator")
    display: Any = Field(..., description="User-facing message surface")


__all__ = ["ModelPluginOptions"]
