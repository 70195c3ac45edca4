# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Renderer Started Model.

Payload of ``EnumCoreEvent.RENDERER_STARTED``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from omnishell.enums import EnumRenderMode


class ModelRendererStarted(BaseModel):
    """Announces which renderer is active and in which mode."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    renderer: Any = Field(..., description="The active ProtocolRenderer")
    render_mode: EnumRenderMode = Field(..., description="APP or CONFIGURE")
    ctx: Any = Field(
        default=None,
        description="ModelContextProviders the renderer was built with",
    )


__all__ = ["ModelRendererStarted"]
