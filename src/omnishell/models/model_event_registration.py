# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Event Registration Model.

What a plugin hands to ``bus.register_events``: the events it listens for
(with their handlers) and the events it may emit.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelEventRegistration(BaseModel):
    """Events a plugin receives and sends.

    Attributes:
        receives: Event name -> listener. Listeners may be sync or async.
        sends: Event names the plugin emits. Informational only; used by the
            CLI and by diagnostics, never enforced.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    receives: dict[str, Callable[..., Any]] = Field(
        default_factory=dict,
        description="Event name to listener callable",
    )
    sends: list[str] = Field(
        default_factory=list,
        description="Event names this plugin may emit",
    )


__all__ = ["ModelEventRegistration"]
