# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Plugin Source Models.

A plugin source is either a constructor already in memory (the built-in
default plugin, or a test double) or a module location that a
ProtocolModuleResolver turns into a module.

Discriminated on ``kind``:
    - ``inline``: ModelInlineConstructorSource
    - ``remote``: ModelRemoteModuleSource
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ModelInlineConstructorSource(BaseModel):
    """A plugin constructor that needs no resolution."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    kind: Literal["inline"] = "inline"
    constructor: Callable[..., Any] = Field(
        ...,
        description="Plugin class or factory taking ModelPluginOptions",
    )

    @property
    def label(self) -> str:
        return f"inline:{getattr(self.constructor, '__qualname__', repr(self.constructor))}"

    @property
    def dedupe_key(self) -> object:
        return self.constructor


class ModelRemoteModuleSource(BaseModel):
    """A normalized module location (URL or filesystem path)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["remote"] = "remote"
    location: str = Field(
        ...,
        min_length=1,
        description="Fully-qualified module location",
    )

    @property
    def label(self) -> str:
        return self.location

    @property
    def dedupe_key(self) -> object:
        return self.location


PluginSource = Annotated[
    Union[ModelInlineConstructorSource, ModelRemoteModuleSource],
    Field(discriminator="kind"),
]


__all__ = [
    "ModelInlineConstructorSource",
    "ModelRemoteModuleSource",
    "PluginSource",
]
