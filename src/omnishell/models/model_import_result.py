# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Import Result Model.

Partition of one load pass into instantiated plugins and load errors.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from omnishell.errors import PluginLoadError


class ModelImportResult(BaseModel):
    """Outcome of a plugin load pass.

    Invariant:
        ``len(good) + len(bad)`` equals the number of de-duplicated sources
        that were requested.

    Attributes:
        good: Plugins that instantiated and registered, in priority order.
        bad: One PluginLoadError per failed source, in source order.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    good: list[Any] = Field(
        default_factory=list,
        description="Instantiated plugin instances",
    )
    bad: list[PluginLoadError] = Field(
        default_factory=list,
        description="Errors for sources that failed to load",
    )

    @property
    def total(self) -> int:
        return len(self.good) + len(self.bad)

    @property
    def has_failures(self) -> bool:
        return bool(self.bad)


__all__ = ["ModelImportResult"]
