# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol for resolving a plugin module location into a module object.

Resolution is an injected capability so the plugin registry never touches
the filesystem or network directly; tests substitute an in-memory resolver.

Error Contract:
    Implementations raise PluginLoadError with
    ``EnumPluginLoadError.MODULE_NOT_FOUND`` when nothing exists at the
    location. Any other exception raised while executing the module body is
    reported by the registry as MODULE_NOT_FOUND with the original cause chained.
"""

from __future__ import annotations

from types import ModuleType
from typing import Protocol, runtime_checkable


@runtime_checkable
class ProtocolModuleResolver(Protocol):
    """Turns a normalized plugin location into a loaded module."""

    async def resolve(self, location: str) -> ModuleType:
        """Load and return the module found at ``location``.

        Args:
            location: Fully-qualified plugin location (URL or path).

        Returns:
            The executed module.

        Raises:
            PluginLoadError: MODULE_NOT_FOUND if nothing exists at the location.
        """
        ...


__all__: list[str] = ["ProtocolModuleResolver"]
