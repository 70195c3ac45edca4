# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocols for the external collaborators plugins register against.

Settings schemas, templates, stylesheets and the display are owned by the
host, not by the plugin core. The core only needs these narrow contracts:
register a URL for a plugin, and reverse every registration of a plugin.

Lock Semantics:
    Collaborators read the shared ProtocolLockHolder and refuse register
    calls with BusLockedError while ``is_locked`` is True. ``unregister``
    always succeeds, so teardown can complete while the shell is locked.
    ``unregister`` for a plugin that registered nothing is a no-op.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from omnishell.protocols.protocol_plugin import ProtocolPlugin


@runtime_checkable
class ProtocolLockHolder(Protocol):
    """Anything exposing the shell's single locked flag."""

    @property
    def is_locked(self) -> bool:
        """True while new registrations must be refused."""
        ...


@runtime_checkable
class ProtocolSettingsProvider(Protocol):
    """Settings collaborator: schema registration plus current values."""

    async def register(self, plugin: ProtocolPlugin, schema_url: str) -> None:
        """Register a settings schema document for a plugin."""
        ...

    def unregister(self, plugin: ProtocolPlugin) -> None:
        """Remove the plugin's schema (no-op if it registered none)."""
        ...

    def get(self) -> Mapping[str, object]:
        """Return the current settings values."""
        ...


@runtime_checkable
class ProtocolTemplateProvider(Protocol):
    """Template collaborator."""

    async def register(self, plugin: ProtocolPlugin, template_url: str) -> None:
        """Register a template document for a plugin."""
        ...

    def unregister(self, plugin: ProtocolPlugin) -> None:
        """Remove every template the plugin registered."""
        ...


@runtime_checkable
class ProtocolStylesheetProvider(Protocol):
    """Stylesheet collaborator."""

    def register(self, plugin: ProtocolPlugin, style_url: str) -> None:
        """Attach a stylesheet for a plugin."""
        ...

    def unregister(self, plugin: ProtocolPlugin) -> None:
        """Detach the plugin's stylesheets."""
        ...


@runtime_checkable
class ProtocolDisplay(Protocol):
    """User-facing message surface."""

    def show_info(self, message: str, title: str | None = None) -> None:
        """Show an informational message."""
        ...

    def show_error(self, error: BaseException | list[BaseException]) -> None:
        """Show one error or a batch of errors."""
        ...


__all__: list[str] = [
    "ProtocolDisplay",
    "ProtocolLockHolder",
    "ProtocolSettingsProvider",
    "ProtocolStylesheetProvider",
    "ProtocolTemplateProvider",
]
