# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Settings collaborator.

Records which settings schema each plugin registered and holds the current
settings values. Rendering the schema as a form and persisting values are
host concerns outside this package.

Values:
    ``get()`` returns a copy of the current values. The plugin registry
    reads the ``plugins`` and ``custom_plugins`` keys from it to decide which
    plugins to load. ``update()`` merges new values and emits
    ``EnumCoreEvent.SYNC_SETTINGS`` when an event bus is attached.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from omnishell.collaborators.mixin_lock_guard import MixinLockGuard
from omnishell.enums import EnumCoreEvent
from omnishell.event_bus import InMemoryEventBus
from omnishell.protocols import ProtocolLockHolder, ProtocolPlugin

logger = logging.getLogger(__name__)


class SettingsRegistry(MixinLockGuard):
    """In-memory settings schema registry and value store.

    Example:
        ```python
        settings = SettingsRegistry(lock_holder=bus, initial={"plugins": ["chat"]})
        await settings.register(chat_plugin, "https://cdn.example/chat/settings.json")
        settings.get()["plugins"]   # ['chat']
        ```
    """

    def __init__(
        self,
        lock_holder: Optional[ProtocolLockHolder] = None,
        initial: Optional[Mapping[str, Any]] = None,
        events: Optional[InMemoryEventBus] = None,
    ) -> None:
        self._init_lock_guard(lock_holder)
        self._values: dict[str, Any] = dict(initial or {})
        self._events = events
        # plugin ref -> (plugin name, schema url)
        self._schemas: dict[object, tuple[str, str]] = {}

    async def register(self, plugin: ProtocolPlugin, schema_url: str) -> None:
        """Record ``schema_url`` as ``plugin``'s settings schema.

        Raises:
            BusLockedError: While the shell is locked.
        """
        self._ensure_unlocked("register_settings", plugin)
        self._schemas[plugin.ref] = (plugin.name, schema_url)
        logger.debug(
            "Registered settings schema",
            extra={"plugin_name": plugin.name, "schema_url": schema_url},
        )

    def unregister(self, plugin: ProtocolPlugin) -> None:
        self._schemas.pop(plugin.ref, None)

    def get(self) -> dict[str, Any]:
        return dict(self._values)

    def update(self, values: Mapping[str, Any]) -> None:
        """Merge ``values`` into the current settings."""
        self._values.update(values)
        logger.debug("Settings updated", extra={"keys": sorted(values)})
        if self._events is not None:
            self._events.emit(EnumCoreEvent.SYNC_SETTINGS, self.get())

    def schema_for(self, plugin: ProtocolPlugin) -> Optional[str]:
        entry = self._schemas.get(plugin.ref)
        return entry[1] if entry else None

    def schemas(self) -> list[tuple[str, str]]:
        """Return (plugin name, schema url) pairs in registration order."""
        return list(self._schemas.values())


__all__: list[str] = ["SettingsRegistry"]
