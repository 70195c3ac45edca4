# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Stylesheet collaborator: stylesheet URLs attached per plugin."""

from __future__ import annotations

import logging
from typing import Optional

from omnishell.collaborators.mixin_lock_guard import MixinLockGuard
from omnishell.protocols import ProtocolLockHolder, ProtocolPlugin

logger = logging.getLogger(__name__)


class StylesheetRegistry(MixinLockGuard):
    """Ordered stylesheet list; each entry remembers the plugin that added it."""

    def __init__(self, lock_holder: Optional[ProtocolLockHolder] = None) -> None:
        self._init_lock_guard(lock_holder)
        self._entries: list[tuple[object, str]] = []

    def register(self, plugin: ProtocolPlugin, style_url: str) -> None:
        self._ensure_unlocked("register_stylesheet", plugin)
        self._entries.append((plugin.ref, style_url))
        logger.debug(
            "Registered stylesheet",
            extra={"plugin_name": plugin.name, "style_url": style_url},
        )

    def unregister(self, plugin: ProtocolPlugin) -> None:
        self._entries = [(ref, url) for ref, url in self._entries if ref is not plugin.ref]

    def stylesheets(self) -> list[str]:
        """Return every attached stylesheet URL in attach order."""
        return [url for _, url in self._entries]


__all__: list[str] = ["StylesheetRegistry"]
