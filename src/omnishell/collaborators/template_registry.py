# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Template collaborator: which template URLs each plugin contributed."""

from __future__ import annotations

import logging
from typing import Optional

from omnishell.collaborators.mixin_lock_guard import MixinLockGuard
from omnishell.protocols import ProtocolLockHolder, ProtocolPlugin

logger = logging.getLogger(__name__)


class TemplateRegistry(MixinLockGuard):
    """Records template URLs per plugin. Fetching and rendering are host concerns."""

    def __init__(self, lock_holder: Optional[ProtocolLockHolder] = None) -> None:
        self._init_lock_guard(lock_holder)
        self._templates: dict[object, list[str]] = {}

    async def register(self, plugin: ProtocolPlugin, template_url: str) -> None:
        self._ensure_unlocked("register_template", plugin)
        self._templates.setdefault(plugin.ref, []).append(template_url)
        logger.debug(
            "Registered template",
            extra={"plugin_name": plugin.name, "template_url": template_url},
        )

    def unregister(self, plugin: ProtocolPlugin) -> None:
        self._templates.pop(plugin.ref, None)

    def templates_for(self, plugin: ProtocolPlugin) -> list[str]:
        return list(self._templates.get(plugin.ref, ()))

    def __len__(self) -> int:
        return sum(len(urls) for urls in self._templates.values())


__all__: list[str] = ["TemplateRegistry"]
