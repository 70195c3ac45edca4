# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory collaborators plugins register against.

Exports:
    SettingsRegistry: Settings schemas and current values
    TemplateRegistry: Template URLs per plugin
    StylesheetRegistry: Stylesheet URLs per plugin
    DisplayLogger: Logging-backed message display
    MixinLockGuard: Lock check shared by the registries
"""

from omnishell.collaborators.display_logger import DisplayLogger
from omnishell.collaborators.mixin_lock_guard import MixinLockGuard
from omnishell.collaborators.settings_registry import SettingsRegistry
from omnishell.collaborators.stylesheet_registry import StylesheetRegistry
from omnishell.collaborators.template_registry import TemplateRegistry

__all__: list[str] = [
    "DisplayLogger",
    "MixinLockGuard",
    "SettingsRegistry",
    "StylesheetRegistry",
    "TemplateRegistry",
]
