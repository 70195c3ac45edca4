# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Plugin base classes and the built-in core plugin."""

from omnishell.plugins.plugin_base import PluginBase
from omnishell.plugins.plugin_core import CORE_CHAIN, CORE_PLUGIN_PRIORITY, PluginCore

__all__: list[str] = ["CORE_CHAIN", "CORE_PLUGIN_PRIORITY", "PluginBase", "PluginCore"]
