# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Plugin Load Error Code Enumeration.

Classifies why a plugin source ended up in the ``bad`` half of an import
result. Values are stable strings so they can be rendered or logged.
"""

from enum import Enum


class EnumPluginLoadError(str, Enum):
    """Failure taxonomy for plugin loading.

    Attributes:
        MODULE_NOT_FOUND: No module exists at the attempted location.
        MISSING_EXPORT: The module loaded but has no constructor export.
        CONSTRUCTOR_FAILED: The export was found but raised while constructing.
        REGISTRATION_FAILED: The plugin instantiated but its register hook raised.
        DUPLICATE_REF: The plugin reuses the ref of an already loaded plugin.
    """

    MODULE_NOT_FOUND = "PLUGIN_LOADER_001"
    MISSING_EXPORT = "PLUGIN_LOADER_002"
    CONSTRUCTOR_FAILED = "PLUGIN_LOADER_003"
    REGISTRATION_FAILED = "PLUGIN_LOADER_004"
    DUPLICATE_REF = "PLUGIN_LOADER_005"


__all__ = ["EnumPluginLoadError"]
