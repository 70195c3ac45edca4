# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""omnishell protocol definitions.

Exports:
    PluginRef: Identity token for plugin instances
    ProtocolPlugin: Structural plugin contract
    ProtocolModuleResolver: Location -> module resolution capability
    ProtocolRenderer: Renderer contract used by the bootstrapper
    ProtocolLockHolder: Access to the shell's locked flag
    ProtocolSettingsProvider: Settings collaborator contract
    ProtocolTemplateProvider: Template collaborator contract
    ProtocolStylesheetProvider: Stylesheet collaborator contract
    ProtocolDisplay: User-facing message contract
"""

from omnishell.protocols.protocol_collaborators import (
    ProtocolDisplay,
    ProtocolLockHolder,
    ProtocolSettingsProvider,
    ProtocolStylesheetProvider,
    ProtocolTemplateProvider,
)
from omnishell.protocols.protocol_module_resolver import ProtocolModuleResolver
from omnishell.protocols.protocol_plugin import PluginRef, ProtocolPlugin
from omnishell.protocols.protocol_renderer import ProtocolRenderer

__all__: list[str] = [
    "PluginRef",
    "ProtocolDisplay",
    "ProtocolLockHolder",
    "ProtocolModuleResolver",
    "ProtocolPlugin",
    "ProtocolRenderer",
    "ProtocolSettingsProvider",
    "ProtocolStylesheetProvider",
    "ProtocolTemplateProvider",
]
