# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""omnishell data models.

Exports:
    ModelChainInitiation: MIDDLEWARE_EXECUTE payload
    ModelContextProviders: Capability object passed to register hooks
    ModelEventRegistration: Events a plugin receives and sends
    ModelImportResult: good/bad partition of a load pass
    ModelPluginOptions: Plugin constructor argument
    ModelPluginRegistrationRecord: What one plugin added to the bus
    ModelRendererStarted: RENDERER_STARTED payload
    ModelShellConfig: Session configuration
    PluginSource: Inline constructor or remote module location
"""

from omnishell.models.model_chain_initiation import ModelChainInitiation
from omnishell.models.model_context_providers import ModelContextProviders
from omnishell.models.model_event_registration import ModelEventRegistration
from omnishell.models.model_import_result import ModelImportResult
from omnishell.models.model_plugin_options import ModelPluginOptions
from omnishell.models.model_plugin_registration_record import (
    ModelPluginRegistrationRecord,
)
from omnishell.models.model_plugin_source import (
    ModelInlineConstructorSource,
    ModelRemoteModuleSource,
    PluginSource,
)
from omnishell.models.model_renderer_started import ModelRendererStarted
from omnishell.models.model_shell_config import (
    ModelShellConfig,
    coerce_plugin_entries,
)

__all__: list[str] = [
    "ModelChainInitiation",
    "ModelContextProviders",
    "ModelEventRegistration",
    "ModelImportResult",
    "ModelInlineConstructorSource",
    "ModelPluginOptions",
    "ModelPluginRegistrationRecord",
    "ModelRemoteModuleSource",
    "ModelRendererStarted",
    "ModelShellConfig",
    "PluginSource",
    "coerce_plugin_entries",
]
