# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""omnishell Errors Module.

Exports:
    ModelShellErrorContext: Configuration model for bundled error context
    ShellError: Base shell error class
    BusLockedError: Registration attempted while the shell is locked
    ChainExecutionError: Base for rejected chain initiations
    ChainNotFoundError: Chain initiation for an unknown chain
    UnauthorizedInitiatorError: Chain initiation by a non-leader plugin
    PluginLoadError: A plugin source could not be loaded or registered
    ShellConfigurationError: Configuration read/validation failures
    SilentChainAbort: Marker error for silently stopping a chain
    is_silent_chain_abort: Marker test usable on any exception

Error Sanitization Guidelines:
    Plugin locations and names are safe to include. Never include settings
    values in messages: settings may hold tokens or credentials.
"""

from omnishell.errors.model_shell_error_context import ModelShellErrorContext
from omnishell.errors.shell_errors import (
    SILENT_FAIL_MARKER,
    BusLockedError,
    ChainExecutionError,
    ChainNotFoundError,
    PluginLoadError,
    ShellConfigurationError,
    ShellError,
    SilentChainAbort,
    UnauthorizedInitiatorError,
    is_silent_chain_abort,
)

__all__: list[str] = [
    "SILENT_FAIL_MARKER",
    "BusLockedError",
    "ChainExecutionError",
    "ChainNotFoundError",
    "ModelShellErrorContext",
    "PluginLoadError",
    "ShellConfigurationError",
    "ShellError",
    "SilentChainAbort",
    "UnauthorizedInitiatorError",
    "is_silent_chain_abort",
]
