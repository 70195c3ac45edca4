# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""omnishell Enumerations Module.

Exports:
    EnumCoreEvent: Well-known lifecycle and chain-initiation event names
    EnumLifecycleState: Lifecycle coordinator FSM states
    EnumPluginLoadError: Failure taxonomy for plugin loading
    EnumRenderMode: Renderer selection (APP, CONFIGURE)
    EnumShellErrorCode: Error codes carried by ShellError
"""

from omnishell.enums.enum_core_event import EnumCoreEvent
from omnishell.enums.enum_lifecycle_state import EnumLifecycleState
from omnishell.enums.enum_plugin_load_error import EnumPluginLoadError
from omnishell.enums.enum_render_mode import EnumRenderMode
from omnishell.enums.enum_shell_error_code import EnumShellErrorCode

__all__: list[str] = [
    "EnumCoreEvent",
    "EnumLifecycleState",
    "EnumPluginLoadError",
    "EnumRenderMode",
    "EnumShellErrorCode",
]
