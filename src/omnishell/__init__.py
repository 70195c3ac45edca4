# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""omnishell: pluggable application shell.

Plugins register events, middleware chain links, and collaborator URLs
against a shared bus. The shell loads them in priority order, locks
registration once a renderer is running, and reverses every registration
on teardown.

Quick Start:
    ```python
    from omnishell import ShellBootstrapper, load_shell_config

    shell = ShellBootstrapper(config=load_shell_config("shell.yaml"))
    result = await shell.init()
    ```
"""

from omnishell.chain import ChainRegistry, MiddlewareChain
from omnishell.enums import EnumCoreEvent, EnumLifecycleState, EnumRenderMode
from omnishell.errors import (
    BusLockedError,
    ChainNotFoundError,
    PluginLoadError,
    ShellError,
    SilentChainAbort,
    UnauthorizedInitiatorError,
)
from omnishell.event_bus import BusManager, InMemoryEventBus
from omnishell.models import (
    ModelChainInitiation,
    ModelContextProviders,
    ModelEventRegistration,
    ModelImportResult,
    ModelPluginOptions,
    ModelShellConfig,
)
from omnishell.plugins import PluginBase, PluginCore
from omnishell.protocols import PluginRef
from omnishell.runtime import (
    LifecycleCoordinator,
    PluginRegistry,
    ShellBootstrapper,
    load_shell_config,
)

__version__ = "0.1.0"

__all__: list[str] = [
    "BusLockedError",
    "BusManager",
    "ChainNotFoundError",
    "ChainRegistry",
    "EnumCoreEvent",
    "EnumLifecycleState",
    "EnumRenderMode",
    "InMemoryEventBus",
    "LifecycleCoordinator",
    "MiddlewareChain",
    "ModelChainInitiation",
    "ModelContextProviders",
    "ModelEventRegistration",
    "ModelImportResult",
    "ModelPluginOptions",
    "ModelShellConfig",
    "PluginBase",
    "PluginCore",
    "PluginLoadError",
    "PluginRef",
    "PluginRegistry",
    "ShellBootstrapper",
    "ShellError",
    "SilentChainAbort",
    "UnauthorizedInitiatorError",
    "load_shell_config",
]
