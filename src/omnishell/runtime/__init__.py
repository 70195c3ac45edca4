# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shell runtime: plugin loading, lifecycle and bootstrap.

Exports:
    PluginRegistry: Load/order/register/unregister plugins
    LifecycleCoordinator: Lock state machine over lifecycle events
    ShellBootstrapper: Builds and starts one session
    ModuleResolverFilesystem / ModuleResolverHttp / ModuleResolverComposite
    normalize_plugin_location: Entry -> fully-qualified location
    load_shell_config: YAML + environment configuration loader
    configure_logging: CLI logging setup
"""

from omnishell.runtime.config_loader import load_shell_config
from omnishell.runtime.lifecycle_coordinator import LifecycleCoordinator
from omnishell.runtime.logging_config import configure_logging
from omnishell.runtime.module_resolver import (
    ModuleResolverComposite,
    ModuleResolverFilesystem,
    ModuleResolverHttp,
    normalize_plugin_location,
)
from omnishell.runtime.plugin_registry import PluginRegistry, sort_plugins
from omnishell.runtime.shell_bootstrapper import ShellBootstrapper

__all__: list[str] = [
    "LifecycleCoordinator",
    "ModuleResolverComposite",
    "ModuleResolverFilesystem",
    "ModuleResolverHttp",
    "PluginRegistry",
    "ShellBootstrapper",
    "configure_logging",
    "load_shell_config",
    "normalize_plugin_location",
    "sort_plugins",
]
