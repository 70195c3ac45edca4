# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Core Event Name Enumeration.

Defines the well-known event names exchanged between the shell host and its
plugins over the event buses.
"""

from enum import Enum


class EnumCoreEvent(str, Enum):
    """Well-known events sent throughout the shell lifecycle.

    Attributes:
        RENDERER_STARTED: A renderer was selected and initialized.
        PLUGINS_LOADED: A load pass finished (payload: ModelImportResult).
        PLUGINS_UNLOADED: Every plugin was unregistered.
        PLUGINS_CHANGED: The plugin list changed during configuration.
        SYNC_SETTINGS: A plugin changed settings or the settings schema.
        MIDDLEWARE_EXECUTE: A plugin initiates a named chain
            (payload: ModelChainInitiation).
    """

    RENDERER_STARTED = "ShellBootstrapper::RendererStarted"
    PLUGINS_LOADED = "PluginRegistry::PluginsLoaded"
    PLUGINS_UNLOADED = "PluginRegistry::PluginsUnloaded"
    PLUGINS_CHANGED = "RendererInstance::PluginsChanged"
    SYNC_SETTINGS = "Plugin::SyncSettings"
    MIDDLEWARE_EXECUTE = "Plugin::MiddlewareExecute"


__all__ = ["EnumCoreEvent"]
