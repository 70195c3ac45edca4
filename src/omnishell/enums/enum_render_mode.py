# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Render mode enumeration for the shell bootstrapper."""

from enum import Enum


class EnumRenderMode(str, Enum):
    """Which renderer the bootstrapper presents.

    Attributes:
        APP: Plugins are configured, show the main view.
        CONFIGURE: Settings are invalid or forced, show the configuration view.
    """

    APP = "app"
    CONFIGURE = "configure"


__all__ = ["EnumRenderMode"]
