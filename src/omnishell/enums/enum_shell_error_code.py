# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shell Error Code Enumeration.

Canonical error codes attached to every ShellError for classification in
logs and user-facing reports.
"""

from enum import Enum


class EnumShellErrorCode(str, Enum):
    """Error codes for omnishell errors.

    Attributes:
        OPERATION_FAILED: Generic failure (default).
        INVALID_CONFIGURATION: Configuration could not be read or validated.
        REGISTRY_LOCKED: A registration was attempted while the shell is locked.
        RESOURCE_NOT_FOUND: A named resource (chain, module) does not exist.
        AUTHORIZATION_ERROR: The caller is not allowed to perform the operation.
        PLUGIN_LOAD_ERROR: A plugin source could not be turned into a plugin.
    """

    OPERATION_FAILED = "OPERATION_FAILED"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    REGISTRY_LOCKED = "REGISTRY_LOCKED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    PLUGIN_LOAD_ERROR = "PLUGIN_LOAD_ERROR"


__all__ = ["EnumShellErrorCode"]
