# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shell-Specific Error Classes.

This module defines the error classes raised by omnishell subsystems.

Error Hierarchy:
    ShellError (base shell error)
    ├── BusLockedError
    ├── ChainExecutionError
    │   ├── ChainNotFoundError
    │   └── UnauthorizedInitiatorError
    ├── PluginLoadError
    └── ShellConfigurationError

    SilentChainAbort (marker error, deliberately NOT a ShellError)

All ShellErrors:
    - Carry an EnumShellErrorCode for classification
    - Support proper error chaining with ``raise ... from e``
    - Carry structured context (``.context``) for logging
    - Accept ModelShellErrorContext for bundled context parameters
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from omnishell.enums import EnumPluginLoadError, EnumShellErrorCode
from omnishell.errors.model_shell_error_context import ModelShellErrorContext

SILENT_FAIL_MARKER = "silently_fail_chain"


class ShellError(Exception):
    """Base error class for omnishell errors.

    Structured Fields (via ModelShellErrorContext):
        operation: Operation being performed
        target_name: Target resource name
        plugin_name: Plugin involved
        correlation_id: Correlation ID for tracking

    Example:
        >>> context = ModelShellErrorContext(operation="load_plugin")
        >>> raise ShellError("Operation failed", context=context, retry_count=3)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[EnumShellErrorCode] = None,
        context: Optional[ModelShellErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize ShellError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to OPERATION_FAILED)
            context: Bundled shell context (operation, target_name, etc.)
            **extra_context: Additional context information
        """
        structured_context: dict[str, object] = dict(extra_context)

        correlation_id: Optional[UUID] = None
        if context is not None:
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            if context.plugin_name is not None:
                structured_context["plugin_name"] = context.plugin_name
            correlation_id = context.correlation_id

        super().__init__(message)
        self.message = message
        self.error_code = error_code or EnumShellErrorCode.OPERATION_FAILED
        self.correlation_id = correlation_id
        self.context = structured_context

    def __str__(self) -> str:
        return self.message


class BusLockedError(ShellError):
    """Raised when a registration is attempted while the shell is locked.

    Raised by the event bus for new listeners, by every registration
    collaborator (settings, templates, stylesheets) for new entries, and by
    the plugin registry for a load pass. Removal is never refused. The
    reconfiguration flow is expected to catch it; it signals a
    configuration-order bug otherwise.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[ModelShellErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message
            or (
                "The shell is currently locked and will not allow any new events, "
                "middleware, stylesheets, templates, or settings schemas to be registered."
            ),
            error_code=EnumShellErrorCode.REGISTRY_LOCKED,
            context=context,
            **extra_context,
        )


class ChainExecutionError(ShellError):
    """Base class for failures rejecting a chain initiation."""


class ChainNotFoundError(ChainExecutionError):
    """Raised when a chain initiation names a chain nobody registered."""

    def __init__(
        self,
        chain_name: str,
        context: Optional[ModelShellErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            f"Middleware chain does not exist: {chain_name}",
            error_code=EnumShellErrorCode.RESOURCE_NOT_FOUND,
            context=context,
            chain_name=chain_name,
            **extra_context,
        )
        self.chain_name = chain_name


class UnauthorizedInitiatorError(ChainExecutionError):
    """Raised when a plugin that does not lead a chain tries to execute it."""

    def __init__(
        self,
        chain_name: str,
        plugin_name: str,
        context: Optional[ModelShellErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            f"Plugin '{plugin_name}' is not the leader of middleware chain: {chain_name}",
            error_code=EnumShellErrorCode.AUTHORIZATION_ERROR,
            context=context,
            chain_name=chain_name,
            initiating_plugin=plugin_name,
            **extra_context,
        )
        self.chain_name = chain_name
        self.plugin_name = plugin_name


class PluginLoadError(ShellError):
    """Raised (and collected into ImportResult.bad) when a plugin source fails.

    Carries the attempted location so the failure can be shown to an end user.

    Example:
        >>> raise PluginLoadError(
        ...     "Plugin does not exist at location",
        ...     location="https://example.com/plugins/chat/plugin.py",
        ...     loader_error=EnumPluginLoadError.MODULE_NOT_FOUND,
        ... )
    """

    def __init__(
        self,
        message: str,
        location: str,
        loader_error: EnumPluginLoadError,
        context: Optional[ModelShellErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            f"{message}: {location}",
            error_code=EnumShellErrorCode.PLUGIN_LOAD_ERROR,
            context=context,
            location=location,
            loader_error=loader_error.value,
            **extra_context,
        )
        self.location = location
        self.loader_error = loader_error


class ShellConfigurationError(ShellError):
    """Raised when shell configuration cannot be read or validated."""

    def __init__(
        self,
        message: str,
        context: Optional[ModelShellErrorContext] = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumShellErrorCode.INVALID_CONFIGURATION,
            context=context,
            **extra_context,
        )


class SilentChainAbort(Exception):
    """Marker error that stops a chain without being reported as a failure.

    Raise it from a link, or hand it to ``next(...)``; the chain registry logs
    it and swallows it. Any exception carrying a truthy ``silently_fail_chain``
    attribute is treated the same way, so plugins need not import this class.
    """

    silently_fail_chain = True


def is_silent_chain_abort(error: BaseException | None) -> bool:
    """Return True if ``error`` carries the silent-fail marker."""
    if error is None:
        return False
    return bool(getattr(error, SILENT_FAIL_MARKER, False))


__all__ = [
    "SILENT_FAIL_MARKER",
    "BusLockedError",
    "ChainExecutionError",
    "ChainNotFoundError",
    "PluginLoadError",
    "ShellConfigurationError",
    "ShellError",
    "SilentChainAbort",
    "UnauthorizedInitiatorError",
    "is_silent_chain_abort",
]
