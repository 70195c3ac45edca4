# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shell Error Context Configuration Model.

This module defines the configuration model for shell error context,
bundling the common structured fields so error constructors stay short
while keeping strong typing.
"""

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class ModelShellErrorContext(BaseModel):
    """Configuration model for shell error context.

    Attributes:
        operation: Operation being performed (load_plugin, execute_chain, ...)
        target_name: Target resource name (chain name, event name, location)
        plugin_name: Human-readable name of the plugin involved, if any
        correlation_id: Correlation ID tying log lines of one operation together

    Example:
        >>> context = ModelShellErrorContext(
        ...     operation="execute_chain",
        ...     target_name="chat:twitch",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise ChainNotFoundError("Chain does not exist", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    operation: Optional[str] = Field(
        default=None,
        description="Operation being performed (load_plugin, execute_chain, etc.)",
    )
    target_name: Optional[str] = Field(
        default=None,
        description="Target resource name (chain, event, plugin location)",
    )
    plugin_name: Optional[str] = Field(
        default=None,
        description="Name of the plugin involved in the failure",
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Correlation ID for tying together one operation's log lines",
    )

    @classmethod
    def with_correlation(
        cls,
        correlation_id: Optional[UUID] = None,
        **kwargs: object,
    ) -> "ModelShellErrorContext":
        """Create a context, generating a UUID4 correlation ID when none is given.

        Args:
            correlation_id: Existing correlation ID to propagate.
            **kwargs: Remaining context fields.

        Returns:
            A new context with a correlation ID set.
        """
        return cls(correlation_id=correlation_id or uuid4(), **kwargs)


__all__ = ["ModelShellErrorContext"]
