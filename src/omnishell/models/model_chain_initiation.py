# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Chain Initiation Model.

Payload of ``EnumCoreEvent.MIDDLEWARE_EXECUTE``: which chain to run, the
context to run it on, and who is asking.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelChainInitiation(BaseModel):
    """Request to execute a named middleware chain.

    The initial context is handed to the chain by reference; the chain owns it
    until ``execute`` returns.

    Example:
        >>> bus.emit(
        ...     EnumCoreEvent.MIDDLEWARE_EXECUTE,
        ...     ModelChainInitiation(
        ...         chain_name="chat:twitch",
        ...         initial_context={"message": raw},
        ...         initiating_plugin=self,
        ...     ),
        ... )
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    chain_name: str = Field(
        ...,
        min_length=1,
        description="Name of the chain to execute",
    )
    initial_context: Any = Field(
        default=None,
        description="Mutable context object threaded through every link",
    )
    initiating_plugin: Any = Field(
        ...,
        description="Plugin instance requesting execution; must lead the chain",
    )


__all__ = ["ModelChainInitiation"]
