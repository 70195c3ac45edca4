# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Middleware chains.

Exports:
    MiddlewareChain: Ordered, error-aware link pipeline
    ChainRegistry: Named chains with leader election
    error_boundary_link: Terminal link re-raising unhandled errors
"""

from omnishell.chain.chain_registry import ChainRegistry, error_boundary_link
from omnishell.chain.middleware_chain import (
    MiddlewareChain,
    MiddlewareLink,
    NextFunction,
)

__all__: list[str] = [
    "ChainRegistry",
    "MiddlewareChain",
    "MiddlewareLink",
    "NextFunction",
    "error_boundary_link",
]
