# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test doubles shipped with omnishell."""

from omnishell.testing.module_resolver_inmemory import ModuleResolverInMemory

__all__: list[str] = ["ModuleResolverInMemory"]
