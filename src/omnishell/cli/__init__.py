# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""omnishell command line interface."""
