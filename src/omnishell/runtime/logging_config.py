# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Logging setup for the omnishell command line entry point.

Library modules only create loggers (``logging.getLogger(__name__)``) and
never configure handlers. The CLI calls ``configure_logging()`` once, before
loading configuration, so config discovery itself can log.

Environment Variables:
    OMNISHELL_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        Default: INFO
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "OMNISHELL_LOG_LEVEL"
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def configure_logging(level: str | None = None) -> str:
    """Configure root logging with the omnishell format.

    Args:
        level: Explicit level; overrides OMNISHELL_LOG_LEVEL when given.

    Returns:
        The level actually applied.

    Example:
        >>> configure_logging()
        'INFO'
        >>> logger.info("Plugins loaded", extra={"good": 3, "bad": 0})
    """
    log_level = (level or os.getenv(ENV_LOG_LEVEL, "INFO")).upper()

    if log_level not in VALID_LOG_LEVELS:
        print(
            f"Warning: Invalid {ENV_LOG_LEVEL} '{log_level}', using INFO. "
            f"Valid levels: {', '.join(sorted(VALID_LOG_LEVELS))}",
            file=sys.stderr,
        )
        log_level = "INFO"

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return log_level


__all__: list[str] = ["ENV_LOG_LEVEL", "VALID_LOG_LEVELS", "configure_logging"]
