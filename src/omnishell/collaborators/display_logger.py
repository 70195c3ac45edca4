# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Display collaborator backed by logging.

Headless hosts (the CLI, tests) have no screen to show messages on, so
messages go to this module's logger and are kept in a bounded
history for inspection.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)


class DisplayLogger:
    """ProtocolDisplay implementation that logs.

    Attributes:
        history: (level, text) pairs shown so far, oldest first.
    """

    def __init__(self, max_history: int = 200) -> None:
        self._max_history = max_history
        self.history: list[tuple[str, str]] = []

    def show_info(self, message: str, title: Optional[str] = None) -> None:
        text = f"{title}: {message}" if title else message
        logger.info("%s", text, extra={"title": title})
        self._remember("info", text)

    def show_error(
        self, error: Union[BaseException, list[BaseException]]
    ) -> None:
        errors = error if isinstance(error, list) else [error]
        for err in errors:
            location = getattr(err, "location", None)
            logger.error(
                "%s",
                err,
                extra={
                    "error_type": type(err).__name__,
                    "location": location,
                },
            )
            self._remember("error", str(err))

    def _remember(self, level: str, text: str) -> None:
        self.history.append((level, text))
        if len(self.history) > self._max_history:
            self.history.pop(0)


__all__: list[str] = ["DisplayLogger"]
