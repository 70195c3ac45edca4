# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Middleware chain: an ordered list of links sharing one mutable context.

A link is a callable ``link(context, next, error)``. It may be a coroutine
function or a plain function; an awaitable return value is awaited.

Control Flow:
    - ``await next()`` advances to the following link with ``error=None``.
    - ``await next(err)`` advances, and the following link receives ``err``.
    - A link that receives an error and does not call ``next`` ends the chain
      there; the error is absorbed.
    - A link that raises aborts the whole execution; ``execute`` raises.
    - An error handed to ``next`` past the last link is raised from ``execute``.

Links run strictly one at a time, so link ``i``'s mutations of the context are
visible before link ``i + 1`` runs. The stack is snapshotted when ``execute``
starts; links added or removed during an execution apply to the next one.

Ownership:
    The chain exclusively owns the context for the duration of one
    ``execute`` call. Callers must not share one context instance between
    concurrent executions.

Example:
    ```python
    chain = MiddlewareChain()

    async def tag(ctx, next, error=None):
        ctx["tags"].append("seen")
        await next()

    async def guard(ctx, next, error=None):
        if error is None and not ctx["tags"]:
            await next(ValueError("untagged"))
            return
        await next(error)

    chain.use(tag, guard)
    await chain.execute({"tags": []})
    ```
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

logger = logging.getLogger(__name__)

NextFunction = Callable[..., Awaitable[None]]
MiddlewareLink = Callable[[Any, NextFunction, Optional[BaseException]], Any]


class MiddlewareChain:
    """Reusable ordered pipeline of middleware links.

    Attributes:
        links: Snapshot tuple of the links currently in the chain.
    """

    def __init__(self, links: Optional[list[MiddlewareLink]] = None) -> None:
        """Initialize the chain.

        Args:
            links: Optional initial links, in execution order.
        """
        self._stack: list[MiddlewareLink] = list(links or [])

    @property
    def links(self) -> tuple[MiddlewareLink, ...]:
        return tuple(self._stack)

    def __len__(self) -> int:
        return len(self._stack)

    def __contains__(self, link: object) -> bool:
        return any(existing is link for existing in self._stack)

    def use(self, *links: MiddlewareLink) -> None:
        """Append links to the end of the chain, preserving their order."""
        self._stack.extend(links)

    def insert_before(self, anchor: MiddlewareLink, *links: MiddlewareLink) -> None:
        """Insert links directly before ``anchor`` (appends if it is absent)."""
        for idx, existing in enumerate(self._stack):
            if existing is anchor:
                self._stack[idx:idx] = links
                return
        self._stack.extend(links)

    def unuse(self, link: MiddlewareLink) -> bool:
        """Remove the first occurrence of ``link`` by identity.

        Returns:
            True if the link was found and removed.
        """
        for idx, existing in enumerate(self._stack):
            if existing is link:
                del self._stack[idx]
                return True
        return False

    async def execute(self, context: Any) -> None:
        """Run the chain against ``context``.

        Raises:
            BaseException: Whatever a link raised, or an error that was
                forwarded with ``next(err)`` past the last link.
        """
        await self._dispatch(context, tuple(self._stack), 0, None)

    async def _dispatch(
        self,
        context: Any,
        stack: tuple[MiddlewareLink, ...],
        index: int,
        error: Optional[BaseException],
    ) -> None:
        if index >= len(stack):
            if error is not None:
                raise error
            return

        link = stack[index]
        called = False

        async def next_link(err: Optional[BaseException] = None) -> None:
            nonlocal called
            if called:
                logger.warning(
                    "Middleware link called next() more than once; ignoring",
                    extra={"link_index": index},
                )
                return
            called = True
            await self._dispatch(context, stack, index + 1, err)

        result = link(context, next_link, error)
        if inspect.isawaitable(result):
            await result


__all__: list[str] = ["MiddlewareChain", "MiddlewareLink", "NextFunction"]
