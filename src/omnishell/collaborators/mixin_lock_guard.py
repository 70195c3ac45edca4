# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lock guard shared by the registration collaborators."""

from __future__ import annotations

from typing import Optional

from omnishell.errors import BusLockedError, ModelShellErrorContext
from omnishell.protocols import ProtocolLockHolder


class MixinLockGuard:
    """Refuses new registrations while the shared lock holder reports locked.

    Subclasses call ``_init_lock_guard`` from ``__init__`` and
    ``_ensure_unlocked`` before every register. Unregister is never
    guarded so teardown can always complete.
    """

    _lock_holder: Optional[ProtocolLockHolder]

    def _init_lock_guard(self, lock_holder: Optional[ProtocolLockHolder]) -> None:
        self._lock_holder = lock_holder

    @property
    def is_locked(self) -> bool:
        return self._lock_holder is not None and self._lock_holder.is_locked

    def _ensure_unlocked(self, operation: str, plugin: object) -> None:
        if self.is_locked:
            raise BusLockedError(
                context=ModelShellErrorContext(
                    operation=operation,
                    plugin_name=getattr(plugin, "name", None),
                ),
                collaborator=type(self).__name__,
            )


__all__: list[str] = ["MixinLockGuard"]
