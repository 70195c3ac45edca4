# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shell lifecycle FSM states.

Defines the states the lifecycle coordinator moves through. Only LOCKED
refuses new registrations.

FSM Diagram::

    +----------+   renderer_started   +--------+
    | unlocked | -------------------> | locked |
    +----------+                      +--------+
                                        |    ^
                       plugins_changed  |    |  reload finished
                                        v    |
                                   +---------------+
                                   | reconfiguring |
                                   +---------------+
"""

from enum import Enum


class EnumLifecycleState(str, Enum):
    """Shell lifecycle FSM states.

    Attributes:
        UNLOCKED: Registration window open (initial load pass).
        LOCKED: Renderer running, registrations refused.
        RECONFIGURING: Plugin list changed, reload pass in progress.
    """

    UNLOCKED = "unlocked"
    LOCKED = "locked"
    RECONFIGURING = "reconfiguring"

    @property
    def is_locked(self) -> bool:
        """Whether registrations are refused in this state."""
        return self is EnumLifecycleState.LOCKED


__all__: list[str] = ["EnumLifecycleState"]
