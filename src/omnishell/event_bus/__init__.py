# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Event bus package.

Exports:
    InMemoryEventBus: emit/call event emitter with a lock switch
    BusManager: Per-plugin registration records over events and chains
"""

from omnishell.event_bus.bus_manager import BusManager
from omnishell.event_bus.inmemory_event_bus import InMemoryEventBus, event_key

__all__: list[str] = ["BusManager", "InMemoryEventBus", "event_key"]
