# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Plugin protocol and identity token.

This module defines the duck-typed contract every plugin instance satisfies,
and PluginRef, the identity token the shell uses to attribute registrations
to a plugin.

Plugin Contract:
    Required attributes:
        - ``name``: human-readable name (display only, may collide)
        - ``version``: version string
        - ``ref``: PluginRef (or any object compared by identity)

    Optional attributes and hooks (looked up with ``getattr``):
        - ``priority``: int; higher registers first, None sorts last
        - ``register(ctx)``: sync or async; receives ModelContextProviders
        - ``unregister()``: sync or async; plugin-side teardown
        - ``is_configured()``: returns True or a field -> message mapping

Identity:
    ``name`` is not an identity. Two plugins may share a name; they never
    share a ``ref``. Every registry keyed by plugin uses ``ref``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class PluginRef:
    """Opaque, identity-compared token identifying one plugin instance.

    Equality and hashing are by object identity, so a ref cannot be forged by
    constructing another token with the same label.

    Example:
        >>> a = PluginRef("chat")
        >>> b = PluginRef("chat")
        >>> a == b
        False
    """

    __slots__ = ("_label",)

    def __init__(self, label: str = "") -> None:
        self._label = label

    @property
    def label(self) -> str:
        """Debug label (usually the plugin name)."""
        return self._label

    def __repr__(self) -> str:
        return f"PluginRef({self._label!r}, id=0x{id(self):x})"

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)


@runtime_checkable
class ProtocolPlugin(Protocol):
    """Minimal structural contract of a plugin instance.

    Optional hooks are deliberately absent from the protocol; the registry
    probes for them with ``getattr`` so a plugin may define only what it needs.
    """

    name: str
    version: str
    ref: object


__all__: list[str] = ["PluginRef", "ProtocolPlugin"]
