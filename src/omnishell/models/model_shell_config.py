# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shell Configuration Model.

Typed configuration for one shell session: where plugins live, which ones
are enabled, and the conventions used to find a plugin's entry point.

Plugin Entry Forms:
    ``plugins`` and ``custom_plugins`` accept a single string or a list.
    Each entry is one of:

        - a bare name (``chat``), resolved against ``plugins_base_path``
        - an absolute path or ``file://`` URL
        - an ``http(s)://`` URL
        - the ``<index>:<name>`` form produced by checkbox form
          serialization, reduced to ``<name>``

Example:
    >>> config = ModelShellConfig(plugins="0:chat", custom_plugins=[])
    >>> config.plugins
    ['chat']
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ENTRY_FILENAME = "plugin.py"
DEFAULT_EXPORT_NAME = "Plugin"
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0

_INDEXED_ENTRY_PATTERN = re.compile(r"^\d+:(?P<name>.+)$")


def coerce_plugin_entries(value: object) -> list[str]:
    """Normalize a raw ``plugins`` setting into a list of entry strings.

    Accepts None, a string, or an iterable of strings. Blank entries are
    dropped and ``<index>:<name>`` entries are reduced to ``<name>``.

    Raises:
        TypeError: If ``value`` is neither a string nor an iterable of strings.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw = [value]
    elif isinstance(value, (list, tuple)):
        raw = list(value)
    else:
        raise TypeError(
            f"plugin entries must be a string or a list of strings, got {type(value).__name__}"
        )

    entries: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise TypeError(f"plugin entry must be a string, got {type(item).__name__}")
        item = item.strip()
        if not item:
            continue
        match = _INDEXED_ENTRY_PATTERN.match(item)
        entries.append(match.group("name") if match else item)
    return entries


class ModelShellConfig(BaseModel):
    """Configuration for the shell bootstrapper and plugin registry.

    Attributes:
        plugins_base_path: Directory or URL bare plugin names resolve against.
        plugins: Enabled plugin entries from the plugin list.
        custom_plugins: Additional user-supplied plugin locations.
        entry_filename: Entry file assumed when a location has no ``.py`` suffix.
        export_name: Module attribute holding the plugin constructor.
        force_show_settings: Always start in CONFIGURE mode.
        http_timeout_seconds: Timeout for fetching remote plugin modules.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    plugins_base_path: str = Field(
        default="plugins",
        min_length=1,
        description="Directory or URL that bare plugin names resolve against",
    )
    plugins: list[str] = Field(
        default_factory=list,
        description="Enabled plugin entries",
    )
    custom_plugins: list[str] = Field(
        default_factory=list,
        description="User-supplied plugin locations",
    )
    entry_filename: str = Field(
        default=DEFAULT_ENTRY_FILENAME,
        pattern=r"^[^/\\]+\.py$",
        description="Conventional entry file inside a plugin location",
    )
    export_name: str = Field(
        default=DEFAULT_EXPORT_NAME,
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Module attribute holding the plugin constructor",
    )
    force_show_settings: bool = Field(
        default=False,
        description="Start in CONFIGURE mode even when settings validate",
    )
    http_timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        gt=0.0,
        le=300.0,
        description="Timeout for fetching remote plugin modules",
    )

    @field_validator("plugins", "custom_plugins", mode="before")
    @classmethod
    def coerce_entries(cls, v: object) -> list[str]:
        try:
            return coerce_plugin_entries(v)
        except TypeError as e:
            raise ValueError(str(e)) from e

    @field_validator("plugins_base_path", mode="after")
    @classmethod
    def strip_trailing_separator(cls, v: str) -> str:
        stripped = v.rstrip("/\\")
        return stripped or v

    def resolved_base_path(self, relative_to: Path | None = None) -> str:
        """Return the base path, anchoring a relative directory at ``relative_to``."""
        if "://" in self.plugins_base_path or relative_to is None:
            return self.plugins_base_path
        base = Path(self.plugins_base_path)
        if base.is_absolute():
            return str(base)
        return str((relative_to / base).resolve())


__all__ = [
    "DEFAULT_ENTRY_FILENAME",
    "DEFAULT_EXPORT_NAME",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "ModelShellConfig",
    "coerce_plugin_entries",
]
