# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shell configuration loader.

Reads a YAML file into ModelShellConfig and applies environment overrides.

YAML Format:
    ```yaml
    plugins_base_path: ./plugins
    plugins:
      - chat
      - 1:emotes
    custom_plugins:
      - https://example.com/plugins/clock
    force_show_settings: false
    ```

Environment Variables:
    OMNISHELL_PLUGINS_BASE_PATH: Overrides ``plugins_base_path``
    OMNISHELL_PLUGINS: Comma separated list, overrides ``plugins``

Path Resolution:
    A relative ``plugins_base_path`` read from a file is anchored at the
    file's directory. One coming from the environment is used as given.

Security:
    - Uses yaml.safe_load() to prevent arbitrary code execution
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from omnishell.errors import ModelShellErrorContext, ShellConfigurationError
from omnishell.models import ModelShellConfig

logger = logging.getLogger(__name__)

ENV_PLUGINS_BASE_PATH = "OMNISHELL_PLUGINS_BASE_PATH"
ENV_PLUGINS = "OMNISHELL_PLUGINS"

# Config files are small; anything larger is almost certainly the wrong file
MAX_CONFIG_SIZE_BYTES = 1024 * 1024


def _read_yaml(path: Path) -> dict[str, object]:
    context = ModelShellErrorContext.with_correlation(
        operation="load_shell_config",
        target_name=str(path),
    )

    if not path.is_file():
        raise ShellConfigurationError(
            f"Config file not found: {path}",
            context=context,
        )

    file_size = path.stat().st_size
    if file_size > MAX_CONFIG_SIZE_BYTES:
        raise ShellConfigurationError(
            f"Config file too large: {file_size} bytes (max {MAX_CONFIG_SIZE_BYTES})",
            context=context,
        )

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ShellConfigurationError(
            f"Invalid YAML in config: {e}",
            context=context,
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ShellConfigurationError(
            f"Config must be a mapping, got {type(data).__name__}",
            context=context,
        )
    return data


def load_shell_config(
    path: Optional[Path | str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ModelShellConfig:
    """Load and validate shell configuration.

    Args:
        path: YAML config file. When None only defaults and the environment
            are used.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Validated configuration.

    Raises:
        ShellConfigurationError: Missing file, malformed YAML, or a value
            that fails validation.
    """
    env = os.environ if environ is None else environ
    raw: dict[str, object] = {}
    config_path = Path(path) if path is not None else None

    if config_path is not None:
        raw = _read_yaml(config_path)

    base_override = env.get(ENV_PLUGINS_BASE_PATH)
    if base_override:
        raw["plugins_base_path"] = base_override

    plugins_override = env.get(ENV_PLUGINS)
    if plugins_override is not None:
        raw["plugins"] = [p for p in plugins_override.split(",") if p.strip()]

    try:
        config = ModelShellConfig.model_validate(raw)
    except ValidationError as e:
        raise ShellConfigurationError(
            f"Invalid shell configuration: {e}",
            context=ModelShellErrorContext.with_correlation(
                operation="load_shell_config",
                target_name=str(config_path) if config_path else None,
            ),
        ) from e

    if config_path is not None and not base_override:
        anchored = config.resolved_base_path(config_path.parent)
        if anchored != config.plugins_base_path:
            config = config.model_copy(update={"plugins_base_path": anchored})

    logger.debug(
        "Loaded shell config",
        extra={
            "config_path": str(config_path) if config_path else None,
            "plugins_base_path": config.plugins_base_path,
            "plugin_count": len(config.plugins) + len(config.custom_plugins),
        },
    )
    return config


__all__: list[str] = [
    "ENV_PLUGINS",
    "ENV_PLUGINS_BASE_PATH",
    "MAX_CONFIG_SIZE_BYTES",
    "load_shell_config",
]
