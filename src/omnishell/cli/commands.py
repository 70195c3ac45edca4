"""
omnishell CLI Commands.

Loads plugins headlessly to inspect what a configuration produces: which
plugins load, which fail and why, and which middleware chains they build.
"""

from __future__ import annotations

import asyncio
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from omnishell.errors import ShellConfigurationError
from omnishell.models import ModelImportResult
from omnishell.runtime import ShellBootstrapper, configure_logging, load_shell_config

console = Console()


def _shell_options(func: Any) -> Any:
    func = click.option(
        "--plugin",
        "plugins",
        multiple=True,
        help="Plugin entry to enable (repeatable; replaces the configured list)",
    )(func)
    func = click.option(
        "--base-path",
        default=None,
        help="Directory or URL bare plugin names resolve against",
    )(func)
    func = click.option(
        "--config",
        "config_path",
        type=click.Path(dir_okay=False),
        default=None,
        help="YAML shell configuration file",
    )(func)
    return func


def _build_shell(
    config_path: str | None, base_path: str | None, plugins: tuple[str, ...]
) -> ShellBootstrapper:
    try:
        config = load_shell_config(config_path)
    except ShellConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        raise SystemExit(2) from e

    overrides: dict[str, Any] = {}
    if base_path:
        overrides["plugins_base_path"] = base_path
    if plugins:
        overrides["plugins"] = list(plugins)
    if overrides:
        config = config.model_validate({**config.model_dump(), **overrides})
    return ShellBootstrapper(config=config)


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Logging level (default: OMNISHELL_LOG_LEVEL or INFO)",
)
def cli(log_level: str | None) -> None:
    """omnishell plugin shell CLI."""
    configure_logging(log_level)


@cli.command("plugins")
@_shell_options
def plugins_cmd(
    config_path: str | None, base_path: str | None, plugins: tuple[str, ...]
) -> None:
    """Load plugins and report which succeeded and which failed."""
    shell = _build_shell(config_path, base_path, plugins)

    async def _run() -> tuple[
        ModelImportResult | None, list[tuple[str, str, str, str]], bool | dict[str, str]
    ]:
        result = await shell.init()
        rows = [
            (
                plugin.name,
                str(getattr(plugin, "version", "")),
                str(getattr(plugin, "priority", None)),
                shell.registry.location_of(plugin) or "",
            )
            for plugin in shell.registry.plugins
        ]
        validation = shell.registry.validate_settings()
        await shell.shutdown()
        return result, rows, validation

    result, rows, validation = asyncio.run(_run())
    if result is None:
        console.print("[bold red]Shell startup failed[/bold red]")
        raise SystemExit(1)

    table = Table(title="Plugins")
    table.add_column("Status", style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Priority")
    table.add_column("Location / Error")

    for name, version, priority, location in rows:
        table.add_row("[green]loaded[/green]", name, version, priority, location)
    for error in result.bad:
        table.add_row(
            "[red]failed[/red]",
            "-",
            "-",
            "-",
            escape(f"{error.loader_error.name}: {error}"),
        )
    console.print(table)

    if validation is True:
        console.print("[green]Settings valid[/green]")
    else:
        console.print("[yellow]Settings incomplete:[/yellow]")
        for field, message in validation.items():
            console.print(f"  - {escape(field)}: {escape(message)}")

    raise SystemExit(1 if result.bad else 0)


@cli.command("chains")
@_shell_options
def chains_cmd(
    config_path: str | None, base_path: str | None, plugins: tuple[str, ...]
) -> None:
    """Load plugins and list middleware chains with their leaders."""
    shell = _build_shell(config_path, base_path, plugins)

    async def _run() -> list[tuple[str, str, int]]:
        await shell.init()
        chains = shell.bus.chains
        rows = []
        for chain_name in chains.chain_names():
            leader = chains.leader_of(chain_name)
            leader_name = shell.bus.plugin_name_for(leader) or repr(leader)
            chain = chains.get_chain(chain_name)
            # The terminal boundary link is not a contributed link
            link_count = len(chain) - 1 if chain is not None else 0
            rows.append((chain_name, leader_name, link_count))
        await shell.shutdown()
        return rows

    rows = asyncio.run(_run())
    if not rows:
        console.print("[yellow]No middleware chains registered[/yellow]")
        return

    table = Table(title="Middleware Chains")
    table.add_column("Chain", style="cyan")
    table.add_column("Leader")
    table.add_column("Links", justify="right")
    for chain_name, leader_name, link_count in rows:
        table.add_row(chain_name, leader_name, str(link_count))
    console.print(table)


__all__ = ["cli"]
