"""Shared console utilities for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from evntboard_openai.config import ModuleConfig

# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{msg}[/red]")


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{msg}[/green]")


def config_table(config: ModuleConfig) -> Table:
    """Summary of a loaded configuration. The token is never shown."""
    table = Table(title="Configuration Summary")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Hub", config.host)
    table.add_row("Module code", config.module.code)
    table.add_row("Module name", config.module.name)
    table.add_row("Module token", str(config.module.token))
    table.add_row("Vision model", config.openai.vision_model)
    table.add_row("Image model", config.openai.image_model)
    table.add_row(
        "Queue ids", "unique" if config.openai.unique_queue_ids else "shared"
    )
    table.add_row("Log level", config.log_level)
    return table
