"""Tracker configuration commands.

Provides commands to show the effective tracker configuration and to
write a default configuration file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from filereaper.core.config import (
    TrackerConfigError,
    get_default_config,
    load_tracker_config_or_default,
    save_tracker_config,
)
from filereaper.core.paths import get_tracker_config_path
from filereaper.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize tracker configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)

ConfigPathOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Config file path (default: ~/.config/filereaper/tracker.toml).",
    ),
]


@app.command()
def show(config_path: ConfigPathOption = None) -> None:
    """Show the effective tracker configuration."""
    path = config_path or get_tracker_config_path()

    try:
        config = load_tracker_config_or_default(path)
    except TrackerConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    source = str(path) if path.exists() else "defaults (no config file)"

    table = Table(
        title="Tracker Configuration",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("thread_name", config.thread_name)
    table.add_row("default_strategy", config.default_strategy)

    console.print(table)
    console.print(f"[dim]Source: {source}[/dim]")


@app.command()
def init(
    config_path: ConfigPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a default tracker configuration file."""
    path = config_path or get_tracker_config_path()

    if path.exists() and not force:
        print_info(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_tracker_config(get_default_config(), path)
    except TrackerConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    print_success(f"Wrote default config to {saved}")
