"""Delete command.

Runs a deletion strategy over paths given on the command line, the same
way the reaper thread does for tracked paths.
"""

from pathlib import Path
from typing import Annotated

import typer

from filereaper.core.errors import DeletionError
from filereaper.core.strategy import FORCE, NORMAL
from filereaper.utils.formatting import console, create_results_table, print_success


def delete(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Files or directories to delete."),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete non-empty directories recursively."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
) -> None:
    """Delete paths using the normal or force strategy."""
    strategy = FORCE if force else NORMAL
    title = "Results (Dry Run)" if dry_run else "Results"
    table = create_results_table(title)
    failed = 0
    deleted = 0

    for path in paths:
        try:
            absent = not path.exists() and not path.is_symlink()
        except OSError as e:
            failed += 1
            table.add_row("[error]FAIL[/error]", str(path), e.strerror or str(e))
            continue

        if absent:
            table.add_row("[muted]-[/muted]", str(path), "Already absent")
            continue

        if dry_run:
            table.add_row("[info]DRY[/info]", str(path), f"Would delete ({strategy.name})")
            continue

        try:
            strategy.delete(path)
        except DeletionError as e:
            failed += 1
            table.add_row("[error]FAIL[/error]", str(path), e.reason)
            continue

        deleted += 1
        table.add_row("[success]OK[/success]", str(path), "")

    console.print(table)

    if failed:
        console.print(f"\n[dim]{failed} of {len(paths)} path(s) could not be deleted[/dim]")
        raise typer.Exit(code=1)

    if not dry_run:
        print_success(f"Deleted {deleted} path(s).")
