"""CLI package for filereaper.

This package contains the Typer application and all subcommands.
"""

from filereaper.cli.main import app

__all__ = ["app"]
