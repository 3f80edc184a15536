"""CLI commands for filereaper.

This package contains all subcommand implementations.
"""

from filereaper.cli.commands import config, delete

__all__ = ["config", "delete"]
