"""XDG-compliant path management for filereaper.

XDG defaults:
- Config: ~/.config/filereaper/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "filereaper"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/filereaper/ (or XDG_CONFIG_HOME/filereaper/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_tracker_config_path() -> Path:
    """Get the tracker configuration file path.

    Returns:
        Path to ~/.config/filereaper/tracker.toml.
    """
    return get_config_dir() / "tracker.toml"


def get_theme_path() -> Path:
    """Get the user theme override file path.

    Returns:
        Path to ~/.config/filereaper/theme.toml.
    """
    return get_config_dir() / "theme.toml"
