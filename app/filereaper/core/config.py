"""Tracker configuration and settings.

This module provides the configuration model and I/O functions for
FileCleaningTracker instances built via FileCleaningTracker.from_config().

Configuration is stored in ~/.config/filereaper/tracker.toml
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from filereaper.core.errors import FileReaperError
from filereaper.core.paths import get_tracker_config_path

StrategyName = Literal["normal", "force"]

DEFAULT_THREAD_NAME = "File Reaper"


class TrackerConfig(BaseModel):
    """Configuration for a FileCleaningTracker.

    Attributes:
        thread_name: Name given to the background reaper thread.
        default_strategy: Strategy used when track() is called without one.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    thread_name: Annotated[
        str,
        Field(min_length=1, description="Name of the reaper thread"),
    ] = DEFAULT_THREAD_NAME
    default_strategy: Annotated[
        StrategyName,
        Field(description="Strategy used when none is passed to track()"),
    ] = "normal"


class TrackerConfigError(FileReaperError):
    """Base exception for tracker configuration errors."""


class TrackerConfigNotFoundError(TrackerConfigError):
    """Raised when the tracker config file is not found."""


class TrackerConfigParseError(TrackerConfigError):
    """Raised when the tracker config file cannot be parsed."""


def load_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Load tracker configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated TrackerConfig object.

    Raises:
        TrackerConfigNotFoundError: If the config file doesn't exist.
        TrackerConfigParseError: If the TOML syntax is invalid.
        TrackerConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_tracker_config_path()

    if not config_path.exists():
        raise TrackerConfigNotFoundError(f"Tracker config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise TrackerConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise TrackerConfigError(f"Failed to read tracker config: {e}") from e

    try:
        return TrackerConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise TrackerConfigError(f"Invalid tracker config content: {e}") from e


def load_tracker_config_or_default(path: Path | None = None) -> TrackerConfig:
    """Load tracker configuration, falling back to defaults if missing.

    Only a missing file falls back; malformed files still raise.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Loaded or default TrackerConfig.
    """
    try:
        return load_tracker_config(path)
    except TrackerConfigNotFoundError:
        return get_default_config()


def save_tracker_config(config: TrackerConfig, path: Path | None = None) -> Path:
    """Save tracker configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The TrackerConfig object to save.
        path: Path to save the config. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        TrackerConfigError: If the file cannot be written.
    """
    config_path = path or get_tracker_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        # os.replace() is atomic on POSIX
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise TrackerConfigError(f"Failed to write tracker config: {e}") from e

    return config_path


def get_default_config() -> TrackerConfig:
    """Create a default TrackerConfig.

    Returns:
        TrackerConfig with default settings.
    """
    return TrackerConfig()
