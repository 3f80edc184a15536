"""Deletion strategies for tracked paths.

A strategy knows how to remove a single filesystem path. Two variants are
provided:

- NORMAL: removes files, symlinks and empty directories only.
- FORCE: additionally removes non-empty directories recursively.

Strategies are stateless and shared; compare them by identity or name.
"""

import logging
import os
import shutil
from pathlib import Path

from filereaper.core.errors import DeletionError

logger = logging.getLogger(__name__)

StrPath = str | os.PathLike[str]


class DeleteStrategy:
    """Strategy for deleting files and directories.

    The base class implements the conservative behaviour: directories are
    removed only if they are empty.

    Attributes:
        name: Short identifier of the strategy ("normal" or "force").
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def delete(self, path: StrPath) -> None:
        """Delete a path, raising if it cannot be removed.

        A path that does not exist is treated as already deleted.

        Args:
            path: Path to the file or directory to delete.

        Raises:
            DeletionError: If the path could not be inspected or removed.
        """
        target = Path(path)

        try:
            # Dead symlinks report exists() == False but still need removal
            if not target.exists() and not target.is_symlink():
                return
            self._do_delete(target)
        except OSError as e:
            raise DeletionError(str(path), e.strerror or str(e)) from e

    def delete_quietly(self, path: StrPath | None) -> bool:
        """Delete a path without raising.

        Any error while deleting is translated into a False return value.
        A missing path (or None) counts as success since nothing is left
        to delete.

        Args:
            path: Path to the file or directory to delete.

        Returns:
            True if the path no longer exists, False if deletion failed.
        """
        if path is None:
            return True

        try:
            self.delete(path)
        except (OSError, ValueError) as e:
            # ValueError covers paths the OS rejects outright (embedded NUL)
            logger.debug("Quiet delete of %s failed: %s", path, e)
            return False
        return True

    def _do_delete(self, target: Path) -> None:
        """Remove an existing path.

        Args:
            target: Existing path to remove.

        Raises:
            OSError: If removal failed (e.g. directory not empty).
        """
        if target.is_dir() and not target.is_symlink():
            target.rmdir()
        else:
            target.unlink()

    @classmethod
    def from_name(cls, name: str) -> "DeleteStrategy":
        """Look up a builtin strategy by name.

        Args:
            name: "normal" or "force" (case-insensitive).

        Returns:
            The shared strategy instance.

        Raises:
            ValueError: If the name is unknown.
        """
        try:
            return _STRATEGIES[name.strip().lower()]
        except KeyError:
            msg = f"Unknown delete strategy '{name}', expected one of: {', '.join(_STRATEGIES)}"
            raise ValueError(msg) from None

    def __repr__(self) -> str:
        return f"DeleteStrategy[{self.name}]"


class ForceDeleteStrategy(DeleteStrategy):
    """Strategy that deletes directories together with their contents."""

    def __init__(self) -> None:
        super().__init__("force")

    def _do_delete(self, target: Path) -> None:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()


NORMAL = DeleteStrategy("normal")
FORCE = ForceDeleteStrategy()

_STRATEGIES: dict[str, DeleteStrategy] = {
    NORMAL.name: NORMAL,
    FORCE.name: FORCE,
}
