"""Unit tests for deletion strategies.

Tests NORMAL and FORCE deletion of files, directories and symlinks, the
never-raise contract of delete_quietly() and strategy lookup by name.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from filereaper.core.errors import DeletionError
from filereaper.core.strategy import FORCE, NORMAL, DeleteStrategy, ForceDeleteStrategy


class TestNormalStrategy:
    """Tests for the NORMAL strategy."""

    def test_delete_file(self, tmp_path: Path) -> None:
        """Files are removed."""
        target = tmp_path / "file.txt"
        target.write_text("content")

        assert NORMAL.delete_quietly(target) is True
        assert not target.exists()

    def test_delete_empty_directory(self, tmp_path: Path) -> None:
        """Empty directories are removed."""
        target = tmp_path / "empty"
        target.mkdir()

        assert NORMAL.delete_quietly(str(target)) is True
        assert not target.exists()

    def test_non_empty_directory_fails(self, tmp_path: Path) -> None:
        """Non-empty directories are left alone and reported as failed."""
        target = tmp_path / "full"
        target.mkdir()
        (target / "file.txt").write_text("content")

        assert NORMAL.delete_quietly(target) is False
        assert target.exists()
        assert (target / "file.txt").exists()

    def test_non_empty_directory_raises_on_delete(self, tmp_path: Path) -> None:
        """The loud variant raises DeletionError, which is also an OSError."""
        target = tmp_path / "full"
        target.mkdir()
        (target / "file.txt").write_text("content")

        with pytest.raises(DeletionError) as exc_info:
            NORMAL.delete(target)

        assert isinstance(exc_info.value, OSError)
        assert exc_info.value.path == str(target)
        assert str(target) in str(exc_info.value)

    def test_delete_symlink_keeps_target(self, tmp_path: Path) -> None:
        """Deleting a symlink to a directory removes the link only."""
        real_dir = tmp_path / "real"
        real_dir.mkdir()
        (real_dir / "file.txt").write_text("content")
        link = tmp_path / "link"
        link.symlink_to(real_dir)

        assert NORMAL.delete_quietly(link) is True
        assert not link.is_symlink()
        assert (real_dir / "file.txt").exists()

    def test_delete_dead_symlink(self, tmp_path: Path) -> None:
        """Dead symlinks are removed even though exists() is False."""
        link = tmp_path / "dead"
        link.symlink_to(tmp_path / "missing")

        assert NORMAL.delete_quietly(link) is True
        assert not link.is_symlink()

    def test_missing_path_is_success(self, tmp_path: Path) -> None:
        """Nothing to delete counts as deleted."""
        assert NORMAL.delete_quietly(tmp_path / "missing") is True
        NORMAL.delete(tmp_path / "missing")

    def test_none_is_success(self) -> None:
        """None has nothing to delete."""
        assert NORMAL.delete_quietly(None) is True

    def test_os_error_is_reported_as_false(self, tmp_path: Path) -> None:
        """OSError during deletion becomes a False return value."""
        target = tmp_path / "locked.txt"
        target.write_text("content")

        with patch.object(Path, "unlink", side_effect=PermissionError(13, "Permission denied")):
            assert NORMAL.delete_quietly(target) is False

        assert target.exists()

    def test_os_error_reason_on_delete(self, tmp_path: Path) -> None:
        """DeletionError carries the OS error message."""
        target = tmp_path / "locked.txt"
        target.write_text("content")

        with (
            patch.object(Path, "unlink", side_effect=PermissionError(13, "Permission denied")),
            pytest.raises(DeletionError) as exc_info,
        ):
            NORMAL.delete(target)

        assert exc_info.value.reason == "Permission denied"

    def test_stat_error_raises_deletion_error(self, tmp_path: Path) -> None:
        """A path that cannot be inspected raises DeletionError, not a raw OSError."""
        target = tmp_path / "unsearchable" / "file.txt"

        with (
            patch.object(Path, "exists", side_effect=PermissionError(13, "Permission denied")),
            pytest.raises(DeletionError) as exc_info,
        ):
            NORMAL.delete(target)

        assert exc_info.value.path == str(target)
        assert exc_info.value.reason == "Permission denied"

    def test_stat_error_is_reported_as_false(self, tmp_path: Path) -> None:
        """delete_quietly() reports an uninspectable path as failed."""
        with patch.object(Path, "exists", side_effect=PermissionError(13, "Permission denied")):
            assert NORMAL.delete_quietly(tmp_path / "file.txt") is False


class TestForceStrategy:
    """Tests for the FORCE strategy."""

    def test_delete_non_empty_directory(self, tmp_path: Path) -> None:
        """Directory trees are removed recursively."""
        target = tmp_path / "tree"
        (target / "a" / "b").mkdir(parents=True)
        (target / "a" / "b" / "file.txt").write_text("content")
        (target / "top.txt").write_text("content")

        assert FORCE.delete_quietly(target) is True
        assert not target.exists()

    def test_delete_file(self, tmp_path: Path) -> None:
        """Files are removed just like with NORMAL."""
        target = tmp_path / "file.txt"
        target.write_text("content")

        assert FORCE.delete_quietly(target) is True
        assert not target.exists()

    def test_symlink_to_directory_keeps_target(self, tmp_path: Path) -> None:
        """FORCE never follows a symlink into its target."""
        real_dir = tmp_path / "real"
        real_dir.mkdir()
        (real_dir / "file.txt").write_text("content")
        link = tmp_path / "link"
        link.symlink_to(real_dir)

        assert FORCE.delete_quietly(link) is True
        assert not link.is_symlink()
        assert (real_dir / "file.txt").exists()

    def test_rmtree_error_is_reported_as_false(self, tmp_path: Path) -> None:
        """Errors from recursive removal become a False return value."""
        target = tmp_path / "tree"
        target.mkdir()

        with patch("filereaper.core.strategy.shutil.rmtree", side_effect=OSError("busy")):
            assert FORCE.delete_quietly(target) is False

        assert target.exists()

    def test_is_force_subclass(self) -> None:
        """FORCE is a ForceDeleteStrategy named 'force'."""
        assert isinstance(FORCE, ForceDeleteStrategy)
        assert FORCE.name == "force"


class TestFromName:
    """Tests for DeleteStrategy.from_name()."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("normal", NORMAL), ("force", FORCE), (" FORCE ", FORCE), ("Normal", NORMAL)],
    )
    def test_lookup(self, name: str, expected: DeleteStrategy) -> None:
        """Builtin strategies are found case-insensitively."""
        assert DeleteStrategy.from_name(name) is expected

    def test_unknown_name(self) -> None:
        """Unknown names raise ValueError listing the choices."""
        with pytest.raises(ValueError, match="normal, force"):
            DeleteStrategy.from_name("shred")

    def test_repr(self) -> None:
        """Strategies render their name."""
        assert repr(NORMAL) == "DeleteStrategy[normal]"
