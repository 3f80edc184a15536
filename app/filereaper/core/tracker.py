"""Deferred deletion of files tied to the lifetime of owner objects.

A FileCleaningTracker keeps track of paths awaiting deletion and removes
each one once its associated owner object has been garbage collected.
No explicit close or cleanup call is needed from the owner.

Each tracked path is represented by a Tracker, a weak reference to the
owner. When the owner is reclaimed, the weak reference callback puts the
Tracker on the tracker's queue, and a single background daemon thread
(the reaper) drains that queue and performs the deletions.

Example:
    tracker = FileCleaningTracker()
    entry = CacheEntry()
    tracker.track("/tmp/cache-1234.bin", entry)
    del entry  # file is deleted by the reaper shortly after

Call exit_when_finished() to let the reaper thread stop once every path
tracked so far has been handled; no new paths can be tracked afterwards.
"""

from __future__ import annotations

import logging
import os
import queue
import tempfile
import threading
import weakref
from typing import TYPE_CHECKING

from filereaper.core.errors import TrackerShutdownError
from filereaper.core.strategy import FORCE, NORMAL, DeleteStrategy

if TYPE_CHECKING:
    from filereaper.core.config import TrackerConfig

logger = logging.getLogger(__name__)

# Put on the queue by exit_when_finished() to wake a blocked reaper
_WAKE = object()


class Tracker(weakref.ref):
    """Weak reference to an owner object carrying a path to delete.

    The Tracker never keeps the owner alive. When the owner is reclaimed,
    the Tracker itself is put on the queue it was created with.

    Trackers compare and hash by identity, so two Trackers for the same
    owner or the same path are distinct.

    Attributes:
        path: Path to delete once the owner is reclaimed.
        strategy: Strategy used to delete the path.
    """

    def __new__(
        cls,
        path: str,
        strategy: DeleteStrategy | None,
        owner: object,
        channel: queue.SimpleQueue[object],
    ) -> Tracker:
        return super().__new__(cls, owner, channel.put)

    def __init__(
        self,
        path: str,
        strategy: DeleteStrategy | None,
        owner: object,
        channel: queue.SimpleQueue[object],
    ) -> None:
        super().__init__(owner, channel.put)
        self.path = path
        self.strategy = strategy if strategy is not None else NORMAL

    # weakref.ref compares referents; records must stay distinct
    def __eq__(self, other: object) -> bool:
        return self is other

    def __ne__(self, other: object) -> bool:
        return self is not other

    __hash__ = object.__hash__

    def delete(self) -> bool:
        """Delete the tracked path.

        Returns:
            True if the path was deleted (or was already gone).
        """
        return self.strategy.delete_quietly(self.path)

    def __repr__(self) -> str:
        return f"Tracker(path={self.path!r}, strategy={self.strategy.name})"


class _Reaper(threading.Thread):
    """Background thread that deletes paths of reclaimed owners.

    Runs until exit_when_finished() has been called on its tracker and no
    tracked paths remain.
    """

    def __init__(self, tracker: FileCleaningTracker, name: str) -> None:
        # Daemon: never keeps the interpreter alive on its own
        super().__init__(name=name, daemon=True)
        self._tracker = tracker

    def run(self) -> None:
        tracker = self._tracker
        logger.debug("%s started", self.name)

        while not tracker._exit_when_finished or tracker.get_track_count() > 0:
            # Blocks until an owner is reclaimed or exit_when_finished() wakes us
            item = tracker._queue.get()
            if item is _WAKE:
                continue
            tracker._reap(item)
            # Release the record so it can be reclaimed itself
            del item

        logger.debug("%s finished", self.name)


class FileCleaningTracker:
    """Tracks paths and deletes them when their owner objects are reclaimed.

    A single reaper thread is started lazily on the first call to track().
    All state (queue, registry, failures) belongs to this instance.

    Attributes:
        thread_name: Name used for the reaper thread.
        default_strategy: Strategy used when track() receives none.
    """

    def __init__(
        self,
        *,
        thread_name: str = "File Reaper",
        default_strategy: DeleteStrategy = NORMAL,
    ) -> None:
        self.thread_name = thread_name
        self.default_strategy = default_strategy

        self._queue: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._trackers: set[Tracker] = set()
        self._trackers_lock = threading.Lock()
        self._delete_failures: list[str] = []
        self._failures_lock = threading.Lock()

        # Guards _exit_when_finished transitions and reaper startup
        self._lock = threading.Lock()
        self._exit_when_finished = False
        self._reaper: _Reaper | None = None

    @classmethod
    def from_config(cls, config: TrackerConfig) -> FileCleaningTracker:
        """Create a tracker from a TrackerConfig.

        Args:
            config: Loaded or default tracker configuration.

        Returns:
            New FileCleaningTracker (reaper not yet started).
        """
        return cls(
            thread_name=config.thread_name,
            default_strategy=DeleteStrategy.from_name(config.default_strategy),
        )

    def track(
        self,
        path: str | os.PathLike[str],
        owner: object,
        strategy: DeleteStrategy | None = None,
    ) -> None:
        """Track a path for deletion once the owner is garbage collected.

        String paths are stored as given; path-like objects are made
        absolute first.

        Args:
            path: Path to the file or directory to delete.
            owner: Object whose reclamation triggers the deletion. Must
                support weak references.
            strategy: Strategy used to delete the path. Defaults to the
                tracker's default strategy.

        Raises:
            ValueError: If path is None or empty.
            TypeError: If path is not a str or path-like object, or the
                owner cannot be weakly referenced.
            TrackerShutdownError: If exit_when_finished() was already called.
        """
        normalized = _normalize_path(path)
        if strategy is None:
            strategy = self.default_strategy

        with self._lock:
            self._ensure_accepting()

            # Built under the lock so a rejected call leaves no live weakref behind
            tracker = Tracker(normalized, strategy, owner, self._queue)

            if self._reaper is None:
                self._reaper = _Reaper(self, self.thread_name)
                self._reaper.start()

            with self._trackers_lock:
                self._trackers.add(tracker)

        logger.debug("Tracking %s (strategy=%s)", normalized, strategy.name)

    def track_temp_file(
        self,
        owner: object,
        *,
        suffix: str | None = None,
        prefix: str | None = None,
        directory: str | os.PathLike[str] | None = None,
        strategy: DeleteStrategy | None = None,
    ) -> str:
        """Create an empty temporary file and track it against owner.

        Args:
            owner: Object whose reclamation triggers the deletion.
            suffix: Optional file name suffix.
            prefix: Optional file name prefix.
            directory: Directory to create the file in (system default if None).
            strategy: Deletion strategy (tracker default if None).

        Returns:
            Absolute path of the created file.

        Raises:
            TrackerShutdownError: If exit_when_finished() was already called.
        """
        self._ensure_accepting()
        fd, path = tempfile.mkstemp(suffix=suffix, prefix=prefix, dir=directory)
        os.close(fd)
        try:
            self.track(path, owner, strategy)
        except Exception:
            os.unlink(path)
            raise
        return path

    def track_temp_dir(
        self,
        owner: object,
        *,
        suffix: str | None = None,
        prefix: str | None = None,
        directory: str | os.PathLike[str] | None = None,
        strategy: DeleteStrategy | None = FORCE,
    ) -> str:
        """Create a temporary directory and track it against owner.

        Unlike track_temp_file(), this defaults to the FORCE strategy since
        the directory is expected to be filled by the caller.

        Args:
            owner: Object whose reclamation triggers the deletion.
            suffix: Optional directory name suffix.
            prefix: Optional directory name prefix.
            directory: Parent directory (system default if None).
            strategy: Deletion strategy (tracker default if None).

        Returns:
            Absolute path of the created directory.

        Raises:
            TrackerShutdownError: If exit_when_finished() was already called.
        """
        self._ensure_accepting()
        path = tempfile.mkdtemp(suffix=suffix, prefix=prefix, dir=directory)
        try:
            self.track(path, owner, strategy)
        except Exception:
            os.rmdir(path)
            raise
        return path

    def exit_when_finished(self) -> None:
        """Let the reaper thread stop once all tracked paths are handled.

        Paths tracked before this call are still deleted when their owners
        are reclaimed. No new paths can be tracked afterwards. This call
        does not wait for the reaper to stop; use join() for that.

        Calling it more than once has no further effect.
        """
        with self._lock:
            if self._exit_when_finished:
                return
            self._exit_when_finished = True
            if self._reaper is not None:
                self._queue.put(_WAKE)
        logger.debug("Exit requested with %d path(s) still tracked", self.get_track_count())

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the reaper thread to stop.

        Only returns early after exit_when_finished() was called and every
        tracked owner has been reclaimed.

        Args:
            timeout: Maximum seconds to wait, None to wait indefinitely.

        Returns:
            True if no reaper thread is running anymore.
        """
        reaper = self._reaper
        if reaper is None:
            return True
        reaper.join(timeout)
        return not reaper.is_alive()

    @property
    def is_running(self) -> bool:
        """Whether the reaper thread has been started and is still alive."""
        reaper = self._reaper
        return reaper is not None and reaper.is_alive()

    def get_track_count(self) -> int:
        """Get the number of paths still awaiting deletion.

        The value is a snapshot and may change concurrently.

        Returns:
            Number of tracked paths not yet processed.
        """
        with self._trackers_lock:
            return len(self._trackers)

    def get_delete_failures(self) -> list[str]:
        """Get a copy of the paths whose deletion failed.

        Returns:
            Paths in the order their deletion failed.
        """
        with self._failures_lock:
            return list(self._delete_failures)

    def _reap(self, tracker: Tracker) -> None:
        """Handle one Tracker whose owner was reclaimed.

        Never raises: any error is recorded as a failed deletion so the
        reaper keeps running.
        """
        with self._trackers_lock:
            self._trackers.discard(tracker)

        try:
            deleted = tracker.delete()
        except Exception:
            logger.exception("Unexpected error deleting %s", tracker.path)
            deleted = False

        if deleted:
            logger.debug("Deleted %s", tracker.path)
            return

        logger.warning("Failed to delete %s", tracker.path)
        with self._failures_lock:
            self._delete_failures.append(tracker.path)

    def _ensure_accepting(self) -> None:
        """Raise TrackerShutdownError once exit_when_finished() was called."""
        if self._exit_when_finished:
            msg = "No new paths can be tracked once exit_when_finished() is called"
            raise TrackerShutdownError(msg)

    def __repr__(self) -> str:
        return (
            f"FileCleaningTracker(tracked={self.get_track_count()}, "
            f"failures={len(self.get_delete_failures())}, "
            f"exit_when_finished={self._exit_when_finished})"
        )


def _normalize_path(path: str | os.PathLike[str]) -> str:
    """Validate a path argument and convert it to the stored string form.

    Raises:
        ValueError: If path is None or empty.
        TypeError: If path is neither str nor path-like.
    """
    if path is None:
        msg = "path must not be None"
        raise ValueError(msg)
    if isinstance(path, str):
        if not path:
            msg = "path must not be empty"
            raise ValueError(msg)
        return path
    if isinstance(path, os.PathLike):
        fspath = os.fspath(path)
        if not isinstance(fspath, str):
            msg = f"path must be a str path, got {type(fspath).__name__}"
            raise TypeError(msg)
        return os.path.abspath(fspath)
    msg = f"path must be str or os.PathLike, got {type(path).__name__}"
    raise TypeError(msg)
