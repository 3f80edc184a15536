"""Exception hierarchy for filereaper.

All errors raised by the tracker and its deletion strategies derive from
FileReaperError, and additionally from the builtin exception class that
best describes them so callers can catch either.
"""


class FileReaperError(Exception):
    """Base exception for all filereaper errors."""


class TrackerShutdownError(FileReaperError, RuntimeError):
    """Raised when a path is tracked after exit_when_finished() was called."""


class DeletionError(FileReaperError, OSError):
    """Raised when a deletion strategy cannot remove a path.

    Attributes:
        path: The path that could not be deleted.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot delete {path}: {reason}")
        self.path = path
        self.reason = reason
