"""filereaper - delete files once the objects that own them are gone.

Typical use:

    from filereaper import FileCleaningTracker

    tracker = FileCleaningTracker()
    tracker.track(path, owner)
"""

from filereaper.core.errors import DeletionError, FileReaperError, TrackerShutdownError
from filereaper.core.strategy import FORCE, NORMAL, DeleteStrategy
from filereaper.core.tracker import FileCleaningTracker

__version__ = "0.1.0"

__all__ = [
    "FORCE",
    "NORMAL",
    "DeleteStrategy",
    "DeletionError",
    "FileCleaningTracker",
    "FileReaperError",
    "TrackerShutdownError",
    "__version__",
]
