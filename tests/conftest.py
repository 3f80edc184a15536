"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import gc
import time
from collections.abc import Callable, Iterator

import pytest
from filereaper.core.tracker import FileCleaningTracker


class Owner:
    """Weak-referenceable stand-in for an application object owning a file."""


@pytest.fixture
def owner_factory() -> type[Owner]:
    """Class used to create owner objects in tracker tests."""
    return Owner


@pytest.fixture
def tracker() -> Iterator[FileCleaningTracker]:
    """A fresh tracker whose reaper is told to stop after the test."""
    instance = FileCleaningTracker()
    yield instance
    instance.exit_when_finished()


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Poll a predicate while forcing garbage collection.

    Returns:
        Function taking a predicate and an optional timeout in seconds,
        returning the predicate's final value.
    """

    def _wait(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            gc.collect()
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait
