# tests/conftest.py

from __future__ import annotations

import logging

import pytest

from .fakes import RecordingTimer


@pytest.fixture()
def recording_timer() -> RecordingTimer:
    return RecordingTimer()


@pytest.fixture()
def calls() -> list:
    """Execution log shared by the tasks of one test."""
    return []


@pytest.fixture()
def restore_root_logging():
    """
    setup_logging() replaces root handlers (pytest's capture handler included).
    Put everything back after the test.
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)
