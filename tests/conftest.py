import time

import pytest


@pytest.fixture
def local_tz(monkeypatch):
    """Switch the process-local timezone for the duration of a test."""

    def _set(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()
