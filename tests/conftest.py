# tests/conftest.py
import pytest

from lazyslot import config
from lazyslot.config import LazySlotSettings


@pytest.fixture
def allow_redeclare(monkeypatch):
    """Switch the redeclaration policy to last-write-wins for one test."""
    monkeypatch.setattr(
        config, "settings", LazySlotSettings(ALLOW_REDECLARE=True)
    )
    yield


@pytest.fixture
def counter():
    """A mutable call counter shared between a compute function and a test."""

    class Counter:
        def __init__(self):
            self.calls = 0

        def bump(self, value=None):
            self.calls += 1
            return value

    return Counter()
