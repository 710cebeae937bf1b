"""Shared test fixtures for all test modules."""

from collections.abc import Callable

import pytest

from fluency_reporter.adapters.sinks.in_memory import InMemorySink
from fluency_reporter.core.config import ReporterConfig
from fluency_reporter.reporter import FluencyReporter
from tests.fakes import FIXED_NOW, FlakySink


@pytest.fixture
def clock() -> Callable[[], float]:
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def sink() -> InMemorySink:
    """Fixture providing an empty in-memory sink."""
    return InMemorySink()


@pytest.fixture
def flaky_sink() -> FlakySink:
    """Fixture providing a recording sink that can be told to fail."""
    return FlakySink()


@pytest.fixture
def make_reporter(clock: Callable[[], float]):
    """Factory fixture building a reporter with a frozen clock.

    Usage:
        def test_something(make_reporter, sink):
            reporter = make_reporter(sink, prefix="app")
    """

    def _make(sink, **config) -> FluencyReporter:
        config.setdefault("clock", clock)
        return FluencyReporter(sink, ReporterConfig(**config))

    return _make


@pytest.fixture
def db_path(tmp_path) -> str:
    """Provide a temporary database path for SQLite sink tests."""
    return str(tmp_path / "records.db")
