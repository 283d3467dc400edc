"""Shared pytest fixtures for Sati Timer tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from satitimer.database.db import configure_engine, init_db
from satitimer.history import DurationHistoryStore
from satitimer.ledger import SessionLedger
from satitimer.timer.engine import TimerEngine

from helpers import FakeClock, FakeTone, FakeWakeLock


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def tone():
    return FakeTone()


@pytest.fixture
def wake_lock():
    return FakeWakeLock()


@pytest.fixture
def engine(qapp, tone, wake_lock):
    """Fresh TimerEngine with recording collaborators."""
    return TimerEngine(parent=None, tone=tone, wake_lock=wake_lock)


@pytest.fixture
def fast_engine(qapp, tone, wake_lock):
    """TimerEngine with millisecond ticks, for event-loop driven tests."""
    return TimerEngine(
        parent=None, tone=tone, wake_lock=wake_lock, tick_ms=2, grace_ms=20,
    )


@pytest.fixture
def history(qapp):
    return DurationHistoryStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(qapp, clock):
    return SessionLedger(clock=clock)
