"""Timer package."""

from .engine import (
    TimerEngine,
    TimerPhase,
    TimerSnapshot,
    PREPARATION_SECONDS,
    DEFAULT_DURATION,
    GRACE_PERIOD_MS,
    WAKE_LOCK_MARGIN_SECONDS,
)
from .feed import SnapshotFeed

__all__ = [
    "TimerEngine",
    "TimerPhase",
    "TimerSnapshot",
    "SnapshotFeed",
    "PREPARATION_SECONDS",
    "DEFAULT_DURATION",
    "GRACE_PERIOD_MS",
    "WAKE_LOCK_MARGIN_SECONDS",
]
