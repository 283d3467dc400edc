"""Shared test helpers for Sati Timer."""

import time

from PyQt6.QtCore import QCoreApplication

from satitimer.timer.engine import TimerEngine, PREPARATION_SECONDS


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeTone:
    """Counts gong strikes; optionally fails like a broken audio device."""

    def __init__(self, fail: bool = False):
        self.plays = 0
        self.fail = fail

    def play_completion_tone(self):
        self.plays += 1
        if self.fail:
            raise RuntimeError("audio device unavailable")


class FakeWakeLock:
    def __init__(self, fail: bool = False):
        self.acquired: list[int] = []
        self.releases = 0
        self.fail = fail

    def acquire(self, timeout_seconds):
        if self.fail:
            raise OSError("wake lock denied")
        self.acquired.append(timeout_seconds)

    def release(self):
        self.releases += 1


class FakeClock:
    """Epoch-ms clock that moves only when told to."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds * 1000


def finish_preparation(engine: TimerEngine) -> None:
    """Tick through the whole preparation phase."""
    for _ in range(PREPARATION_SECONDS):
        engine._on_tick()


def run_to_last_second(engine: TimerEngine) -> None:
    """Fast-forward a RUNNING engine to one second before the end."""
    while engine.remaining > 1:
        engine._on_tick()


def wait_until(predicate, timeout: float = 2.0) -> bool:
    """Spin the Qt event loop until *predicate* holds or time runs out."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.002)
    return predicate()
