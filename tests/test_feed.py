"""Tests for latest-value-wins snapshot delivery and the wake lock."""

import threading
import time

from satitimer.power import WakeLock
from satitimer.timer.engine import TimerPhase, TimerSnapshot
from satitimer.timer.feed import SnapshotFeed


def _snap(remaining):
    return TimerSnapshot(TimerPhase.RUNNING, 100, remaining, 0)


class TestSnapshotFeed:

    def test_empty_feed_times_out(self):
        feed = SnapshotFeed()
        assert feed.get(timeout=0.01) is None
        assert feed.latest is None

    def test_newest_wins(self):
        feed = SnapshotFeed()
        for remaining in (99, 98, 97):
            feed.publish(_snap(remaining))
        assert feed.get(timeout=0).remaining_seconds == 97
        assert feed.superseded == 2
        assert not feed.has_update

    def test_publish_never_blocks_without_reader(self):
        feed = SnapshotFeed()
        started = time.monotonic()
        for remaining in range(100, 0, -1):
            feed.publish(_snap(remaining))
        assert time.monotonic() - started < 1.0
        assert feed.latest.remaining_seconds == 1

    def test_waiting_reader_woken(self):
        feed = SnapshotFeed()
        got = []
        t = threading.Thread(target=lambda: got.append(feed.get(timeout=2.0)))
        t.start()
        feed.publish(_snap(42))
        t.join(timeout=2.0)
        assert got[0].remaining_seconds == 42

    def test_close_wakes_reader(self):
        feed = SnapshotFeed()
        got = []
        t = threading.Thread(target=lambda: got.append(feed.get(timeout=2.0)))
        t.start()
        feed.close()
        t.join(timeout=2.0)
        assert got == [None]

    def test_publish_after_close_ignored(self):
        feed = SnapshotFeed(_snap(10))
        feed.close()
        feed.publish(_snap(5))
        assert feed.latest.remaining_seconds == 10


class TestWakeLock:

    def test_acquire_and_release(self):
        lock = WakeLock()
        assert not lock.held
        lock.acquire(60)
        assert lock.held
        lock.release()
        assert not lock.held

    def test_release_without_acquire(self):
        WakeLock().release()

    def test_expires(self):
        lock = WakeLock()
        lock.acquire(0)
        assert not lock.held

    def test_platform_hooks_called(self):
        calls = []

        class RecordingLock(WakeLock):
            def _hold(self, timeout_seconds):
                calls.append(("hold", timeout_seconds))

            def _drop(self):
                calls.append(("drop",))

        lock = RecordingLock()
        lock.acquire(75)
        lock.release()
        lock.release()
        assert calls == [("hold", 75), ("drop",)]
