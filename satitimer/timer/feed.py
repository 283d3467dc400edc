"""Latest-value-wins snapshot delivery for consumers on other threads.

The engine never waits on a feed: ``publish`` just replaces the stored
snapshot, so a reader that falls behind skips straight to the newest state
instead of working through a backlog.

Usage::

    feed = engine.subscribe()
    while (snap := feed.get(timeout=5.0)) is not None:
        render(snap)
    engine.unsubscribe(feed)
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .engine import TimerSnapshot


class SnapshotFeed:
    """Single-slot mailbox holding the most recent ``TimerSnapshot``."""

    def __init__(self, initial: TimerSnapshot | None = None) -> None:
        self._cond = threading.Condition()
        self._latest = initial
        self._version = 0 if initial is None else 1
        self._seen = 0
        self._superseded = 0
        self._closed = False

    # ── producer side ─────────────────────────────────────────────────

    def publish(self, snapshot: TimerSnapshot) -> None:
        with self._cond:
            if self._closed:
                return
            if self._version > self._seen:
                self._superseded += 1
            self._latest = snapshot
            self._version += 1
            self._cond.notify_all()

    def close(self) -> None:
        """Wake any waiting reader; further publishes are ignored."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    # ── consumer side ─────────────────────────────────────────────────

    @property
    def latest(self) -> TimerSnapshot | None:
        with self._cond:
            return self._latest

    @property
    def has_update(self) -> bool:
        with self._cond:
            return self._version > self._seen

    @property
    def superseded(self) -> int:
        """How many snapshots were replaced before anyone read them."""
        with self._cond:
            return self._superseded

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def get(self, timeout: float | None = None) -> TimerSnapshot | None:
        """Block until a snapshot newer than the last one read arrives.

        Returns None on timeout or once the feed is closed.
        """
        with self._cond:
            ready = self._cond.wait_for(
                lambda: self._version > self._seen or self._closed,
                timeout=timeout,
            )
            if not ready or self._version <= self._seen:
                return None
            self._seen = self._version
            return self._latest
