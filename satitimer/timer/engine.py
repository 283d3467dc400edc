"""Timer state machine for Sati Timer.

States
------
STOPPED     At rest — shows the selected duration, waiting for start.
PREPARING   "Get ready" countdown (10 s) before the meditation begins.
RUNNING     Meditation countdown.
PAUSED      Countdown frozen; remaining time kept.

Transitions
-----------
any → PREPARING           (start — a start while active restarts)
PREPARING → RUNNING       (preparation reaches 0, gong)
RUNNING → PAUSED          (pause)
PAUSED → RUNNING          (resume)
RUNNING → STOPPED         (remaining reaches 0, gong, 2 s grace window)
any → STOPPED             (stop)

A stopped timer is reset, not drained: ``remaining == total`` and the
preparation counter is back at its start value.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal, pyqtSlot

from .feed import SnapshotFeed

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerPhase(Enum):
    STOPPED = "stopped"
    PREPARING = "preparing"
    RUNNING = "running"
    PAUSED = "paused"


# ── constants ─────────────────────────────────────────────────────────────

PREPARATION_SECONDS = 10
DEFAULT_DURATION = 20 * 60
TICK_INTERVAL_MS = 1000
GRACE_PERIOD_MS = 2000  # lets the closing gong ring out
WAKE_LOCK_MARGIN_SECONDS = 15


# ── snapshot ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerSnapshot:
    """Immutable point-in-time timer state."""

    phase: TimerPhase = TimerPhase.STOPPED
    total_seconds: int = DEFAULT_DURATION
    remaining_seconds: int = DEFAULT_DURATION
    preparation_seconds_left: int = PREPARATION_SECONDS

    @classmethod
    def at_rest(cls, total_seconds: int) -> TimerSnapshot:
        return cls(TimerPhase.STOPPED, total_seconds, total_seconds,
                   PREPARATION_SECONDS)

    @property
    def progress(self) -> float:
        """0.0 → 1.0 progress through the meditation."""
        if self.total_seconds <= 0:
            return 0.0
        elapsed = self.total_seconds - self.remaining_seconds
        return max(0.0, min(1.0, elapsed / self.total_seconds))

    @property
    def is_active(self) -> bool:
        """True while counting down (PREPARING or RUNNING)."""
        return self.phase in (TimerPhase.PREPARING, TimerPhase.RUNNING)


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based meditation countdown with a preparation phase.

    Signals
    -------
    snapshot_changed(snapshot: TimerSnapshot)
        Emitted after every mutation (tick or transition).
    phase_changed(phase: TimerPhase)
        Emitted when the phase differs from the previous snapshot.
    session_completed(total_seconds: int)
        Emitted once when the countdown reaches 0, before the grace
        window.  Not emitted for stopped or restarted runs.

    Controls may be called from any thread.  Calls from a thread other
    than the engine's own are queued onto the engine's thread, so all
    ticking and mutation happens in one place.
    """

    snapshot_changed = pyqtSignal(object)
    phase_changed = pyqtSignal(object)
    session_completed = pyqtSignal(object)

    _start_requested = pyqtSignal(object)
    _pause_requested = pyqtSignal()
    _resume_requested = pyqtSignal()
    _stop_requested = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        tone=None,
        wake_lock=None,
        tick_ms: int = TICK_INTERVAL_MS,
        grace_ms: int = GRACE_PERIOD_MS,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._tone = tone
        self._wake_lock = wake_lock
        self._wake_lock_held: bool = False

        # ── state ─────────────────────────────────────────────────────
        self._snapshot: TimerSnapshot = TimerSnapshot()
        self._completing: bool = False
        self._feeds: list[SnapshotFeed] = []
        self._feeds_lock = threading.Lock()

        # ── Qt timers ─────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(tick_ms)
        self._qt_timer.timeout.connect(self._on_tick)

        self._grace_timer = QTimer(self)
        self._grace_timer.setSingleShot(True)
        self._grace_timer.setInterval(grace_ms)
        self._grace_timer.timeout.connect(self._on_grace_elapsed)

        # ── control requests (queued when emitted off-thread) ─────────
        self._start_requested.connect(self._do_start)
        self._pause_requested.connect(self._do_pause)
        self._resume_requested.connect(self._do_resume)
        self._stop_requested.connect(self._do_stop)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def snapshot(self) -> TimerSnapshot:
        return self._snapshot

    @property
    def phase(self) -> TimerPhase:
        return self._snapshot.phase

    @property
    def remaining(self) -> int:
        """Seconds left in the meditation."""
        return self._snapshot.remaining_seconds

    @property
    def total_duration(self) -> int:
        return self._snapshot.total_seconds

    @property
    def preparation_left(self) -> int:
        return self._snapshot.preparation_seconds_left

    @property
    def is_active(self) -> bool:
        return self._snapshot.is_active

    @property
    def is_ticking(self) -> bool:
        return self._qt_timer.isActive()

    @property
    def grace_pending(self) -> bool:
        """True between the closing gong and the automatic stop."""
        return self._completing

    # ══════════════════════════════════════════════════════════════════
    #  SUBSCRIPTIONS
    # ══════════════════════════════════════════════════════════════════

    def subscribe(self) -> SnapshotFeed:
        """Register a latest-value-wins feed, primed with the current state."""
        feed = SnapshotFeed()
        # Same lock as _publish: the feed either gets the current snapshot
        # here or is in the list for the next publish.
        with self._feeds_lock:
            self._feeds.append(feed)
            feed.publish(self._snapshot)
        return feed

    def unsubscribe(self, feed: SnapshotFeed) -> None:
        with self._feeds_lock:
            if feed in self._feeds:
                self._feeds.remove(feed)
        feed.close()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, duration: int) -> None:
        """Begin a meditation of *duration* seconds.

        Restarts from scratch if a run is already in progress.  Raises
        ``ValueError`` for anything but a positive integer.
        """
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise ValueError(f"duration must be an int, got {duration!r}")
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        self._start_requested.emit(duration)

    def pause(self) -> None:
        """Freeze the meditation countdown.  No-op unless RUNNING."""
        self._pause_requested.emit()

    def resume(self) -> None:
        """Continue from where ``pause`` left off.  No-op unless PAUSED."""
        self._resume_requested.emit()

    def stop(self) -> None:
        """Cancel everything and return to STOPPED.  Always safe."""
        self._stop_requested.emit()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — transitions
    # ══════════════════════════════════════════════════════════════════

    @pyqtSlot(object)
    def _do_start(self, duration: int) -> None:
        self._qt_timer.stop()
        self._grace_timer.stop()
        self._completing = False

        logger.debug("Starting %d s meditation", duration)
        self._publish(TimerSnapshot(
            TimerPhase.PREPARING, duration, duration, PREPARATION_SECONDS,
        ))
        self._acquire_wake_lock(duration + WAKE_LOCK_MARGIN_SECONDS)
        self._qt_timer.start()

    @pyqtSlot()
    def _do_pause(self) -> None:
        if self._snapshot.phase != TimerPhase.RUNNING or self._completing:
            return
        self._qt_timer.stop()
        self._publish(replace(self._snapshot, phase=TimerPhase.PAUSED))

    @pyqtSlot()
    def _do_resume(self) -> None:
        if self._snapshot.phase != TimerPhase.PAUSED:
            return
        self._publish(replace(self._snapshot, phase=TimerPhase.RUNNING))
        self._qt_timer.start()

    @pyqtSlot()
    def _do_stop(self) -> None:
        self._qt_timer.stop()
        self._grace_timer.stop()
        self._completing = False
        self._release_wake_lock()

        at_rest = TimerSnapshot.at_rest(self._snapshot.total_seconds)
        if at_rest != self._snapshot:
            self._publish(at_rest)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        snap = self._snapshot

        if snap.phase == TimerPhase.PREPARING:
            left = max(0, snap.preparation_seconds_left - 1)
            ticked = replace(snap, preparation_seconds_left=left)
            self._publish(ticked)
            # Subscribers run synchronously and may have stopped us.
            if left == 0 and self._snapshot is ticked:
                self._play_tone()
                self._publish(replace(self._snapshot, phase=TimerPhase.RUNNING))

        elif snap.phase == TimerPhase.RUNNING:
            if self._completing:
                return
            remaining = max(0, snap.remaining_seconds - 1)
            ticked = replace(snap, remaining_seconds=remaining)
            self._publish(ticked)
            if remaining == 0 and self._snapshot is ticked:
                self._finish_session()

        else:
            # Stray tick after a pause/stop raced the timer.
            self._qt_timer.stop()

    def _finish_session(self) -> None:
        self._qt_timer.stop()
        self._completing = True
        self._play_tone()
        logger.info("Meditation of %d s complete", self._snapshot.total_seconds)
        self.session_completed.emit(self._snapshot.total_seconds)
        # A slot connected to session_completed may already have stopped
        # or restarted us.
        if self._completing:
            self._grace_timer.start()

    def _on_grace_elapsed(self) -> None:
        if self._completing:
            self._do_stop()

    def _publish(self, snapshot: TimerSnapshot) -> None:
        # Feeds first: slots below may publish again re-entrantly.
        with self._feeds_lock:
            previous = self._snapshot
            self._snapshot = snapshot
            feeds = list(self._feeds)
        for feed in feeds:
            feed.publish(snapshot)

        self.snapshot_changed.emit(snapshot)
        if snapshot.phase != previous.phase and self._snapshot is snapshot:
            self.phase_changed.emit(snapshot.phase)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — best-effort collaborators
    # ══════════════════════════════════════════════════════════════════

    def _play_tone(self) -> None:
        if self._tone is None:
            return
        try:
            self._tone.play_completion_tone()
        except Exception:
            logger.warning("Could not play completion tone", exc_info=True)

    def _acquire_wake_lock(self, timeout_seconds: int) -> None:
        if self._wake_lock is None:
            return
        self._release_wake_lock()
        try:
            self._wake_lock.acquire(timeout_seconds)
            self._wake_lock_held = True
        except Exception:
            logger.warning("Could not acquire wake lock", exc_info=True)

    def _release_wake_lock(self) -> None:
        if self._wake_lock is None or not self._wake_lock_held:
            return
        self._wake_lock_held = False
        try:
            self._wake_lock.release()
        except Exception:
            logger.warning("Could not release wake lock", exc_info=True)
