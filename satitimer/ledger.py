"""Completed meditation sessions and the total time meditated.

A session is only written once the closing gong sounds.  The start time
is kept in the ``preferences`` table in the meantime, so a restart
between start and completion does not lose it; a completion with no
recorded start is ignored.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal
from sqlalchemy import func

from .database.db import (
    delete_preference,
    get_session,
    read_preference,
    write_preference,
)
from .database.models import MeditationSession

logger = logging.getLogger(__name__)

SESSION_START_KEY = "session_start_time"


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(datetime.now().timestamp() * 1000)


class SessionLedger(QObject):
    """Append-only log of completed sessions.

    Signals
    -------
    total_changed(minutes: int)
        Emitted after a session is recorded or the log is cleared.
    """

    total_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        super().__init__(parent)
        self._clock = clock
        self._lock = threading.Lock()

    # ── recording ─────────────────────────────────────────────────────

    def start_session(self) -> int:
        """Remember when the current session began.  Returns epoch ms."""
        started = self._clock()
        with self._lock:
            with get_session() as db:
                write_preference(db, SESSION_START_KEY, str(started))
        logger.debug("Session started at %d", started)
        return started

    def has_pending_session(self) -> bool:
        return self._pending_start() is not None

    def complete_session(
        self, actual_duration_seconds: int
    ) -> MeditationSession | None:
        """Store the session begun by ``start_session``.

        Returns the new record, or None when no start was pending.
        Raises ``ValueError`` for a negative or non-integer duration.
        """
        if (isinstance(actual_duration_seconds, bool)
                or not isinstance(actual_duration_seconds, int)):
            raise ValueError(
                f"duration must be an int, got {actual_duration_seconds!r}"
            )
        if actual_duration_seconds < 0:
            raise ValueError(
                f"duration must not be negative, got {actual_duration_seconds}"
            )
        with self._lock:
            with get_session() as db:
                started = _parse_start(read_preference(db, SESSION_START_KEY))
                if started is None:
                    logger.info("Completion without a recorded start ignored")
                    return None
                record = MeditationSession(
                    duration_seconds=actual_duration_seconds,
                    start_timestamp=started,
                    end_timestamp=self._clock(),
                )
                db.add(record)
                delete_preference(db, SESSION_START_KEY)

        logger.info("Recorded %d s session", actual_duration_seconds)
        self.total_changed.emit(self.total_minutes_meditated())
        return record

    def reset_all(self) -> None:
        """Delete every stored session."""
        with self._lock:
            with get_session() as db:
                db.query(MeditationSession).delete()
        logger.info("All meditation sessions deleted")
        self.total_changed.emit(0)

    # ── queries ───────────────────────────────────────────────────────

    def total_minutes_meditated(self) -> int:
        with get_session() as db:
            total = db.query(func.sum(MeditationSession.duration_seconds)).scalar()
        return (total or 0) // 60

    def session_count(self) -> int:
        with get_session() as db:
            return db.query(MeditationSession).count()

    def all_sessions(self) -> list[MeditationSession]:
        """Every session, most recent first."""
        with get_session() as db:
            return (
                db.query(MeditationSession)
                .order_by(MeditationSession.start_timestamp.desc(),
                          MeditationSession.id.desc())
                .all()
            )

    def recent_sessions(self, limit: int = 10) -> list[MeditationSession]:
        with get_session() as db:
            return (
                db.query(MeditationSession)
                .order_by(MeditationSession.start_timestamp.desc(),
                          MeditationSession.id.desc())
                .limit(limit)
                .all()
            )

    # ── internal ──────────────────────────────────────────────────────

    def _pending_start(self) -> int | None:
        with get_session() as db:
            return _parse_start(read_preference(db, SESSION_START_KEY))


def _parse_start(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        started = int(value)
    except ValueError:
        return None
    return started if started > 0 else None
