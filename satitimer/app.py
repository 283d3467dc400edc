"""Command layer tying the controls to the timer, history and ledger."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject

from .history import DurationHistoryStore
from .ledger import SessionLedger
from .settings import Settings
from .timer.engine import TimerEngine, TimerPhase

logger = logging.getLogger(__name__)


class MeditationApp(QObject):
    """What the buttons on the main screen do.

    - A quick-pick button only selects its duration.
    - A custom duration from the picker is selected and goes straight
      into the history.
    - Start records the duration in the history, opens a ledger entry
      and starts the engine.
    - When the engine finishes on its own the session is written to
      the ledger.  Stopped runs are never recorded.
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
        history: DurationHistoryStore | None = None,
        ledger: SessionLedger | None = None,
        engine: TimerEngine | None = None,
        tone=None,
        wake_lock=None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or Settings()
        self._history = history or DurationHistoryStore(self)
        self._ledger = ledger or SessionLedger(self)
        self._engine = engine or TimerEngine(
            self, tone=tone, wake_lock=wake_lock,
        )
        self._selected: int = self._settings.last_duration

        self._engine.session_completed.connect(self._on_session_completed)

    # ── accessors ─────────────────────────────────────────────────────

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def history(self) -> DurationHistoryStore:
        return self._history

    @property
    def ledger(self) -> SessionLedger:
        return self._ledger

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def selected_duration(self) -> int:
        return self._selected

    # ── duration selection ────────────────────────────────────────────

    def select_duration(self, seconds: int) -> None:
        _check_duration(seconds)
        self._selected = seconds

    def add_custom_duration(self, minutes: int) -> list[int]:
        """Pick a duration from the picker dialog."""
        seconds = minutes * 60
        self.select_duration(seconds)
        return self._history.touch(seconds)

    # ── controls ──────────────────────────────────────────────────────

    def begin(self, duration: int | None = None) -> None:
        """Start a meditation (the selected duration unless given)."""
        seconds = self._selected if duration is None else duration
        _check_duration(seconds)

        self._selected = seconds
        self._settings.last_duration = seconds
        self._history.touch(seconds)
        self._ledger.start_session()
        self._engine.start(seconds)

    def primary_action(self) -> None:
        """The big round button: start, stop, or resume."""
        phase = self._engine.phase
        if phase == TimerPhase.STOPPED:
            self.begin()
        elif phase == TimerPhase.PAUSED:
            self._engine.resume()
        else:
            self._engine.stop()

    def pause(self) -> None:
        self._engine.pause()

    def resume(self) -> None:
        self._engine.resume()

    def stop(self) -> None:
        self._engine.stop()

    # ── internal ──────────────────────────────────────────────────────

    def _on_session_completed(self, total_seconds: int) -> None:
        self._ledger.complete_session(total_seconds)


def _check_duration(seconds) -> None:
    if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
        raise ValueError(f"duration must be a positive int, got {seconds!r}")
