"""Most-recently-used list of meditation durations.

The three quick-pick buttons show this list, newest first.  Pressing
start with a duration moves it to the front; a fourth distinct duration
pushes the oldest one out.

Stored in the ``preferences`` table as a comma-joined string::

    recent_durations = "60,1200,1800"
"""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal

from .database.db import get_session, read_preference, write_preference

logger = logging.getLogger(__name__)

RECENT_DURATIONS_KEY = "recent_durations"
DEFAULT_DURATIONS: tuple[int, ...] = (60, 20 * 60, 30 * 60)
MAX_RECENT_COUNT = 3


def parse_durations(text: str | None) -> list[int]:
    """Parse the stored representation; anything suspicious gives defaults."""
    if not text:
        return list(DEFAULT_DURATIONS)
    try:
        values = [int(part.strip()) for part in text.split(",")]
    except ValueError:
        logger.debug("Unreadable duration history %r, using defaults", text)
        return list(DEFAULT_DURATIONS)
    if any(v <= 0 for v in values):
        logger.debug("Non-positive duration in %r, using defaults", text)
        return list(DEFAULT_DURATIONS)

    unique: list[int] = []
    for v in values:
        if v not in unique:
            unique.append(v)
    return unique[:MAX_RECENT_COUNT]


def format_durations(durations: list[int]) -> str:
    return ",".join(str(d) for d in durations)


def push_front(durations: list[int], duration: int) -> list[int]:
    """New MRU list with *duration* first, duplicates removed, capped."""
    rest = [d for d in durations if d != duration]
    return [duration, *rest][:MAX_RECENT_COUNT]


class DurationHistoryStore(QObject):
    """Persisted MRU list of durations (seconds).

    Signals
    -------
    changed(durations: list)
        Emitted after every write with the new list.
    """

    changed = pyqtSignal(list)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._lock = threading.Lock()

    def list(self) -> list[int]:
        """Current durations, most recent first."""
        with get_session() as db:
            return parse_durations(read_preference(db, RECENT_DURATIONS_KEY))

    def touch(self, duration: int) -> list[int]:
        """Move *duration* to the front of the history."""
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise ValueError(f"duration must be an int, got {duration!r}")
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")

        with self._lock:
            with get_session() as db:
                current = parse_durations(read_preference(db, RECENT_DURATIONS_KEY))
                updated = push_front(current, duration)
                write_preference(db, RECENT_DURATIONS_KEY, format_durations(updated))

        self.changed.emit(updated)
        return updated

    def reset_to_defaults(self) -> list[int]:
        defaults = list(DEFAULT_DURATIONS)
        with self._lock:
            with get_session() as db:
                write_preference(db, RECENT_DURATIONS_KEY, format_durations(defaults))
        logger.info("Duration history reset to defaults")
        self.changed.emit(defaults)
        return defaults
