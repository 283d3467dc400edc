"""Text shown in the ongoing notification and on the timer face."""

from __future__ import annotations

from .timer.engine import TimerPhase, TimerSnapshot


def format_time(seconds: int) -> str:
    """Zero-padded ``MM:SS``; minutes are not wrapped into hours."""
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


def format_duration_label(seconds: int) -> str:
    """Label for a quick-pick duration button, e.g. ``"20 min"``."""
    return f"{seconds // 60} min"


def notification_text(snapshot: TimerSnapshot) -> str:
    phase = snapshot.phase
    if phase == TimerPhase.PREPARING:
        return f"Get ready… {snapshot.preparation_seconds_left}"
    if phase == TimerPhase.RUNNING:
        return f"Meditating: {format_time(snapshot.remaining_seconds)}"
    if phase == TimerPhase.PAUSED:
        return f"Paused: {format_time(snapshot.remaining_seconds)}"
    return "Meditation complete"


def display_text(snapshot: TimerSnapshot) -> str:
    """Timer-face text: the selected duration at rest, else the countdown."""
    if snapshot.phase == TimerPhase.PREPARING:
        return f"Get ready\n{snapshot.preparation_seconds_left}"
    return format_time(snapshot.remaining_seconds)
