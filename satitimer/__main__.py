"""Run a meditation from the terminal: python -m satitimer [minutes]."""

from __future__ import annotations

import argparse
import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QTimer

from .app import MeditationApp
from .database.db import init_db
from .history import DurationHistoryStore
from .ledger import SessionLedger
from .notification import format_duration_label, notification_text
from .power import WakeLock
from .settings import Settings, load_settings, save_settings
from .timer.engine import TimerPhase

logger = logging.getLogger("satitimer")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="satitimer",
        description="Meditation timer with a 10 second preparation and a gong.",
    )
    parser.add_argument(
        "minutes", nargs="?", type=int,
        help="meditation length in minutes (default: last used)",
    )
    parser.add_argument(
        "-s", "--seconds", type=int,
        help="meditation length in seconds, overrides MINUTES",
    )
    parser.add_argument("--history", action="store_true",
                        help="show the recent durations and exit")
    parser.add_argument("--total", action="store_true",
                        help="show total time meditated and exit")
    parser.add_argument("--reset-history", action="store_true",
                        help="restore the default recent durations")
    parser.add_argument("--reset-sessions", action="store_true",
                        help="delete all recorded sessions")
    parser.add_argument("--no-sound", action="store_true",
                        help="do not play the gong")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _build_tone(settings: Settings):
    """The gong player, or None when sound is off or cannot be set up."""
    if not settings.sound_enabled:
        return None
    try:
        from .audio.sounds import TonePlayer

        tone = TonePlayer()
        tone.set_volume(settings.sound_volume)
    except Exception:
        logger.warning("Gong unavailable, running without sound", exc_info=True)
        return None
    return tone


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_db()
    history = DurationHistoryStore()
    ledger = SessionLedger()

    if args.reset_history or args.reset_sessions:
        if args.reset_history:
            history.reset_to_defaults()
        if args.reset_sessions:
            ledger.reset_all()
        print("Reset done.")
        return 0
    if args.history:
        print("  ".join(format_duration_label(d) for d in history.list()))
        return 0
    if args.total:
        print(f"{ledger.total_minutes_meditated()} min meditated "
              f"in {ledger.session_count()} sessions")
        return 0

    settings = load_settings()
    if args.seconds is not None:
        duration = args.seconds
    elif args.minutes is not None:
        duration = args.minutes * 60
    else:
        duration = settings.last_duration
    if duration <= 0:
        print("Duration must be positive.", file=sys.stderr)
        return 2

    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName("SatiTimer")

    tone = None if args.no_sound else _build_tone(settings)

    meditation = MeditationApp(
        settings=settings,
        history=history,
        ledger=ledger,
        tone=tone,
        wake_lock=WakeLock() if settings.keep_screen_on else None,
    )
    engine = meditation.engine
    engine.snapshot_changed.connect(
        lambda snap: print(f"\r{notification_text(snap):<24}", end="", flush=True)
    )
    engine.phase_changed.connect(
        lambda phase: app.quit() if phase == TimerPhase.STOPPED else None
    )

    # Let the interpreter see Ctrl+C while Qt owns the loop.
    signal.signal(signal.SIGINT, lambda *_: meditation.stop())
    heartbeat = QTimer()
    heartbeat.start(200)
    heartbeat.timeout.connect(lambda: None)

    meditation.begin(duration)
    app.exec()
    print()

    save_settings(settings)
    print(f"Total: {ledger.total_minutes_meditated()} min")
    return 0


if __name__ == "__main__":
    sys.exit(main())
