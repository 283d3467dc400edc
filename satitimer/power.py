"""Keep-awake boundary for an active meditation.

The engine acquires the lock when a run starts, with a timeout of the
run length plus a small margin, and releases it on stop.  Platforms
without a wake-lock facility use ``WakeLock`` itself, which only tracks
whether it is held.
"""

from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)


class WakeLock:
    """Timed wake lock.  Subclass and override ``_hold``/``_drop``."""

    def __init__(self, tag: str = "SatiTimer:TimerWakeLock") -> None:
        self.tag = tag
        self._expires_at: float | None = None

    @property
    def held(self) -> bool:
        if self._expires_at is None:
            return False
        return time.monotonic() < self._expires_at

    def acquire(self, timeout_seconds: int) -> None:
        self._hold(timeout_seconds)
        self._expires_at = time.monotonic() + timeout_seconds
        logger.debug("%s acquired for %d s", self.tag, timeout_seconds)

    def release(self) -> None:
        if self._expires_at is None:
            return
        self._expires_at = None
        self._drop()
        logger.debug("%s released", self.tag)

    def _hold(self, timeout_seconds: int) -> None:
        pass

    def _drop(self) -> None:
        pass
