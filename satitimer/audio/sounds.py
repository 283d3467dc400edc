"""Gong playback using QSoundEffect.

The WAV is synthesised once (see ``synth.py``) and cached to disk so
later launches skip the synthesis.
"""

from __future__ import annotations

from pathlib import Path

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from .synth import generate_gong


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "SatiTimer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"
GONG_FILENAME = "gong.wav"


class TonePlayer(QObject):
    """Plays the gong at the start and end of a meditation.

    Usage::

        player = TonePlayer(parent=self)
        player.set_volume(80)
        player.play_completion_tone()
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.8  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effect: QSoundEffect | None = None

        self._ensure_wav_file()
        self._load_effect()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100)."""
        self._volume = max(0, min(level, 100)) / 100.0
        if self._effect is not None:
            self._effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play_completion_tone(self) -> None:
        """Strike the gong.  Restarts it if it is still ringing."""
        if not self._enabled or self._effect is None:
            return
        if self._effect.isPlaying():
            self._effect.stop()
        self._effect.play()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def gong_path(self) -> Path:
        return self._sounds_dir / GONG_FILENAME

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_file(self) -> None:
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        if not self.gong_path.exists():
            self.gong_path.write_bytes(generate_gong())

    def _load_effect(self) -> None:
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(self.gong_path)))
        effect.setVolume(self._volume)
        self._effect = effect
