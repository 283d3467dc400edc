"""Gong synthesis with numpy.

The gong is a handful of inharmonic sine partials, each with its own
exponential decay, over a short mallet-strike transient.  Output is
16-bit mono PCM WAV.
"""

from __future__ import annotations

import io
import wave

import numpy as np

SAMPLE_RATE = 44100
GONG_SECONDS = 4.0

# (frequency ratio to the fundamental, amplitude, decay time in seconds)
_GONG_PARTIALS: tuple[tuple[float, float, float], ...] = (
    (1.00, 0.50, 2.20),
    (2.02, 0.22, 1.40),
    (2.74, 0.14, 1.00),
    (3.93, 0.08, 0.60),
    (5.40, 0.05, 0.35),
)
_GONG_FUNDAMENTAL = 196.0  # G3


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _decay(length: int, tau_s: float, attack: int = 220) -> np.ndarray:
    """Short linear attack followed by exponential decay."""
    t = np.arange(length) / SAMPLE_RATE
    env = np.exp(-t / tau_s)
    a = min(attack, length)
    if a > 0:
        env[:a] *= np.linspace(0.0, 1.0, a)
    return env


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def generate_gong(duration_s: float = GONG_SECONDS) -> bytes:
    """Meditation gong: inharmonic partials with staggered decays."""
    length = int(SAMPLE_RATE * duration_s)
    mix = np.zeros(length, dtype=np.float64)
    for ratio, amp, tau in _GONG_PARTIALS:
        mix += _sine(_GONG_FUNDAMENTAL * ratio, duration_s) * amp * _decay(length, tau)

    # Mallet strike: a few ms of smoothed noise
    strike_len = int(SAMPLE_RATE * 0.015)
    rng = np.random.default_rng(7)
    strike = rng.standard_normal(strike_len) * 0.08
    strike = np.convolve(strike, np.ones(8) / 8, mode="same")
    mix[:strike_len] += strike * np.linspace(1.0, 0.0, strike_len)

    # Fade the tail so playback never ends on a click
    fade = int(SAMPLE_RATE * 0.2)
    mix[-fade:] *= np.linspace(1.0, 0.0, fade)
    return _to_wav_bytes(mix)
