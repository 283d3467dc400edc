"""Audio package."""

from .synth import generate_gong

__all__ = ["generate_gong"]
