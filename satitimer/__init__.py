"""Sati Timer: a mindful meditation timer."""

__version__ = "0.1.0"
