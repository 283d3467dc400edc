"""Database package."""

from .db import get_session, init_db
from .models import MeditationSession, Preference

__all__ = ["get_session", "init_db", "MeditationSession", "Preference"]
