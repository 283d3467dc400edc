"""SQLAlchemy ORM models for Sati Timer."""

from sqlalchemy import BigInteger, Column, Integer, String
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class MeditationSession(Base):
    """One completed meditation.  Rows are never updated after insert."""

    __tablename__ = "meditation_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    duration_seconds = Column(Integer, nullable=False)
    start_timestamp = Column(BigInteger, nullable=False)  # epoch ms
    end_timestamp = Column(BigInteger, nullable=False)    # epoch ms

    def __repr__(self) -> str:
        return (
            f"<MeditationSession id={self.id} "
            f"duration={self.duration_seconds}s>"
        )


class Preference(Base):
    """Durable key-value pairs (recent durations, pending session start)."""

    __tablename__ = "preferences"

    key = Column(String(64), primary_key=True)
    value = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Preference {self.key}={self.value!r}>"
