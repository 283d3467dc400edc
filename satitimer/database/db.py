"""Database connection and session management."""

from __future__ import annotations

from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base, Preference

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "SatiTimer"
DB_PATH = APP_SUPPORT_DIR / "satitimer.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    if url.startswith("sqlite:///:memory:"):
        # One shared connection, otherwise every thread sees its own
        # empty in-memory database.
        from sqlalchemy.pool import StaticPool

        _engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
    else:
        _engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False,
        )


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── key-value helpers ─────────────────────────────────────────────────────


def read_preference(db: OrmSession, key: str) -> str | None:
    """Value stored under *key*, or None."""
    row = db.get(Preference, key)
    return row.value if row is not None else None


def write_preference(db: OrmSession, key: str, value: str) -> None:
    row = db.get(Preference, key)
    if row is None:
        db.add(Preference(key=key, value=value))
    else:
        row.value = value


def delete_preference(db: OrmSession, key: str) -> None:
    row = db.get(Preference, key)
    if row is not None:
        db.delete(row)
