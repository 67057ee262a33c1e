"""Database configuration and helpers for SkySync backend."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from skysync.config import settings

DATABASE_URL = os.getenv("SKYSYNC_DB_URL", "sqlite:///./skysync.db")
CLEANUP_STATE_FILE = Path(
    os.getenv("SKYSYNC_RETENTION_STATE_FILE", "/var/lib/skysync/retention_cleanup_state")
)

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

logger = logging.getLogger("skysync.db")


def _load_last_cleanup_date() -> date | None:
    """Load the last cleanup date from disk if present."""

    try:
        if not CLEANUP_STATE_FILE.exists():
            return None

        stored = CLEANUP_STATE_FILE.read_text().strip()
        if not stored:
            return None

        return date.fromisoformat(stored)
    except (OSError, ValueError) as exc:  # pragma: no cover
        logger.warning(
            "Failed to load last cleanup date from %s: %s", CLEANUP_STATE_FILE, exc
        )
        return None


def _persist_last_cleanup_date(value: date) -> None:
    """Persist the last cleanup date to disk for reuse across restarts."""

    try:
        CLEANUP_STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        CLEANUP_STATE_FILE.write_text(value.isoformat())
    except OSError as exc:  # pragma: no cover
        logger.warning(
            "Failed to persist cleanup date to %s: %s", CLEANUP_STATE_FILE, exc
        )


_last_cleanup_date: date | None = _load_last_cleanup_date()


def _utc_today() -> date:
    """Calendar day of the sighting log, which stamps rows with UTC dates."""

    return datetime.now(timezone.utc).date()


def init_db() -> None:
    """Create database tables if they do not exist."""

    import skysync.db_models  # noqa: F401 - models are imported for side effects

    Base.metadata.create_all(bind=engine)


def maybe_cleanup_old_records(db: Session) -> None:
    """
    Delete sightings older than the retention window.

    - Only run at most once per UTC day.
    - Compare on the sighting date, ignoring time-of-day.
    - Fail-soft: log on error but never break the caller's normal write.
    """

    global _last_cleanup_date

    try:
        today = _utc_today()
        if _last_cleanup_date == today:
            return

        retention_days = max(settings.retention_days, 1)
        cutoff_date = today - timedelta(days=retention_days)

        import skysync.db_models as models

        deleted = (
            db.query(models.FlightSighting)
            .filter(models.FlightSighting.seen_date < cutoff_date)
            .delete(synchronize_session=False)
        )
        db.commit()
        if deleted:
            logger.info("Retention cleanup removed %s sightings before %s", deleted, cutoff_date)
        _last_cleanup_date = today
        _persist_last_cleanup_date(today)
    except Exception as exc:  # pragma: no cover
        db.rollback()
        logger.warning("Retention cleanup failed: %s", exc)
