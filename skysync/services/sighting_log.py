"""Record each aircraft once per UTC day as it is ingested."""

from __future__ import annotations

from datetime import date, datetime
import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skysync import db as db_module
from skysync import db_models
from skysync.models.aircraft import AircraftState

logger = logging.getLogger("skysync.sighting_log")


class SightingLogger:
    """Ingestor callback that persists the first daily sighting per aircraft."""

    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self.session_factory = session_factory
        # icao24s already written for `_logged_day`
        self._logged: set[str] = set()
        self._logged_day: date | None = None

    def __call__(self, states: list[AircraftState], captured_at: datetime) -> int:
        day = captured_at.date()
        if day != self._logged_day:
            self._logged.clear()
            self._logged_day = day
        pending = [s for s in states if s.icao24 not in self._logged]
        if not pending:
            return 0

        factory = self.session_factory or db_module.SessionLocal
        db = factory()
        try:
            existing = {
                row[0]
                for row in db.query(db_models.FlightSighting.icao24)
                .filter(
                    db_models.FlightSighting.seen_date == day,
                    db_models.FlightSighting.icao24.in_([s.icao24 for s in pending]),
                )
                .all()
            }
            added = 0
            for state in pending:
                if state.icao24 not in existing:
                    db.add(
                        db_models.FlightSighting(
                            icao24=state.icao24,
                            callsign=state.callsign,
                            origin_country=state.origin_country,
                            seen_date=day,
                            first_seen_at=captured_at.replace(tzinfo=None),
                            lat=state.lat,
                            lon=state.lon,
                            altitude_m=state.baro_altitude,
                        )
                    )
                    existing.add(state.icao24)
                    added += 1
            db.commit()
            self._logged.update(state.icao24 for state in pending)
            if added:
                logger.info("Logged %s new sightings for %s", added, day.isoformat())
            db_module.maybe_cleanup_old_records(db)
            return added
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Failed to log sightings: %s", exc)
            return 0
        finally:
            db.close()

    def clear(self) -> None:
        self._logged.clear()
        self._logged_day = None


__all__ = ["SightingLogger"]
