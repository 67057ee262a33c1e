"""SQLAlchemy ORM models for SkySync backend."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from skysync.db import Base


class FlightSighting(Base):
    """First observation of an aircraft on a given UTC day."""

    __tablename__ = "flight_sightings"
    __table_args__ = (
        UniqueConstraint("icao24", "seen_date", name="uq_flight_sightings_icao24_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    icao24: Mapped[str] = mapped_column(String(6), index=True, nullable=False)
    callsign: Mapped[str | None] = mapped_column(String(8), nullable=True)
    origin_country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    seen_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    first_seen_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    lon: Mapped[float | None] = mapped_column(Float, nullable=True)
    altitude_m: Mapped[float | None] = mapped_column(Float, nullable=True)
