"""Models for aircraft states received from the live feed."""

from __future__ import annotations

from datetime import datetime
import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AircraftState(BaseModel):
    """One aircraft as reported by the feed on a single refresh."""

    icao24: str = Field(..., description="ICAO24 transponder address (lowercase hex)")
    callsign: Optional[str] = Field(default=None, description="Display callsign, if broadcast")
    origin_country: Optional[str] = Field(default=None, description="Country of registration")
    lat: Optional[float] = Field(default=None, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(default=None, description="Longitude in decimal degrees")
    baro_altitude: Optional[float] = Field(
        default=None, description="Barometric altitude in meters"
    )
    velocity: Optional[float] = Field(default=None, description="Ground speed in m/s")
    heading: Optional[float] = Field(default=None, description="True track in degrees")
    vertical_rate: Optional[float] = Field(
        default=None, description="Vertical rate in m/s, positive when climbing"
    )
    on_ground: bool = Field(default=False, description="Aircraft reports being on ground")
    last_contact: Optional[datetime] = Field(
        default=None, description="Feed-reported time of the last message"
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    def has_position(self) -> bool:
        return (
            self.lat is not None
            and self.lon is not None
            and math.isfinite(self.lat)
            and math.isfinite(self.lon)
        )

    def is_trackable(self) -> bool:
        """Airborne, positioned, and without a corrupt altitude."""

        if not self.has_position() or self.on_ground:
            return False
        return self.baro_altitude is None or math.isfinite(self.baro_altitude)

    @property
    def altitude_ft(self) -> Optional[int]:
        if self.baro_altitude is None:
            return None
        return round(self.baro_altitude * 3.28084)

    @property
    def speed_kts(self) -> Optional[int]:
        if self.velocity is None:
            return None
        return round(self.velocity * 1.94384)


class PositionSample(BaseModel):
    """An aircraft state stamped with the local capture time."""

    state: AircraftState
    captured_at: datetime = Field(..., description="Wall-clock time of ingestion (UTC)")

    model_config = ConfigDict(frozen=True)

    @property
    def icao24(self) -> str:
        return self.state.icao24

    @property
    def lat(self) -> float:
        return self.state.lat  # type: ignore[return-value]

    @property
    def lon(self) -> float:
        return self.state.lon  # type: ignore[return-value]


class TrailPoint(BaseModel):
    """A single vertex of an aircraft's rendered path."""

    lat: float
    lon: float
    timestamp: datetime
    altitude: Optional[float] = None

    model_config = ConfigDict(frozen=True)


__all__ = ["AircraftState", "PositionSample", "TrailPoint"]
