"""Response models for resolved fleets, trails and classification."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from skysync.domain import PositionMode
from skysync.models.aircraft import PositionSample, TrailPoint
from skysync.models.tracking import TrackingConfig


class ResolvedAircraft(BaseModel):
    """One aircraft as it appeared at the requested instant."""

    icao24: str = Field(..., description="ICAO24 transponder address")
    callsign: Optional[str] = Field(default=None, description="Display callsign")
    origin_country: Optional[str] = Field(default=None)
    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")
    altitude: Optional[float] = Field(default=None, description="Barometric altitude in meters")
    velocity: Optional[float] = Field(default=None, description="Ground speed in m/s")
    heading: Optional[float] = Field(default=None, description="True track in degrees")
    vertical_rate: Optional[float] = Field(default=None, description="Vertical rate in m/s")
    on_ground: bool = False
    captured_at: datetime = Field(..., description="When the sample was ingested")
    sample_age_seconds: float = Field(
        ..., description="Age of the sample relative to the snapshot time"
    )

    @classmethod
    def from_sample(cls, sample: PositionSample, now: datetime) -> "ResolvedAircraft":
        state = sample.state
        return cls(
            icao24=state.icao24,
            callsign=state.callsign,
            origin_country=state.origin_country,
            lat=sample.lat,
            lon=sample.lon,
            altitude=state.baro_altitude,
            velocity=state.velocity,
            heading=state.heading,
            vertical_rate=state.vertical_rate,
            on_ground=state.on_ground,
            captured_at=sample.captured_at,
            sample_age_seconds=(now - sample.captured_at).total_seconds(),
        )


class FeedStatus(BaseModel):
    """Health of the upstream feed as seen by the ingestor."""

    last_attempt_at: Optional[datetime] = None
    last_success_at: Optional[datetime] = None
    last_error: Optional[str] = Field(
        default=None, description="Message of the most recent failed refresh"
    )
    consecutive_failures: int = 0
    calls_today: int = Field(default=0, description="Feed requests issued this UTC day")

    @property
    def degraded(self) -> bool:
        return self.consecutive_failures > 0


class FleetSnapshot(BaseModel):
    """The resolved fleet for a delay and radius."""

    as_of: datetime = Field(..., description="Time the snapshot was computed")
    target_time: datetime = Field(..., description="Instant the positions represent")
    delay_minutes: float
    mode: PositionMode
    radius_km: float
    count: int
    aircraft: list[ResolvedAircraft]
    feed: FeedStatus


class FleetClassificationResponse(BaseModel):
    """Departing and arriving traffic around the reference point."""

    as_of: datetime
    delay_minutes: float
    mode: PositionMode
    reference_lat: float
    reference_lon: float
    departing: list[ResolvedAircraft]
    arriving: list[ResolvedAircraft]
    total_nearby: int


class TrailResponse(BaseModel):
    icao24: str
    points: list[TrailPoint]


class TickResponse(BaseModel):
    """Outcome of a single ingestion pass."""

    ok: bool
    skipped: bool = False
    ingested: int = 0
    evicted: list[str] = Field(default_factory=list)
    error: Optional[str] = None


class TrackingStatus(BaseModel):
    running: bool
    tracked_aircraft: int
    trails: int
    config: TrackingConfig
    feed: FeedStatus


__all__ = [
    "FeedStatus",
    "FleetClassificationResponse",
    "FleetSnapshot",
    "ResolvedAircraft",
    "TickResponse",
    "TrackingStatus",
    "TrailResponse",
]
