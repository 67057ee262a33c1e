"""Validated configuration for a live tracking session."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

from skysync.config import Settings, settings as default_settings
from skysync.domain import GeoPoint

MAX_POSITION_DELAY_MINUTES = 10.0
MIN_INGESTION_INTERVAL_SECONDS = 10.0


class TrackingConfig(BaseModel):
    """All tunables of the buffering and playback engine in one place."""

    ingestion_interval_seconds: float = Field(
        default=90.0,
        ge=MIN_INGESTION_INTERVAL_SECONDS,
        description="Seconds between feed refreshes",
    )
    retention_window_minutes: float = Field(
        default=15.0, gt=0, description="Maximum age of a retained position sample"
    )
    stale_timeout_minutes: float = Field(
        default=10.0, gt=0, description="Aircraft unseen for longer are no longer tracked"
    )
    trail_length: int = Field(default=50, ge=1, description="Points kept per trail")
    position_delay_minutes: float = Field(
        default=3.0,
        ge=0,
        le=MAX_POSITION_DELAY_MINUTES,
        description="Default playback delay for resolved fleets",
    )
    search_radius_km: float = Field(default=50.0, gt=0, description="Feed and display radius")
    reference_lat: float = Field(default=26.3785, ge=-90, le=90)
    reference_lon: float = Field(default=-80.1077, ge=-180, le=180)
    near_threshold_km: float = Field(default=10.0, gt=0)
    low_altitude_m: float = Field(default=3000.0, gt=0)
    vertical_rate_threshold: float = Field(default=2.0, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def reference(self) -> GeoPoint:
        return GeoPoint(lat=self.reference_lat, lon=self.reference_lon)

    @property
    def retention_window(self) -> timedelta:
        return timedelta(minutes=self.retention_window_minutes)

    @property
    def stale_timeout(self) -> timedelta:
        return timedelta(minutes=self.stale_timeout_minutes)

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "TrackingConfig":
        """Build and validate a config from environment-backed settings."""

        s = source or default_settings
        return cls(
            ingestion_interval_seconds=s.ingestion_interval_seconds,
            retention_window_minutes=s.retention_window_minutes,
            stale_timeout_minutes=s.stale_timeout_minutes,
            trail_length=s.trail_length,
            position_delay_minutes=s.position_delay_minutes,
            search_radius_km=s.search_radius_km,
            reference_lat=s.reference_lat,
            reference_lon=s.reference_lon,
            near_threshold_km=s.near_threshold_km,
            low_altitude_m=s.low_altitude_m,
            vertical_rate_threshold=s.vertical_rate_threshold,
        )


__all__ = ["MAX_POSITION_DELAY_MINUTES", "TrackingConfig"]
