"""Pydantic models for SkySync backend."""

from .aircraft import AircraftState, PositionSample, TrailPoint
from .fleet import (
    FeedStatus,
    FleetClassificationResponse,
    FleetSnapshot,
    ResolvedAircraft,
    TickResponse,
    TrackingStatus,
    TrailResponse,
)
from .tracking import TrackingConfig

__all__ = [
    "AircraftState",
    "FeedStatus",
    "FleetClassificationResponse",
    "FleetSnapshot",
    "PositionSample",
    "ResolvedAircraft",
    "TickResponse",
    "TrackingConfig",
    "TrackingStatus",
    "TrailPoint",
    "TrailResponse",
]
