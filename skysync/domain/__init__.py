"""Domain primitives for SkySync."""

from .geo import BoundingBox, GeoPoint, distance_from, distance_km
from .modes import PositionMode, mode_for_delay

__all__ = [
    "BoundingBox",
    "GeoPoint",
    "PositionMode",
    "distance_from",
    "distance_km",
    "mode_for_delay",
]
