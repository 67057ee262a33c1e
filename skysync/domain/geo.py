"""Geographic helpers shared by the feed client, resolver and classifier."""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in kilometers.

    Uses the haversine formula. Inputs are not validated; a NaN coordinate
    yields a NaN distance, so callers must drop positionless aircraft first.
    """

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_from(point: GeoPoint, lat: float, lon: float) -> float:
    return distance_km(point.lat, point.lon, lat, lon)


@dataclass(frozen=True)
class BoundingBox:
    """Rectangular lat/lon region used to query the feed."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @classmethod
    def from_center_radius(cls, lat: float, lon: float, radius_km: float) -> "BoundingBox":
        """Equirectangular box around a center point.

        One degree of latitude is taken as 111 km; the longitude span widens
        with 1/cos(lat) and is clamped near the poles.
        """

        lat_delta = radius_km / KM_PER_DEGREE
        lon_delta = radius_km / max(KM_PER_DEGREE * math.cos(math.radians(lat)), 0.0001)
        return cls(
            min_lat=lat - lat_delta,
            max_lat=lat + lat_delta,
            min_lon=lon - lon_delta,
            max_lon=lon + lon_delta,
        )

    def to_params(self) -> dict[str, float]:
        """OpenSky `states/all` query parameters."""

        return {
            "lamin": self.min_lat,
            "lomin": self.min_lon,
            "lamax": self.max_lat,
            "lomax": self.max_lon,
        }


__all__ = ["BoundingBox", "GeoPoint", "distance_from", "distance_km"]
