"""Bounded recent-position trails for path rendering."""

from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Optional

from skysync.models.aircraft import TrailPoint


class TrailBuilder:
    """Keeps the last `max_length` points per aircraft, independent of age."""

    def __init__(self, max_length: int = 50) -> None:
        self.max_length = max(1, int(max_length))
        self._trails: dict[str, deque[TrailPoint]] = {}

    def append_position(
        self,
        icao24: str,
        lat: float,
        lon: float,
        timestamp: datetime,
        altitude: Optional[float] = None,
    ) -> None:
        trail = self._trails.get(icao24)
        if trail is None:
            trail = self._trails[icao24] = deque(maxlen=self.max_length)
        trail.append(TrailPoint(lat=lat, lon=lon, timestamp=timestamp, altitude=altitude))

    def trail_for(self, icao24: str) -> list[TrailPoint]:
        if not icao24:
            return []
        return list(self._trails.get(icao24, ()))

    def drop_trail(self, icao24: str) -> None:
        self._trails.pop(icao24, None)

    def tracked_ids(self) -> set[str]:
        return set(self._trails)

    def clear(self) -> None:
        self._trails.clear()

    def __len__(self) -> int:
        return len(self._trails)


__all__ = ["TrailBuilder"]
