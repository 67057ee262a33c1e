"""Reconstruct the fleet as it appeared at an arbitrary past instant."""

from __future__ import annotations

from datetime import datetime, timedelta
import logging
from typing import Optional, Sequence

from skysync.domain import GeoPoint, distance_from
from skysync.models.aircraft import PositionSample
from skysync.services.sample_store import PositionSampleStore

logger = logging.getLogger("skysync.resolver")


def target_time_for(now: datetime, delay_minutes: float) -> datetime:
    return now - timedelta(minutes=delay_minutes)


def select_sample(
    samples: Sequence[PositionSample], target: datetime
) -> Optional[PositionSample]:
    """Return the sample captured closest to `target`.

    `samples` must be oldest first. On an exact tie the earlier sample wins.
    """

    best: Optional[PositionSample] = None
    best_gap: Optional[float] = None
    for sample in samples:
        gap = abs((sample.captured_at - target).total_seconds())
        if best_gap is None or gap < best_gap:
            best, best_gap = sample, gap
    return best


class TemporalResolver:
    """Read-only view over a sample store answering "where was everyone at T?"."""

    def __init__(self, store: PositionSampleStore) -> None:
        self.store = store

    def resolve(
        self,
        now: datetime,
        delay_minutes: float,
        radius_km: float,
        reference: GeoPoint,
    ) -> list[PositionSample]:
        """One sample per tracked aircraft, filtered by distance from `reference`.

        The radius applies to the resolved position, so a delayed view shows
        aircraft where they were rather than where they are now.
        """

        target = target_time_for(now, delay_minutes)
        resolved: list[PositionSample] = []

        for icao24 in sorted(self.store.tracked_ids()):
            if delay_minutes == 0:
                sample = self.store.latest_for(icao24)
            else:
                sample = select_sample(self.store.samples_for(icao24), target)
            if sample is None:
                continue
            if distance_from(reference, sample.lat, sample.lon) > radius_km:
                continue
            resolved.append(sample)

        logger.debug(
            "Resolved %s aircraft for delay=%s min radius=%s km",
            len(resolved),
            delay_minutes,
            radius_km,
        )
        return resolved


__all__ = ["TemporalResolver", "select_sample", "target_time_for"]
