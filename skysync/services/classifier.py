"""Departure / arrival classification around a reference airport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from skysync.domain import GeoPoint, distance_from
from skysync.models.aircraft import PositionSample


@dataclass
class FleetClassification:
    """Nearby low-altitude traffic split by vertical movement."""

    departing: list[PositionSample] = field(default_factory=list)
    arriving: list[PositionSample] = field(default_factory=list)
    total_nearby: int = 0


def is_nearby(
    sample: PositionSample,
    reference: GeoPoint,
    near_threshold_km: float,
    low_altitude_m: float,
) -> bool:
    altitude = sample.state.baro_altitude
    if altitude is None or altitude >= low_altitude_m:
        return False
    return distance_from(reference, sample.lat, sample.lon) <= near_threshold_km


def classify(
    samples: Iterable[PositionSample],
    reference: GeoPoint,
    near_threshold_km: float = 10.0,
    low_altitude_m: float = 3000.0,
    vertical_rate_threshold: float = 2.0,
) -> FleetClassification:
    """Classify resolved samples into departing and arriving traffic.

    Nearby aircraft climbing faster than the threshold are departing, those
    descending faster are arriving. Everything else nearby, including an
    unknown vertical rate, only contributes to `total_nearby`.
    """

    result = FleetClassification()
    for sample in samples:
        if not is_nearby(sample, reference, near_threshold_km, low_altitude_m):
            continue
        result.total_nearby += 1
        vertical_rate = sample.state.vertical_rate
        if vertical_rate is None:
            continue
        if vertical_rate > vertical_rate_threshold:
            result.departing.append(sample)
        elif vertical_rate < -vertical_rate_threshold:
            result.arriving.append(sample)
    return result


__all__ = ["FleetClassification", "classify", "is_nearby"]
