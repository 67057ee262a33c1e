"""Per-aircraft sliding window of timestamped position samples."""

from __future__ import annotations

from collections import deque
from datetime import datetime, timedelta
import logging

from skysync.models.aircraft import AircraftState, PositionSample

logger = logging.getLogger("skysync.sample_store")


class PositionSampleStore:
    """Append-only sample history keyed by ICAO24, bounded by age.

    Samples for one aircraft are kept oldest first. Nothing is evicted on
    read; `prune` must run after each batch of `record` calls.
    """

    def __init__(self, *, retention_window: timedelta, stale_timeout: timedelta) -> None:
        self.retention_window = retention_window
        self.stale_timeout = stale_timeout
        self._samples: dict[str, deque[PositionSample]] = {}

    def record(self, state: AircraftState, captured_at: datetime) -> PositionSample:
        sample = PositionSample(state=state, captured_at=captured_at)
        history = self._samples.get(state.icao24)
        if history is None:
            history = self._samples[state.icao24] = deque()
        history.append(sample)
        return sample

    def prune(self, now: datetime) -> set[str]:
        """Drop expired samples and stop tracking stale aircraft.

        Returns the identifiers that were removed entirely.
        """

        retention_cutoff = now - self.retention_window
        stale_cutoff = now - self.stale_timeout
        evicted: set[str] = set()
        dropped = 0

        for icao24, history in self._samples.items():
            while history and history[0].captured_at < retention_cutoff:
                history.popleft()
                dropped += 1
            if not history or history[-1].captured_at < stale_cutoff:
                evicted.add(icao24)

        for icao24 in evicted:
            del self._samples[icao24]

        if dropped or evicted:
            logger.debug(
                "Pruned %s expired samples and %s stale aircraft", dropped, len(evicted)
            )
        return evicted

    def samples_for(self, icao24: str) -> tuple[PositionSample, ...]:
        return tuple(self._samples.get(icao24, ()))

    def latest_for(self, icao24: str) -> PositionSample | None:
        history = self._samples.get(icao24)
        return history[-1] if history else None

    def tracked_ids(self) -> set[str]:
        return set(self._samples)

    def sample_count(self) -> int:
        return sum(len(history) for history in self._samples.values())

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __contains__(self, icao24: object) -> bool:
        return icao24 in self._samples


__all__ = ["PositionSampleStore"]
