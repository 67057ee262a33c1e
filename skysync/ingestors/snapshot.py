"""Periodic ingestion of feed snapshots into the position buffers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
import inspect
import logging
from typing import Any, Callable, Protocol

from skysync.domain import BoundingBox
from skysync.ingestors.opensky import FeedUnavailableError
from skysync.models.aircraft import AircraftState
from skysync.models.fleet import FeedStatus
from skysync.models.tracking import TrackingConfig
from skysync.services.sample_store import PositionSampleStore
from skysync.services.trails import TrailBuilder

logger = logging.getLogger("skysync.ingestors.snapshot")

UpdateCallback = Callable[[list[AircraftState], datetime], Any]


class AircraftFeed(Protocol):
    async def get_states(self, bbox: BoundingBox) -> list[AircraftState]:
        """Return the aircraft currently inside `bbox`."""


@dataclass
class TickResult:
    """Outcome of one ingestion pass."""

    ok: bool
    skipped: bool = False
    captured_at: datetime | None = None
    ingested: list[AircraftState] = field(default_factory=list)
    evicted: set[str] = field(default_factory=set)
    error: str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotIngestor:
    """Bridge between the feed and the sample store / trail buffers.

    Every state mutation happens inside `tick`, and ticks never overlap: a
    call that arrives while another is still awaiting the feed returns a
    skipped result without touching the buffers.
    """

    def __init__(
        self,
        *,
        feed: AircraftFeed,
        store: PositionSampleStore,
        trails: TrailBuilder,
        config: TrackingConfig,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.feed = feed
        self.store = store
        self.trails = trails
        self.config = config
        self.clock = clock
        self._in_flight = False
        self._callbacks: list[UpdateCallback] = []
        self.status = FeedStatus()

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def add_update_callback(self, callback: UpdateCallback) -> None:
        """Register a callback invoked with the accepted states after each tick."""

        self._callbacks.append(callback)

    def bounding_box(self) -> BoundingBox:
        reference = self.config.reference
        return BoundingBox.from_center_radius(
            reference.lat, reference.lon, self.config.search_radius_km
        )

    async def tick(self, now: datetime | None = None) -> TickResult:
        if self._in_flight:
            logger.warning("Previous ingestion still in flight; skipping tick")
            return TickResult(ok=False, skipped=True, error="Ingestion already in progress")

        self._in_flight = True
        try:
            self.status.last_attempt_at = now or self.clock()
            try:
                states = await self.feed.get_states(self.bounding_box())
            except FeedUnavailableError as exc:
                logger.warning("Feed unavailable, keeping previous state: %s", exc)
                self.status.last_error = str(exc)
                self.status.consecutive_failures += 1
                return TickResult(ok=False, error=str(exc))

            captured_at = now or self.clock()
            self.status.last_success_at = captured_at
            self.status.last_error = None
            self.status.consecutive_failures = 0
            accepted = [state for state in states if state.is_trackable()]
            for state in accepted:
                self.store.record(state, captured_at)
                self.trails.append_position(
                    state.icao24,
                    state.lat,  # type: ignore[arg-type]
                    state.lon,  # type: ignore[arg-type]
                    captured_at,
                    state.baro_altitude,
                )

            evicted = self.store.prune(captured_at)
            for icao24 in evicted:
                self.trails.drop_trail(icao24)

            logger.info(
                "Ingested %s of %s aircraft states (%s tracked, %s evicted)",
                len(accepted),
                len(states),
                len(self.store),
                len(evicted),
            )
            await self._notify(accepted, captured_at)
            return TickResult(
                ok=True, captured_at=captured_at, ingested=accepted, evicted=evicted
            )
        finally:
            self._in_flight = False

    async def _notify(self, states: list[AircraftState], captured_at: datetime) -> None:
        for callback in self._callbacks:
            try:
                result = callback(states, captured_at)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.warning("Update callback error: %s", exc)

    async def run(self) -> None:
        """Tick at a fixed interval until cancelled."""

        interval = self.config.ingestion_interval_seconds
        loop = asyncio.get_running_loop()
        logger.info("Starting live ingestion (interval=%ss)", interval)
        while True:
            started = loop.time()
            try:
                await self.tick()
            except asyncio.CancelledError:
                logger.info("Snapshot ingestor cancelled")
                raise
            except Exception as exc:  # pragma: no cover
                logger.warning("Snapshot ingestor error: %s", exc)

            await asyncio.sleep(max(interval - (loop.time() - started), 0))


__all__ = ["AircraftFeed", "SnapshotIngestor", "TickResult"]
