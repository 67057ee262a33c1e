"""Live tracking session: owns the buffers for one active map view."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
import logging
import math
from typing import Callable, Optional

from skysync.config import settings
from skysync.db import init_db
from skysync.domain import GeoPoint, mode_for_delay
from skysync.ingestors.opensky import OpenSkyFeed, OpenSkyTokenProvider
from skysync.ingestors.snapshot import AircraftFeed, SnapshotIngestor, TickResult
from skysync.models.aircraft import PositionSample, TrailPoint
from skysync.models.fleet import (
    FeedStatus,
    FleetClassificationResponse,
    FleetSnapshot,
    ResolvedAircraft,
    TrackingStatus,
)
from skysync.models.tracking import MAX_POSITION_DELAY_MINUTES, TrackingConfig
from skysync.services.classifier import classify
from skysync.services.resolver import TemporalResolver, target_time_for
from skysync.services.sample_store import PositionSampleStore
from skysync.services.sighting_log import SightingLogger
from skysync.services.trails import TrailBuilder

logger = logging.getLogger("skysync.session")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrackingSession:
    """Buffers, ingestion loop and read API for one tracking session.

    Construct when live tracking is enabled and call `stop()` when it is
    disabled; stopping clears every buffer. All reads are side-effect free.
    """

    def __init__(
        self,
        config: TrackingConfig | None = None,
        *,
        feed: AircraftFeed | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config or TrackingConfig.from_settings()
        self.clock = clock
        self.feed = feed or OpenSkyFeed(token_provider=OpenSkyTokenProvider.from_settings())
        self.store = PositionSampleStore(
            retention_window=self.config.retention_window,
            stale_timeout=self.config.stale_timeout,
        )
        self.trails = TrailBuilder(self.config.trail_length)
        self.ingestor = SnapshotIngestor(
            feed=self.feed,
            store=self.store,
            trails=self.trails,
            config=self.config,
            clock=clock,
        )
        self.resolver = TemporalResolver(self.store)
        self.position_delay_minutes = self.config.position_delay_minutes
        self._task: Optional[asyncio.Task] = None

    # ----- lifecycle -----

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Spawn the fixed-interval ingestion loop on the running event loop."""

        if self.running:
            logger.warning("Tracking session already running")
            return
        self._task = asyncio.create_task(self.ingestor.run())
        logger.info(
            "Tracking started around (%.4f, %.4f) radius=%s km",
            self.config.reference_lat,
            self.config.reference_lon,
            self.config.search_radius_km,
        )

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self.clear()
        logger.info("Tracking stopped; buffers cleared")

    def clear(self) -> None:
        self.store.clear()
        self.trails.clear()

    async def refresh(self, now: datetime | None = None) -> TickResult:
        """Run one ingestion pass immediately."""

        return await self.ingestor.tick(now)

    # ----- playback settings -----

    def _check_delay(self, delay_minutes: float | None) -> float:
        delay = self.position_delay_minutes if delay_minutes is None else delay_minutes
        if not 0 <= delay <= MAX_POSITION_DELAY_MINUTES:
            raise ValueError(
                f"Position delay must be between 0 and {MAX_POSITION_DELAY_MINUTES:g} minutes"
            )
        return delay

    def _check_radius(self, radius_km: float | None) -> float:
        radius = self.config.search_radius_km if radius_km is None else radius_km
        if math.isnan(radius) or radius < 0:
            raise ValueError("Radius must be a non-negative number of kilometers")
        return radius

    def set_position_delay(self, delay_minutes: float) -> None:
        self.position_delay_minutes = self._check_delay(delay_minutes)
        mode = mode_for_delay(self.position_delay_minutes)
        if self.position_delay_minutes:
            logger.info(
                "Position delay set to %s min (%s); showing positions from %s",
                self.position_delay_minutes,
                mode.value,
                target_time_for(self.clock(), self.position_delay_minutes).isoformat(),
            )
        else:
            logger.info("Position delay cleared (%s)", mode.value)

    # ----- reads -----

    def resolve(
        self,
        delay_minutes: float | None = None,
        radius_km: float | None = None,
        reference: GeoPoint | None = None,
        now: datetime | None = None,
    ) -> list[PositionSample]:
        return self.resolver.resolve(
            now or self.clock(),
            self._check_delay(delay_minutes),
            self._check_radius(radius_km),
            reference or self.config.reference,
        )

    @property
    def feed_status(self) -> FeedStatus:
        status = self.ingestor.status.model_copy()
        status.calls_today = getattr(self.feed, "calls_today", 0)
        return status

    def get_resolved_fleet(
        self,
        delay_minutes: float | None = None,
        radius_km: float | None = None,
        now: datetime | None = None,
    ) -> FleetSnapshot:
        now = now or self.clock()
        delay = self._check_delay(delay_minutes)
        radius = self._check_radius(radius_km)
        samples = self.resolve(delay, radius, now=now)
        aircraft = [ResolvedAircraft.from_sample(sample, now) for sample in samples]
        return FleetSnapshot(
            as_of=now,
            target_time=target_time_for(now, delay),
            delay_minutes=delay,
            mode=mode_for_delay(delay),
            radius_km=radius,
            count=len(aircraft),
            aircraft=aircraft,
            feed=self.feed_status,
        )

    def get_trail(self, icao24: str) -> list[TrailPoint]:
        return self.trails.trail_for(icao24.strip().lower())

    def get_classification(
        self,
        delay_minutes: float | None = None,
        radius_km: float | None = None,
        reference: GeoPoint | None = None,
        now: datetime | None = None,
    ) -> FleetClassificationResponse:
        now = now or self.clock()
        delay = self._check_delay(delay_minutes)
        reference = reference or self.config.reference
        samples = self.resolve(delay, radius_km, reference, now=now)
        result = classify(
            samples,
            reference,
            near_threshold_km=self.config.near_threshold_km,
            low_altitude_m=self.config.low_altitude_m,
            vertical_rate_threshold=self.config.vertical_rate_threshold,
        )
        return FleetClassificationResponse(
            as_of=now,
            delay_minutes=delay,
            mode=mode_for_delay(delay),
            reference_lat=reference.lat,
            reference_lon=reference.lon,
            departing=[ResolvedAircraft.from_sample(s, now) for s in result.departing],
            arriving=[ResolvedAircraft.from_sample(s, now) for s in result.arriving],
            total_nearby=result.total_nearby,
        )

    def status(self) -> TrackingStatus:
        return TrackingStatus(
            running=self.running,
            tracked_aircraft=len(self.store),
            trails=len(self.trails),
            config=self.config,
            feed=self.feed_status,
        )


def build_tracking_session(
    config: TrackingConfig | None = None, *, feed: AircraftFeed | None = None
) -> TrackingSession:
    """Create a session from settings, wiring the optional sighting log."""

    session = TrackingSession(config, feed=feed)
    if settings.enable_sighting_log:
        init_db()
        session.ingestor.add_update_callback(SightingLogger())
        logger.info("Daily sighting log enabled")
    return session


__all__ = ["TrackingSession", "build_tracking_session"]
