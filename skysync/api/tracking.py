"""Live tracking lifecycle, resolved fleet, trail and classification endpoints."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from skysync.domain import GeoPoint
from skysync.models.fleet import (
    FleetClassificationResponse,
    FleetSnapshot,
    TickResponse,
    TrackingStatus,
    TrailResponse,
)
from skysync.models.tracking import MAX_POSITION_DELAY_MINUTES
from skysync.services.session import TrackingSession, build_tracking_session

router = APIRouter(prefix="/api/v1", tags=["tracking"])

logger = logging.getLogger("skysync.api.tracking")


def _session_factory(request: Request) -> Callable[[], TrackingSession]:
    return getattr(request.app.state, "tracking_session_factory", build_tracking_session)


def get_tracking_session(request: Request) -> TrackingSession:
    """Return the active session or fail with 409 when tracking is disabled."""

    session: TrackingSession | None = getattr(request.app.state, "tracking_session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Live tracking is not enabled",
        )
    return session


@router.post(
    "/tracking/start", response_model=TrackingStatus, summary="Enable live tracking"
)
async def start_tracking(request: Request) -> TrackingStatus:
    session: TrackingSession | None = getattr(request.app.state, "tracking_session", None)
    if session is None:
        session = _session_factory(request)()
        request.app.state.tracking_session = session
    session.start()
    return session.status()


@router.post("/tracking/stop", summary="Disable live tracking and clear buffers")
async def stop_tracking(request: Request) -> dict[str, str]:
    session: TrackingSession | None = getattr(request.app.state, "tracking_session", None)
    if session is not None:
        await session.stop()
        request.app.state.tracking_session = None
    return {"status": "stopped"}


@router.get("/tracking/status", response_model=TrackingStatus, summary="Tracking status")
async def tracking_status(
    session: TrackingSession = Depends(get_tracking_session),
) -> TrackingStatus:
    return session.status()


@router.post(
    "/tracking/refresh", response_model=TickResponse, summary="Run one ingestion pass now"
)
async def refresh_tracking(
    session: TrackingSession = Depends(get_tracking_session),
) -> TickResponse:
    result = await session.refresh()
    return TickResponse(
        ok=result.ok,
        skipped=result.skipped,
        ingested=len(result.ingested),
        evicted=sorted(result.evicted),
        error=result.error,
    )


@router.put("/tracking/delay", response_model=TrackingStatus, summary="Set playback delay")
async def set_position_delay(
    minutes: float = Query(..., ge=0, le=MAX_POSITION_DELAY_MINUTES),
    session: TrackingSession = Depends(get_tracking_session),
) -> TrackingStatus:
    session.set_position_delay(minutes)
    return session.status()


@router.get("/fleet", response_model=FleetSnapshot, summary="Resolved fleet")
async def get_resolved_fleet(
    delay_minutes: Optional[float] = Query(
        default=None,
        ge=0,
        le=MAX_POSITION_DELAY_MINUTES,
        description="Minutes into the past; defaults to the session delay",
    ),
    radius_km: Optional[float] = Query(
        default=None, gt=0, description="Display radius; defaults to the search radius"
    ),
    session: TrackingSession = Depends(get_tracking_session),
) -> FleetSnapshot:
    try:
        return session.get_resolved_fleet(delay_minutes, radius_km)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get(
    "/fleet/classification",
    response_model=FleetClassificationResponse,
    summary="Departing and arriving traffic near the reference point",
)
async def get_classification(
    delay_minutes: Optional[float] = Query(default=None, ge=0, le=MAX_POSITION_DELAY_MINUTES),
    radius_km: Optional[float] = Query(default=None, gt=0),
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lon: Optional[float] = Query(default=None, ge=-180, le=180),
    session: TrackingSession = Depends(get_tracking_session),
) -> FleetClassificationResponse:
    reference = None
    if lat is not None and lon is not None:
        reference = GeoPoint(lat=lat, lon=lon)
    elif lat is not None or lon is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="lat and lon must be provided together",
        )
    try:
        return session.get_classification(delay_minutes, radius_km, reference)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/trails/{icao24}", response_model=TrailResponse, summary="Aircraft trail")
async def get_trail(
    icao24: str, session: TrackingSession = Depends(get_tracking_session)
) -> TrailResponse:
    return TrailResponse(icao24=icao24.lower(), points=session.get_trail(icao24))
