from __future__ import annotations

import contextlib
import logging
import time

from fastapi import FastAPI, Request

from skysync.api import api_router
from skysync.config import settings
from skysync.services.session import TrackingSession, build_tracking_session

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("skysync")


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    app.state.tracking_session = None
    if settings.tracking_enabled:
        session = build_tracking_session()
        session.start()
        app.state.tracking_session = session
        logger.info("Live tracking enabled at startup")

    try:
        yield
    finally:
        session: TrackingSession | None = getattr(app.state, "tracking_session", None)
        if session is not None:
            await session.stop()
            app.state.tracking_session = None


app = FastAPI(title="SkySync Backend", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "SkySync backend is running"}
