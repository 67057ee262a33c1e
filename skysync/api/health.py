"""Health check endpoint."""

from fastapi import APIRouter, Request

from skysync.config import settings

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check(request: Request) -> dict[str, object]:
    """Liveness plus whether a tracking session is running and its feed health."""

    session = getattr(request.app.state, "tracking_session", None)
    body: dict[str, object] = {
        "status": "ok",
        "env": settings.skysync_env,
        "tracking": session is not None and session.running,
    }
    if session is not None:
        body["feed_degraded"] = session.feed_status.degraded
    return body
