"""Configuration settings for SkySync backend."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("skysync.config")

# Shared SSM client for secret reads. Default to a region so imports do not
# fail in environments without AWS configuration (e.g. CI test runners).
_ssm_client = boto3.client(
    "ssm",
    region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
)


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def get_opensky_client_secret() -> str:
    """Fetch the OpenSky OAuth2 client secret from AWS SSM Parameter Store.

    The value is cached in-memory to avoid repeated SSM calls. Any failure to
    retrieve the secret results in a runtime error; callers decide whether to
    fall back to anonymous feed access.
    """

    parameter = os.getenv("OPENSKY_SECRET_SSM_PARAMETER", "/skysync/opensky/client_secret")
    try:
        response = _ssm_client.get_parameter(Name=parameter, WithDecryption=True)
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.error("Failed to load OpenSky client secret from SSM: %s", exc)
        raise RuntimeError("Unable to load OpenSky client secret from SSM") from exc

    if not value:
        logger.error("Received empty OpenSky client secret from SSM")
        raise RuntimeError("OpenSky client secret not configured in SSM")

    return value


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    skysync_env: str = os.getenv("SKYSYNC_ENV", "local")
    log_level: str = os.getenv("SKYSYNC_LOG_LEVEL", "INFO")
    retention_days: int = int(os.getenv("SKYSYNC_RETENTION_DAYS", "7"))

    # OpenSky feed
    opensky_base_url: str = os.getenv(
        "OPENSKY_BASE_URL", "https://opensky-network.org/api/states/all"
    )
    opensky_token_url: str = os.getenv(
        "OPENSKY_TOKEN_URL",
        "https://auth.opensky-network.org/auth/realms/opensky-network/protocol/openid-connect/token",
    )
    opensky_timeout: float = float(os.getenv("OPENSKY_TIMEOUT", "10.0"))
    opensky_client_id: str | None = os.getenv("OPENSKY_CLIENT_ID") or None
    opensky_client_secret: str | None = os.getenv("OPENSKY_CLIENT_SECRET") or None

    # Live tracking session
    tracking_enabled: bool = _get_bool("SKYSYNC_TRACKING_ENABLED", default=False)
    ingestion_interval_seconds: float = float(os.getenv("SKYSYNC_INGESTION_INTERVAL_SECONDS", "90"))
    retention_window_minutes: float = float(os.getenv("SKYSYNC_RETENTION_WINDOW_MINUTES", "15"))
    stale_timeout_minutes: float = float(os.getenv("SKYSYNC_STALE_TIMEOUT_MINUTES", "10"))
    trail_length: int = int(os.getenv("SKYSYNC_TRAIL_LENGTH", "50"))
    position_delay_minutes: float = float(os.getenv("SKYSYNC_POSITION_DELAY_MINUTES", "3"))
    search_radius_km: float = float(os.getenv("SKYSYNC_SEARCH_RADIUS_KM", "50"))

    # Departure / arrival classification around the reference airport
    reference_lat: float = float(os.getenv("SKYSYNC_REFERENCE_LAT", "26.3785"))
    reference_lon: float = float(os.getenv("SKYSYNC_REFERENCE_LON", "-80.1077"))
    near_threshold_km: float = float(os.getenv("SKYSYNC_NEAR_THRESHOLD_KM", "10"))
    low_altitude_m: float = float(os.getenv("SKYSYNC_LOW_ALTITUDE_M", "3000"))
    vertical_rate_threshold: float = float(os.getenv("SKYSYNC_VERTICAL_RATE_THRESHOLD", "2.0"))

    # Daily sighting log
    enable_sighting_log: bool = _get_bool("SKYSYNC_ENABLE_SIGHTING_LOG", default=False)


settings = Settings()

# Only reach out to SSM when OAuth2 is configured without an explicit secret
if settings.opensky_client_id and not settings.opensky_client_secret:
    try:
        settings.opensky_client_secret = get_opensky_client_secret()
    except RuntimeError:
        logger.warning("OpenSky client secret not available; feed will run anonymously")

__all__ = ["settings", "Settings", "get_opensky_client_secret"]
