"""OpenSky `states/all` feed client for live aircraft positions."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
import logging
import math
from typing import Any, Callable, Optional

import httpx

from skysync.config import settings
from skysync.domain import BoundingBox
from skysync.models.aircraft import AircraftState

logger = logging.getLogger("skysync.ingestors.opensky")

# Refresh bearer tokens this long before the server-declared expiry
TOKEN_EXPIRY_MARGIN = timedelta(minutes=5)


class FeedUnavailableError(RuntimeError):
    """The feed could not produce a snapshot for this refresh."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_epoch(raw_ts: Any) -> datetime | None:
    if not isinstance(raw_ts, (int, float)) or isinstance(raw_ts, bool):
        return None
    try:
        return datetime.fromtimestamp(raw_ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        logger.debug("Failed to parse OpenSky timestamp: %s", raw_ts)
        return None


def normalize_state(entry: Any) -> Optional[AircraftState]:
    """Convert one OpenSky state vector array into an AircraftState.

    Index layout: 0 icao24, 1 callsign, 2 origin_country, 4 last_contact,
    5 longitude, 6 latitude, 7 baro_altitude, 8 on_ground, 9 velocity,
    10 true_track, 11 vertical_rate. Entries without an identifier are dropped.
    """

    if not isinstance(entry, (list, tuple)) or len(entry) < 9:
        return None

    icao24 = entry[0]
    if not icao24 or not isinstance(icao24, str) or not icao24.strip():
        return None

    callsign = None
    if isinstance(entry[1], str):
        callsign = entry[1].strip() or None

    def _at(index: int) -> Any:
        return entry[index] if len(entry) > index else None

    return AircraftState(
        icao24=icao24.strip().lower(),
        callsign=callsign,
        origin_country=entry[2] if isinstance(entry[2], str) else None,
        lat=_as_float(entry[6]),
        lon=_as_float(entry[5]),
        baro_altitude=_as_float(entry[7]),
        on_ground=bool(entry[8]),
        velocity=_as_float(_at(9)),
        heading=_as_float(_at(10)),
        vertical_rate=_as_float(_at(11)),
        last_contact=_parse_epoch(_at(4)),
    )


class OpenSkyTokenProvider:
    """OAuth2 client-credentials bearer token, cached until shortly before expiry.

    Returns None whenever a token cannot be obtained so the feed falls back
    to anonymous (lower quota) access instead of failing the refresh.
    """

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        token_url: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url or settings.opensky_token_url
        self.clock = clock
        self._token: str | None = None
        self._expires_at: datetime | None = None

    @classmethod
    def from_settings(cls) -> Optional["OpenSkyTokenProvider"]:
        if not settings.opensky_client_id or not settings.opensky_client_secret:
            return None
        return cls(
            client_id=settings.opensky_client_id,
            client_secret=settings.opensky_client_secret,
        )

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = None

    async def get_token(self, client: httpx.AsyncClient) -> str | None:
        if self._token and self._expires_at and self.clock() < self._expires_at:
            return self._token

        try:
            response = await client.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "OpenSky token request returned HTTP %s", exc.response.status_code
            )
            return None
        except httpx.RequestError as exc:
            logger.warning("OpenSky token request failed: %s", exc)
            return None
        except ValueError as exc:
            logger.warning("Failed to parse OpenSky token response: %s", exc)
            return None

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            logger.warning("OpenSky token response did not include an access token")
            return None

        expires_in = _as_float(payload.get("expires_in"))
        if expires_in is None or not math.isfinite(expires_in) or expires_in <= 0:
            expires_in = 3600.0
        expires_in = min(expires_in, 86400.0)
        self._token = token
        self._expires_at = self.clock() + timedelta(seconds=expires_in) - TOKEN_EXPIRY_MARGIN
        logger.info("Obtained OpenSky OAuth2 token, expires in %s seconds", expires_in)
        return token


class OpenSkyFeed:
    """Fetch current aircraft states inside a bounding box."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        token_provider: OpenSkyTokenProvider | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.base_url = base_url or settings.opensky_base_url
        self.timeout = timeout or settings.opensky_timeout
        self.transport = transport
        self.token_provider = token_provider
        self.clock = clock
        self._calls_date: date | None = None
        self._calls_today = 0

    @property
    def calls_today(self) -> int:
        if self._calls_date != self.clock().date():
            return 0
        return self._calls_today

    def _count_call(self) -> None:
        today = self.clock().date()
        if self._calls_date != today:
            self._calls_date = today
            self._calls_today = 0
        self._calls_today += 1

    async def get_states(self, bbox: BoundingBox) -> list[AircraftState]:
        """Return every aircraft state the feed reports inside `bbox`.

        Raises FeedUnavailableError for timeouts, transport errors, non-2xx
        responses (including rate limiting) and malformed payloads.
        """

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                headers: dict[str, str] = {}
                if self.token_provider is not None:
                    token = await self.token_provider.get_token(client)
                    if token:
                        headers["Authorization"] = f"Bearer {token}"
                self._count_call()
                response = await client.get(
                    self.base_url, params=bbox.to_params(), headers=headers
                )
        except httpx.TimeoutException as exc:
            logger.warning("OpenSky request timed out: %s", exc)
            raise FeedUnavailableError("OpenSky request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning("OpenSky request failed: %s", exc)
            raise FeedUnavailableError(f"OpenSky request failed: {exc}") from exc

        if response.status_code == 429:
            logger.warning("OpenSky rate limit encountered: %s", response.text)
            raise FeedUnavailableError("OpenSky rate limit exceeded", status_code=429)
        if response.status_code == 401 and self.token_provider is not None:
            logger.warning("OpenSky rejected the bearer token; it will be refreshed")
            self.token_provider.invalidate()
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning("OpenSky returned HTTP %s: %s", status_code, exc)
            raise FeedUnavailableError(
                f"OpenSky returned HTTP {status_code}", status_code=status_code
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse OpenSky JSON response: %s", exc)
            raise FeedUnavailableError("OpenSky returned malformed JSON") from exc

        raw_states = []
        if isinstance(payload, dict):
            raw_states = payload.get("states") or []

        states: list[AircraftState] = []
        for entry in raw_states:
            state = normalize_state(entry)
            if state is not None:
                states.append(state)

        logger.debug("Received %s aircraft states from OpenSky", len(states))
        return states


__all__ = [
    "FeedUnavailableError",
    "OpenSkyFeed",
    "OpenSkyTokenProvider",
    "normalize_state",
]
