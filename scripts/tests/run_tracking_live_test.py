#!/usr/bin/env python
"""
Run this to exercise the live OpenSky feed and the playback engine end to end.

Takes two snapshots one ingestion interval apart, then prints the live fleet,
a short delayed view and the departure / arrival split.

Usage (from repo root):
    python scripts/tests/run_tracking_live_test.py
"""

import asyncio
from datetime import datetime, timezone

from skysync.models.tracking import TrackingConfig
from skysync.services.session import TrackingSession


async def main() -> None:
    config = TrackingConfig.from_settings()
    session = TrackingSession(config)
    now = datetime.now(timezone.utc)

    print(
        f"=== Live tracking test around {config.reference_lat}, {config.reference_lon} "
        f"radius={config.search_radius_km} km (UTC now: {now.isoformat()}) ===\n"
    )

    print("Requesting first snapshot from OpenSky...")
    first = await session.refresh()
    print(f"ok={first.ok} ingested={len(first.ingested)} error={first.error}")

    print(f"\nWaiting {config.ingestion_interval_seconds:.0f}s for the next snapshot...")
    await asyncio.sleep(config.ingestion_interval_seconds)
    second = await session.refresh()
    print(f"ok={second.ok} ingested={len(second.ingested)} error={second.error}")

    fleet = session.get_resolved_fleet(delay_minutes=0)
    print(f"\nLive fleet: {fleet.count} aircraft. Showing a few:")
    for idx, a in enumerate(fleet.aircraft[:5], start=1):
        print(
            f"{idx}. callsign={a.callsign!r}, icao24={a.icao24!r}, "
            f"lat={a.lat:.5f}, lon={a.lon:.5f}, alt_m={a.altitude}, "
            f"vr={a.vertical_rate}, trail_points={len(session.get_trail(a.icao24))}"
        )

    delayed = session.get_resolved_fleet(delay_minutes=1)
    print(f"\nDelayed fleet (1 min, target {delayed.target_time.isoformat()}): {delayed.count} aircraft")

    classification = session.get_classification(delay_minutes=0)
    print(
        f"\nNear reference: {classification.total_nearby} "
        f"(departing={[a.callsign or a.icao24 for a in classification.departing]}, "
        f"arriving={[a.callsign or a.icao24 for a in classification.arriving]})"
    )
    print(f"\nFeed status: {session.feed_status.model_dump()}")


if __name__ == "__main__":
    asyncio.run(main())
