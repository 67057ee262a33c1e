from datetime import datetime, timedelta, timezone
import math

from skysync.domain import GeoPoint
from skysync.models.aircraft import AircraftState
from skysync.services.resolver import TemporalResolver, select_sample, target_time_for
from skysync.services.sample_store import PositionSampleStore

NOW = datetime(2024, 5, 3, 20, 0, tzinfo=timezone.utc)
REFERENCE = GeoPoint(lat=26.3785, lon=-80.1077)


def _store() -> PositionSampleStore:
    return PositionSampleStore(
        retention_window=timedelta(minutes=15), stale_timeout=timedelta(minutes=10)
    )


def _record(store, icao24, minutes_ago, lat=26.40, lon=-80.10, altitude=1500.0):
    return store.record(
        AircraftState(icao24=icao24, lat=lat, lon=lon, baro_altitude=altitude),
        NOW - timedelta(minutes=minutes_ago),
    )


def test_target_time_subtracts_delay():
    assert target_time_for(NOW, 1.5) == NOW - timedelta(seconds=90)
    assert target_time_for(NOW, 0) == NOW


def test_select_sample_of_empty_sequence_is_none():
    assert select_sample([], NOW) is None


def test_live_mode_returns_latest_sample_per_aircraft():
    store = _store()
    _record(store, "b2", 5)
    latest_b2 = _record(store, "b2", 1)
    _record(store, "a1", 4)
    latest_a1 = _record(store, "a1", 0.5)

    resolved = TemporalResolver(store).resolve(NOW, 0, math.inf, REFERENCE)

    assert resolved == [latest_a1, latest_b2]


def test_delay_selects_sample_closest_to_target():
    store = _store()
    _record(store, "a1", 10)
    expected = _record(store, "a1", 5)
    _record(store, "a1", 1)

    resolved = TemporalResolver(store).resolve(NOW, 6, math.inf, REFERENCE)

    assert resolved == [expected]


def test_equidistant_samples_resolve_to_the_earlier_one():
    store = _store()
    earlier = _record(store, "a1", 4)
    _record(store, "a1", 2)

    resolved = TemporalResolver(store).resolve(NOW, 3, math.inf, REFERENCE)

    assert resolved == [earlier]


def test_delay_beyond_oldest_sample_falls_back_to_oldest():
    store = _store()
    oldest = _record(store, "a1", 3)
    _record(store, "a1", 1)

    resolved = TemporalResolver(store).resolve(NOW, 10, math.inf, REFERENCE)

    assert resolved == [oldest]


def test_radius_filter_uses_resolved_position():
    store = _store()
    # Five minutes ago the aircraft was ~111 km north, now it is overhead.
    _record(store, "a1", 5, lat=REFERENCE.lat + 1.0, lon=REFERENCE.lon)
    _record(store, "a1", 0, lat=REFERENCE.lat, lon=REFERENCE.lon)
    resolver = TemporalResolver(store)

    assert [s.icao24 for s in resolver.resolve(NOW, 0, 50, REFERENCE)] == ["a1"]
    assert resolver.resolve(NOW, 5, 50, REFERENCE) == []


def test_every_resolved_sample_is_within_radius():
    store = _store()
    _record(store, "near", 0, lat=26.40, lon=-80.10)
    _record(store, "edge", 0, lat=REFERENCE.lat + 0.4, lon=REFERENCE.lon)
    _record(store, "far", 0, lat=28.0, lon=-80.10)

    resolved = TemporalResolver(store).resolve(NOW, 0, 50, REFERENCE)

    assert [s.icao24 for s in resolved] == ["edge", "near"]


def test_empty_store_resolves_to_empty_list():
    assert TemporalResolver(_store()).resolve(NOW, 3, 50, REFERENCE) == []


def test_delayed_view_keeps_aircraft_that_has_since_left_the_radius():
    store = _store()
    # Five minutes ago the aircraft was overhead, now it is ~111 km north.
    _record(store, "a1", 5, lat=REFERENCE.lat, lon=REFERENCE.lon)
    _record(store, "a1", 0, lat=REFERENCE.lat + 1.0, lon=REFERENCE.lon)
    resolver = TemporalResolver(store)

    delayed = resolver.resolve(NOW, 5, 50, REFERENCE)

    assert [s.icao24 for s in delayed] == ["a1"]
    assert delayed[0].captured_at == NOW - timedelta(minutes=5)
    assert resolver.resolve(NOW, 0, 50, REFERENCE) == []
