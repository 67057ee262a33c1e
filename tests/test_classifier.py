from datetime import datetime, timezone

from skysync.domain import GeoPoint
from skysync.models.aircraft import AircraftState, PositionSample
from skysync.services.classifier import classify, is_nearby

NOW = datetime(2024, 5, 3, 20, 0, tzinfo=timezone.utc)
REFERENCE = GeoPoint(lat=26.3785, lon=-80.1077)


def _sample(icao24, vertical_rate=None, altitude=1000.0, lat=26.3965, lon=-80.1077):
    # default position is ~2 km north of the reference point
    state = AircraftState(
        icao24=icao24,
        lat=lat,
        lon=lon,
        baro_altitude=altitude,
        vertical_rate=vertical_rate,
    )
    return PositionSample(state=state, captured_at=NOW)


def test_climbing_and_descending_traffic_is_split():
    climbing = _sample("a1", vertical_rate=3.0)
    descending = _sample("b2", vertical_rate=-4.5)
    level = _sample("c3", vertical_rate=0.5)

    result = classify([climbing, descending, level], REFERENCE)

    assert result.departing == [climbing]
    assert result.arriving == [descending]
    assert result.total_nearby == 3


def test_unknown_vertical_rate_counts_only_toward_total():
    result = classify([_sample("a1", vertical_rate=None)], REFERENCE)

    assert result.departing == []
    assert result.arriving == []
    assert result.total_nearby == 1


def test_threshold_itself_is_not_a_departure_or_arrival():
    result = classify(
        [_sample("a1", vertical_rate=2.0), _sample("b2", vertical_rate=-2.0)], REFERENCE
    )

    assert result.departing == []
    assert result.arriving == []
    assert result.total_nearby == 2


def test_far_high_or_altitude_unknown_traffic_is_not_nearby():
    far = _sample("far", vertical_rate=5.0, lat=26.60)
    high = _sample("high", vertical_rate=5.0, altitude=3000.0)
    unknown_altitude = _sample("alt", vertical_rate=5.0, altitude=None)

    result = classify([far, high, unknown_altitude], REFERENCE)

    assert result.departing == []
    assert result.total_nearby == 0
    assert not is_nearby(unknown_altitude, REFERENCE, 10.0, 3000.0)


def test_custom_thresholds_are_honored():
    sample = _sample("a1", vertical_rate=1.0, altitude=4000.0)

    result = classify(
        [sample],
        REFERENCE,
        near_threshold_km=5.0,
        low_altitude_m=5000.0,
        vertical_rate_threshold=0.5,
    )

    assert result.departing == [sample]


def test_departing_and_arriving_never_overlap():
    samples = [_sample(f"x{i}", vertical_rate=rate) for i, rate in enumerate([-9, -2, 0, 2, 9, None])]

    result = classify(samples, REFERENCE)

    assert not set(id(s) for s in result.departing) & set(id(s) for s in result.arriving)
    assert len(result.departing) + len(result.arriving) <= result.total_nearby
