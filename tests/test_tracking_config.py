from datetime import timedelta

import pytest
from pydantic import ValidationError

from skysync.config import Settings
from skysync.models.tracking import TrackingConfig


def test_defaults_match_documented_values():
    config = TrackingConfig()

    assert config.ingestion_interval_seconds == 90
    assert config.retention_window == timedelta(minutes=15)
    assert config.stale_timeout == timedelta(minutes=10)
    assert config.trail_length == 50
    assert config.position_delay_minutes == 3
    assert config.search_radius_km == 50
    assert config.reference.lat == pytest.approx(26.3785)
    assert config.reference.lon == pytest.approx(-80.1077)


@pytest.mark.parametrize(
    "field, value",
    [
        ("ingestion_interval_seconds", 5),
        ("position_delay_minutes", 10.5),
        ("position_delay_minutes", -1),
        ("search_radius_km", 0),
        ("trail_length", 0),
        ("reference_lat", 91),
    ],
)
def test_out_of_range_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        TrackingConfig(**{field: value})


def test_from_settings_copies_tracking_fields():
    source = Settings()
    source.position_delay_minutes = 1.5
    source.search_radius_km = 25.0
    source.reference_lat = 40.6413
    source.reference_lon = -73.7781

    config = TrackingConfig.from_settings(source)

    assert config.position_delay_minutes == 1.5
    assert config.search_radius_km == 25.0
    assert config.reference.lat == pytest.approx(40.6413)


def test_from_settings_validates():
    source = Settings()
    source.ingestion_interval_seconds = 1

    with pytest.raises(ValidationError):
        TrackingConfig.from_settings(source)
