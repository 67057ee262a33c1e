import math

import pytest

from skysync.domain import BoundingBox, GeoPoint, distance_from, distance_km


def test_distance_is_zero_for_same_point():
    assert distance_km(26.3785, -80.1077, 26.3785, -80.1077) == 0


def test_one_degree_of_latitude_is_about_111_km():
    assert distance_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, rel=1e-3)


def test_distance_is_symmetric():
    forward = distance_km(26.3785, -80.1077, 25.7959, -80.2870)
    backward = distance_km(25.7959, -80.2870, 26.3785, -80.1077)
    assert forward == pytest.approx(backward)
    assert forward == pytest.approx(66.9, rel=1e-2)


def test_nan_propagates_instead_of_raising():
    assert math.isnan(distance_km(float("nan"), 0.0, 0.0, 0.0))


def test_distance_from_reference_point():
    reference = GeoPoint(lat=10.0, lon=20.0)
    assert distance_from(reference, 10.0, 20.0) == 0


def test_bounding_box_at_equator():
    bbox = BoundingBox.from_center_radius(0.0, 0.0, 111.0)

    assert bbox.min_lat == pytest.approx(-1.0)
    assert bbox.max_lat == pytest.approx(1.0)
    assert bbox.min_lon == pytest.approx(-1.0)
    assert bbox.max_lon == pytest.approx(1.0)


def test_bounding_box_widens_longitude_with_latitude():
    bbox = BoundingBox.from_center_radius(60.0, 10.0, 111.0)

    assert bbox.max_lat - bbox.min_lat == pytest.approx(2.0)
    assert bbox.max_lon - bbox.min_lon == pytest.approx(4.0)


def test_bounding_box_query_params():
    params = BoundingBox(min_lat=1.0, max_lat=2.0, min_lon=3.0, max_lon=4.0).to_params()

    assert params == {"lamin": 1.0, "lomin": 3.0, "lamax": 2.0, "lomax": 4.0}
