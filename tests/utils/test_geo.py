import pytest

from disaster_intel.utils.geo import calculate_distance, create_point


def test_create_point_is_lng_first():
    assert create_point(40.7128, -74.006) == "POINT(-74.006 40.7128)"


def test_create_point_keeps_zero_coordinates():
    assert create_point(0.0, 0.0) == "POINT(0.0 0.0)"


@pytest.mark.parametrize("lat, lng", [(None, 10.0), (10.0, None), (None, None)])
def test_create_point_missing_coordinate(lat, lng):
    assert create_point(lat, lng) is None


def test_distance_between_same_point_is_zero():
    assert calculate_distance(48.8566, 2.3522, 48.8566, 2.3522) == pytest.approx(0.0, abs=1e-6)


def test_distance_paris_london():
    distance = calculate_distance(48.8566, 2.3522, 51.5074, -0.1278)

    assert distance == pytest.approx(343.5, rel=0.01)


def test_distance_is_symmetric():
    there = calculate_distance(40.7128, -74.006, 34.0522, -118.2437)
    back = calculate_distance(34.0522, -118.2437, 40.7128, -74.006)

    assert there == pytest.approx(back)
    assert there == pytest.approx(3936, rel=0.01)
