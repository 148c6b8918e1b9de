import math

import pytest

from osmnav.domain.errors import MalformedCoordinateError
from osmnav.graph.geomath import EARTH_RADIUS_M, haversine_distance


POINTS = [
    (0.0, 0.0),
    (48.1173, -1.6778),
    (-33.8688, 151.2093),
    (89.9, 179.9),
    (50.0755, 14.4378),
]


@pytest.mark.parametrize("lat, lon", POINTS)
def test_distance_to_self_is_zero(lat, lon):
    assert haversine_distance(lat, lon, lat, lon) == 0.0


def test_distance_is_symmetric():
    for lat1, lon1 in POINTS:
        for lat2, lon2 in POINTS:
            assert haversine_distance(lat1, lon1, lat2, lon2) == pytest.approx(
                haversine_distance(lat2, lon2, lat1, lon1)
            )


def test_one_degree_along_equator():
    expected = EARTH_RADIUS_M * math.radians(1)
    assert haversine_distance(0, 0, 0, 1) == pytest.approx(expected)
    assert expected == pytest.approx(111_194.93, rel=1e-6)


def test_triangle_inequality():
    a, b, c = POINTS[1], POINTS[4], POINTS[2]
    ab = haversine_distance(*a, *b)
    bc = haversine_distance(*b, *c)
    ac = haversine_distance(*a, *c)
    assert ac <= ab + bc + 1e-6


def test_antipodal_points_are_half_circumference():
    assert haversine_distance(0, 0, 0, 180) == pytest.approx(math.pi * EARTH_RADIUS_M)


@pytest.mark.parametrize("bad", [None, float("nan"), float("inf"), "12.5"])
def test_unusable_coordinate_raises(bad):
    with pytest.raises(MalformedCoordinateError):
        haversine_distance(bad, 0.0, 1.0, 1.0)
