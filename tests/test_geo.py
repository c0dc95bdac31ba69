import os
import sys

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))

from tripscan.models.photo import Coordinate
from tripscan.utils.geo import (
    distance_meters,
    distance_miles,
    max_pairwise_distance_miles,
    round_coordinate_key,
)

MILES_PER_DEGREE = 3958.8 * 3.141592653589793 / 180


def test_distance_one_degree_of_latitude():
    d = distance_miles(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
    assert d == pytest.approx(MILES_PER_DEGREE, rel=1e-9)


def test_distance_is_symmetric_and_zero_for_same_point():
    a = Coordinate(48.8566, 2.3522)
    b = Coordinate(51.5074, -0.1278)
    assert distance_miles(a, b) == pytest.approx(distance_miles(b, a))
    assert distance_miles(a, a) == 0.0
    # Paris - London
    assert 200 < distance_miles(a, b) < 220


def test_max_pairwise_distance():
    assert max_pairwise_distance_miles([]) == 0.0
    assert max_pairwise_distance_miles([Coordinate(10.0, 10.0)]) == 0.0

    coords = [Coordinate(0.0, 0.0), Coordinate(1.0, 0.0), Coordinate(3.0, 0.0)]
    assert max_pairwise_distance_miles(coords) == pytest.approx(3 * MILES_PER_DEGREE)


def test_distance_meters_uses_ellipsoid():
    # one degree of latitude at the equator on WGS84
    d = distance_meters(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
    assert d == pytest.approx(110574, rel=1e-3)


def test_round_coordinate_key():
    assert round_coordinate_key(Coordinate(48.85661, 2.35222)) == "48.857,2.352"
    assert round_coordinate_key(Coordinate(48.85661, 2.35222), decimals=1) == "48.9,2.4"
    assert round_coordinate_key(Coordinate(48.85649, 2.35201)) == round_coordinate_key(Coordinate(48.8565, 2.3520))
