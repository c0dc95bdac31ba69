import math
from typing import Sequence

from pyproj import Geod

from tripscan.models.photo import Coordinate

EARTH_RADIUS_MILES = 3958.8
METERS_PER_MILE = 1609.344

_geod = Geod(ellps="WGS84")


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance in miles."""
    return haversine_miles(a.lat, a.lon, b.lat, b.lon)


def max_pairwise_distance_miles(coords: Sequence[Coordinate]) -> float:
    """Largest distance over all unordered pairs; 0 for fewer than two coordinates."""
    if len(coords) < 2:
        return 0.0
    max_d = 0.0
    for i in range(len(coords)):
        for j in range(i + 1, len(coords)):
            d = distance_miles(coords[i], coords[j])
            if d > max_d:
                max_d = d
    return max_d


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    # inv(lon1, lat1, lon2, lat2) -> az12, az21, dist
    _, _, dist = _geod.inv(a.lon, a.lat, b.lon, b.lat)
    return dist


def round_coordinate_key(coord: Coordinate, decimals: int = 3) -> str:
    return f"{round(coord.lat, decimals)},{round(coord.lon, decimals)}"
