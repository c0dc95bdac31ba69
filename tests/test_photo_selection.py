import os
import sys
from datetime import datetime, timedelta

sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))

from tripscan.cluster.services.photo_selection import collapse_bursts, select_best_photos
from tripscan.models.cluster import PlaceStop
from tripscan.models.photo import Coordinate, PhotoRecord

T0 = datetime(2025, 6, 1, 10, 0)
CAFE = Coordinate(48.8566, 2.3522)


def _photo(pid, seconds, size=None, lat=CAFE.lat, lon=CAFE.lon, label=None):
    return PhotoRecord(
        id=pid,
        timestamp=T0 + timedelta(seconds=seconds),
        lat=lat,
        lon=lon,
        place_label=label,
        pixel_width=size,
        pixel_height=size,
    )


def _stop(photos):
    return PlaceStop(order_index=0, representative=photos[0].coordinate, photos=photos)


def _ids(photos):
    return [p.id for p in photos]


def test_small_stop_keeps_every_photo():
    photos = [_photo("a", 0, 100), _photo("b", 0.5, 4000), _photo("c", 60)]
    assert _ids(select_best_photos(_stop(photos))) == ["a", "b", "c"]


def test_burst_collapses_to_its_sharpest_shot():
    photos = [
        _photo("burst-1", 0, 1000),
        _photo("burst-2", 0.5, 4000),
        _photo("burst-3", 1.0, 2000),
        _photo("single-1", 60, 3000),
        _photo("single-2", 120, 500),
    ]
    selected = select_best_photos(_stop(photos))

    assert _ids(selected) == ["burst-2", "single-1", "single-2"]


def test_burst_chains_on_consecutive_gaps():
    photos = [_photo("a", 0, 10), _photo("b", 1.5, 30), _photo("c", 3.0, 20), _photo("d", 5.5, 5)]
    assert _ids(collapse_bursts(photos)) == ["b", "d"]


def test_resolution_ranks_before_distance():
    photos = [
        _photo("near", 0, 1000),
        _photo("near-2", 10, 1000),
        _photo("far-sharp", 20, 4000, lat=CAFE.lat + 0.01),
        _photo("near-3", 30, 1000),
    ]
    assert _ids(select_best_photos(_stop(photos)))[0] == "far-sharp"


def test_distance_to_centroid_breaks_resolution_ties():
    # centroid latitude sits at +0.00325
    photos = [
        _photo("a", 0, lat=0.000, lon=0.0),
        _photo("b", 10, lat=0.001, lon=0.0),
        _photo("c", 20, lat=0.002, lon=0.0),
        _photo("d", 30, lat=0.010, lon=0.0),
    ]
    assert _ids(select_best_photos(_stop(photos))) == ["c", "b", "a"]


def test_photo_id_breaks_remaining_ties():
    photos = [_photo("d", 0), _photo("b", 10), _photo("c", 20), _photo("a", 30)]
    assert _ids(select_best_photos(_stop(photos))) == ["a", "b", "c"]


def test_max_count_and_determinism():
    photos = [_photo(f"p{i}", i * 10, 100 * i) for i in range(8)]
    first = select_best_photos(_stop(photos), max_count=2)
    second = select_best_photos(_stop(list(reversed(photos))), max_count=2)

    assert _ids(first) == ["p7", "p6"]
    assert _ids(first) == _ids(second)


def test_stop_label_is_most_common_place_label():
    photos = [
        _photo("a", 0, label="Louvre Museum"),
        _photo("b", 10, label="Tuileries Garden"),
        _photo("c", 20, label="Louvre Museum"),
        _photo("d", 30),
    ]
    assert _stop(photos).label == "Louvre Museum"
    assert _stop([_photo("x", 0)]).label is None
