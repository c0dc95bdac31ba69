import os
import sys
from datetime import datetime, timedelta

sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))

from tripscan.cluster.clusters.place_stop import PlaceStopCluster
from tripscan.config import PlaceStopConfig
from tripscan.models.photo import Coordinate, PhotoRecord

T0 = datetime(2025, 6, 1, 10, 0)
CAFE = (48.8566, 2.3522)
CAFE_TERRACE = (48.8567, 2.3522)  # ~11 m from CAFE
MUSEUM = (48.8656, 2.3522)  # ~1 km from CAFE


def _photo(pid, minutes, where=CAFE, base=T0):
    lat, lon = where if where else (None, None)
    return PhotoRecord(id=pid, timestamp=base + timedelta(minutes=minutes), lat=lat, lon=lon)


def _ids(stops):
    return [[p.id for p in s.photos] for s in stops]


def test_empty_input():
    assert PlaceStopCluster().cluster([]) == []


def test_moving_to_another_place_opens_a_stop():
    photos = [_photo("a", 0), _photo("b", 1), _photo("c", 10, MUSEUM)]
    stops = PlaceStopCluster().cluster(photos)

    assert _ids(stops) == [["a", "b"], ["c"]]
    assert [s.order_index for s in stops] == [0, 1]
    assert stops[0].representative == Coordinate(*CAFE)
    assert stops[1].representative == Coordinate(*MUSEUM)


def test_lingering_at_same_place_stays_one_stop():
    photos = [_photo("a", 0), _photo("b", 120, CAFE_TERRACE)]
    stops = PlaceStopCluster().cluster(photos)
    assert _ids(stops) == [["a", "b"]]


def test_returning_to_an_older_stop_opens_a_new_one():
    photos = [_photo("a", 0), _photo("b", 10, MUSEUM), _photo("c", 30, CAFE)]
    stops = PlaceStopCluster().cluster(photos)
    assert _ids(stops) == [["a"], ["b"], ["c"]]


def test_stops_do_not_cross_midnight():
    photos = [
        _photo("late", 0, base=datetime(2025, 6, 1, 23, 58)),
        _photo("early", 3, base=datetime(2025, 6, 1, 23, 58)),
    ]
    stops = PlaceStopCluster().cluster(photos)
    assert _ids(stops) == [["late"], ["early"]]


def test_input_order_does_not_matter():
    photos = [_photo("c", 10, MUSEUM), _photo("a", 0), _photo("b", 1)]
    stops = PlaceStopCluster().cluster(photos)
    assert _ids(stops) == [["a", "b"], ["c"]]


def test_time_only_mode_without_locations():
    photos = [_photo("a", 0, None), _photo("b", 10, None), _photo("c", 50, None)]
    stops = PlaceStopCluster().cluster(photos)

    assert _ids(stops) == [["a", "b"], ["c"]]
    assert all(s.representative is None for s in stops)
    assert stops[1].start == T0 + timedelta(minutes=50)


def test_representative_is_first_located_photo():
    photos = [_photo("blind", 0, None), _photo("seen", 1, CAFE_TERRACE)]
    stops = PlaceStopCluster().cluster(photos)

    assert _ids(stops) == [["blind", "seen"]]
    assert stops[0].representative == Coordinate(*CAFE_TERRACE)
    assert stops[0].start == T0
    assert stops[0].end == T0 + timedelta(minutes=1)


def test_quick_follow_up_joins_even_when_far():
    # 60 s after the stop starts, a 1 km jump is still within the snap-back gap
    photos = [_photo("a", 0), _photo("b", 1, MUSEUM)]
    assert _ids(PlaceStopCluster().cluster(photos)) == [["a", "b"]]


def test_photo_can_join_an_older_stop():
    # a wider start window keeps the first stop open after the second one opens
    cluster = PlaceStopCluster(PlaceStopConfig(group_start_window_sec=3600))
    photos = [_photo("a", 0), _photo("b", 10, MUSEUM), _photo("c", 20, CAFE_TERRACE)]

    stops = cluster.cluster(photos)

    assert _ids(stops) == [["a", "c"], ["b"]]
    assert [s.order_index for s in stops] == [0, 1]
