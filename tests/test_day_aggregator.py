import os
import sys
from datetime import date, datetime

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))

from tripscan.cluster.services.day_aggregator import (
    build_day_cluster,
    build_day_clusters,
    group_photos_by_day,
)
from tripscan.config import DayGroupingConfig
from tripscan.models.photo import PhotoRecord


def _photo(pid, ts, lat=48.8566, lon=2.3522, **labels):
    return PhotoRecord(id=pid, timestamp=ts, lat=lat, lon=lon, **labels)


def test_midnight_bridge_chains_until_first_photo_that_stays():
    photos = [
        _photo("dinner", datetime(2025, 6, 1, 23, 30)),
        _photo("late", datetime(2025, 6, 2, 0, 45)),
        _photo("later", datetime(2025, 6, 2, 1, 30)),
        _photo("breakfast", datetime(2025, 6, 2, 9, 0)),
        _photo("sleepless", datetime(2025, 6, 2, 4, 5)),
    ]
    groups = group_photos_by_day(photos)

    assert [d for d, _ in groups] == [date(2025, 6, 1), date(2025, 6, 2)]
    assert [p.id for p in groups[0][1]] == ["dinner", "late", "later"]
    # 04:05 photo is 2h35m after 01:30, so it stays and bridging ends there
    assert [p.id for p in groups[1][1]] == ["sleepless", "breakfast"]


def test_midnight_bridge_respects_gap_and_hour():
    photos = [
        _photo("evening", datetime(2025, 6, 1, 21, 0)),
        _photo("early", datetime(2025, 6, 2, 3, 30)),
    ]
    groups = group_photos_by_day(photos)
    assert len(groups) == 2

    photos = [
        _photo("night", datetime(2025, 6, 1, 23, 50)),
        _photo("morning", datetime(2025, 6, 2, 5, 10)),
    ]
    groups = group_photos_by_day(photos, DayGroupingConfig(midnight_bridge_hours=8.0))
    assert len(groups) == 2


def test_bridged_day_is_dropped_when_all_photos_move():
    photos = [
        _photo("a", datetime(2025, 6, 1, 23, 0)),
        _photo("b", datetime(2025, 6, 2, 0, 30)),
    ]
    groups = group_photos_by_day(photos)
    assert len(groups) == 1
    assert [p.id for p in groups[0][1]] == ["a", "b"]


def test_group_photos_by_day_empty():
    assert group_photos_by_day([]) == []


def test_build_day_cluster_dominant_labels_and_ties():
    ts = datetime(2025, 6, 1, 10, 0)
    photos = [
        _photo("1", ts, 48.0, 2.0, country_code="FR", country_name="France", city_name="Paris"),
        _photo("2", ts, 48.0, 2.0, country_code="DE", country_name="Germany", city_name="Berlin"),
        _photo("3", ts, 48.0, 2.0, country_code="FR", country_name="France", city_name="Lyon"),
        _photo("4", ts, 48.0, 2.0, country_code="DE", country_name="Germany", city_name="Berlin"),
        _photo("5", ts),
    ]
    cluster = build_day_cluster(date(2025, 6, 1), photos)

    # FR and DE tie on two photos each; FR was seen first
    assert cluster.country_code == "FR"
    assert cluster.country_name == "France"
    # Berlin has two photos; the unlabelled photo falls into "?"
    assert cluster.city_name == "Berlin"
    assert len(cluster.city_centroids) == 4
    assert len(cluster.photos) == 5


def test_build_day_cluster_centroid_and_spread():
    ts = datetime(2025, 6, 1, 10, 0)
    photos = [
        _photo("a", ts, 40.0, 0.0, country_code="FR", city_name="A"),
        _photo("b", ts, 42.0, 0.0, country_code="FR", city_name="B"),
        _photo("nowhere", ts, None, None),
    ]
    cluster = build_day_cluster(date(2025, 6, 1), photos)

    assert cluster.centroid.lat == pytest.approx(41.0)
    assert cluster.centroid.lon == pytest.approx(0.0)
    assert cluster.max_distance_within_day_miles == pytest.approx(2 * 3958.8 * 3.141592653589793 / 180)


def test_build_day_cluster_unknown_labels():
    cluster = build_day_cluster(date(2025, 6, 1), [_photo("a", datetime(2025, 6, 1, 10, 0))])

    assert cluster.country_code == "?"
    assert cluster.country_name == "Unknown"
    assert cluster.city_name == ""
    assert cluster.max_distance_within_day_miles == 0.0


def test_days_without_location_are_dropped():
    groups = [
        (date(2025, 6, 1), [_photo("a", datetime(2025, 6, 1, 10, 0), None, None)]),
        (date(2025, 6, 2), [_photo("b", datetime(2025, 6, 2, 10, 0))]),
    ]
    clusters = build_day_clusters(groups)
    assert [c.day for c in clusters] == [date(2025, 6, 2)]
