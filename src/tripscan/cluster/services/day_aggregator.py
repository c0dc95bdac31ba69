import logging
from collections import Counter
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from tripscan.config import DayGroupingConfig
from tripscan.models.cluster import DayCluster
from tripscan.models.photo import UNKNOWN_COUNTRY, Coordinate, PhotoRecord
from tripscan.utils.geo import max_pairwise_distance_miles

logger = logging.getLogger(__name__)

UNKNOWN_KEY = "?"

DayGroup = Tuple[date, List[PhotoRecord]]


def group_photos_by_day(
    photos: Sequence[PhotoRecord],
    config: Optional[DayGroupingConfig] = None,
) -> List[DayGroup]:
    """
    Groups photos by local calendar day, then applies the midnight bridge.

    A photo taken before `bridge_before_hour` whose gap to the photo right
    before it is within `midnight_bridge_hours` joins the previous day's group,
    so a late dinner that runs past midnight stays one outing. The comparison
    chains: a bridged photo becomes the reference for the next one. Bridging
    for a day stops at its first photo that stays.
    """
    config = config or DayGroupingConfig()
    if not photos:
        return []

    by_day: Dict[date, List[PhotoRecord]] = {}
    for photo in sorted(photos, key=lambda p: p.timestamp):
        by_day.setdefault(photo.timestamp.date(), []).append(photo)

    bridge_sec = config.midnight_bridge_hours * 3600
    groups: List[DayGroup] = []

    for day in sorted(by_day):
        day_photos = by_day[day]
        if not groups:
            groups.append((day, list(day_photos)))
            continue

        prev_photos = groups[-1][1]
        kept: List[PhotoRecord] = []
        bridging = True
        for photo in day_photos:
            if bridging:
                gap = (photo.timestamp - prev_photos[-1].timestamp).total_seconds()
                if photo.timestamp.hour < config.bridge_before_hour and gap <= bridge_sec:
                    prev_photos.append(photo)
                    logger.debug(f"Midnight bridge: photo {photo.id} moved to {groups[-1][0]} (gap {gap:.0f}s)")
                    continue
                bridging = False
            kept.append(photo)

        if kept:
            groups.append((day, kept))

    return groups


def _mean_coordinate(points: Sequence[Tuple[float, float]]) -> Coordinate:
    arr = np.asarray(points, dtype=float)
    lat, lon = arr.mean(axis=0)
    return Coordinate(float(lat), float(lon))


def build_day_cluster(day: date, photos: Sequence[PhotoRecord]) -> Optional[DayCluster]:
    """Summarises one day. Returns None when no photo carries a coordinate."""
    located = [p for p in photos if p.has_location]
    if not located:
        return None

    country_counts: Counter = Counter()
    country_names: Dict[str, str] = {}
    city_points: Dict[str, List[Tuple[float, float]]] = {}

    for p in located:
        country_key = p.country_code or p.country_name or UNKNOWN_KEY
        country_counts[country_key] += 1
        if p.country_name:
            country_names[country_key] = p.country_name

        city_key = p.city_name or p.area_name or UNKNOWN_KEY
        city_points.setdefault(city_key, []).append((p.lat, p.lon))

    centroid = _mean_coordinate([(p.lat, p.lon) for p in located])

    # most_common keeps first-seen order among equal counts
    dominant_country = country_counts.most_common(1)[0][0]
    dominant_city = max(city_points.items(), key=lambda kv: len(kv[1]))[0]

    city_centroids = [_mean_coordinate(points) for points in city_points.values()]

    return DayCluster(
        day=day,
        centroid=centroid,
        country_code=dominant_country,
        country_name=country_names.get(dominant_country, UNKNOWN_COUNTRY),
        city_name="" if dominant_city == UNKNOWN_KEY else dominant_city,
        city_centroids=city_centroids,
        max_distance_within_day_miles=max_pairwise_distance_miles(city_centroids),
        photos=list(photos),
    )


def build_day_clusters(groups: Sequence[DayGroup]) -> List[DayCluster]:
    clusters: List[DayCluster] = []
    for day, photos in groups:
        cluster = build_day_cluster(day, photos)
        if cluster is None:
            logger.debug(f"Day {day} has no located photos; dropped.")
            continue
        clusters.append(cluster)
    logger.info(f"Built {len(clusters)} day clusters from {len(groups)} day groups.")
    return clusters
