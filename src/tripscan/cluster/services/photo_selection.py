"""
Deterministic pick of the best few photos of a place stop.

Bursts (consecutive shots less than 2 s apart) collapse to their best shot.
The survivors are ranked by pixel count, then by distance to the stop
centroid, then by photo id.
"""
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from tripscan.models.cluster import PlaceStop
from tripscan.models.photo import Coordinate, PhotoRecord
from tripscan.utils.geo import distance_meters

logger = logging.getLogger(__name__)

BURST_WINDOW_SEC = 2.0


def _centroid(photos: Sequence[PhotoRecord]) -> Optional[Coordinate]:
    points = [(p.lat, p.lon) for p in photos if p.has_location]
    if not points:
        return None
    lat, lon = np.asarray(points, dtype=float).mean(axis=0)
    return Coordinate(float(lat), float(lon))


def _distance_to(photo: PhotoRecord, centroid: Optional[Coordinate]) -> float:
    if centroid is None or not photo.has_location:
        return float("inf")
    return distance_meters(photo.coordinate, centroid)


def _rank_key(photo: PhotoRecord, centroid: Optional[Coordinate]) -> Tuple[int, float, str]:
    return (-photo.pixel_count, _distance_to(photo, centroid), photo.id)


def collapse_bursts(photos: Sequence[PhotoRecord], centroid: Optional[Coordinate] = None) -> List[PhotoRecord]:
    """Keeps the best photo of each burst, in time order."""
    kept: List[PhotoRecord] = []
    burst: List[PhotoRecord] = []

    for photo in sorted(photos, key=lambda p: p.timestamp):
        if burst and (photo.timestamp - burst[-1].timestamp).total_seconds() < BURST_WINDOW_SEC:
            burst.append(photo)
            continue
        if burst:
            kept.append(min(burst, key=lambda p: _rank_key(p, centroid)))
        burst = [photo]

    if burst:
        kept.append(min(burst, key=lambda p: _rank_key(p, centroid)))
    return kept


def select_best_photos(stop: PlaceStop, max_count: int = 3) -> List[PhotoRecord]:
    if len(stop.photos) <= max_count:
        return list(stop.photos)

    centroid = _centroid(stop.photos)
    candidates = collapse_bursts(stop.photos, centroid)
    selected = sorted(candidates, key=lambda p: _rank_key(p, centroid))[:max_count]
    logger.debug(f"Stop {stop.order_index}: {len(stop.photos)} photos -> {len(candidates)} distinct -> {len(selected)} selected.")
    return selected
