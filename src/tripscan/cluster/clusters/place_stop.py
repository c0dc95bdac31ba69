import logging
from typing import List, Optional

from tripscan.cluster.clusters.base import Clusterer
from tripscan.config import PlaceStopConfig
from tripscan.models.cluster import PlaceStop
from tripscan.models.photo import PhotoRecord
from tripscan.utils.geo import distance_meters

logger = logging.getLogger(__name__)


class _OpenStop:
    __slots__ = ("reference", "photos")

    def __init__(self, reference: PhotoRecord):
        self.reference = reference
        self.photos = [reference]


class PlaceStopCluster(Clusterer[PlaceStop]):
    """
    Splits one day's trip photos into ordered place stops.

    With at least one located photo, each photo joins the first open stop that
    accepts it, otherwise it opens a new stop. A stop accepts a photo when

      (time since stop start < 5 min
         OR (distance to stop's last photo < 50 m AND time since start < 5 h
             AND the stop is the newest one))
      AND (gap since stop's last photo > expected walking time OR gap < 5 min)

    where expected walking time = distance / 1.34 m/s * 1.3. Without any
    location the day is cut on time gaps longer than 30 minutes.
    """

    def __init__(self, config: Optional[PlaceStopConfig] = None):
        self.config = config or PlaceStopConfig()

    def cluster(self, photos: List[PhotoRecord]) -> List[PlaceStop]:
        if not photos:
            return []

        sorted_photos = sorted(photos, key=lambda p: p.timestamp)
        if any(p.has_location for p in sorted_photos):
            groups = self._cluster_by_heuristic(sorted_photos)
        else:
            groups = self._cluster_by_time_only(sorted_photos)

        stops = [
            PlaceStop(
                order_index=idx,
                representative=next((p.coordinate for p in group if p.has_location), None),
                photos=group,
            )
            for idx, group in enumerate(groups)
        ]
        logger.info(f"PlaceStopCluster: {len(sorted_photos)} photos -> {len(stops)} stops.")
        return stops

    def _accepts(self, stop: _OpenStop, photo: PhotoRecord, is_newest: bool) -> bool:
        cfg = self.config
        last = stop.photos[-1]

        if last.has_location and photo.has_location:
            distance_m = distance_meters(last.coordinate, photo.coordinate)
        else:
            distance_m = 0.0

        time_gap = (photo.timestamp - last.timestamp).total_seconds()
        since_start = (photo.timestamp - stop.reference.timestamp).total_seconds()
        min_expected = (distance_m / cfg.walking_speed_mps) * cfg.fudge_factor

        starts_here = since_start < cfg.group_start_window_sec or (
            distance_m < cfg.same_place_distance_m
            and since_start < cfg.same_place_window_sec
            and is_newest
        )
        plausible_gap = time_gap > min_expected or time_gap < cfg.snap_back_gap_sec
        return starts_here and plausible_gap

    def _cluster_by_heuristic(self, photos: List[PhotoRecord]) -> List[List[PhotoRecord]]:
        stops: List[_OpenStop] = []

        for photo in photos:
            placed = False
            photo_day = photo.timestamp.date()
            for i, stop in enumerate(stops):
                if stop.photos[-1].timestamp.date() != photo_day:
                    continue
                if self._accepts(stop, photo, is_newest=(i == len(stops) - 1)):
                    stop.photos.append(photo)
                    placed = True
                    break
            if not placed:
                stops.append(_OpenStop(photo))

        return [s.photos for s in stops]

    def _cluster_by_time_only(self, photos: List[PhotoRecord]) -> List[List[PhotoRecord]]:
        groups: List[List[PhotoRecord]] = []
        current: List[PhotoRecord] = [photos[0]]

        for prev, curr in zip(photos, photos[1:]):
            gap = (curr.timestamp - prev.timestamp).total_seconds()
            if gap > self.config.no_location_gap_sec:
                logger.debug(f"Time gap of {gap:.0f}s exceeded threshold. Starting new stop.")
                groups.append(current)
                current = [curr]
            else:
                current.append(curr)

        groups.append(current)
        return groups
