"""
Groups day clusters into trips.

Days are walked in date order and either extend the current trip or open a
new one, using the neighborhood rule, the same-country fallback, the
multi-city rule, gap bridging and the trip-centroid exclusion. A smoothing
pass then folds isolated one-day trips into a neighbouring trip. Same input
and config always give the same trips and reasons.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from tripscan.config import TripGroupingConfig
from tripscan.models.cluster import DayCluster, GroupingResult
from tripscan.models.enum import MergeReason
from tripscan.models.photo import Coordinate
from tripscan.utils.geo import distance_miles

logger = logging.getLogger(__name__)


@dataclass
class _RunningCentroid:
    lat_sum: float = 0.0
    lon_sum: float = 0.0
    count: int = 0

    @classmethod
    def start(cls, day: DayCluster) -> "_RunningCentroid":
        return cls(day.centroid.lat, day.centroid.lon, 1)

    def add(self, day: DayCluster) -> None:
        self.lat_sum += day.centroid.lat
        self.lon_sum += day.centroid.lon
        self.count += 1

    @property
    def mean(self) -> Coordinate:
        return Coordinate(self.lat_sum / self.count, self.lon_sum / self.count)


class TripGrouper:
    def __init__(self, config: Optional[TripGroupingConfig] = None):
        self.config = config or TripGroupingConfig()

    def group(self, days: Sequence[DayCluster]) -> GroupingResult:
        if not days:
            return GroupingResult(trips=[], reasons=[])

        # stable sort keeps caller order for equal dates
        sorted_days = sorted(days, key=lambda d: d.day)

        trips: List[List[DayCluster]] = [[sorted_days[0]]]
        reasons: List[List[MergeReason]] = [[MergeReason.FIRST_DAY]]
        centroid = _RunningCentroid.start(sorted_days[0])

        for day in sorted_days[1:]:
            merge, reason = self.should_merge(day, trips[-1][-1], centroid.mean)
            if merge:
                trips[-1].append(day)
                reasons[-1].append(reason)
                centroid.add(day)
            else:
                trips.append([day])
                reasons.append([reason])
                centroid = _RunningCentroid.start(day)

        logger.info(f"Day→Trip grouping: {len(sorted_days)} days -> {len(trips)} trips before smoothing.")

        trips, reasons = apply_trip_merge_smoothing(trips, reasons, self.config)

        if self.config.debug_logging:
            for trip_idx, trip_reasons in enumerate(reasons):
                for day_idx, reason in enumerate(trip_reasons):
                    logger.debug(f"[TripClustering] trip={trip_idx} day={day_idx} reason={reason.value}")

        logger.info(f"Day→Trip grouping produced {len(trips)} trip(s).")
        return GroupingResult(trips=trips, reasons=reasons)

    def should_merge(
        self,
        candidate: DayCluster,
        trip_last_day: DayCluster,
        trip_centroid: Coordinate,
    ) -> Tuple[bool, MergeReason]:
        """Merge decision for `candidate` against the current trip. Rules run in fixed order."""
        cfg = self.config

        if trip_last_day.day_gap(candidate) > cfg.max_gap_days_to_bridge:
            return False, MergeReason.GAP_TOO_LARGE

        if distance_miles(trip_centroid, candidate.centroid) > cfg.trip_exclusion_radius_miles:
            return False, MergeReason.DISTANCE_TOO_FAR

        miles = distance_miles(trip_last_day.centroid, candidate.centroid)

        # near-field days merge regardless of country
        if miles <= cfg.neighborhood_radius_miles:
            return True, MergeReason.NEIGHBORHOOD_PASS

        if candidate.country_code != trip_last_day.country_code:
            return False, MergeReason.DIFFERENT_COUNTRY

        if miles > cfg.country_fallback_max_miles:
            return False, MergeReason.DISTANCE_TOO_FAR

        if candidate.max_distance_within_day_miles > cfg.multi_city_day_max_miles:
            return False, MergeReason.MULTI_CITY_FAIL

        return True, MergeReason.COUNTRY_FALLBACK_PASS


def _absorb_distance(single: DayCluster, neighbour: DayCluster, config: TripGroupingConfig) -> Optional[float]:
    """Distance to a neighbour day that may absorb `single`, or None when it may not."""
    if neighbour.country_code != single.country_code:
        return None
    earlier, later = (neighbour, single) if neighbour.day <= single.day else (single, neighbour)
    if earlier.day_gap(later) > config.max_gap_days_to_bridge:
        return None
    miles = distance_miles(earlier.centroid, later.centroid)
    if miles > config.country_fallback_max_miles:
        return None
    return miles


def apply_trip_merge_smoothing(
    trips: List[List[DayCluster]],
    reasons: List[List[MergeReason]],
    config: Optional[TripGroupingConfig] = None,
) -> Tuple[List[List[DayCluster]], List[List[MergeReason]]]:
    """
    Folds one-day trips into an adjacent trip until nothing changes.

    A neighbour qualifies when it shares the day's country, is within the
    bridgeable gap and within the country-fallback distance. The closer
    qualifying neighbour wins; ties go to the previous trip. Every merge
    removes a trip, so the loop ends. The multi-city flag is not checked
    here.
    """
    config = config or TripGroupingConfig()
    trips = [list(t) for t in trips]
    reasons = [list(r) for r in reasons]
    if len(trips) < 2:
        return trips, reasons

    changed = True
    while changed:
        changed = False
        for i in range(len(trips)):
            if len(trips[i]) != 1:
                continue
            single = trips[i][0]

            dist_prev = None
            if i > 0:
                dist_prev = _absorb_distance(single, trips[i - 1][-1], config)
            dist_next = None
            if i < len(trips) - 1:
                dist_next = _absorb_distance(single, trips[i + 1][0], config)

            if dist_prev is None and dist_next is None:
                continue

            if dist_next is None or (dist_prev is not None and dist_prev <= dist_next):
                logger.debug(f"Smoothing: {single.day} merged into previous trip ({dist_prev:.1f} mi).")
                trips[i - 1].append(single)
                reasons[i - 1].extend(reasons[i])
                del trips[i]
                del reasons[i]
            else:
                logger.debug(f"Smoothing: {single.day} merged into next trip ({dist_next:.1f} mi).")
                trips[i + 1] = [single] + trips[i + 1]
                reasons[i + 1] = reasons[i] + reasons[i + 1]
                del trips[i]
                del reasons[i]
            changed = True
            break

    return trips, reasons


def group_days_into_trips(
    days: Sequence[DayCluster],
    config: Optional[TripGroupingConfig] = None,
) -> GroupingResult:
    return TripGrouper(config).group(days)
