from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from tripscan.models.enum import MergeReason
from tripscan.models.photo import Coordinate, PhotoRecord


@dataclass
class DayCluster:
    """One calendar day of trip-qualifying photos, summarised for Day→Trip grouping."""

    day: date
    centroid: Coordinate
    country_code: str
    country_name: str
    city_name: str
    city_centroids: List[Coordinate] = field(default_factory=list)
    max_distance_within_day_miles: float = 0.0
    photos: List[PhotoRecord] = field(default_factory=list)

    def day_gap(self, other: "DayCluster") -> int:
        """Calendar days from this day to `other`. 1 = next day, 2 = one day in between."""
        return max(0, (other.day - self.day).days)


@dataclass
class PlaceStop:
    order_index: int
    representative: Optional[Coordinate]
    photos: List[PhotoRecord] = field(default_factory=list)

    @property
    def start(self):
        return self.photos[0].timestamp if self.photos else None

    @property
    def end(self):
        return self.photos[-1].timestamp if self.photos else None

    @property
    def label(self) -> Optional[str]:
        """Most common place label among the stop's photos; first seen wins ties."""
        labels = [p.place_label for p in self.photos if p.place_label]
        if not labels:
            return None
        return Counter(labels).most_common(1)[0][0]


@dataclass
class GroupingResult:
    trips: List[List[DayCluster]]
    # reasons[i][j] -> decision that placed day j of trip i
    reasons: List[List[MergeReason]]
