from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from tripscan.models.cluster import DayCluster
from tripscan.models.enum import MergeReason


@dataclass
class TripCandidate:
    id: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    country_name: Optional[str] = None


@dataclass
class SavedTrip:
    id: str
    source_trip_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    country_name: Optional[str] = None


@dataclass
class TripDraft:
    id: str
    title: str
    date_range_text: str
    days: List[DayCluster]
    reasons: List[MergeReason] = field(default_factory=list)
    country_name: Optional[str] = None
    cover_photo_id: Optional[str] = None

    @property
    def first_day(self) -> date:
        return self.days[0].day

    @property
    def last_day(self) -> date:
        return self.days[-1].day

    @property
    def photo_count(self) -> int:
        return sum(len(d.photos) for d in self.days)

    def to_candidate(self) -> TripCandidate:
        """Date span of the draft as midnight-to-midnight day starts, like saved trips carry."""
        return TripCandidate(
            id=self.id,
            start=datetime.combine(self.first_day, datetime.min.time()),
            end=datetime.combine(self.last_day, datetime.min.time()),
            country_name=self.country_name,
        )


@dataclass
class ScanResult:
    trips: List[TripDraft]
    total_fetched: int
    excluded_local_count: int
    remaining_for_trips_count: int
