from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tripscan.config import (
    DayGroupingConfig,
    DuplicateMatchConfig,
    InclusionConfig,
    PlaceStopConfig,
    ScanConfig,
    TripGroupingConfig,
)
from tripscan.models.photo import Coordinate, PhotoRecord
from tripscan.models.trip import SavedTrip, TripCandidate


def _wall_clock(value: Optional[datetime]) -> Optional[datetime]:
    """Drops the offset of an aware datetime, keeping its own local clock time."""
    if value is not None and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


class CoordinateSchema(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0, description="Latitude")
    lon: float = Field(ge=-180.0, le=180.0, description="Longitude")

    def to_model(self) -> Coordinate:
        return Coordinate(self.lat, self.lon)


class PhotoInput(BaseModel):
    id: str = Field(description="Stable photo identifier")
    timestamp: datetime = Field(description="Local capture time")
    lat: Optional[float] = Field(None, ge=-90.0, le=90.0)
    lon: Optional[float] = Field(None, ge=-180.0, le=180.0)
    country_name: Optional[str] = None
    country_code: Optional[str] = None
    city_name: Optional[str] = None
    area_name: Optional[str] = None
    place_label: Optional[str] = None
    pixel_width: Optional[int] = Field(None, ge=0)
    pixel_height: Optional[int] = Field(None, ge=0)

    @field_validator("timestamp")
    @classmethod
    def local_timestamp(cls, v):
        return _wall_clock(v)

    def to_model(self) -> PhotoRecord:
        return PhotoRecord(
            id=self.id,
            timestamp=self.timestamp,
            lat=self.lat,
            lon=self.lon,
            country_name=self.country_name,
            country_code=self.country_code,
            city_name=self.city_name,
            area_name=self.area_name,
            place_label=self.place_label,
            pixel_width=self.pixel_width,
            pixel_height=self.pixel_height,
        )


class ScanConfigOverrides(BaseModel):
    min_miles: Optional[float] = Field(None, ge=0.0)
    neighborhood_radius_miles: Optional[float] = Field(None, ge=0.0)
    country_fallback_max_miles: Optional[float] = Field(None, ge=0.0)
    max_gap_days_to_bridge: Optional[int] = Field(None, ge=0)
    multi_city_day_max_miles: Optional[float] = Field(None, ge=0.0)
    trip_exclusion_radius_miles: Optional[float] = Field(None, ge=0.0)
    midnight_bridge_hours: Optional[float] = Field(None, ge=0.0)
    high_overlap_threshold: Optional[float] = Field(None, ge=0.0, le=1.0)
    country_overlap_threshold: Optional[float] = Field(None, ge=0.0, le=1.0)
    debug_logging: bool = False

    def to_scan_config(self, geocode_key_decimals: int = 3) -> ScanConfig:
        def pick(value, default):
            return default if value is None else value

        inclusion = InclusionConfig()
        trip = TripGroupingConfig()
        day = DayGroupingConfig()
        dup = DuplicateMatchConfig()
        return ScanConfig(
            inclusion=InclusionConfig(min_miles=pick(self.min_miles, inclusion.min_miles)),
            day_grouping=DayGroupingConfig(
                midnight_bridge_hours=pick(self.midnight_bridge_hours, day.midnight_bridge_hours),
                bridge_before_hour=day.bridge_before_hour,
            ),
            place_stop=PlaceStopConfig(),
            trip_grouping=TripGroupingConfig(
                neighborhood_radius_miles=pick(self.neighborhood_radius_miles, trip.neighborhood_radius_miles),
                country_fallback_max_miles=pick(self.country_fallback_max_miles, trip.country_fallback_max_miles),
                max_gap_days_to_bridge=pick(self.max_gap_days_to_bridge, trip.max_gap_days_to_bridge),
                multi_city_day_max_miles=pick(self.multi_city_day_max_miles, trip.multi_city_day_max_miles),
                trip_exclusion_radius_miles=pick(self.trip_exclusion_radius_miles, trip.trip_exclusion_radius_miles),
                debug_logging=self.debug_logging,
            ),
            duplicate_match=DuplicateMatchConfig(
                high_overlap_threshold=pick(self.high_overlap_threshold, dup.high_overlap_threshold),
                country_overlap_threshold=pick(self.country_overlap_threshold, dup.country_overlap_threshold),
            ),
            geocode_key_decimals=geocode_key_decimals,
        )


class DateRangeSchema(BaseModel):
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def local_bounds(cls, v):
        return _wall_clock(v)

    @model_validator(mode="after")
    def check_order(self):
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class SavedTripSchema(BaseModel):
    id: str
    source_trip_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    country_name: Optional[str] = None

    @field_validator("start", "end")
    @classmethod
    def local_bounds(cls, v):
        return _wall_clock(v)

    def to_model(self) -> SavedTrip:
        return SavedTrip(
            id=self.id,
            source_trip_id=self.source_trip_id,
            start=self.start,
            end=self.end,
            country_name=self.country_name,
        )


class TripCandidateSchema(BaseModel):
    id: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    country_name: Optional[str] = None

    @field_validator("start", "end")
    @classmethod
    def local_bounds(cls, v):
        return _wall_clock(v)

    def to_model(self) -> TripCandidate:
        return TripCandidate(id=self.id, start=self.start, end=self.end, country_name=self.country_name)


class ScanRequest(BaseModel):
    photos: List[PhotoInput] = Field(default_factory=list)
    home: Optional[CoordinateSchema] = Field(None, description="Neighborhood center; no trips without it")
    saved_trips: List[SavedTripSchema] = Field(default_factory=list)
    occupied_ranges: List[DateRangeSchema] = Field(default_factory=list)
    config: ScanConfigOverrides = Field(default_factory=ScanConfigOverrides)
    resolve_places: bool = Field(True, description="Reverse geocode photos without labels")


class DayClusterResponse(BaseModel):
    day: date
    centroid: CoordinateSchema
    country_code: str
    country_name: str
    city_name: str
    max_distance_within_day_miles: float
    photo_ids: List[str]
    reason: Optional[str] = None


class TripResponse(BaseModel):
    id: str
    title: str
    date_range_text: str
    country_name: Optional[str] = None
    cover_photo_id: Optional[str] = None
    photo_count: int
    days: List[DayClusterResponse]


class ScanResponse(BaseModel):
    trips: List[TripResponse]
    total_fetched: int
    excluded_local_count: int
    remaining_for_trips_count: int


class PlaceStopRequest(BaseModel):
    photos: List[PhotoInput] = Field(default_factory=list)
    resolve_places: bool = Field(True, description="Reverse geocode photos without labels")


class PlaceStopResponse(BaseModel):
    order_index: int
    representative: Optional[CoordinateSchema] = None
    label: Optional[str] = None
    photo_ids: List[str]
    selected_photo_ids: List[str] = Field(default_factory=list, description="Best photos of the stop, best first")
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class PlaceStopsResponse(BaseModel):
    stops: List[PlaceStopResponse]
    total_photos: int
    total_stops: int


class IsSavedRequest(BaseModel):
    candidate: TripCandidateSchema
    saved_trips: List[SavedTripSchema] = Field(default_factory=list)


class IsSavedResponse(BaseModel):
    candidate_id: str
    is_saved: bool
