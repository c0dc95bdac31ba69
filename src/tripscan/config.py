from dataclasses import dataclass, field


@dataclass
class InclusionConfig:
    min_miles: float = 50.0


@dataclass
class DayGroupingConfig:
    midnight_bridge_hours: float = 2.0
    bridge_before_hour: int = 5


@dataclass
class PlaceStopConfig:
    group_start_window_sec: float = 5 * 60
    same_place_window_sec: float = 5 * 3600
    same_place_distance_m: float = 50.0
    walking_speed_mps: float = 1.34
    fudge_factor: float = 1.3
    snap_back_gap_sec: float = 5 * 60
    no_location_gap_sec: float = 30 * 60


@dataclass
class TripGroupingConfig:
    neighborhood_radius_miles: float = 50.0
    country_fallback_max_miles: float = 100.0
    max_gap_days_to_bridge: int = 2
    multi_city_day_max_miles: float = 100.0
    trip_exclusion_radius_miles: float = 100.0
    debug_logging: bool = False


@dataclass
class DuplicateMatchConfig:
    high_overlap_threshold: float = 0.80
    country_overlap_threshold: float = 0.30


@dataclass
class ScanConfig:
    inclusion: InclusionConfig = field(default_factory=InclusionConfig)
    day_grouping: DayGroupingConfig = field(default_factory=DayGroupingConfig)
    place_stop: PlaceStopConfig = field(default_factory=PlaceStopConfig)
    trip_grouping: TripGroupingConfig = field(default_factory=TripGroupingConfig)
    duplicate_match: DuplicateMatchConfig = field(default_factory=DuplicateMatchConfig)

    # Geocode cache key precision (~111m at 3 decimals)
    geocode_key_decimals: int = 3

