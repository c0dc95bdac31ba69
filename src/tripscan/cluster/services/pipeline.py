import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from core.geocoding.base import Geocoder
from tripscan.cluster.clusters.base import Clusterer
from tripscan.cluster.clusters.place_stop import PlaceStopCluster
from tripscan.cluster.services.day_aggregator import build_day_clusters, group_photos_by_day
from tripscan.cluster.services.formatters import build_trip_draft
from tripscan.cluster.services.photo_filter import exclude_occupied_ranges, filter_trip_photos
from tripscan.cluster.services.photo_selection import select_best_photos
from tripscan.cluster.services.trip_grouper import TripGrouper
from tripscan.cluster.services.trip_matcher import is_already_saved
from tripscan.config import ScanConfig
from tripscan.models.cluster import PlaceStop
from tripscan.models.photo import Coordinate, PhotoRecord, PlaceRecord
from tripscan.models.trip import SavedTrip, ScanResult, TripDraft
from tripscan.utils.geo import round_coordinate_key
from tripscan.utils.performance import PerformanceMonitor

logger = logging.getLogger(__name__)


class TripScanPipeline:
    def __init__(self, config: Optional[ScanConfig] = None, geocoder: Optional[Geocoder] = None):
        self.config = config or ScanConfig()
        self.geocoder = geocoder
        self.grouper = TripGrouper(self.config.trip_grouping)
        self.place_stop_clusterer: Clusterer[PlaceStop] = PlaceStopCluster(self.config.place_stop)
        logger.debug(f"Pipeline initialized (geocoder={type(geocoder).__name__ if geocoder else None}).")

    async def run(
        self,
        photos: Sequence[PhotoRecord],
        home: Optional[Coordinate],
        saved_trips: Sequence[SavedTrip] = (),
        occupied_ranges: Sequence[Tuple[datetime, datetime]] = (),
    ) -> ScanResult:
        logger.info(f"Trip scan started for {len(photos)} photos.")
        monitor = PerformanceMonitor()
        monitor.start()

        candidates = exclude_occupied_ranges(photos, occupied_ranges)
        if len(candidates) != len(photos):
            logger.info(f"Skipped {len(photos) - len(candidates)} photos inside existing trips.")

        filtered = filter_trip_photos(candidates, home, self.config.inclusion.min_miles)
        included = await self.resolve_places(filtered.included)

        groups = group_photos_by_day(included, self.config.day_grouping)
        days = build_day_clusters(groups)
        grouping = self.grouper.group(days)

        drafts: List[TripDraft] = []
        for trip_days, reasons in zip(grouping.trips, grouping.reasons):
            draft = build_trip_draft(trip_days, reasons)
            if saved_trips and is_already_saved(draft.to_candidate(), saved_trips, self.config.duplicate_match):
                logger.info(f"Trip '{draft.title}' ({draft.date_range_text}) already saved; skipped.")
                continue
            drafts.append(draft)

        monitor.stop()
        monitor.report("trip_scan", count=len(photos))

        logger.info(f"Trip scan finished with {len(drafts)} trip(s).")
        return ScanResult(
            trips=drafts,
            total_fetched=len(candidates),
            excluded_local_count=filtered.excluded_local + filtered.missing_location,
            remaining_for_trips_count=len(filtered.included),
        )

    async def resolve_places(self, photos: Sequence[PhotoRecord]) -> List[PhotoRecord]:
        """
        Fills place labels for located photos that have none.

        Each rounded coordinate is looked up once, one request at a time, so
        the geocoder's rate limit holds. Photos that already carry a country
        keep their labels.
        """
        if self.geocoder is None:
            return list(photos)

        decimals = self.config.geocode_key_decimals
        places: Dict[str, PlaceRecord] = {}
        resolved: List[PhotoRecord] = []

        for photo in photos:
            coord = photo.coordinate
            if coord is None or photo.country_code or photo.country_name:
                resolved.append(photo)
                continue

            key = round_coordinate_key(coord, decimals)
            if key not in places:
                places[key] = await self.geocoder.reverse(coord)
            resolved.append(photo.with_place(places[key]))

        if places:
            logger.info(f"Resolved places for {len(places)} unique coordinates.")
        return resolved

    def place_stops_for_day(self, photos: Sequence[PhotoRecord]) -> List[PlaceStop]:
        stops = self.place_stop_clusterer.cluster(list(photos))
        logger.debug(f"{len(photos)} photos -> {len(stops)} place stops.")
        return stops

    def place_stops_for_trip(self, draft: TripDraft) -> List[List[PlaceStop]]:
        """Place stops per day of the trip, in day order."""
        return [self.place_stops_for_day(day.photos) for day in draft.days]

    def best_photos_for_trip(self, draft: TripDraft, max_count: int = 3) -> List[PhotoRecord]:
        """Best photos of every place stop of the trip, in stop order."""
        selected: List[PhotoRecord] = []
        for day_stops in self.place_stops_for_trip(draft):
            for stop in day_stops:
                selected.extend(select_best_photos(stop, max_count))
        logger.info(f"Selected {len(selected)} of {draft.photo_count} photos for trip '{draft.title}'.")
        return selected
