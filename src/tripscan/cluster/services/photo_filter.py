"""
Single source of truth for whether a photo belongs in any trip.

Photos without a coordinate never qualify. Photos strictly closer than
`min_miles` to home are local and excluded; exactly `min_miles` is included.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from tripscan.models.photo import Coordinate, PhotoRecord
from tripscan.utils.geo import distance_miles

logger = logging.getLogger(__name__)


@dataclass
class FilterResult:
    included: List[PhotoRecord] = field(default_factory=list)
    total: int = 0
    missing_location: int = 0
    excluded_local: int = 0


def should_include(photo_coordinate: Optional[Coordinate], home: Coordinate, min_miles: float = 50.0) -> bool:
    if photo_coordinate is None:
        return False
    return distance_miles(home, photo_coordinate) >= min_miles


def is_valid_coordinate(lat: float, lon: float) -> bool:
    """Catches swapped lat/lon before they reach the filter."""
    return -90 <= lat <= 90 and -180 <= lon <= 180


def filter_trip_photos(
    photos: Sequence[PhotoRecord],
    home: Optional[Coordinate],
    min_miles: float = 50.0,
    sample_size: int = 30,
) -> FilterResult:
    result = FilterResult(total=len(photos))

    if home is None:
        if photos:
            logger.info("Neighborhood center not set; no photo qualifies for trips.")
        result.missing_location = sum(1 for p in photos if not p.has_location)
        return result

    for idx, photo in enumerate(photos):
        coord = photo.coordinate
        if coord is None:
            result.missing_location += 1
            reason = "excluded_no_location"
        elif not is_valid_coordinate(coord.lat, coord.lon):
            logger.warning(f"Photo {photo.id} has out-of-range coordinate ({coord.lat}, {coord.lon}); skipped.")
            result.missing_location += 1
            reason = "excluded_invalid_coordinate"
        elif should_include(coord, home, min_miles):
            result.included.append(photo)
            reason = "included"
        else:
            result.excluded_local += 1
            reason = "excluded"

        if idx < sample_size and logger.isEnabledFor(logging.DEBUG):
            miles = f"{distance_miles(home, coord):.2f}" if coord is not None else "nil"
            logger.debug(f"[TripFilter] id={photo.id} distanceMiles={miles} {reason}")

    logger.info(
        f"[TripFilter] total={result.total} missingLocation={result.missing_location} "
        f"excludedWithin{min_miles:g}mi={result.excluded_local} included={len(result.included)}"
    )
    return result


def exclude_occupied_ranges(
    photos: Iterable[PhotoRecord],
    occupied_ranges: Sequence[Tuple[datetime, datetime]],
) -> List[PhotoRecord]:
    """Drops photos captured inside any (start, end) range, both ends inclusive."""
    photos = list(photos)
    if not occupied_ranges:
        return photos
    return [
        p for p in photos
        if not any(start <= p.timestamp <= end for start, end in occupied_ranges)
    ]
