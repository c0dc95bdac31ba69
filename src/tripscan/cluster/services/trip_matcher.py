"""
Matching rules that keep already-saved trips from being offered again.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from tripscan.config import DuplicateMatchConfig
from tripscan.models.photo import UNKNOWN_COUNTRY
from tripscan.models.trip import SavedTrip, TripCandidate

logger = logging.getLogger(__name__)


def _countries_match(a: Optional[str], b: Optional[str]) -> bool:
    a = (a or "").strip()
    b = (b or "").strip()
    if not a or not b or a == UNKNOWN_COUNTRY or b == UNKNOWN_COUNTRY:
        return False
    return a.lower() == b.lower()


def date_overlap_seconds(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> float:
    latest_start = max(start1, start2)
    earliest_end = min(end1, end2)
    return max(0.0, (earliest_end - latest_start).total_seconds())


def _is_single_day_saved(candidate: TripCandidate, saved_trips: Sequence[SavedTrip]) -> bool:
    day = candidate.start
    for saved in saved_trips:
        if saved.start is None or saved.end is None:
            continue
        if saved.start <= day <= saved.end and _countries_match(candidate.country_name, saved.country_name):
            return True
        if day.date() == saved.start.date() and day.date() == saved.end.date():
            return True
    return False


def is_already_saved(
    candidate: TripCandidate,
    saved_trips: Sequence[SavedTrip],
    config: Optional[DuplicateMatchConfig] = None,
) -> bool:
    """
    Returns True if the candidate trip is considered already saved.

    Args:
        candidate: Freshly detected trip.
        saved_trips: Trips the user already turned into blogs.
        config: Overlap thresholds (80% alone, 30% with matching country).

    Returns:
        True on a stable id match, on the single-day rules for zero-length
        candidates, or when the overlap with a saved trip reaches a threshold.
    """
    config = config or DuplicateMatchConfig()

    if any(s.source_trip_id is not None and s.source_trip_id == candidate.id for s in saved_trips):
        return True

    if candidate.start is None or candidate.end is None:
        return False

    duration = (candidate.end - candidate.start).total_seconds()
    if duration <= 0:
        return _is_single_day_saved(candidate, saved_trips)

    for saved in saved_trips:
        if saved.start is None or saved.end is None:
            continue

        overlap = date_overlap_seconds(candidate.start, candidate.end, saved.start, saved.end)
        fraction = overlap / duration

        if fraction >= config.high_overlap_threshold:
            logger.debug(f"Trip {candidate.id} overlaps saved trip {saved.id} by {fraction:.0%}.")
            return True

        if fraction >= config.country_overlap_threshold and _countries_match(candidate.country_name, saved.country_name):
            logger.debug(f"Trip {candidate.id} overlaps saved trip {saved.id} by {fraction:.0%} in the same country.")
            return True

    return False


def filter_saved(
    candidates: Sequence[TripCandidate],
    saved_trips: Sequence[SavedTrip],
    config: Optional[DuplicateMatchConfig] = None,
) -> List[TripCandidate]:
    kept = [c for c in candidates if not is_already_saved(c, saved_trips, config)]
    if len(kept) != len(candidates):
        logger.info(f"Filtered {len(candidates) - len(kept)} already-saved trip(s).")
    return kept
