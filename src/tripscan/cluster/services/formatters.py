import uuid
from collections import Counter
from datetime import date
from typing import List, Optional, Sequence

from tripscan.cluster.schema import (
    CoordinateSchema,
    DayClusterResponse,
    PlaceStopResponse,
    TripResponse,
)
from tripscan.cluster.services.photo_selection import select_best_photos
from tripscan.models.cluster import DayCluster, PlaceStop
from tripscan.models.enum import MergeReason
from tripscan.models.photo import UNKNOWN_COUNTRY
from tripscan.models.trip import TripDraft

TRIP_ID_NAMESPACE = uuid.UUID("6f1c2d3e-8a47-4b0e-9d65-3c1e2f4a5b70")


def _month_day(d: date) -> str:
    return f"{d:%b} {d.day}"


def date_range_text(first: date, last: date) -> str:
    """Formats e.g. "Dec 1, 2025", "Dec 1 – 5, 2025", "Nov 28 – Dec 3, 2025", "Dec 30, 2025 – Jan 2, 2026"."""
    if first == last:
        return f"{_month_day(first)}, {first.year}"
    if first.year == last.year and first.month == last.month:
        return f"{_month_day(first)} – {last.day}, {first.year}"
    if first.year == last.year:
        return f"{_month_day(first)} – {_month_day(last)}, {first.year}"
    return f"{_month_day(first)}, {first.year} – {_month_day(last)}, {last.year}"


def default_trip_title(days: Sequence[DayCluster]) -> str:
    """Title as "{TopCity}, {Country}", or "{TopCity} Area, {Country}" when the trip spans cities."""
    country = days[0].country_name if days and days[0].country_name else UNKNOWN_COUNTRY
    cities = [d.city_name for d in days if d.city_name]
    if not cities:
        return f"{country} Trip"

    top_city = Counter(cities).most_common(1)[0][0]
    if len(set(cities)) > 1:
        return f"{top_city} Area, {country}"
    return f"{top_city}, {country}"


def primary_country_name(days: Sequence[DayCluster]) -> Optional[str]:
    """Country named on the most photos of the trip, ignoring unknowns."""
    names = [
        p.country_name.strip()
        for d in days for p in d.photos
        if p.country_name and p.country_name.strip() and p.country_name.strip() != UNKNOWN_COUNTRY
    ]
    if not names:
        return None
    return Counter(names).most_common(1)[0][0]


def trip_id(days: Sequence[DayCluster]) -> str:
    """Stable id derived from member photo ids, so rescans match saved trips."""
    photo_ids = "|".join(p.id for d in days for p in d.photos)
    return str(uuid.uuid5(TRIP_ID_NAMESPACE, photo_ids))


def build_trip_draft(days: List[DayCluster], reasons: Optional[List[MergeReason]] = None) -> TripDraft:
    cover = next((p for d in days for p in d.photos), None)
    return TripDraft(
        id=trip_id(days),
        title=default_trip_title(days),
        date_range_text=date_range_text(days[0].day, days[-1].day),
        days=days,
        reasons=list(reasons or []),
        country_name=primary_country_name(days),
        cover_photo_id=cover.id if cover else None,
    )


def _to_day_response(day: DayCluster, reason: Optional[MergeReason]) -> DayClusterResponse:
    return DayClusterResponse(
        day=day.day,
        centroid=CoordinateSchema(lat=day.centroid.lat, lon=day.centroid.lon),
        country_code=day.country_code,
        country_name=day.country_name,
        city_name=day.city_name,
        max_distance_within_day_miles=day.max_distance_within_day_miles,
        photo_ids=[p.id for p in day.photos],
        reason=reason.value if reason else None,
    )


def format_trip_response(draft: TripDraft) -> TripResponse:
    reasons = list(draft.reasons) + [None] * (len(draft.days) - len(draft.reasons))
    return TripResponse(
        id=draft.id,
        title=draft.title,
        date_range_text=draft.date_range_text,
        country_name=draft.country_name,
        cover_photo_id=draft.cover_photo_id,
        photo_count=draft.photo_count,
        days=[_to_day_response(d, r) for d, r in zip(draft.days, reasons)],
    )


def format_place_stop_response(stop: PlaceStop, max_count: int = 3) -> PlaceStopResponse:
    rep = stop.representative
    return PlaceStopResponse(
        order_index=stop.order_index,
        representative=CoordinateSchema(lat=rep.lat, lon=rep.lon) if rep else None,
        label=stop.label,
        photo_ids=[p.id for p in stop.photos],
        selected_photo_ids=[p.id for p in select_best_photos(stop, max_count)],
        start=stop.start,
        end=stop.end,
    )
