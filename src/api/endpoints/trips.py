import logging

from fastapi import APIRouter, Depends

from core.config import configs
from core.dependencies import get_request_geocoder
from core.geocoding.base import Geocoder
from tripscan.cluster.schema import (
    IsSavedRequest,
    IsSavedResponse,
    PlaceStopRequest,
    PlaceStopsResponse,
    ScanRequest,
    ScanResponse,
)
from tripscan.cluster.services.formatters import format_place_stop_response, format_trip_response
from tripscan.cluster.services.pipeline import TripScanPipeline
from tripscan.cluster.services.trip_matcher import is_already_saved
from tripscan.config import ScanConfig

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/scan", response_model=ScanResponse)
async def scan_trips(req: ScanRequest, geocoder: Geocoder = Depends(get_request_geocoder)):
    """
    Detects trips in a batch of photos and drops the ones already saved.
    """
    logger.info(f"📥 Scan request: {len(req.photos)} photos, {len(req.saved_trips)} saved trips.")

    config = req.config.to_scan_config(configs.GEOCODE_KEY_DECIMALS)
    config.trip_grouping.debug_logging = config.trip_grouping.debug_logging or configs.TRIP_CLUSTERING_DEBUG

    pipeline = TripScanPipeline(config, geocoder if req.resolve_places else None)
    result = await pipeline.run(
        photos=[p.to_model() for p in req.photos],
        home=req.home.to_model() if req.home else None,
        saved_trips=[s.to_model() for s in req.saved_trips],
        occupied_ranges=[(r.start, r.end) for r in req.occupied_ranges],
    )

    return ScanResponse(
        trips=[format_trip_response(t) for t in result.trips],
        total_fetched=result.total_fetched,
        excluded_local_count=result.excluded_local_count,
        remaining_for_trips_count=result.remaining_for_trips_count,
    )


@router.post("/place-stops", response_model=PlaceStopsResponse)
async def place_stops(req: PlaceStopRequest, geocoder: Geocoder = Depends(get_request_geocoder)):
    """
    Splits one day of photos into place stops and picks the best photos of each.
    """
    config = ScanConfig(geocode_key_decimals=configs.GEOCODE_KEY_DECIMALS)
    pipeline = TripScanPipeline(config, geocoder if req.resolve_places else None)

    photos = await pipeline.resolve_places([p.to_model() for p in req.photos])
    stops = pipeline.place_stops_for_day(photos)
    return PlaceStopsResponse(
        stops=[format_place_stop_response(s) for s in stops],
        total_photos=len(req.photos),
        total_stops=len(stops),
    )


@router.post("/is-saved", response_model=IsSavedResponse)
async def check_saved(req: IsSavedRequest):
    candidate = req.candidate.to_model()
    saved = is_already_saved(candidate, [s.to_model() for s in req.saved_trips])
    return IsSavedResponse(candidate_id=candidate.id, is_saved=saved)
