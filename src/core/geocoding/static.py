import logging
from typing import Dict, Optional

from tripscan.models.photo import Coordinate, PlaceRecord
from tripscan.utils.geo import round_coordinate_key

from .base import Geocoder

logger = logging.getLogger(__name__)


class StaticGeocoder(Geocoder):
    """Dictionary-backed geocoder keyed by rounded coordinate. Used offline and in tests."""

    def __init__(self, places: Optional[Dict[str, PlaceRecord]] = None, decimals: int = 3):
        self.places = dict(places or {})
        self.decimals = decimals
        logger.debug(f"StaticGeocoder initialized with {len(self.places)} places")

    def add(self, coord: Coordinate, place: PlaceRecord) -> None:
        self.places[round_coordinate_key(coord, self.decimals)] = place

    async def reverse(self, coord: Coordinate) -> PlaceRecord:
        return self.places.get(round_coordinate_key(coord, self.decimals), PlaceRecord.unknown())
