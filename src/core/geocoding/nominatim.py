import logging
from typing import Any, Dict, Optional

import httpx

from core.config import configs
from tripscan.models.photo import UNKNOWN_COUNTRY, UNKNOWN_PLACE, Coordinate, PlaceRecord

from .base import Geocoder
from .labels import best_place_label

logger = logging.getLogger(__name__)


def _first(address: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = address.get(key)
        if value:
            return value
    return None


def place_from_nominatim(payload: Dict[str, Any]) -> PlaceRecord:
    """Maps a Nominatim /reverse (jsonv2) payload to a PlaceRecord."""
    if not payload or "error" in payload:
        return PlaceRecord.unknown()

    address = payload.get("address") or {}
    name = payload.get("name") or None
    sub_locality = _first(address, "suburb", "neighbourhood", "quarter", "city_district")
    locality = _first(address, "city", "town", "village", "municipality", "hamlet")
    sub_admin = _first(address, "county")
    admin = _first(address, "state", "region")
    road = address.get("road")
    country = address.get("country")
    country_code = (address.get("country_code") or "").upper()

    return PlaceRecord(
        title=name or locality or admin or UNKNOWN_PLACE,
        area_name=sub_locality or name or road or locality or UNKNOWN_PLACE,
        city_name=locality or sub_admin or admin or name or UNKNOWN_PLACE,
        country_name=country or UNKNOWN_COUNTRY,
        country_code=country_code,
        best_label=best_place_label(name, sub_locality, locality, admin),
    )


class NominatimGeocoder(Geocoder):
    """Reverse geocoding against a Nominatim-compatible HTTP endpoint."""

    def __init__(
        self,
        base_url: str = None,
        user_agent: str = None,
        timeout: float = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or configs.NOMINATIM_URL).rstrip("/")
        self.timeout = timeout or configs.GEOCODE_TIMEOUT_SECONDS
        self.client = client or httpx.AsyncClient(
            headers={"User-Agent": user_agent or configs.GEOCODER_USER_AGENT},
            timeout=self.timeout,
        )
        logger.info(f"NominatimGeocoder initialized for {self.base_url}")

    async def reverse(self, coord: Coordinate) -> PlaceRecord:
        params = {
            "format": "jsonv2",
            "lat": coord.lat,
            "lon": coord.lon,
            "zoom": 14,
            "addressdetails": 1,
        }
        try:
            resp = await self.client.get(f"{self.base_url}/reverse", params=params)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Reverse geocode failed for ({coord.lat}, {coord.lon}): HTTP {e.response.status_code}")
            return PlaceRecord.unknown()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Reverse geocode failed for ({coord.lat}, {coord.lon}): {e}")
            return PlaceRecord.unknown()

        return place_from_nominatim(payload)

    async def aclose(self) -> None:
        await self.client.aclose()
