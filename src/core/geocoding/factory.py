import logging
from functools import lru_cache

from core.config import configs

from .base import Geocoder
from .cached import CachedGeocoder, RateLimiter
from .nominatim import NominatimGeocoder
from .static import StaticGeocoder

logger = logging.getLogger(__name__)


class GeocoderFactory:
    @staticmethod
    def get_geocoder_service(service_type: str = "nominatim") -> Geocoder:
        logger.info(f"Creating geocoder of type: {service_type}")
        if service_type == "nominatim":
            inner = NominatimGeocoder()
        elif service_type == "static":
            inner = StaticGeocoder(decimals=configs.GEOCODE_KEY_DECIMALS)
        else:
            raise ValueError(f"Unknown geocoder type: {service_type}")

        limiter = RateLimiter(
            limit=configs.GEOCODE_RATE_LIMIT_PER_MINUTE,
            window_sec=60.0,
            max_wait_sec=configs.GEOCODE_MAX_WAIT_SECONDS,
        )
        return CachedGeocoder(inner, rate_limiter=limiter, decimals=configs.GEOCODE_KEY_DECIMALS)


@lru_cache()
def get_geocoder() -> Geocoder:
    geocoder_type = getattr(configs, "GEOCODER_TYPE", "nominatim")
    logger.debug(f"Getting geocoder (cached). Type: {geocoder_type}")
    return GeocoderFactory.get_geocoder_service(geocoder_type)
