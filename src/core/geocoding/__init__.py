from .base import Geocoder
from .cached import CachedGeocoder, RateLimiter
from .nominatim import NominatimGeocoder
from .static import StaticGeocoder
from .factory import get_geocoder

__all__ = ["Geocoder", "CachedGeocoder", "RateLimiter", "NominatimGeocoder", "StaticGeocoder", "get_geocoder"]
