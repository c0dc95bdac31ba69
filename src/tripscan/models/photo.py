from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

UNKNOWN_PLACE = "Unknown Place"
UNKNOWN_COUNTRY = "Unknown"


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float


@dataclass(frozen=True)
class PlaceRecord:
    """Reverse geocoding result for one rounded coordinate."""

    title: str = UNKNOWN_PLACE
    area_name: str = UNKNOWN_PLACE
    city_name: str = UNKNOWN_PLACE
    country_name: str = UNKNOWN_COUNTRY
    country_code: str = ""
    best_label: str = UNKNOWN_PLACE

    @classmethod
    def unknown(cls) -> "PlaceRecord":
        return cls()

    @property
    def is_unknown(self) -> bool:
        return self.country_name == UNKNOWN_COUNTRY and not self.country_code


@dataclass(frozen=True)
class PhotoRecord:
    id: str
    timestamp: datetime  # local wall clock of capture
    lat: Optional[float] = None
    lon: Optional[float] = None
    country_name: Optional[str] = None
    country_code: Optional[str] = None
    city_name: Optional[str] = None
    area_name: Optional[str] = None
    place_label: Optional[str] = None
    pixel_width: Optional[int] = None
    pixel_height: Optional[int] = None

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.lat is None or self.lon is None:
            return None
        return Coordinate(self.lat, self.lon)

    @property
    def has_location(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def pixel_count(self) -> int:
        return (self.pixel_width or 0) * (self.pixel_height or 0)

    def with_place(self, place: Optional[PlaceRecord]) -> "PhotoRecord":
        """Copy of this record carrying the geocoder's labels.

        "Unknown" placeholders are dropped so the aggregator falls back the
        same way it does for photos that were never geocoded.
        """
        if place is None:
            return self
        return replace(
            self,
            country_name=_known(place.country_name, UNKNOWN_COUNTRY),
            country_code=place.country_code or None,
            city_name=_known(place.city_name, UNKNOWN_PLACE),
            area_name=_known(place.area_name, UNKNOWN_PLACE),
            place_label=_known(place.best_label, UNKNOWN_PLACE) or self.place_label,
        )


def _known(value: Optional[str], placeholder: str) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    if not value or value == placeholder:
        return None
    return value
