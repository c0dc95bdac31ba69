from abc import ABC, abstractmethod

from tripscan.models.photo import Coordinate, PlaceRecord


class Geocoder(ABC):
    """Abstract base class for reverse geocoding services."""

    @abstractmethod
    async def reverse(self, coord: Coordinate) -> PlaceRecord:
        """
        Resolve a coordinate to place labels.

        Args:
            coord: The coordinate to resolve.

        Returns:
            The resolved place. Implementations never raise for lookup
            failures; they return PlaceRecord.unknown() instead.
        """
        pass

    async def aclose(self) -> None:
        """Release any underlying client."""
        return None
