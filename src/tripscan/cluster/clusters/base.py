from abc import ABC, abstractmethod
from typing import Generic, List, TypeVar

from tripscan.models.photo import PhotoRecord

T = TypeVar("T")


class Clusterer(ABC, Generic[T]):
    """Abstract base class for a clustering strategy over one batch of photos."""

    @abstractmethod
    def cluster(self, photos: List[PhotoRecord]) -> List[T]:
        """
        Applies a clustering strategy to a list of photos.

        Args:
            photos: A list of PhotoRecord objects to cluster.

        Returns:
            A list of clusters, in the order the strategy produces them.
        """
        raise NotImplementedError()
