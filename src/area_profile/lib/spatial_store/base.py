"""Abstract spatial store interface."""

from abc import ABC, abstractmethod

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from area_profile.lib.spatial_store.types import NearestUnit, Overlap


class SpatialStoreError(Exception):
    """Raised when the spatial store cannot answer a query.

    Args:
        store_name: Name of the failing store.
        message: Human-readable error description.
    """

    def __init__(self, store_name: str, message: str) -> None:
        self.store_name = store_name
        self.message = message
        super().__init__(f"{store_name}: {message}")


class BaseSpatialStore(ABC):
    """Base unit geometry store. All stores must implement this."""

    @property
    @abstractmethod
    def store_name(self) -> str:
        """Unique name identifying this store."""

    @abstractmethod
    async def intersect(self, polygon: BaseGeometry) -> list[Overlap]:
        """Return every base unit whose boundary intersects ``polygon``.

        Args:
            polygon: WGS84 polygon or multipolygon.

        Returns:
            Overlap records in no guaranteed order.

        Raises:
            SpatialStoreError: If the store fails.
        """

    @abstractmethod
    async def nearest(self, centroid: Point) -> NearestUnit | None:
        """Return the base unit nearest to ``centroid``, or None if the store is empty.

        Raises:
            SpatialStoreError: If the store fails.
        """

    @abstractmethod
    async def unit_parents(self) -> dict[str, str]:
        """Return the unit code to parent code table for every stored unit."""
