"""In-memory spatial store backed by shapely geometries.

Serves the same queries as the PostGIS store from a unit layer loaded
into memory (GeoJSON, shapefile or GeoPackage). Areas are computed in
the layer's coordinate units, which cancels out in the overlap ratio.
"""

from dataclasses import dataclass

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from shapely.strtree import STRtree

from area_profile.lib.spatial_store.base import BaseSpatialStore
from area_profile.lib.spatial_store.types import NearestUnit, Overlap, clamp_ratio


@dataclass(frozen=True)
class StoredUnit:
    """A base unit geometry held by the in-memory store."""

    unit_code: str
    parent_code: str | None
    geometry: BaseGeometry


class InMemorySpatialStore(BaseSpatialStore):
    """Spatial store over a fixed list of unit geometries."""

    def __init__(self, units: list[StoredUnit]) -> None:
        self._units = [u for u in units if u.geometry is not None and not u.geometry.is_empty]
        self._tree = STRtree([u.geometry for u in self._units])

    @property
    def store_name(self) -> str:
        return "memory"

    def __len__(self) -> int:
        return len(self._units)

    async def intersect(self, polygon: BaseGeometry) -> list[Overlap]:
        overlaps: list[Overlap] = []
        for index in self._tree.query(polygon, predicate="intersects"):
            unit = self._units[int(index)]
            unit_area = unit.geometry.area
            if unit_area <= 0:
                continue
            overlap_area = unit.geometry.intersection(polygon).area
            overlaps.append(
                Overlap(
                    unit_code=unit.unit_code,
                    parent_code=unit.parent_code,
                    overlap_ratio=clamp_ratio(overlap_area / unit_area),
                    overlap_area=overlap_area,
                )
            )
        return overlaps

    async def nearest(self, centroid: Point) -> NearestUnit | None:
        if not self._units:
            return None
        best = min(self._units, key=lambda u: (u.geometry.distance(centroid), u.unit_code))
        return NearestUnit(
            unit_code=best.unit_code,
            parent_code=best.parent_code,
            distance=best.geometry.distance(centroid),
        )

    async def unit_parents(self) -> dict[str, str]:
        return {u.unit_code: u.parent_code for u in self._units if u.parent_code is not None}
