"""PostGIS-backed spatial store over the ``base_units`` table."""

from geoalchemy2.shape import from_shape
from loguru import logger
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry
from sqlalchemy import Select, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from area_profile.lib.spatial_store.base import BaseSpatialStore, SpatialStoreError
from area_profile.lib.spatial_store.types import NearestUnit, Overlap, clamp_ratio
from area_profile.models.base_unit import BaseUnit

SRID = 4326


def build_intersect_query(polygon: BaseGeometry) -> Select:
    """Build the overlap query for a polygon.

    Args:
        polygon: WGS84 query polygon.

    Returns:
        SELECT of unit_code, parent_code, overlap_ratio, overlap_area for
        intersecting units, largest ratio first.
    """
    query_geom = from_shape(polygon, srid=SRID)
    overlap_area = func.ST_Area(func.ST_Intersection(BaseUnit.geometry, query_geom))
    overlap_ratio = overlap_area / func.nullif(func.ST_Area(BaseUnit.geometry), 0)

    return (
        select(
            BaseUnit.unit_code,
            BaseUnit.parent_code,
            overlap_ratio.label("overlap_ratio"),
            overlap_area.label("overlap_area"),
        )
        .where(func.ST_Intersects(BaseUnit.geometry, query_geom))
        .order_by(desc("overlap_ratio"), BaseUnit.unit_code)
    )


def build_nearest_query(centroid: Point) -> Select:
    """Build the nearest-unit query for a point."""
    point_geom = from_shape(centroid, srid=SRID)
    distance = func.ST_Distance(BaseUnit.geometry, point_geom)

    return (
        select(BaseUnit.unit_code, BaseUnit.parent_code, distance.label("distance"))
        .order_by(distance, BaseUnit.unit_code)
        .limit(1)
    )


class PostGISSpatialStore(BaseSpatialStore):
    """Spatial store querying PostGIS through an async session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def store_name(self) -> str:
        return "postgis"

    async def intersect(self, polygon: BaseGeometry) -> list[Overlap]:
        try:
            result = await self._session.execute(build_intersect_query(polygon))
            rows = result.all()
        except SQLAlchemyError as e:
            logger.warning(f"PostGIS intersect query failed: {e}")
            raise SpatialStoreError(self.store_name, f"Intersect query failed: {e}") from e

        return [
            Overlap(
                unit_code=unit_code,
                parent_code=parent_code,
                overlap_ratio=clamp_ratio(ratio),
                overlap_area=max(0.0, float(area or 0.0)),
            )
            for unit_code, parent_code, ratio, area in rows
        ]

    async def nearest(self, centroid: Point) -> NearestUnit | None:
        try:
            result = await self._session.execute(build_nearest_query(centroid))
            row = result.first()
        except SQLAlchemyError as e:
            logger.warning(f"PostGIS nearest query failed: {e}")
            raise SpatialStoreError(self.store_name, f"Nearest query failed: {e}") from e

        if row is None:
            return None
        unit_code, parent_code, distance = row
        return NearestUnit(unit_code=unit_code, parent_code=parent_code, distance=float(distance))

    async def unit_parents(self) -> dict[str, str]:
        try:
            result = await self._session.execute(
                select(BaseUnit.unit_code, BaseUnit.parent_code).where(BaseUnit.parent_code.is_not(None))
            )
            return {unit_code: parent_code for unit_code, parent_code in result.all()}
        except SQLAlchemyError as e:
            raise SpatialStoreError(self.store_name, f"Parent table query failed: {e}") from e
