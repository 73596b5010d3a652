"""Area resolver — turns a polygon into a set of statistical base units.

Queries the spatial store for intersecting units, keeps those covering
at least ``min_overlap_threshold`` of their own area, and picks the
majority parent by overlap weight. A polygon touching nothing resolves
to the nearest unit; a polygon too small for every candidate resolves
to the candidate it covers most. Resolution only fails when the store
itself fails.
"""

from collections.abc import Iterable

from loguru import logger
from shapely.geometry import MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry

from area_profile.lib.resolver.types import MatchResult
from area_profile.lib.spatial_store.base import BaseSpatialStore
from area_profile.lib.spatial_store.types import Overlap

DEFAULT_MIN_OVERLAP_THRESHOLD = 0.10


class ResolutionError(Exception):
    """Raised when the spatial store fails during resolution."""


ResolutionFailure = ResolutionError


def parse_polygon(geojson: dict) -> Polygon | MultiPolygon:
    """Parse a GeoJSON Polygon or MultiPolygon geometry.

    A Feature wrapper is accepted. Invalid rings are repaired with a
    zero-width buffer.

    Args:
        geojson: GeoJSON geometry or Feature dict.

    Returns:
        Shapely polygon or multipolygon.

    Raises:
        ValueError: If the geometry is missing, of the wrong type, or empty.
    """
    if not isinstance(geojson, dict):
        msg = "Polygon must be a GeoJSON object"
        raise ValueError(msg)

    geometry = geojson.get("geometry") if geojson.get("type") == "Feature" else geojson
    if not isinstance(geometry, dict):
        msg = "Feature has no geometry"
        raise ValueError(msg)

    geom_type = geometry.get("type")
    if geom_type not in ("Polygon", "MultiPolygon"):
        msg = f"Expected Polygon or MultiPolygon geometry, got {geom_type}"
        raise ValueError(msg)

    try:
        geom = shape(geometry)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        msg = f"Invalid {geom_type} coordinates: {e}"
        raise ValueError(msg) from e

    if not geom.is_valid:
        geom = geom.buffer(0)
    if geom.is_empty or not isinstance(geom, (Polygon, MultiPolygon)):
        msg = "Polygon is empty"
        raise ValueError(msg)
    return geom


def select_majority_parent(weighted: Iterable[tuple[str | None, float]]) -> tuple[str | None, int]:
    """Pick the parent with the greatest summed weight.

    Ties go to the lowest parent code. Units without a parent are ignored.

    Args:
        weighted: (parent_code, weight) pairs, one per unit.

    Returns:
        Tuple of (majority parent or None, number of distinct parents).
    """
    totals: dict[str, float] = {}
    for parent, weight in weighted:
        if parent is None:
            continue
        totals[parent] = totals.get(parent, 0.0) + weight

    if not totals:
        return None, 0

    majority = sorted(totals.items(), key=lambda item: (-item[1], item[0]))[0][0]
    return majority, len(totals)


def _ordered(candidates: list[Overlap]) -> list[Overlap]:
    return sorted(candidates, key=lambda o: (-o.overlap_ratio, o.unit_code))


async def resolve_area(
    store: BaseSpatialStore,
    polygon: BaseGeometry,
    *,
    min_overlap_threshold: float = DEFAULT_MIN_OVERLAP_THRESHOLD,
) -> MatchResult:
    """Resolve a polygon to base units.

    Args:
        store: Spatial store to query.
        polygon: WGS84 polygon or multipolygon.
        min_overlap_threshold: Minimum share of a unit's own area the
            polygon must cover for the unit to be selected.

    Returns:
        MatchResult with at least one unit.

    Raises:
        ResolutionError: If the store fails or holds no units at all.
    """
    try:
        candidates = await store.intersect(polygon)
    except Exception as e:
        logger.warning(f"Spatial store {store.store_name} failed on intersect: {e}")
        raise ResolutionError(f"Failed to find base units: {e}") from e

    if not candidates:
        return await _resolve_nearest(store, polygon)

    ordered = _ordered(candidates)
    warnings: list[str] = []

    selected = [o for o in ordered if o.overlap_ratio >= min_overlap_threshold]
    if not selected:
        closest = ordered[0]
        selected = [closest]
        warnings.append(f"area too small; used closest unit {closest.unit_code}")

    coverage = min(1.0, sum(o.overlap_ratio for o in selected))

    majority_parent, parent_count = select_majority_parent((o.parent_code, o.overlap_ratio) for o in selected)
    if parent_count > 1:
        warnings.append(f"area spans {parent_count} parent areas")

    logger.info(f"Resolved polygon to {len(selected)} base units (coverage {coverage * 100:.1f}%)")

    return MatchResult(
        units=tuple(o.unit_code for o in selected),
        coverage_percentage=coverage,
        majority_parent=majority_parent,
        warnings=tuple(warnings),
        overlaps=tuple(selected),
    )


async def _resolve_nearest(store: BaseSpatialStore, polygon: BaseGeometry) -> MatchResult:
    logger.info("No intersecting base units, falling back to nearest unit")
    try:
        nearest = await store.nearest(polygon.centroid)
    except Exception as e:
        logger.warning(f"Spatial store {store.store_name} failed on nearest: {e}")
        raise ResolutionError(f"Fallback to nearest unit failed: {e}") from e

    if nearest is None:
        msg = "No base units found in spatial store"
        raise ResolutionError(msg)

    return MatchResult(
        units=(nearest.unit_code,),
        coverage_percentage=0.0,
        majority_parent=nearest.parent_code,
        warnings=(f"no intersecting units; used nearest unit {nearest.unit_code}",),
        overlaps=(),
    )
