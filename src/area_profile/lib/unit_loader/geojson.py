"""GeoJSON reader — parses base unit layers and converts geometries to MultiPolygon."""

import json
from pathlib import Path

from loguru import logger
from shapely.geometry import MultiPolygon, Polygon, shape

from area_profile.lib.resolver.parents import DEFAULT_PARENT_CODE_LENGTH
from area_profile.lib.unit_loader.records import BaseUnitData, unit_from_properties


def read_geojson(file_path: Path, parent_code_length: int = DEFAULT_PARENT_CODE_LENGTH) -> list[BaseUnitData]:
    """Read a GeoJSON FeatureCollection of base units.

    Coordinates are expected in WGS84. Features without a unit code or
    polygon geometry are skipped.

    Args:
        file_path: Path to .geojson or .json file.
        parent_code_length: Code prefix length used when a feature has
            no explicit parent code.

    Returns:
        List of BaseUnitData objects.

    Raises:
        ValueError: If the file is not a FeatureCollection or has no features.
    """
    logger.info(f"Reading GeoJSON: {file_path}")

    with file_path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if data.get("type") != "FeatureCollection":
        msg = f"Expected FeatureCollection, got {data.get('type')}"
        raise ValueError(msg)

    features = data.get("features", [])
    if not features:
        msg = f"GeoJSON has no features: {file_path}"
        raise ValueError(msg)

    units: list[BaseUnitData] = []
    skipped = 0

    for i, feature in enumerate(features):
        geom_data = feature.get("geometry")
        if not geom_data:
            skipped += 1
            continue

        geom = shape(geom_data)
        if not geom.is_valid:
            logger.warning(f"Feature {i} has invalid geometry, attempting repair")
            geom = geom.buffer(0)

        if isinstance(geom, Polygon):
            geom = MultiPolygon([geom])
        elif not isinstance(geom, MultiPolygon):
            logger.warning(f"Skipping unsupported geometry type: {geom.geom_type}")
            skipped += 1
            continue

        unit = unit_from_properties(feature.get("properties") or {}, geom, parent_code_length)
        if unit is None:
            skipped += 1
            continue
        units.append(unit)

    if skipped:
        logger.warning(f"Skipped {skipped} features without a unit code or polygon geometry")
    logger.info(f"Parsed {len(units)} base units from GeoJSON")
    return units
