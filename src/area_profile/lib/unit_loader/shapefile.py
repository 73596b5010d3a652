"""Shapefile and GeoPackage reader using GeoPandas with pyogrio engine.

Reads the layer, transforms CRS to EPSG:4326 (base unit layers are
commonly published in SWEREF99 TM) and converts geometries to
MultiPolygon for consistent storage.
"""

import math
from pathlib import Path

import geopandas as gpd
import numpy as np
from loguru import logger
from shapely.geometry import MultiPolygon, Polygon

from area_profile.lib.resolver.parents import DEFAULT_PARENT_CODE_LENGTH
from area_profile.lib.unit_loader.records import BaseUnitData, unit_from_properties

# Maximum file size for layer input (500 MB uncompressed)
MAX_LAYER_SIZE_BYTES = 500 * 1024 * 1024


def read_layer(file_path: Path, parent_code_length: int = DEFAULT_PARENT_CODE_LENGTH) -> list[BaseUnitData]:
    """Read a shapefile or GeoPackage of base units.

    Args:
        file_path: Path to .shp or .gpkg file.
        parent_code_length: Code prefix length used when a row has no
            explicit parent code.

    Returns:
        List of BaseUnitData objects.

    Raises:
        ValueError: If the file is too large or empty.
    """
    logger.info(f"Reading layer: {file_path}")

    if file_path.is_file() and file_path.stat().st_size > MAX_LAYER_SIZE_BYTES:
        msg = f"Layer exceeds maximum size of {MAX_LAYER_SIZE_BYTES // (1024 * 1024)} MB: {file_path}"
        raise ValueError(msg)

    gdf = gpd.read_file(file_path, engine="pyogrio")

    if gdf.empty:
        msg = f"Layer is empty: {file_path}"
        raise ValueError(msg)

    if gdf.crs and gdf.crs.to_epsg() != 4326:
        logger.debug(f"Transforming CRS from {gdf.crs} to EPSG:4326")
        gdf = gdf.to_crs(epsg=4326)

    units: list[BaseUnitData] = []

    for _, row in gdf.iterrows():
        geom = row.geometry
        if geom is None or not hasattr(geom, "geom_type"):
            continue

        if isinstance(geom, Polygon):
            geom = MultiPolygon([geom])
        elif not isinstance(geom, MultiPolygon):
            logger.warning(f"Skipping unsupported geometry type: {geom.geom_type}")
            continue

        props = {col: _serialize_value(row[col]) for col in gdf.columns if col != "geometry" and row[col] is not None}
        unit = unit_from_properties(props, geom, parent_code_length)
        if unit is not None:
            units.append(unit)

    logger.info(f"Parsed {len(units)} base units from layer")
    return units


def _serialize_value(val: object) -> object:
    """Serialize a GeoDataFrame value to a JSON-safe type; NaN and Inf become None."""
    if isinstance(val, float) and (math.isnan(val) or math.isinf(val)):
        return None
    if isinstance(val, np.integer):
        return int(val)
    if isinstance(val, np.floating):
        v = float(val)
        return None if math.isnan(v) or math.isinf(v) else v
    if isinstance(val, np.ndarray):
        return val.tolist()
    return val
