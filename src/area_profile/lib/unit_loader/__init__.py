"""Base unit loader library — reads unit boundary layers.

Public API:
    - load_units: Auto-detect format and parse a unit layer
    - load_store: Build an InMemorySpatialStore from a unit layer
    - BaseUnitData: Parsed base unit
    - read_geojson / read_layer: Direct readers
"""

from pathlib import Path

from area_profile.lib.resolver.parents import DEFAULT_PARENT_CODE_LENGTH
from area_profile.lib.spatial_store.memory import InMemorySpatialStore, StoredUnit
from area_profile.lib.unit_loader.geojson import read_geojson
from area_profile.lib.unit_loader.records import BaseUnitData, unit_from_properties
from area_profile.lib.unit_loader.shapefile import read_layer


def load_units(file_path: Path, parent_code_length: int = DEFAULT_PARENT_CODE_LENGTH) -> list[BaseUnitData]:
    """Load base units from a file with automatic format detection.

    Supports .shp, .gpkg, .geojson and .json.

    Raises:
        ValueError: If the file format is not supported.
    """
    suffix = file_path.suffix.lower()

    if suffix in (".shp", ".gpkg"):
        return read_layer(file_path, parent_code_length)
    if suffix in (".geojson", ".json"):
        return read_geojson(file_path, parent_code_length)

    msg = f"Unsupported unit file format: {suffix}. Supported: .shp, .gpkg, .geojson, .json"
    raise ValueError(msg)


def load_store(file_path: Path, parent_code_length: int = DEFAULT_PARENT_CODE_LENGTH) -> InMemorySpatialStore:
    """Load a unit layer into an in-memory spatial store."""
    units = load_units(file_path, parent_code_length)
    return InMemorySpatialStore([StoredUnit(u.unit_code, u.parent_code, u.geometry) for u in units])


__all__ = [
    "BaseUnitData",
    "load_store",
    "load_units",
    "read_geojson",
    "read_layer",
    "unit_from_properties",
]
