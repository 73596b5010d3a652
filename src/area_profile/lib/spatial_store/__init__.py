"""Spatial store library — base unit intersection and nearest-unit queries.

Public API:
    - BaseSpatialStore: Abstract store interface
    - PostGISSpatialStore: Production store over the base_units table
    - InMemorySpatialStore / StoredUnit: Shapely-backed store for files and tests
    - Overlap / NearestUnit: Query result records
    - SpatialStoreError: Store failure
"""

from area_profile.lib.spatial_store.base import BaseSpatialStore, SpatialStoreError
from area_profile.lib.spatial_store.memory import InMemorySpatialStore, StoredUnit
from area_profile.lib.spatial_store.postgis import PostGISSpatialStore
from area_profile.lib.spatial_store.types import NearestUnit, Overlap, clamp_ratio

__all__ = [
    "BaseSpatialStore",
    "InMemorySpatialStore",
    "NearestUnit",
    "Overlap",
    "PostGISSpatialStore",
    "SpatialStoreError",
    "StoredUnit",
    "clamp_ratio",
]
