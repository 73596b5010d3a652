"""Area resolver library — polygon to base units.

Public API:
    - resolve_area: Resolve a polygon to a MatchResult
    - select_majority_parent: Overlap-weighted parent selection
    - parse_polygon: Validate GeoJSON polygon input
    - ParentLookup: Load-once unit to parent table
    - MatchResult: Resolution outcome
    - ResolutionError / ResolutionFailure: Store failure during resolution
"""

from area_profile.lib.resolver.parents import DEFAULT_PARENT_CODE_LENGTH, ParentLookup
from area_profile.lib.resolver.resolver import (
    DEFAULT_MIN_OVERLAP_THRESHOLD,
    ResolutionError,
    ResolutionFailure,
    parse_polygon,
    resolve_area,
    select_majority_parent,
)
from area_profile.lib.resolver.types import MatchResult

__all__ = [
    "DEFAULT_MIN_OVERLAP_THRESHOLD",
    "DEFAULT_PARENT_CODE_LENGTH",
    "MatchResult",
    "ParentLookup",
    "ResolutionError",
    "ResolutionFailure",
    "parse_polygon",
    "resolve_area",
    "select_majority_parent",
]
