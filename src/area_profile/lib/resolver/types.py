"""Resolver result types."""

from dataclasses import asdict, dataclass, field

from area_profile.lib.spatial_store.types import Overlap


@dataclass(frozen=True)
class MatchResult:
    """Base units selected for a polygon.

    ``units`` is never empty for a successful resolution. ``overlaps``
    carries the selected units' overlap records, in ``units`` order.
    """

    units: tuple[str, ...]
    coverage_percentage: float
    majority_parent: str | None
    warnings: tuple[str, ...] = ()
    overlaps: tuple[Overlap, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.units:
            msg = "MatchResult requires at least one unit"
            raise ValueError(msg)
        if not (0 <= self.coverage_percentage <= 1):
            msg = f"coverage_percentage must be between 0 and 1, got {self.coverage_percentage}"
            raise ValueError(msg)

    @property
    def overlap_weights(self) -> dict[str, float]:
        """Unit code to overlap ratio for the selected units."""
        return {o.unit_code: o.overlap_ratio for o in self.overlaps}

    def to_dict(self) -> dict:
        data = asdict(self)
        data["units"] = list(self.units)
        data["warnings"] = list(self.warnings)
        data["overlaps"] = [asdict(o) for o in self.overlaps]
        return data
