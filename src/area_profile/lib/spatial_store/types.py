"""Records returned by spatial stores."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Overlap:
    """One base unit intersecting a query polygon.

    ``overlap_ratio`` is the share of the unit's own area covered by the
    polygon; ``overlap_area`` is the covered area in store units.
    """

    unit_code: str
    parent_code: str | None
    overlap_ratio: float
    overlap_area: float = 0.0

    def __post_init__(self) -> None:
        if not (0 <= self.overlap_ratio <= 1):
            msg = f"overlap_ratio must be between 0 and 1, got {self.overlap_ratio}"
            raise ValueError(msg)
        if self.overlap_area < 0:
            msg = f"overlap_area must be non-negative, got {self.overlap_area}"
            raise ValueError(msg)


@dataclass(frozen=True)
class NearestUnit:
    """Base unit closest to a point."""

    unit_code: str
    parent_code: str | None
    distance: float


def clamp_ratio(value: float | None) -> float:
    """Clamp a measured overlap ratio into [0, 1].

    Intersection areas measured in floating point can exceed the unit
    area by a rounding error.
    """
    if value is None:
        return 0.0
    return min(1.0, max(0.0, float(value)))
