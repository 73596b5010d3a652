"""Metric kind classification for family fields.

Every numeric field of a metric family is tagged with the rule used to
combine it across base units. The tag lives in the pydantic field's
``json_schema_extra`` so the aggregation engine reads the contract from
the model declaration instead of guessing from field names or types.
"""

import enum
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

# Weight key meaning "the unit's population.total"
POPULATION_WEIGHT = "population"

PERCENT = 100.0


class MetricKind(enum.StrEnum):
    """How a family field is combined across base units."""

    COUNT = "count"
    WEIGHTED_MEAN = "weighted_mean"
    UNWEIGHTED_MEAN = "unweighted_mean"
    RATIO = "ratio"
    DISTRIBUTION = "distribution"
    TIME_SERIES = "time_series"
    METADATA = "metadata"


@dataclass(frozen=True)
class FieldSpec:
    """Combination contract for one family field."""

    name: str
    kind: MetricKind
    weight: str = POPULATION_WEIGHT
    numerator: tuple[str, ...] = ()
    denominator: tuple[str, ...] = ()
    scale: float = 1.0
    order: tuple[str, ...] = ()


def _tagged(kind: MetricKind, description: str | None = None, **extra: Any) -> Any:
    return Field(default=None, description=description, json_schema_extra={"metric_kind": kind.value, **extra})


def count(description: str | None = None) -> Any:
    """Absolute count; summed across units."""
    return _tagged(MetricKind.COUNT, description)


def weighted_mean(description: str | None = None, *, weight: str = POPULATION_WEIGHT) -> Any:
    """Median, mean or non-recomputable share; weighted by ``weight``.

    ``weight`` is either ``POPULATION_WEIGHT`` or the name of a count
    field in the same family (e.g. ``total_persons``).
    """
    return _tagged(MetricKind.WEIGHTED_MEAN, description, weight=weight)


def unweighted_mean(description: str | None = None) -> Any:
    """Rate averaged with equal weight per unit."""
    return _tagged(MetricKind.UNWEIGHTED_MEAN, description)


def ratio(
    numerator: list[str],
    denominator: list[str],
    description: str | None = None,
    *,
    scale: float = PERCENT,
) -> Any:
    """Share recomputed as ``scale * sum(numerator) / sum(denominator)`` after summation."""
    return _tagged(MetricKind.RATIO, description, numerator=numerator, denominator=denominator, scale=scale)


def distribution(description: str | None = None, *, order: list[str] | None = None) -> Any:
    """Labelled counts; summed per label, percentages recomputed."""
    return _tagged(MetricKind.DISTRIBUTION, description, order=order or [])


def time_series(description: str | None = None) -> Any:
    """Values keyed by period; unioned and summed per period."""
    return _tagged(MetricKind.TIME_SERIES, description)


def metadata(description: str | None = None) -> Any:
    """Descriptive value (e.g. data year); first reported value wins."""
    return _tagged(MetricKind.METADATA, description)


def field_specs(model_cls: type[BaseModel]) -> list[FieldSpec]:
    """Return the combination contract for every tagged field of a family.

    Untagged fields (such as ``parent_comparison``) are skipped.

    Args:
        model_cls: The family model class.

    Returns:
        FieldSpec list in declaration order.
    """
    specs: list[FieldSpec] = []
    for name, info in model_cls.model_fields.items():
        extra = info.json_schema_extra
        if not isinstance(extra, dict) or "metric_kind" not in extra:
            continue
        specs.append(
            FieldSpec(
                name=name,
                kind=MetricKind(extra["metric_kind"]),
                weight=str(extra.get("weight", POPULATION_WEIGHT)),
                numerator=tuple(extra.get("numerator", ())),
                denominator=tuple(extra.get("denominator", ())),
                scale=float(extra.get("scale", 1.0)),
                order=tuple(extra.get("order", ())),
            )
        )
    return specs
