"""Per-kind reduction of one metric family across base units.

The rule applied to each field comes only from its metric kind tag:

- count: summed
- weighted_mean: sum(v * w) / sum(w) over units reporting both
- unweighted_mean: arithmetic mean
- ratio: recomputed from counts summed over units reporting every term,
  never averaged; a unit missing one side is rebuilt from its own share
- distribution: counts summed per label, percentages recomputed
- time_series: values summed per period
- metadata: first reported value in unit-code order

A field no unit reported stays None so "no data" is never confused
with zero.
"""

from collections.abc import Sequence
from typing import Any

from loguru import logger

from area_profile.lib.metrics.families import DistributionBand, MetricFamily, SeriesPoint
from area_profile.lib.metrics.kinds import PERCENT, POPULATION_WEIGHT, FieldSpec, MetricKind, field_specs

Contribution = tuple[str, MetricFamily]


def _sum(values: list[float | None]) -> float | None:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return float(sum(present))


def _weighted_mean(
    spec: FieldSpec,
    contributions: Sequence[Contribution],
    population_weights: dict[str, float],
) -> float | None:
    numerator = 0.0
    denominator = 0.0
    for unit_code, family in contributions:
        value = getattr(family, spec.name)
        if spec.weight == POPULATION_WEIGHT:
            weight = population_weights.get(unit_code)
        else:
            weight = getattr(family, spec.weight, None)
        if value is None or weight is None or weight <= 0:
            continue
        numerator += value * weight
        denominator += weight
    if denominator == 0:
        return None
    return numerator / denominator


def _unweighted_mean(spec: FieldSpec, contributions: Sequence[Contribution]) -> float | None:
    values = [getattr(f, spec.name) for _, f in contributions if getattr(f, spec.name) is not None]
    if not values:
        return None
    return sum(values) / len(values)


def _terms(family: MetricFamily, names: Sequence[str]) -> float | None:
    values = [getattr(family, name, None) for name in names]
    if any(v is None for v in values):
        return None
    return float(sum(values))


def _unit_ratio_terms(spec: FieldSpec, family: MetricFamily) -> tuple[float | None, float | None]:
    """Numerator and denominator for one unit, rebuilding one side from its reported share."""
    numerator = _terms(family, spec.numerator)
    denominator = _terms(family, spec.denominator)
    share = getattr(family, spec.name, None)
    if share is not None:
        if numerator is None and denominator is not None:
            numerator = share * denominator / spec.scale
        elif denominator is None and numerator is not None and share > 0:
            denominator = numerator * spec.scale / share
    return numerator, denominator


def _ratio(
    spec: FieldSpec,
    contributions: Sequence[Contribution],
    warnings: list[str] | None = None,
) -> float | None:
    numerator = 0.0
    denominator = 0.0
    counted = 0
    for unit_code, family in contributions:
        unit_num, unit_den = _unit_ratio_terms(spec, family)
        if unit_num is None or unit_den is None:
            names = (*spec.numerator, *spec.denominator, spec.name)
            if any(getattr(family, name, None) is not None for name in names):
                message = f"{spec.name} excludes unit {unit_code}: incomplete counts"
                logger.warning(message)
                if warnings is not None:
                    warnings.append(message)
            continue
        numerator += unit_num
        denominator += unit_den
        counted += 1
    if counted == 0 or denominator == 0:
        return None
    return spec.scale * numerator / denominator


def _distribution(spec: FieldSpec, contributions: Sequence[Contribution]) -> list[DistributionBand] | None:
    counts: dict[str, float | None] = {}
    for _, family in contributions:
        bands: list[DistributionBand] | None = getattr(family, spec.name)
        if not bands:
            continue
        for band in bands:
            current = counts.get(band.label)
            if band.count is None:
                counts.setdefault(band.label, None)
            else:
                counts[band.label] = (current or 0.0) + band.count

    if not counts:
        return None

    known = [label for label in spec.order if label in counts]
    labels = known + [label for label in counts if label not in spec.order]
    total = sum(c for c in counts.values() if c is not None)

    return [
        DistributionBand(
            label=label,
            count=counts[label],
            percentage=None if counts[label] is None or total == 0 else PERCENT * counts[label] / total,
        )
        for label in labels
    ]


def _period_key(period: str) -> tuple[int, int, str]:
    if period.isdigit():
        return (0, int(period), period)
    return (1, 0, period)


def _time_series(spec: FieldSpec, contributions: Sequence[Contribution]) -> list[SeriesPoint] | None:
    values: dict[str, float | None] = {}
    for _, family in contributions:
        points: list[SeriesPoint] | None = getattr(family, spec.name)
        if not points:
            continue
        for point in points:
            if point.value is None:
                values.setdefault(point.period, None)
            else:
                values[point.period] = (values.get(point.period) or 0.0) + point.value

    if not values:
        return None
    return [SeriesPoint(period=p, value=values[p]) for p in sorted(values, key=_period_key)]


def _metadata(spec: FieldSpec, contributions: Sequence[Contribution]) -> Any:
    for _, family in contributions:
        value = getattr(family, spec.name)
        if value is not None:
            return value
    return None


def reduce_family(
    family_cls: type[MetricFamily],
    contributions: Sequence[Contribution],
    population_weights: dict[str, float],
    warnings: list[str] | None = None,
) -> MetricFamily | None:
    """Combine one family across the units that reported it.

    Args:
        family_cls: The family model class.
        contributions: (unit_code, family value) pairs, one per unit
            that returned the family.
        population_weights: Unit code to population total.
        warnings: Collects a message for each unit left out of a ratio.

    Returns:
        The combined family, or None if no unit contributed.
    """
    if not contributions:
        return None

    ordered = sorted(contributions, key=lambda c: c[0])
    specs = field_specs(family_cls)
    reduced: dict[str, Any] = {}

    for spec in specs:
        if spec.kind == MetricKind.COUNT:
            reduced[spec.name] = _sum([getattr(f, spec.name) for _, f in ordered])
        elif spec.kind == MetricKind.WEIGHTED_MEAN:
            reduced[spec.name] = _weighted_mean(spec, ordered, population_weights)
        elif spec.kind == MetricKind.UNWEIGHTED_MEAN:
            reduced[spec.name] = _unweighted_mean(spec, ordered)
        elif spec.kind == MetricKind.RATIO:
            reduced[spec.name] = _ratio(spec, ordered, warnings)
        elif spec.kind == MetricKind.DISTRIBUTION:
            reduced[spec.name] = _distribution(spec, ordered)
        elif spec.kind == MetricKind.TIME_SERIES:
            reduced[spec.name] = _time_series(spec, ordered)
        elif spec.kind == MetricKind.METADATA:
            reduced[spec.name] = _metadata(spec, ordered)

    return family_cls(**reduced)
