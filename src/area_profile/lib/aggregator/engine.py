"""Aggregation engine — combines per-unit metric bundles into one composite.

Per-unit bundles, the majority parent's bundle and the optional
national baseline are fetched concurrently inside one task group.
A unit whose fetch fails is dropped with a warning; the call only
fails when no unit survives or the surviving units have no population.
"""

import asyncio
from collections.abc import Iterable

from loguru import logger

from area_profile.lib.aggregator.reducers import reduce_family
from area_profile.lib.metrics.bundle import AggregationType, CompositeBundle, MetricBundle
from area_profile.lib.metrics.families import FAMILY_MODELS, MetricFamily
from area_profile.lib.provider.base import BaseMetricProvider
from area_profile.lib.resolver.parents import ParentLookup
from area_profile.lib.resolver.resolver import select_majority_parent


class AggregationError(Exception):
    """Raised when no composite can be produced for a set of units."""


AggregationFailure = AggregationError


def _with_comparison(family: MetricFamily | None, parent: MetricFamily | None) -> MetricFamily | None:
    if family is None or parent is None:
        return family
    return family.model_copy(update={"parent_comparison": parent.comparison_free()})


def _attach_comparisons(families: dict[str, MetricFamily | None], parent_bundle: MetricBundle | None) -> dict:
    if parent_bundle is None:
        return families
    return {name: _with_comparison(value, parent_bundle.family(name)) for name, value in families.items()}


async def _fetch_optional(
    provider: BaseMetricProvider, code: str | None, label: str, warnings: list[str]
) -> MetricBundle | None:
    if code is None:
        return None
    try:
        return await provider.fetch_parent(code)
    except Exception:
        logger.exception(f"Failed to fetch {label} metrics for {code}")
        warnings.append(f"metrics unavailable for {label} {code}")
        return None


async def aggregate_units(
    provider: BaseMetricProvider,
    units: Iterable[str],
    *,
    parent_lookup: ParentLookup | None = None,
    weights: dict[str, float] | None = None,
    national_code: str | None = None,
) -> CompositeBundle:
    """Aggregate metrics for a set of base units.

    Args:
        provider: Metric provider for per-unit and parent bundles.
        units: Base unit codes; duplicates are collapsed.
        parent_lookup: Unit to parent table. Defaults to code-prefix parents.
        weights: Unit code to overlap ratio used for majority parent
            selection. Units not listed weigh 1.0.
        national_code: Area code of a national baseline to attach.

    Returns:
        CompositeBundle for the units.

    Raises:
        ValueError: If ``units`` is empty.
        AggregationError: If every unit fetch fails or total population is zero.
    """
    codes = list(dict.fromkeys(units))
    if not codes:
        msg = "At least one unit code is required"
        raise ValueError(msg)

    lookup = parent_lookup or ParentLookup()
    parents = {code: lookup.parent_of(code) for code in codes}
    unit_weights = weights or {}
    majority_parent, parent_count = select_majority_parent(
        (parents[code], unit_weights.get(code, 1.0)) for code in codes
    )

    if len(codes) == 1:
        return await _aggregate_single(provider, codes[0], parents[codes[0]], majority_parent, national_code)

    logger.info(f"Aggregating {len(codes)} base units (majority parent {majority_parent})")

    warnings: list[str] = []
    if parent_count > 1:
        warnings.append(f"units span {parent_count} parent areas")

    bundles: dict[str, MetricBundle] = {}
    failed_units: list[str] = []

    async def _fetch_unit(code: str) -> None:
        try:
            bundles[code] = await provider.fetch(code, parents[code])
        except Exception:
            logger.exception(f"Failed to fetch metrics for unit {code}")
            failed_units.append(code)

    async with asyncio.TaskGroup() as tg:
        for code in codes:
            tg.create_task(_fetch_unit(code))
        parent_task = tg.create_task(_fetch_optional(provider, majority_parent, "parent", warnings))
        national_task = tg.create_task(_fetch_optional(provider, national_code, "national baseline", warnings))

    failed_units.sort()
    warnings.extend(f"metrics unavailable for unit {code}" for code in failed_units)

    if not bundles:
        msg = f"Metrics unavailable for all {len(codes)} units"
        raise AggregationError(msg)

    surviving = [code for code in codes if code in bundles]
    for code in surviving:
        for family in sorted(bundles[code].failed_families):
            warnings.append(f"{family} metrics unavailable for unit {code}")

    population_weights = {code: bundles[code].population_total or 0.0 for code in surviving}
    total_population = sum(population_weights.values())
    if total_population <= 0:
        msg = f"Total population is zero for units {', '.join(surviving)}"
        raise AggregationError(msg)

    families: dict[str, MetricFamily | None] = {}
    for name, family_cls in FAMILY_MODELS.items():
        contributions = [
            (code, bundles[code].family(name)) for code in surviving if bundles[code].family(name) is not None
        ]
        families[name] = reduce_family(family_cls, contributions, population_weights, warnings)

    parent_bundle = parent_task.result()

    logger.info(
        f"Aggregated {len(surviving)}/{len(codes)} units, total population {total_population:.0f}"
    )

    return CompositeBundle(
        unit_codes=surviving,
        area_count=len(surviving),
        aggregation_type=AggregationType.POPULATION_WEIGHTED,
        total_population=total_population,
        majority_parent=majority_parent,
        parent_bundle=parent_bundle,
        national_comparison=national_task.result(),
        failed_units=failed_units,
        warnings=warnings,
        **_attach_comparisons(families, parent_bundle),
    )


async def _aggregate_single(
    provider: BaseMetricProvider,
    code: str,
    parent_code: str,
    majority_parent: str | None,
    national_code: str | None,
) -> CompositeBundle:
    """Return one unit's bundle as-is with its parent comparison attached."""
    warnings: list[str] = []

    async with asyncio.TaskGroup() as tg:
        unit_task = tg.create_task(_fetch_single_unit(provider, code, parent_code))
        parent_task = tg.create_task(_fetch_optional(provider, majority_parent, "parent", warnings))
        national_task = tg.create_task(_fetch_optional(provider, national_code, "national baseline", warnings))

    bundle = unit_task.result()
    if bundle is None or bundle.is_empty:
        msg = f"Metrics unavailable for unit {code}"
        raise AggregationError(msg)

    warnings.extend(f"{family} metrics unavailable for unit {code}" for family in sorted(bundle.failed_families))
    parent_bundle = parent_task.result()

    return CompositeBundle(
        unit_codes=[code],
        area_count=1,
        aggregation_type=AggregationType.SINGLE,
        total_population=bundle.population_total,
        majority_parent=majority_parent,
        parent_bundle=parent_bundle,
        national_comparison=national_task.result(),
        warnings=warnings,
        **_attach_comparisons(bundle.families(), parent_bundle),
    )


async def _fetch_single_unit(provider: BaseMetricProvider, code: str, parent_code: str) -> MetricBundle | None:
    try:
        return await provider.fetch(code, parent_code)
    except Exception:
        logger.exception(f"Failed to fetch metrics for unit {code}")
        return None
