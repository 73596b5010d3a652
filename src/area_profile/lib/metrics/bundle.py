"""Metric bundles: per-unit and composite."""

import enum

from pydantic import BaseModel, Field

from area_profile.lib.metrics.families import (
    FAMILY_NAMES,
    BuildingAgeMetrics,
    EarnedIncomeMetrics,
    EconomicStandardMetrics,
    EducationMetrics,
    HouseholdMetrics,
    HousingTypeMetrics,
    IncomeMetrics,
    MetricFamily,
    MigrationMetrics,
    OriginMetrics,
    PopulationMetrics,
    TenureFormMetrics,
    VehicleMetrics,
)


class AggregationType(enum.StrEnum):
    SINGLE = "single"
    POPULATION_WEIGHTED = "population_weighted"


class _FamilySet(BaseModel):
    """One optional attribute per metric family. ``None`` means no data."""

    income: IncomeMetrics | None = None
    population: PopulationMetrics | None = None
    education: EducationMetrics | None = None
    migration: MigrationMetrics | None = None
    origin: OriginMetrics | None = None
    household: HouseholdMetrics | None = None
    housing_type: HousingTypeMetrics | None = None
    tenure_form: TenureFormMetrics | None = None
    economic_standard: EconomicStandardMetrics | None = None
    earned_income: EarnedIncomeMetrics | None = None
    vehicles: VehicleMetrics | None = None
    building_age: BuildingAgeMetrics | None = None

    def family(self, name: str) -> MetricFamily | None:
        if name not in FAMILY_NAMES:
            msg = f"Unknown metric family: {name}"
            raise KeyError(msg)
        return getattr(self, name)

    def families(self) -> dict[str, MetricFamily | None]:
        return {name: getattr(self, name) for name in FAMILY_NAMES}

    @property
    def population_total(self) -> float | None:
        if self.population is None:
            return None
        return self.population.total


class MetricBundle(_FamilySet):
    """Metrics for one base unit (or one parent area) as returned by a provider."""

    unit_code: str
    parent_code: str | None = None
    failed_families: dict[str, str] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True when no family returned data."""
        return all(value is None for value in self.families().values())


class CompositeBundle(_FamilySet):
    """Metrics for a set of base units combined into one area.

    Every family carries ``parent_comparison`` taken from the majority
    parent's bundle when that bundle is available.
    """

    unit_codes: list[str]
    area_count: int
    aggregation_type: AggregationType
    total_population: float | None = None
    majority_parent: str | None = None
    parent_bundle: MetricBundle | None = None
    national_comparison: MetricBundle | None = None
    failed_units: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
