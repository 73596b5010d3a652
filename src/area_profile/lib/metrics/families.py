"""Metric family models.

One pydantic model per family. Every numeric field carries a metric
kind tag (see ``kinds``) describing how it combines across base units.
``parent_comparison`` holds the same family for the comparison parent
and is never reduced.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from area_profile.lib.metrics import kinds


class DistributionBand(BaseModel):
    """One labelled band of a distribution (age band, construction period)."""

    model_config = ConfigDict(frozen=True)

    label: str
    count: float | None = None
    percentage: float | None = None


class SeriesPoint(BaseModel):
    """One value of a time series keyed by period (usually a year)."""

    model_config = ConfigDict(frozen=True)

    period: str
    value: float | None = None


class MetricFamily(BaseModel):
    """Base class for metric families."""

    model_config = ConfigDict(extra="ignore")

    family_name: ClassVar[str] = ""
    parent_comparison: "MetricFamily | None" = None

    def comparison_free(self) -> "MetricFamily":
        """Return a copy without ``parent_comparison`` attached."""
        return self.model_copy(update={"parent_comparison": None})


class IncomeMetrics(MetricFamily):
    family_name: ClassVar[str] = "income"
    parent_comparison: "IncomeMetrics | None" = None

    median_income: float | None = kinds.weighted_mean("Median income (SEK)")
    mean_income: float | None = kinds.weighted_mean("Mean income (SEK)")
    percentile_20: float | None = kinds.weighted_mean()
    percentile_80: float | None = kinds.weighted_mean()
    year: int | None = kinds.metadata()


class PopulationMetrics(MetricFamily):
    family_name: ClassVar[str] = "population"
    parent_comparison: "PopulationMetrics | None" = None

    total: float | None = kinds.count("Total population")
    growth_rate: float | None = kinds.unweighted_mean("Annual growth rate (percent)")
    age_distribution: list[DistributionBand] | None = kinds.distribution()
    historical_population: list[SeriesPoint] | None = kinds.time_series()
    age_distribution_start: list[DistributionBand] | None = kinds.distribution()
    age_distribution_end: list[DistributionBand] | None = kinds.distribution()
    start_year: int | None = kinds.metadata()
    end_year: int | None = kinds.metadata()


class EducationMetrics(MetricFamily):
    family_name: ClassVar[str] = "education"
    parent_comparison: "EducationMetrics | None" = None

    percentage_primary: float | None = kinds.weighted_mean("Share with at most primary education")
    percentage_secondary: float | None = kinds.weighted_mean("Share with upper secondary education")
    percentage_post_secondary: float | None = kinds.weighted_mean("Share with post-secondary education")


class MigrationMetrics(MetricFamily):
    family_name: ClassVar[str] = "migration"
    parent_comparison: "MigrationMetrics | None" = None

    moved_in: float | None = kinds.count()
    moved_out: float | None = kinds.count()
    net: float | None = kinds.count()
    year: int | None = kinds.metadata()


class OriginMetrics(MetricFamily):
    family_name: ClassVar[str] = "origin"
    parent_comparison: "OriginMetrics | None" = None

    swedish_background: float | None = kinds.count()
    foreign_background: float | None = kinds.count()
    percentage_foreign: float | None = kinds.ratio(
        ["foreign_background"], ["swedish_background", "foreign_background"], "Share with foreign background"
    )


class HouseholdMetrics(MetricFamily):
    family_name: ClassVar[str] = "household"
    parent_comparison: "HouseholdMetrics | None" = None

    total_households: float | None = kinds.count()
    single_no_children: float | None = kinds.count()
    single_with_children: float | None = kinds.count()
    couple_no_children: float | None = kinds.count()
    couple_with_children: float | None = kinds.count()
    other: float | None = kinds.count()
    average_household_size: float | None = kinds.weighted_mean(weight="total_households")


class HousingTypeMetrics(MetricFamily):
    family_name: ClassVar[str] = "housing_type"
    parent_comparison: "HousingTypeMetrics | None" = None

    small_house: float | None = kinds.count("Persons living in detached or terraced houses")
    apartment_building: float | None = kinds.count()
    percentage_small_house: float | None = kinds.ratio(["small_house"], ["small_house", "apartment_building"])


class TenureFormMetrics(MetricFamily):
    family_name: ClassVar[str] = "tenure_form"
    parent_comparison: "TenureFormMetrics | None" = None

    ownership: float | None = kinds.count()
    cooperative: float | None = kinds.count()
    rental: float | None = kinds.count()
    percentage_ownership: float | None = kinds.ratio(["ownership"], ["ownership", "cooperative", "rental"])
    percentage_cooperative: float | None = kinds.ratio(["cooperative"], ["ownership", "cooperative", "rental"])
    percentage_rental: float | None = kinds.ratio(["rental"], ["ownership", "cooperative", "rental"])


class _QuartileMetrics(MetricFamily):
    """Quartile person counts plus person-weighted median and mean."""

    quartile_1: float | None = kinds.count()
    quartile_2: float | None = kinds.count()
    quartile_3: float | None = kinds.count()
    quartile_4: float | None = kinds.count()
    total_persons: float | None = kinds.count()
    percentage_quartile_1: float | None = kinds.ratio(["quartile_1"], ["total_persons"])
    percentage_quartile_2: float | None = kinds.ratio(["quartile_2"], ["total_persons"])
    percentage_quartile_3: float | None = kinds.ratio(["quartile_3"], ["total_persons"])
    percentage_quartile_4: float | None = kinds.ratio(["quartile_4"], ["total_persons"])
    median_value: float | None = kinds.weighted_mean(weight="total_persons")
    mean_value: float | None = kinds.weighted_mean(weight="total_persons")
    year: int | None = kinds.metadata()


class EconomicStandardMetrics(_QuartileMetrics):
    family_name: ClassVar[str] = "economic_standard"
    parent_comparison: "EconomicStandardMetrics | None" = None


class EarnedIncomeMetrics(_QuartileMetrics):
    family_name: ClassVar[str] = "earned_income"
    parent_comparison: "EarnedIncomeMetrics | None" = None


class VehicleMetrics(MetricFamily):
    family_name: ClassVar[str] = "vehicles"
    parent_comparison: "VehicleMetrics | None" = None

    total_vehicles: float | None = kinds.count()
    vehicles_in_traffic: float | None = kinds.count()
    vehicles_deregistered: float | None = kinds.count()
    households: float | None = kinds.count()
    vehicles_per_household: float | None = kinds.ratio(["total_vehicles"], ["households"], scale=1.0)
    year: int | None = kinds.metadata()


# Construction periods, oldest first
BUILDING_PERIODS: list[str] = [
    "-1920",
    "1921-1930",
    "1931-1940",
    "1941-1950",
    "1951-1960",
    "1961-1970",
    "1971-1980",
    "1981-1990",
    "1991-2000",
    "2001-2010",
    "2011-2020",
    "2021-2030",
]


class BuildingAgeMetrics(MetricFamily):
    family_name: ClassVar[str] = "building_age"
    parent_comparison: "BuildingAgeMetrics | None" = None

    periods: list[DistributionBand] | None = kinds.distribution(order=BUILDING_PERIODS)
    total_buildings: float | None = kinds.count()
    average_age: float | None = kinds.weighted_mean("Average building age (years)", weight="total_buildings")
    year: int | None = kinds.metadata()


FAMILY_MODELS: dict[str, type[MetricFamily]] = {
    "income": IncomeMetrics,
    "population": PopulationMetrics,
    "education": EducationMetrics,
    "migration": MigrationMetrics,
    "origin": OriginMetrics,
    "household": HouseholdMetrics,
    "housing_type": HousingTypeMetrics,
    "tenure_form": TenureFormMetrics,
    "economic_standard": EconomicStandardMetrics,
    "earned_income": EarnedIncomeMetrics,
    "vehicles": VehicleMetrics,
    "building_age": BuildingAgeMetrics,
}

FAMILY_NAMES: list[str] = list(FAMILY_MODELS)
