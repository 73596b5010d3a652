"""Metric library: family models, kind tags, and bundles.

Public API:
    - MetricKind: Combination rule for a family field
    - FieldSpec / field_specs: Read the combination contract of a family
    - FAMILY_MODELS / FAMILY_NAMES: Known metric families
    - DistributionBand / SeriesPoint: Distribution and time series elements
    - MetricBundle: Metrics for one base unit
    - CompositeBundle: Metrics for a combined set of base units
"""

from area_profile.lib.metrics.bundle import AggregationType, CompositeBundle, MetricBundle
from area_profile.lib.metrics.families import (
    BUILDING_PERIODS,
    FAMILY_MODELS,
    FAMILY_NAMES,
    BuildingAgeMetrics,
    DistributionBand,
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
    SeriesPoint,
    TenureFormMetrics,
    VehicleMetrics,
)
from area_profile.lib.metrics.kinds import POPULATION_WEIGHT, FieldSpec, MetricKind, field_specs

__all__ = [
    "BUILDING_PERIODS",
    "FAMILY_MODELS",
    "FAMILY_NAMES",
    "POPULATION_WEIGHT",
    "AggregationType",
    "BuildingAgeMetrics",
    "CompositeBundle",
    "DistributionBand",
    "EarnedIncomeMetrics",
    "EconomicStandardMetrics",
    "EducationMetrics",
    "FieldSpec",
    "HouseholdMetrics",
    "HousingTypeMetrics",
    "IncomeMetrics",
    "MetricBundle",
    "MetricFamily",
    "MetricKind",
    "MigrationMetrics",
    "OriginMetrics",
    "PopulationMetrics",
    "SeriesPoint",
    "TenureFormMetrics",
    "VehicleMetrics",
    "field_specs",
]
