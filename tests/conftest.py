"""Shared test fixtures: settings, a small base unit grid, and metric documents."""

from collections.abc import Callable

import pytest
from shapely.geometry import box

from area_profile.core.config import Settings
from area_profile.lib.provider import StaticMetricProvider
from area_profile.lib.spatial_store import InMemorySpatialStore, StoredUnit

# Three 0.1 x 0.1 degree cells side by side; the first two share a parent
UNIT_A = "0180C1010"
UNIT_B = "0180C1020"
UNIT_C = "0181A0010"
PARENT_1 = "0180"
PARENT_2 = "0181"
NATIONAL = "00"


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        database_url=None,
        min_overlap_threshold=0.10,
        parent_code_length=4,
        national_code=None,
    )


@pytest.fixture
def grid_units() -> list[StoredUnit]:
    """Base units laid out west to east."""
    return [
        StoredUnit(UNIT_A, PARENT_1, box(18.0, 59.0, 18.1, 59.1)),
        StoredUnit(UNIT_B, PARENT_1, box(18.1, 59.0, 18.2, 59.1)),
        StoredUnit(UNIT_C, PARENT_2, box(18.2, 59.0, 18.3, 59.1)),
    ]


@pytest.fixture
def memory_store(grid_units: list[StoredUnit]) -> InMemorySpatialStore:
    """In-memory spatial store over the grid."""
    return InMemorySpatialStore(grid_units)


def _unit_metrics(
    population: float,
    foreign_background: float = 0.0,
    median_income: float = 300_000.0,
    growth_rate: float = 1.0,
) -> dict[str, dict]:
    return {
        "population": {
            "total": population,
            "growth_rate": growth_rate,
            "age_distribution": [
                {"label": "0-19", "count": population * 0.25},
                {"label": "20-64", "count": population * 0.55},
                {"label": "65+", "count": population * 0.20},
            ],
            "historical_population": [
                {"period": "2022", "value": population - 10},
                {"period": "2023", "value": population},
            ],
        },
        "income": {"median_income": median_income, "mean_income": median_income * 1.1, "year": 2023},
        "origin": {
            "swedish_background": population - foreign_background,
            "foreign_background": foreign_background,
            "percentage_foreign": 100.0 * foreign_background / population if population else None,
        },
    }


@pytest.fixture
def unit_metrics() -> Callable[..., dict[str, dict]]:
    """Factory for one unit's metric families."""
    return _unit_metrics


@pytest.fixture
def metrics_document() -> dict[str, dict[str, dict]]:
    """Metrics for the grid units, both parents and the national baseline."""
    return {
        UNIT_A: _unit_metrics(100, foreign_background=20, median_income=250_000.0, growth_rate=2.0),
        UNIT_B: _unit_metrics(900, foreign_background=450, median_income=350_000.0, growth_rate=0.0),
        UNIT_C: _unit_metrics(500, foreign_background=100, median_income=300_000.0, growth_rate=1.0),
        PARENT_1: _unit_metrics(100_000, foreign_background=25_000, median_income=320_000.0),
        PARENT_2: _unit_metrics(50_000, foreign_background=5_000, median_income=280_000.0),
        NATIONAL: _unit_metrics(10_500_000, foreign_background=2_100_000, median_income=310_000.0),
    }


@pytest.fixture
def static_provider(metrics_document: dict[str, dict[str, dict]]) -> StaticMetricProvider:
    """Static provider over the metrics document."""
    return StaticMetricProvider(metrics_document)
