"""Unit tests for the base metric provider fan-out."""

import httpx
import pytest

from area_profile.lib.metrics import MetricBundle
from area_profile.lib.provider import BaseMetricProvider, MetricProviderError


class ScriptedProvider(BaseMetricProvider):
    """Provider answering from a dict and failing on chosen families."""

    def __init__(
        self,
        data: dict[str, dict],
        failing: set[str] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self._data = data
        self._failing = failing or set()
        self._errors = errors or {}
        self.calls: list[tuple[str, str, str | None]] = []

    @property
    def provider_name(self) -> str:
        return "scripted"

    async def fetch_family(self, family: str, unit_code: str, parent_code: str | None = None) -> dict | None:
        self.calls.append((family, unit_code, parent_code))
        if family in self._failing:
            raise MetricProviderError(self.provider_name, f"{family} backend down", status_code=503)
        if family in self._errors:
            raise self._errors[family]
        return self._data.get(family)


class TestBaseMetricProviderFetch:
    """Tests for BaseMetricProvider.fetch."""

    @pytest.mark.asyncio
    async def test_builds_bundle(self) -> None:
        provider = ScriptedProvider({"income": {"median_income": 300_000}, "population": {"total": 1200}})
        bundle = await provider.fetch("0180C1010", "0180")
        assert isinstance(bundle, MetricBundle)
        assert bundle.unit_code == "0180C1010"
        assert bundle.parent_code == "0180"
        assert bundle.income is not None
        assert bundle.income.median_income == 300_000
        assert bundle.population_total == 1200
        assert bundle.education is None
        assert bundle.failed_families == {}

    @pytest.mark.asyncio
    async def test_every_family_requested_with_parent(self) -> None:
        provider = ScriptedProvider({})
        await provider.fetch("0180C1010", "0180")
        assert {family for family, _, _ in provider.calls} == set(provider.families)
        assert all(unit == "0180C1010" and parent == "0180" for _, unit, parent in provider.calls)

    @pytest.mark.asyncio
    async def test_family_failure_is_isolated(self) -> None:
        """A failing family is recorded and the other families still load."""
        data = {"income": {"median_income": 1.0}, "origin": {"foreign_background": 5}}
        provider = ScriptedProvider(data, failing={"origin"})
        bundle = await provider.fetch("0180C1010")
        assert bundle.origin is None
        assert "origin" in bundle.failed_families
        assert "backend down" in bundle.failed_families["origin"]
        assert bundle.income is not None

    @pytest.mark.asyncio
    async def test_unexpected_family_error_is_isolated(self) -> None:
        """A transport error outside MetricProviderError only drops its own family."""
        provider = ScriptedProvider(
            {"population": {"total": 100}},
            errors={"income": httpx.ReadError("connection reset")},
        )
        bundle = await provider.fetch("0180C1010", "0180")
        assert bundle.population_total == 100
        assert bundle.income is None
        assert "income" in bundle.failed_families
        assert "connection reset" in bundle.failed_families["income"]

    @pytest.mark.asyncio
    async def test_invalid_family_payload_recorded(self) -> None:
        provider = ScriptedProvider({"population": {"total": "lots"}})
        bundle = await provider.fetch("0180C1010")
        assert bundle.population is None
        assert "population" in bundle.failed_families

    @pytest.mark.asyncio
    async def test_fetch_parent_has_no_parent_code(self) -> None:
        provider = ScriptedProvider({"population": {"total": 100_000}})
        bundle = await provider.fetch_parent("0180")
        assert bundle.unit_code == "0180"
        assert bundle.parent_code is None


class TestMetricProviderError:
    """Tests for MetricProviderError."""

    def test_attributes(self) -> None:
        error = MetricProviderError("http", "Provider returned HTTP 500", status_code=500)
        assert error.provider_name == "http"
        assert error.status_code == 500
        assert str(error) == "http: Provider returned HTTP 500"
