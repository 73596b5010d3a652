"""Unit tests for the profile service."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from loguru import logger
from shapely.geometry import box

from area_profile.lib.aggregator import AggregationError
from area_profile.lib.parcel import ParcelLookupError, ParcelReference
from area_profile.lib.provider import StaticMetricProvider
from area_profile.lib.resolver import ParentLookup
from area_profile.services.profile_service import (
    build_area_profile,
    build_parcel_profile,
    create_parcel_client,
)


def _parcel(longitude: float | None = 18.05, latitude: float | None = 59.05) -> ParcelReference:
    return ParcelReference(
        designation="STOCKHOLM SÄLGEN 2:3",
        object_id="abc-123",
        municipality="Stockholm",
        status="gällande",
        longitude=longitude,
        latitude=latitude,
    )


def _registry(result: ParcelReference | None) -> MagicMock:
    client = MagicMock()
    client.search = AsyncMock(return_value=result)
    return client


class TestBuildAreaProfile:
    """Tests for build_area_profile."""

    @pytest.mark.asyncio
    async def test_two_units_one_parent(self, memory_store, static_provider, settings) -> None:
        profile = await build_area_profile(
            memory_store, static_provider, box(18.0, 59.0, 18.2, 59.1), settings=settings
        )
        assert profile.match.units == ("0180C1010", "0180C1020")
        assert profile.match.coverage_percentage == pytest.approx(1.0)
        assert profile.composite.majority_parent == "0180"
        assert profile.composite.origin is not None
        assert profile.composite.origin.percentage_foreign == pytest.approx(47.0)
        assert profile.warnings == []

    @pytest.mark.asyncio
    async def test_summary_logged_as_json_record(self, memory_store, static_provider, settings) -> None:
        records: list[dict] = []
        sink_id = logger.add(
            lambda message: records.append(message.record),
            filter=lambda record: record["extra"].get("json_output", False),
        )
        try:
            await build_area_profile(memory_store, static_provider, box(18.0, 59.0, 18.2, 59.1), settings=settings)
        finally:
            logger.remove(sink_id)
        assert len(records) == 1
        assert records[0]["extra"]["unit_codes"] == ["0180C1010", "0180C1020"]
        assert records[0]["extra"]["majority_parent"] == "0180"

    @pytest.mark.asyncio
    async def test_spanning_parents_warns_once_per_source(self, memory_store, static_provider, settings) -> None:
        profile = await build_area_profile(
            memory_store, static_provider, box(18.12, 59.0, 18.25, 59.1), settings=settings
        )
        assert profile.match.units == ("0180C1020", "0181A0010")
        assert profile.match.majority_parent == "0180"
        assert profile.composite.majority_parent == "0180"
        assert profile.warnings == ["area spans 2 parent areas", "units span 2 parent areas"]

    @pytest.mark.asyncio
    async def test_overlap_weights_drive_composite_parent(self, memory_store, static_provider, settings) -> None:
        """The composite's parent agrees with the resolver's overlap-weighted choice."""
        profile = await build_area_profile(
            memory_store, static_provider, box(18.18, 59.0, 18.3, 59.1), settings=settings
        )
        assert profile.match.units == ("0181A0010", "0180C1020")
        assert profile.match.majority_parent == "0181"
        assert profile.composite.majority_parent == "0181"
        assert profile.composite.income is not None
        assert profile.composite.income.parent_comparison is not None
        assert profile.composite.income.parent_comparison.median_income == pytest.approx(280_000)

    @pytest.mark.asyncio
    async def test_nearest_fallback(self, memory_store, static_provider, settings) -> None:
        profile = await build_area_profile(
            memory_store, static_provider, box(17.5, 59.0, 17.6, 59.1), settings=settings
        )
        assert profile.match.units == ("0180C1010",)
        assert profile.match.coverage_percentage == 0.0
        assert profile.warnings == ["no intersecting units; used nearest unit 0180C1010"]
        assert profile.composite.income is not None
        assert profile.composite.income.parent_comparison is not None

    @pytest.mark.asyncio
    async def test_national_code_from_settings(self, memory_store, static_provider, settings) -> None:
        settings = settings.model_copy(update={"national_code": "00"})
        profile = await build_area_profile(
            memory_store, static_provider, box(18.0, 59.0, 18.1, 59.1), settings=settings
        )
        assert profile.composite.national_comparison is not None
        assert profile.composite.national_comparison.unit_code == "00"

    @pytest.mark.asyncio
    async def test_explicit_parent_lookup(self, memory_store, static_provider, settings) -> None:
        lookup = ParentLookup()
        lookup.load({"0180C1010": "0181"})
        profile = await build_area_profile(
            memory_store, static_provider, box(18.0, 59.0, 18.1, 59.1), settings=settings, parent_lookup=lookup
        )
        assert profile.composite.majority_parent == "0181"

    @pytest.mark.asyncio
    async def test_aggregation_failure_propagates(self, memory_store, settings, unit_metrics) -> None:
        provider = StaticMetricProvider({"0180C1010": unit_metrics(0), "0180C1020": unit_metrics(0)})
        with pytest.raises(AggregationError):
            await build_area_profile(memory_store, provider, box(18.0, 59.0, 18.2, 59.1), settings=settings)

    @pytest.mark.asyncio
    async def test_to_dict(self, memory_store, static_provider, settings) -> None:
        profile = await build_area_profile(
            memory_store, static_provider, box(18.0, 59.0, 18.1, 59.1), settings=settings
        )
        data = profile.to_dict()
        assert data["match"]["units"] == ["0180C1010"]
        assert data["composite"]["aggregation_type"] == "single"
        assert data["warnings"] == []


class TestParcelClientFactory:
    """Tests for create_parcel_client."""

    def test_unconfigured(self, settings) -> None:
        with pytest.raises(ValueError, match="credentials not configured"):
            create_parcel_client(settings)

    def test_configured(self, settings) -> None:
        settings = settings.model_copy(update={"parcel_client_id": "key", "parcel_client_secret": "secret"})
        client = create_parcel_client(settings)
        assert client._client_id == "key"
        assert client._timeout == settings.parcel_timeout


class TestBuildParcelProfile:
    """Tests for build_parcel_profile."""

    @pytest.mark.asyncio
    async def test_parcel_inside_unit(self, memory_store, static_provider, settings) -> None:
        client = _registry(_parcel())
        result = await build_parcel_profile(
            memory_store, static_provider, client, "Stockholm Sälgen 2:3", settings=settings
        )
        assert result is not None
        assert result.profile.match.units == ("0180C1010",)
        assert result.profile.warnings == ["area too small; used closest unit 0180C1010"]
        searched = client.search.call_args.args[0]
        assert str(searched) == "STOCKHOLM SÄLGEN 2:3"
        assert result.to_dict()["parcel"]["object_id"] == "abc-123"

    @pytest.mark.asyncio
    async def test_invalid_designation(self, memory_store, static_provider, settings) -> None:
        client = _registry(_parcel())
        with pytest.raises(ValueError, match="Invalid property designation"):
            await build_parcel_profile(memory_store, static_provider, client, "not a parcel", settings=settings)
        client.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_parcel_not_found(self, memory_store, static_provider, settings) -> None:
        client = _registry(None)
        result = await build_parcel_profile(memory_store, static_provider, client, "Stockholm 1:1", settings=settings)
        assert result is None

    @pytest.mark.asyncio
    async def test_parcel_without_centre(self, memory_store, static_provider, settings) -> None:
        client = _registry(_parcel(longitude=None, latitude=None))
        with pytest.raises(ParcelLookupError, match="has no centre point"):
            await build_parcel_profile(memory_store, static_provider, client, "Stockholm 1:1", settings=settings)

    @pytest.mark.asyncio
    async def test_parcel_outside_service_area(self, memory_store, static_provider, settings) -> None:
        client = _registry(_parcel(longitude=13.40, latitude=52.52))
        with pytest.raises(ValueError, match="outside the Sweden service area"):
            await build_parcel_profile(memory_store, static_provider, client, "Stockholm 1:1", settings=settings)
