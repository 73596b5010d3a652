"""Profile service — orchestrates resolution and aggregation for an area."""

from dataclasses import dataclass

from loguru import logger
from shapely.geometry.base import BaseGeometry

from area_profile.core.config import Settings
from area_profile.lib.aggregator import aggregate_units
from area_profile.lib.metrics import CompositeBundle
from area_profile.lib.parcel import (
    ParcelLookupError,
    ParcelReference,
    ParcelRegistryClient,
    parse_designation,
    point_to_polygon,
    validate_service_area_coordinates,
)
from area_profile.lib.provider import BaseMetricProvider
from area_profile.lib.resolver import MatchResult, ParentLookup, resolve_area
from area_profile.lib.spatial_store import BaseSpatialStore


@dataclass
class AreaProfile:
    """Resolution and composite metrics for one polygon."""

    match: MatchResult
    composite: CompositeBundle

    @property
    def warnings(self) -> list[str]:
        return list(self.match.warnings) + [w for w in self.composite.warnings if w not in self.match.warnings]

    def to_dict(self) -> dict:
        return {
            "match": self.match.to_dict(),
            "composite": self.composite.model_dump(mode="json"),
            "warnings": self.warnings,
        }


@dataclass
class ParcelProfile:
    """Profile for the area around a parcel."""

    parcel: ParcelReference
    profile: AreaProfile

    def to_dict(self) -> dict:
        return {
            "parcel": {
                "designation": self.parcel.designation,
                "object_id": self.parcel.object_id,
                "municipality": self.parcel.municipality,
                "status": self.parcel.status,
                "longitude": self.parcel.longitude,
                "latitude": self.parcel.latitude,
            },
            **self.profile.to_dict(),
        }


def _lookup_from_match(match: MatchResult, prefix_length: int) -> ParentLookup:
    """Parent table agreeing with the parents the resolver saw."""
    lookup = ParentLookup(prefix_length)
    table = {o.unit_code: o.parent_code for o in match.overlaps if o.parent_code}
    if not table and match.majority_parent:
        table = {code: match.majority_parent for code in match.units}
    lookup.load(table)
    return lookup


async def build_area_profile(
    store: BaseSpatialStore,
    provider: BaseMetricProvider,
    polygon: BaseGeometry,
    *,
    settings: Settings,
    parent_lookup: ParentLookup | None = None,
) -> AreaProfile:
    """Resolve a polygon to base units and aggregate their metrics.

    Overlap ratios from resolution weigh the majority parent choice.

    Args:
        store: Spatial store for resolution.
        provider: Metric provider for aggregation.
        polygon: WGS84 polygon.
        settings: Application settings.
        parent_lookup: Optional unit to parent table. Defaults to the
            parent codes reported by the store.

    Returns:
        AreaProfile with match and composite.

    Raises:
        ResolutionError: If the spatial store fails.
        AggregationError: If no composite can be produced.
    """
    match = await resolve_area(store, polygon, min_overlap_threshold=settings.min_overlap_threshold)
    lookup = parent_lookup or _lookup_from_match(match, settings.parent_code_length)

    composite = await aggregate_units(
        provider,
        match.units,
        parent_lookup=lookup,
        weights=match.overlap_weights or None,
        national_code=settings.national_code,
    )
    logger.bind(
        json_output=True,
        unit_codes=composite.unit_codes,
        majority_parent=composite.majority_parent,
        coverage_percentage=match.coverage_percentage,
        warnings=composite.warnings,
    ).info(f"Built profile for {composite.area_count} units (majority parent {composite.majority_parent})")
    return AreaProfile(match=match, composite=composite)


def create_parcel_client(settings: Settings) -> ParcelRegistryClient:
    """Build a parcel registry client from settings.

    Raises:
        ValueError: If registry credentials are not configured.
    """
    if not settings.parcel_registry_configured:
        msg = "Parcel registry credentials not configured. Set PARCEL_CLIENT_ID and PARCEL_CLIENT_SECRET."
        raise ValueError(msg)
    return ParcelRegistryClient(
        token_url=settings.parcel_token_url,
        search_url=settings.parcel_search_url,
        client_id=settings.parcel_client_id or "",
        client_secret=settings.parcel_client_secret or "",
        timeout=settings.parcel_timeout,
        scope=settings.parcel_scope,
    )


async def build_parcel_profile(
    store: BaseSpatialStore,
    provider: BaseMetricProvider,
    client: ParcelRegistryClient,
    designation_text: str,
    *,
    settings: Settings,
    parent_lookup: ParentLookup | None = None,
) -> ParcelProfile | None:
    """Profile the area around a parcel identified by its designation.

    The parcel's centre point is buffered into a square of
    ``settings.parcel_buffer_meters`` half-width and resolved like any
    drawn polygon.

    Returns:
        ParcelProfile, or None if the registry has no such parcel.

    Raises:
        ValueError: If the designation cannot be parsed or the parcel
            lies outside the service area.
        ParcelLookupError: If the registry fails or the parcel has no centre point.
    """
    designation = parse_designation(designation_text)
    if designation is None:
        msg = f"Invalid property designation: {designation_text!r}"
        raise ValueError(msg)

    parcel = await client.search(designation)
    if parcel is None:
        logger.info(f"No parcel found for {designation}")
        return None
    if parcel.longitude is None or parcel.latitude is None:
        msg = f"Parcel {parcel.designation} has no centre point"
        raise ParcelLookupError(msg)

    validate_service_area_coordinates(parcel.latitude, parcel.longitude)
    polygon = point_to_polygon(parcel.longitude, parcel.latitude, settings.parcel_buffer_meters)

    profile = await build_area_profile(store, provider, polygon, settings=settings, parent_lookup=parent_lookup)
    return ParcelProfile(parcel=parcel, profile=profile)
