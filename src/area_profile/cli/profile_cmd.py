"""Area profile CLI commands: resolve, aggregate, profile and parcel.

Every command prints JSON on stdout. Base units come from ``--units``
(a GeoJSON, shapefile or GeoPackage layer held in memory) or, when that
is omitted, from the PostGIS ``base_units`` table. Metrics come from
``--metrics`` (a JSON document) or the configured HTTP provider.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import typer

from area_profile.core.config import Settings


def _echo_json(data: object) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(error: Exception) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


def read_polygon(path: Path) -> dict:
    """Read a GeoJSON polygon document; a FeatureCollection yields its first feature.

    Raises:
        ValueError: If the file is not JSON or the collection is empty.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        msg = f"{path} is not valid JSON: {e}"
        raise ValueError(msg) from e

    if isinstance(data, dict) and data.get("type") == "FeatureCollection":
        features = data.get("features") or []
        if not features:
            msg = f"{path} has no features"
            raise ValueError(msg)
        return features[0]
    return data


@asynccontextmanager
async def open_store(settings: Settings, units_file: Path | None) -> AsyncIterator:
    """Yield a spatial store for the command, releasing database resources on exit."""
    if units_file is not None:
        from area_profile.lib.unit_loader import load_store

        yield load_store(units_file, settings.parent_code_length)
        return

    from area_profile.core.database import dispose_engine, get_session_factory, init_engine_from_settings
    from area_profile.lib.spatial_store import PostGISSpatialStore

    init_engine_from_settings(settings)
    try:
        factory = get_session_factory()
        async with factory() as session:
            yield PostGISSpatialStore(session)
    finally:
        await dispose_engine()


def resolve(
    polygon_file: Path = typer.Argument(..., help="GeoJSON Polygon/MultiPolygon file", exists=True),  # noqa: B008
    units: Path | None = typer.Option(None, "--units", help="Base unit layer file", exists=True),  # noqa: B008
    min_overlap: float | None = typer.Option(None, "--min-overlap", help="Override the minimum overlap ratio"),
) -> None:
    """Resolve a polygon to statistical base units."""
    asyncio.run(_resolve(polygon_file, units, min_overlap))


async def _resolve(polygon_file: Path, units_file: Path | None, min_overlap: float | None) -> None:
    """Async implementation of resolve."""
    from area_profile.core.config import get_settings
    from area_profile.lib.resolver import ResolutionError, parse_polygon, resolve_area

    settings = get_settings()
    threshold = min_overlap if min_overlap is not None else settings.min_overlap_threshold

    try:
        polygon = parse_polygon(read_polygon(polygon_file))
        async with open_store(settings, units_file) as store:
            match = await resolve_area(store, polygon, min_overlap_threshold=threshold)
    except (ValueError, RuntimeError, ResolutionError) as e:
        raise _fail(e) from e

    _echo_json(match.to_dict())


def aggregate(
    codes: list[str] = typer.Argument(..., help="Base unit codes"),  # noqa: B008
    units: Path | None = typer.Option(None, "--units", help="Base unit layer file", exists=True),  # noqa: B008
    metrics: Path | None = typer.Option(None, "--metrics", help="Metrics JSON file", exists=True),  # noqa: B008
) -> None:
    """Aggregate metrics for a list of base unit codes."""
    asyncio.run(_aggregate(codes, units, metrics))


async def _aggregate(codes: list[str], units_file: Path | None, metrics_file: Path | None) -> None:
    """Async implementation of aggregate.

    Parents come from the unit layer or the database when either is
    available, and from the code prefix otherwise.
    """
    from area_profile.core.config import get_settings
    from area_profile.lib.aggregator import AggregationError, aggregate_units
    from area_profile.lib.provider import get_metric_provider
    from area_profile.lib.resolver import ParentLookup

    settings = get_settings()

    try:
        provider = get_metric_provider(settings, metrics_file)
        parent_lookup = ParentLookup(settings.parent_code_length)
        if units_file is not None or settings.database_url:
            async with open_store(settings, units_file) as store:
                parent_lookup = await ParentLookup.from_store(store, settings.parent_code_length)
        composite = await aggregate_units(
            provider,
            codes,
            parent_lookup=parent_lookup,
            national_code=settings.national_code,
        )
    except (ValueError, RuntimeError, AggregationError) as e:
        raise _fail(e) from e

    _echo_json(composite.model_dump(mode="json"))


def profile(
    polygon_file: Path = typer.Argument(..., help="GeoJSON Polygon/MultiPolygon file", exists=True),  # noqa: B008
    units: Path | None = typer.Option(None, "--units", help="Base unit layer file", exists=True),  # noqa: B008
    metrics: Path | None = typer.Option(None, "--metrics", help="Metrics JSON file", exists=True),  # noqa: B008
) -> None:
    """Resolve a polygon and aggregate metrics for its base units."""
    asyncio.run(_profile(polygon_file, units, metrics))


async def _profile(polygon_file: Path, units_file: Path | None, metrics_file: Path | None) -> None:
    """Async implementation of profile."""
    from area_profile.core.config import get_settings
    from area_profile.lib.aggregator import AggregationError
    from area_profile.lib.provider import get_metric_provider
    from area_profile.lib.resolver import ResolutionError, parse_polygon
    from area_profile.services.profile_service import build_area_profile

    settings = get_settings()

    try:
        polygon = parse_polygon(read_polygon(polygon_file))
        provider = get_metric_provider(settings, metrics_file)
        async with open_store(settings, units_file) as store:
            result = await build_area_profile(store, provider, polygon, settings=settings)
    except (ValueError, RuntimeError, ResolutionError, AggregationError) as e:
        raise _fail(e) from e

    _echo_json(result.to_dict())


def parcel(
    designation: str = typer.Argument(..., help='Property designation, e.g. "UMEÅ TOLVMANSGÅRDEN 4"'),
    units: Path | None = typer.Option(None, "--units", help="Base unit layer file", exists=True),  # noqa: B008
    metrics: Path | None = typer.Option(None, "--metrics", help="Metrics JSON file", exists=True),  # noqa: B008
) -> None:
    """Profile the area around a parcel identified by its property designation."""
    asyncio.run(_parcel(designation, units, metrics))


async def _parcel(designation: str, units_file: Path | None, metrics_file: Path | None) -> None:
    """Async implementation of parcel."""
    from area_profile.core.config import get_settings
    from area_profile.lib.aggregator import AggregationError
    from area_profile.lib.parcel import ParcelLookupError
    from area_profile.lib.provider import get_metric_provider
    from area_profile.lib.resolver import ResolutionError
    from area_profile.services.profile_service import build_parcel_profile, create_parcel_client

    settings = get_settings()

    try:
        client = create_parcel_client(settings)
        provider = get_metric_provider(settings, metrics_file)
        async with open_store(settings, units_file) as store:
            result = await build_parcel_profile(store, provider, client, designation, settings=settings)
    except (ValueError, RuntimeError, ParcelLookupError, ResolutionError, AggregationError) as e:
        raise _fail(e) from e

    if result is None:
        typer.echo(f"No parcel found for {designation}", err=True)
        raise typer.Exit(code=1)

    _echo_json(result.to_dict())
