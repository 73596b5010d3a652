"""Import CLI commands for base unit layers."""

import asyncio
from pathlib import Path

import typer

import_app = typer.Typer()


@import_app.command("units")
def import_units_cmd(
    file: Path = typer.Argument(..., help="Path to GeoJSON, shapefile or GeoPackage", exists=True),  # noqa: B008
) -> None:
    """Import base unit boundaries into the database."""
    asyncio.run(_import_units(file))


async def _import_units(file_path: Path) -> None:
    """Async implementation of base unit import."""
    from area_profile.core.config import get_settings
    from area_profile.core.database import dispose_engine, get_session_factory, init_engine_from_settings
    from area_profile.services.base_unit_service import import_base_units

    settings = get_settings()
    try:
        init_engine_from_settings(settings)
    except RuntimeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    try:
        factory = get_session_factory()
        async with factory() as session:
            units = await import_base_units(session, file_path, settings.parent_code_length)
            parents = {u.parent_code for u in units}
            typer.echo(f"Imported {len(units)} base units")
            typer.echo(f"  Parents: {len(parents)}")
            typer.echo(f"  File:    {file_path.name}")
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()
