"""Base unit service — imports base unit layers into the base_units table."""

from pathlib import Path

from geoalchemy2.shape import from_shape
from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from area_profile.lib.resolver.parents import DEFAULT_PARENT_CODE_LENGTH
from area_profile.lib.unit_loader import load_units
from area_profile.models.base_unit import BaseUnit


async def import_base_units(
    session: AsyncSession,
    file_path: Path,
    parent_code_length: int = DEFAULT_PARENT_CODE_LENGTH,
) -> list[BaseUnit]:
    """Import base units from a file, upserting by unit code.

    Args:
        session: Database session.
        file_path: Path to shapefile, GeoPackage or GeoJSON file.
        parent_code_length: Code prefix length used when a feature has
            no explicit parent code.

    Returns:
        List of imported/updated BaseUnit records.
    """
    unit_data = load_units(file_path, parent_code_length)

    logger.info(f"Importing {len(unit_data)} base units from {file_path.name}")

    imported: list[BaseUnit] = []
    inserted = 0

    for data in unit_data:
        geom_wkb = from_shape(data.geometry, srid=4326)

        result = await session.execute(select(BaseUnit).where(BaseUnit.unit_code == data.unit_code))
        existing = result.scalar_one_or_none()

        if existing:
            existing.name = data.name
            existing.parent_code = data.parent_code
            existing.parent_name = data.parent_name
            existing.region_code = data.region_code
            existing.region_name = data.region_name
            existing.category = data.category
            existing.population = data.population
            existing.geometry = geom_wkb
            existing.properties = data.properties
            imported.append(existing)
        else:
            unit = BaseUnit(
                unit_code=data.unit_code,
                name=data.name,
                parent_code=data.parent_code,
                parent_name=data.parent_name,
                region_code=data.region_code,
                region_name=data.region_name,
                category=data.category,
                population=data.population,
                geometry=geom_wkb,
                properties=data.properties,
            )
            session.add(unit)
            imported.append(unit)
            inserted += 1

    await session.commit()

    logger.info(f"Imported {len(imported)} base units ({inserted} new, {len(imported) - inserted} updated)")
    return imported
