"""ORM model registry — import all models so Alembic autogenerate discovers them."""

from area_profile.models.base_unit import BaseUnit

__all__ = [
    "BaseUnit",
]
