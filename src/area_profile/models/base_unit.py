"""BaseUnit model — statistical base areas (e.g. DeSO) with their boundaries."""

from datetime import datetime
from typing import Any

from geoalchemy2 import Geometry
from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from area_profile.models.base import Base

# DeSO category letter (5th character of the code): A rural, B town, C urban
UNIT_CATEGORIES = ["A", "B", "C"]


class BaseUnit(Base):
    """Smallest statistical area the system reasons about."""

    __tablename__ = "base_units"

    unit_code: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    parent_code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    parent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    region_code: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    region_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    category: Mapped[str | None] = mapped_column(String(1), nullable=True)
    population: Mapped[int | None] = mapped_column(Integer, nullable=True)
    geometry: Mapped[Any] = mapped_column(
        Geometry(geometry_type="MULTIPOLYGON", srid=4326),
        nullable=False,
    )
    properties: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_base_units_geometry", "geometry", postgresql_using="gist"),)
