"""Create base_units table.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

import geoalchemy2  # noqa: F401
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")
    op.create_table(
        "base_units",
        sa.Column("unit_code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("parent_code", sa.String(20), nullable=False),
        sa.Column("parent_name", sa.String(200), nullable=True),
        sa.Column("region_code", sa.String(20), nullable=True),
        sa.Column("region_name", sa.String(200), nullable=True),
        sa.Column("category", sa.String(1), nullable=True),
        sa.Column("population", sa.Integer(), nullable=True),
        sa.Column(
            "geometry",
            geoalchemy2.types.Geometry(
                geometry_type="MULTIPOLYGON",
                srid=4326,
                from_text="ST_GeomFromEWKT",
                spatial_index=False,
            ),
            nullable=False,
        ),
        sa.Column("properties", postgresql.JSONB(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("unit_code"),
    )
    op.create_index("ix_base_units_parent_code", "base_units", ["parent_code"])
    op.create_index("ix_base_units_region_code", "base_units", ["region_code"])
    op.create_index("idx_base_units_geometry", "base_units", ["geometry"], postgresql_using="gist")


def downgrade() -> None:
    op.drop_index("idx_base_units_geometry", table_name="base_units")
    op.drop_index("ix_base_units_region_code", table_name="base_units")
    op.drop_index("ix_base_units_parent_code", table_name="base_units")
    op.drop_table("base_units")
