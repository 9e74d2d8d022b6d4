"""create_product_table

Revision ID: e7b1c2d3f401
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "e7b1c2d3f401"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Apply migration - create product table."""
    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("sold", sa.Boolean(), nullable=False),
        # ISO-8601 text, cast to a timestamp at query time
        sa.Column("date_of_sale", sa.String(length=40), nullable=False),
        sa.Column("image", sa.String(length=500), nullable=True),
        sa.Column(
            "loaded_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("price >= 0", name="ck_product_price_positive"),
    )
    op.create_index(op.f("ix_product_category"), "product", ["category"], unique=False)


def downgrade() -> None:
    """Revert migration - drop product table."""
    op.drop_index(op.f("ix_product_category"), table_name="product")
    op.drop_table("product")
