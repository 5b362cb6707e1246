"""Create breed, category, alt_name and breed_category tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema for the breed catalogue.
How:   Child tables reference breed with ON DELETE CASCADE so deleting a
       breed removes its alternate names and category links in the database.

Rollback: downgrade() drops all four tables (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "breed",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "name",
            sa.String(64),
            nullable=False,
            comment="Breed name, unique across all breeds",
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "alt_name",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("breed_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.ForeignKeyConstraint(["breed_id"], ["breed.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_alt_name_breed_id", "alt_name", ["breed_id"])

    # No primary key: one request may link the same category twice
    op.create_table(
        "breed_category",
        sa.Column("breed_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["breed_id"], ["breed.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["category.id"]),
    )
    op.create_index("ix_breed_category_breed_id", "breed_category", ["breed_id"])


def downgrade() -> None:
    op.drop_index("ix_breed_category_breed_id", table_name="breed_category")
    op.drop_table("breed_category")
    op.drop_index("ix_alt_name_breed_id", table_name="alt_name")
    op.drop_table("alt_name")
    op.drop_table("category")
    op.drop_table("breed")
