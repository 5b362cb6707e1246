"""
Rabbitry Backend — Breed SQLAlchemy Models
===========================================

What:  ORM mappings for the four tables behind a breed aggregate.
Who:   Queried by BreedDao; read by Alembic for migrations and by the test
       fixtures to build the SQLite schema.

Tables:
    breed            id PK, name UNIQUE, description
    category         id PK, name UNIQUE
    alt_name         id PK, breed_id → breed (ON DELETE CASCADE), name
    breed_category   breed_id → breed (ON DELETE CASCADE), category_id → category

    breed 1 ──< alt_name
    breed 1 ──< breed_category >── 1 category

Deleting a breed removes its alt_name and breed_category rows in the
database itself; the application never deletes children explicitly on the
delete path.

breed_category is a plain Table without a primary key: a request that names
the same category twice links it twice.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from rabbitry.database import Base

# Largest value an INTEGER id column holds (PostgreSQL int4)
BREED_ID_MAX = 2**31 - 1
BREED_NAME_MAX = 64
DESCRIPTION_MAX = 4096
CATEGORY_NAME_MAX = 32
ALTERNATE_NAME_MAX = 64


class Breed(Base):
    """
    A rabbit breed's base row. Categories and alternate names live in their
    own tables and are attached by BreedService.
    """

    __tablename__ = "breed"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(BREED_NAME_MAX),
        nullable=False,
        unique=True,
        comment="Breed name, unique across all breeds",
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Breed(id={self.id}, name='{self.name}')>"


class Category(Base):
    """A shared tag; created the first time any breed names it, never deleted."""

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(CATEGORY_NAME_MAX), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"


class AlternateName(Base):
    """A secondary name owned by exactly one breed."""

    __tablename__ = "alt_name"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    breed_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("breed.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(ALTERNATE_NAME_MAX), nullable=False)

    def __repr__(self) -> str:
        return f"<AlternateName(breed_id={self.breed_id}, name='{self.name}')>"


breed_category = Table(
    "breed_category",
    Base.metadata,
    Column(
        "breed_id",
        Integer,
        ForeignKey("breed.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("category_id", Integer, ForeignKey("category.id"), nullable=False),
)
