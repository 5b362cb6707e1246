"""
Rabbitry Backend — Breed Data Access
=====================================

What:  Every SQL statement the service issues, one method per statement
       (or per short fixed sequence for category lookup).
How:   SQLAlchemy select/insert/update/delete constructs executed on the
       AsyncSession handed to the constructor. Values always travel as
       bound parameters.
Who:   Constructed by BreedService inside an open transaction; never commits
       or rolls back itself.

Return conventions:
    - Missing rows come back as None / False, not as exceptions. Deciding
      that a missing breed is an error is BreedService's job.
    - A unique-constraint hit on breed.name becomes DuplicateNameError here,
      because only this layer knows which statement tripped it.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rabbitry.exceptions import DuplicateNameError
from rabbitry.models.breed import AlternateName, Breed, Category, breed_category

logger = logging.getLogger(__name__)


class BreedDao:
    """Statement-level access to the breed, category, alt_name and breed_category tables."""

    def __init__(self, session: AsyncSession):
        self._session = session

    # ── Breeds ────────────────────────────────────────────────────────────

    async def fetch_all_breeds(self) -> List[Breed]:
        """Base breed rows only, ordered by name."""
        result = await self._session.execute(select(Breed).order_by(Breed.name))
        return list(result.scalars().all())

    async def fetch_breed(self, breed_id: int) -> Optional[Breed]:
        result = await self._session.execute(select(Breed).where(Breed.id == breed_id))
        return result.scalar_one_or_none()

    async def insert_breed(self, name: str, description: str) -> int:
        """
        Insert a base breed row.

        Returns:
            The generated breed ID.

        Raises:
            DuplicateNameError: A breed with this name already exists.
        """
        stmt = insert(Breed).values(name=name, description=description).returning(Breed.id)
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as e:
            logger.warning("Duplicate breed name rejected: %s", name)
            raise DuplicateNameError(
                name=name, context={"driver_error": type(e.orig).__name__}
            ) from e
        breed_id = result.scalar_one()
        logger.debug("Inserted breed %d (%s)", breed_id, name)
        return breed_id

    async def update_breed(self, breed_id: int, name: str, description: str) -> bool:
        """
        Overwrite name and description of an existing breed.

        Returns:
            False when no breed has this ID.

        Raises:
            DuplicateNameError: The new name belongs to another breed.
        """
        stmt = (
            update(Breed)
            .where(Breed.id == breed_id)
            .values(name=name, description=description)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as e:
            logger.warning("Duplicate breed name rejected on update of %d: %s", breed_id, name)
            raise DuplicateNameError(
                name=name, context={"breed_id": breed_id, "driver_error": type(e.orig).__name__}
            ) from e
        return result.rowcount == 1

    async def delete_breed(self, breed_id: int) -> bool:
        """Delete the base row; alt_name and breed_category rows go with it via ON DELETE CASCADE."""
        stmt = (
            delete(Breed)
            .where(Breed.id == breed_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    # ── Alternate names ───────────────────────────────────────────────────

    async def fetch_alternate_names(self, breed_id: int) -> List[str]:
        stmt = (
            select(AlternateName.name)
            .where(AlternateName.breed_id == breed_id)
            .order_by(AlternateName.name)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def insert_alternate_name(self, breed_id: int, name: str) -> None:
        await self._session.execute(insert(AlternateName).values(breed_id=breed_id, name=name))

    async def delete_alternate_names(self, breed_id: int) -> None:
        stmt = (
            delete(AlternateName)
            .where(AlternateName.breed_id == breed_id)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    # ── Categories ────────────────────────────────────────────────────────

    async def fetch_category_names(self, breed_id: int) -> List[str]:
        """Names of the categories linked to a breed, via breed_category, sorted."""
        stmt = (
            select(Category.name)
            .join(breed_category, breed_category.c.category_id == Category.id)
            .where(breed_category.c.breed_id == breed_id)
            .order_by(Category.name)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def fetch_or_create_category(self, name: str) -> Category:
        """
        Return the category with this name, creating it first if needed.

        Lookup → insert-if-absent → lookup again. The insert ignores a
        unique-name conflict (PostgreSQL and SQLite), so when two
        transactions create the same new category at once both end up
        holding the single row that won.
        """
        category = await self._fetch_category_by_name(name)
        if category is not None:
            return category

        await self._session.execute(self._insert_category_stmt(name))
        category = await self._fetch_category_by_name(name)
        logger.debug("Created category %s (id=%s)", name, category.id if category else None)
        return category

    async def insert_breed_category_link(self, breed_id: int, category_id: int) -> None:
        await self._session.execute(
            insert(breed_category).values(breed_id=breed_id, category_id=category_id)
        )

    async def delete_breed_category_links(self, breed_id: int) -> None:
        await self._session.execute(
            delete(breed_category).where(breed_category.c.breed_id == breed_id)
        )

    async def _fetch_category_by_name(self, name: str) -> Optional[Category]:
        result = await self._session.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    def _insert_category_stmt(self, name: str):
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            return (
                postgresql.insert(Category)
                .values(name=name)
                .on_conflict_do_nothing(index_elements=[Category.name])
            )
        if dialect == "sqlite":
            return (
                sqlite.insert(Category)
                .values(name=name)
                .on_conflict_do_nothing(index_elements=[Category.name])
            )
        return insert(Category).values(name=name)
