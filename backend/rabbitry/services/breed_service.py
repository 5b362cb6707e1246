"""
Rabbitry Backend — Breed Service (Aggregate Assembly)
======================================================

What:  The five breed operations: list, get, add, modify, delete.
How:   Each public method opens one session and one transaction from the
       session factory given to the constructor, drives BreedDao through a
       fixed sequence of statements and assembles BreedRecord aggregates.
Who:   Called by the breed routes through the `get_breed_service` dependency.

Aggregate assembly:
    breed row ──┬── fetch_category_names(id)   → categoryNames (sorted)
                └── fetch_alternate_names(id)  → alternateNames (sorted)

Write paths:
    add     insert breed → reuse-or-create + link each category (request
            order) → insert each alternate name (request order)
    modify  update breed (0 rows → not found, nothing else touched) →
            delete all alternate names and category links → reinsert as in add
    delete  load full aggregate (not found → 404) → delete breed row
            (0 rows → DeleteFailedError); children go by ON DELETE CASCADE

Transactions:
    Any exception inside an operation rolls back everything that operation
    wrote. SQLAlchemy failures that no lower layer classified are logged
    with traceback and re-raised as DatabaseError.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rabbitry.database import async_session_factory
from rabbitry.exceptions import BreedNotFoundError, DatabaseError, DeleteFailedError
from rabbitry.models.breed import Breed
from rabbitry.schemas.breed import AddBreedRequest, BreedRecord
from rabbitry.services.breed_dao import BreedDao

logger = logging.getLogger(__name__)


class BreedService:
    """
    Business logic layer for breed operations.

    Holds nothing but the session factory, so one instance can serve any
    number of concurrent requests.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str, read_only: bool = False) -> AsyncIterator[BreedDao]:
        """
        Open a session, begin a transaction and hand out a BreedDao bound to it.

        Commits when the block exits normally, rolls back on any exception.
        """
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    if read_only and session.get_bind().dialect.name == "postgresql":
                        await session.execute(text("SET TRANSACTION READ ONLY"))
                    yield BreedDao(session)
            except SQLAlchemyError as e:
                logger.error("Database error in %s: %s", operation, str(e), exc_info=True)
                raise DatabaseError(
                    context={"operation": operation, "error_type": type(e).__name__},
                ) from e

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_breeds(self) -> List[BreedRecord]:
        """All breeds ordered by name, each with its categories and alternate names."""
        logger.info("Listing breeds")
        async with self._transaction("list_breeds", read_only=True) as dao:
            breeds = await dao.fetch_all_breeds()
            return [await self._assemble(dao, breed) for breed in breeds]

    async def get_breed(self, breed_id: int) -> BreedRecord:
        """
        Retrieve one breed aggregate.

        Raises:
            BreedNotFoundError: No breed has this ID (→ 404)
        """
        logger.info("Getting breed with ID=%d", breed_id)
        async with self._transaction("get_breed", read_only=True) as dao:
            return await self._load(dao, breed_id)

    # ── Writes ────────────────────────────────────────────────────────────

    async def add_breed(self, request: AddBreedRequest) -> BreedRecord:
        """
        Create a breed with its categories and alternate names.

        Returns:
            The new breed with its generated ID; child lists are echoed in
            request order.

        Raises:
            DuplicateNameError: The name is taken (→ 409); nothing is written.
        """
        logger.info("Adding breed %s", request.name)
        async with self._transaction("add_breed") as dao:
            breed_id = await dao.insert_breed(request.name, request.description)
            await self._insert_children(dao, breed_id, request.category_names, request.alternate_names)

        logger.info("Breed %s stored with ID=%d", request.name, breed_id)
        return BreedRecord(id=breed_id, **request.model_dump())

    async def modify_breed(self, breed: BreedRecord) -> BreedRecord:
        """
        Replace a breed's name, description and both child lists.

        Children are not diffed: all existing alternate names and category
        links are deleted and the submitted ones inserted.

        Raises:
            BreedNotFoundError: No breed has this ID; children are left alone.
            DuplicateNameError: The new name belongs to another breed.
        """
        logger.info("Modifying breed with ID=%d", breed.id)
        async with self._transaction("modify_breed") as dao:
            if not await dao.update_breed(breed.id, breed.name, breed.description):
                raise BreedNotFoundError(breed.id)
            await dao.delete_alternate_names(breed.id)
            await dao.delete_breed_category_links(breed.id)
            await self._insert_children(dao, breed.id, breed.category_names, breed.alternate_names)
        return breed

    async def delete_breed(self, breed_id: int) -> None:
        """
        Delete a breed and, through the database cascade, its child rows.

        Raises:
            BreedNotFoundError: No breed has this ID (→ 404)
            DeleteFailedError: The breed was read but the delete hit no row (→ 500)
        """
        logger.info("Deleting breed with ID=%d", breed_id)
        async with self._transaction("delete_breed") as dao:
            await self._load(dao, breed_id)
            if not await dao.delete_breed(breed_id):
                raise DeleteFailedError(breed_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, dao: BreedDao, breed_id: int) -> BreedRecord:
        breed = await dao.fetch_breed(breed_id)
        if breed is None:
            raise BreedNotFoundError(breed_id)
        return await self._assemble(dao, breed)

    @staticmethod
    async def _assemble(dao: BreedDao, breed: Breed) -> BreedRecord:
        return BreedRecord(
            id=breed.id,
            name=breed.name,
            description=breed.description,
            category_names=await dao.fetch_category_names(breed.id),
            alternate_names=await dao.fetch_alternate_names(breed.id),
        )

    @staticmethod
    async def _insert_children(
        dao: BreedDao,
        breed_id: int,
        category_names: List[str],
        alternate_names: List[str],
    ) -> None:
        for category_name in category_names:
            category = await dao.fetch_or_create_category(category_name)
            await dao.insert_breed_category_link(breed_id, category.id)
        for alternate_name in alternate_names:
            await dao.insert_alternate_name(breed_id, alternate_name)


def get_breed_service() -> BreedService:
    """FastAPI dependency: a BreedService bound to the application's session factory."""
    return BreedService(async_session_factory)
