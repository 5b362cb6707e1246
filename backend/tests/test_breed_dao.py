"""
Rabbitry Backend — Breed Data Access Tests
===========================================

What:  Statement-level behavior of BreedDao.
How:   Runs against the per-test in-memory SQLite database, plus a mocked
       session for the IntegrityError translation.

What we test:
    ✅ Insert returns a generated ID; duplicate names raise DuplicateNameError
    ✅ Ordering of breeds, category names and alternate names
    ✅ Category reuse-or-create
    ✅ Update/delete report unknown IDs as False
    ✅ Deleting a breed cascades to alt_name and breed_category
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import sqlite
from sqlalchemy.exc import IntegrityError

from rabbitry.exceptions import DuplicateNameError
from rabbitry.services.breed_dao import BreedDao


async def _in_transaction(session_factory, work):
    async with session_factory() as session:
        async with session.begin():
            return await work(BreedDao(session))


class TestBreedRows:
    """Tests for the base breed statements."""

    @pytest.mark.asyncio
    async def test_insert_returns_generated_id(self, session_factory):
        async def work(dao):
            breed_id = await dao.insert_breed("Holland Lop", "Compact lop-eared breed.")
            return breed_id, await dao.fetch_breed(breed_id)

        breed_id, breed = await _in_transaction(session_factory, work)

        assert breed_id > 0
        assert breed.name == "Holland Lop"
        assert breed.description == "Compact lop-eared breed."

    @pytest.mark.asyncio
    async def test_insert_duplicate_name_raises(self, session_factory):
        await _in_transaction(session_factory, lambda dao: dao.insert_breed("Rex", "Velvet coat."))

        async def work(dao):
            with pytest.raises(DuplicateNameError) as exc_info:
                await dao.insert_breed("Rex", "Another velvet coat.")
            return exc_info.value

        error = await _in_transaction(session_factory, work)
        assert error.message == "Duplicate key"
        assert error.context["name"] == "Rex"

    @pytest.mark.asyncio
    async def test_insert_translates_integrity_error(self, mock_db_session):
        """Driver text never reaches the message."""
        mock_db_session.execute.side_effect = IntegrityError(
            "INSERT INTO breed ...", {}, Exception("UNIQUE constraint failed: breed.name")
        )

        with pytest.raises(DuplicateNameError) as exc_info:
            await BreedDao(mock_db_session).insert_breed("Rex", "Velvet coat.")

        assert "breed.name" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_fetch_breed_missing_returns_none(self, session_factory):
        breed = await _in_transaction(session_factory, lambda dao: dao.fetch_breed(404))
        assert breed is None

    @pytest.mark.asyncio
    async def test_fetch_all_breeds_sorted_by_name(self, session_factory):
        async def work(dao):
            for name in ("Rex", "Angora", "Mini Lop"):
                await dao.insert_breed(name, "Some description.")
            return await dao.fetch_all_breeds()

        breeds = await _in_transaction(session_factory, work)
        assert [b.name for b in breeds] == ["Angora", "Mini Lop", "Rex"]

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_false(self, session_factory):
        updated = await _in_transaction(
            session_factory, lambda dao: dao.update_breed(999, "Rex", "Velvet coat.")
        )
        assert updated is False

    @pytest.mark.asyncio
    async def test_update_existing_breed(self, session_factory):
        async def work(dao):
            breed_id = await dao.insert_breed("Rex", "Velvet coat.")
            updated = await dao.update_breed(breed_id, "Mini Rex", "Smaller velvet coat.")
            return updated, await dao.fetch_breed(breed_id)

        updated, breed = await _in_transaction(session_factory, work)
        assert updated is True
        assert breed.name == "Mini Rex"

    @pytest.mark.asyncio
    async def test_delete_unknown_id_returns_false(self, session_factory):
        deleted = await _in_transaction(session_factory, lambda dao: dao.delete_breed(999))
        assert deleted is False


class TestChildRows:
    """Tests for categories, links and alternate names."""

    @pytest.mark.asyncio
    async def test_fetch_or_create_category_reuses_by_name(self, session_factory):
        async def work(dao):
            first = await dao.fetch_or_create_category("smooth")
            second = await dao.fetch_or_create_category("smooth")
            other = await dao.fetch_or_create_category("spotted")
            return first, second, other

        first, second, other = await _in_transaction(session_factory, work)
        assert first.id == second.id
        assert other.id != first.id
        assert other.name == "spotted"

    @pytest.mark.asyncio
    async def test_child_names_sorted_lexically(self, session_factory):
        async def work(dao):
            breed_id = await dao.insert_breed("Dwarf Lop", "Small show breed.")
            for name in ("spotted", "lop-eared", "smooth"):
                category = await dao.fetch_or_create_category(name)
                await dao.insert_breed_category_link(breed_id, category.id)
            for name in ("Mini Lop", "Klein Widder"):
                await dao.insert_alternate_name(breed_id, name)
            return (
                await dao.fetch_category_names(breed_id),
                await dao.fetch_alternate_names(breed_id),
            )

        categories, alternates = await _in_transaction(session_factory, work)
        assert categories == ["lop-eared", "smooth", "spotted"]
        assert alternates == ["Klein Widder", "Mini Lop"]

    @pytest.mark.asyncio
    async def test_delete_children_leaves_categories(self, session_factory, row_counts):
        async def work(dao):
            breed_id = await dao.insert_breed("Dwarf Lop", "Small show breed.")
            category = await dao.fetch_or_create_category("smooth")
            await dao.insert_breed_category_link(breed_id, category.id)
            await dao.insert_alternate_name(breed_id, "Klein Widder")
            await dao.delete_alternate_names(breed_id)
            await dao.delete_breed_category_links(breed_id)

        await _in_transaction(session_factory, work)

        counts = await row_counts()
        assert counts["alt_name"] == 0
        assert counts["breed_category"] == 0
        assert counts["category"] == 1

    @pytest.mark.asyncio
    async def test_delete_breed_cascades_to_children(self, session_factory, row_counts):
        async def setup(dao):
            breed_id = await dao.insert_breed("Dwarf Lop", "Small show breed.")
            category = await dao.fetch_or_create_category("smooth")
            await dao.insert_breed_category_link(breed_id, category.id)
            await dao.insert_alternate_name(breed_id, "Klein Widder")
            return breed_id

        breed_id = await _in_transaction(session_factory, setup)
        deleted = await _in_transaction(session_factory, lambda dao: dao.delete_breed(breed_id))

        assert deleted is True
        counts = await row_counts()
        assert counts == {"breed": 0, "category": 1, "alt_name": 0, "breed_category": 0}

    @pytest.mark.asyncio
    async def test_category_insert_statement_follows_dialect(self, mock_db_session):
        """SQLite gets ON CONFLICT DO NOTHING."""
        missing = MagicMock()
        missing.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = missing

        await BreedDao(mock_db_session).fetch_or_create_category("smooth")

        assert mock_db_session.execute.await_count == 3
        insert_stmt = mock_db_session.execute.await_args_list[1].args[0]
        compiled = str(insert_stmt.compile(dialect=sqlite.dialect()))
        assert "ON CONFLICT (name) DO NOTHING" in compiled
