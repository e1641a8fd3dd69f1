"""Integration tests for the SQLAlchemy profile repository."""

from datetime import date
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import ProfileConflictError
from domain.entities.profile import Experience, Profile
from infrastructure.database.repositories.sqlalchemy_profile_repo import _is_duplicate_owner
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from tests.conftest import insert_user


@pytest.fixture
async def owner_id(session_factory: async_sessionmaker[AsyncSession]) -> UUID:
    """A provisioned user that profiles can belong to."""
    user_id = uuid4()
    await insert_user(session_factory, user_id, "owner@example.com", "Owner")
    return user_id


async def _create_profile(uow_factory, user_id) -> Profile:
    async with uow_factory() as uow:
        profile = await uow.profiles.create(
            Profile.create(user_id, {"status": "Developer", "skills": "python, sql"})
        )
        await uow.commit()
    return profile


class TestSQLAlchemyProfileRepository:
    @pytest.mark.asyncio
    async def test_create_sets_initial_version(self, uow_factory, owner_id: UUID) -> None:
        profile = await _create_profile(uow_factory, owner_id)

        assert profile.version == 1
        assert profile.skills == ["python", "sql"]

    @pytest.mark.asyncio
    async def test_second_profile_for_same_user_conflicts(
        self, uow_factory, owner_id: UUID
    ) -> None:
        await _create_profile(uow_factory, owner_id)

        with pytest.raises(ProfileConflictError):
            await _create_profile(uow_factory, owner_id)

    @pytest.mark.asyncio
    async def test_create_without_owner_row_is_not_a_conflict(self, uow_factory) -> None:
        with pytest.raises(IntegrityError):
            await _create_profile(uow_factory, uuid4())

        async with uow_factory() as uow:
            assert await uow.profiles.get_all_with_owner() == []

    @pytest.mark.asyncio
    async def test_update_bumps_version_and_keeps_entries(
        self, uow_factory, owner_id: UUID
    ) -> None:
        await _create_profile(uow_factory, owner_id)

        async with uow_factory() as uow:
            profile = await uow.profiles.get_by_user(owner_id)
            assert profile is not None
            profile.add_experience(
                Experience(title="Engineer", company="Acme", from_date=date(2020, 1, 1))
            )
            updated = await uow.profiles.update(profile)
            await uow.commit()

        assert updated.version == 2
        async with uow_factory() as uow:
            stored = await uow.profiles.get_by_user(owner_id)

        assert stored is not None
        assert [e.title for e in stored.experience] == ["Engineer"]
        assert stored.experience[0].from_date == date(2020, 1, 1)
        assert stored.experience[0].to_date is None

    @pytest.mark.asyncio
    async def test_stale_write_is_rejected(self, uow_factory, owner_id: UUID) -> None:
        await _create_profile(uow_factory, owner_id)

        async with uow_factory() as uow:
            stale = await uow.profiles.get_by_user(owner_id)
        assert stale is not None

        async with uow_factory() as uow:
            fresh = await uow.profiles.get_by_user(owner_id)
            assert fresh is not None
            fresh.apply({"company": "First"})
            await uow.profiles.update(fresh)
            await uow.commit()

        stale.apply({"company": "Second"})
        with pytest.raises(ProfileConflictError):
            async with uow_factory() as uow:
                await uow.profiles.update(stale)
                await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.profiles.get_by_user(owner_id)
        assert stored is not None
        assert stored.company == "First"

    @pytest.mark.asyncio
    async def test_get_with_owner_joins_user_summary(
        self,
        uow_factory,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        user_id = uuid4()
        await insert_user(session_factory, user_id, "jane@example.com", "Jane", "jane.png")
        await _create_profile(uow_factory, user_id)

        async with uow_factory() as uow:
            result = await uow.profiles.get_with_owner_by_user(user_id)
            everything = await uow.profiles.get_all_with_owner()

        assert result is not None
        assert result.owner is not None
        assert result.owner.name == "Jane"
        assert result.owner.avatar == "jane.png"
        assert len(everything) == 1

    @pytest.mark.asyncio
    async def test_delete_by_user(self, uow_factory, owner_id: UUID) -> None:
        await _create_profile(uow_factory, owner_id)

        async with uow_factory() as uow:
            assert await uow.profiles.delete_by_user(owner_id) is True
            assert await uow.profiles.delete_by_user(uuid4()) is False
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.profiles.get_by_user(owner_id) is None

    @pytest.mark.asyncio
    async def test_uow_property_requires_context(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        uow = SQLAlchemyUnitOfWork(session_factory)

        with pytest.raises(RuntimeError):
            uow.profiles


class TestDuplicateOwnerDetection:
    @pytest.mark.parametrize(
        "message",
        [
            "UNIQUE constraint failed: profiles.user_id",
            'duplicate key value violates unique constraint "ix_profiles_user_id"',
        ],
    )
    def test_unique_owner_violation(self, message: str) -> None:
        error = IntegrityError("INSERT INTO profiles", {}, Exception(message))

        assert _is_duplicate_owner(error) is True

    @pytest.mark.parametrize(
        "message",
        [
            "FOREIGN KEY constraint failed",
            'insert or update on table "profiles" violates foreign key constraint '
            '"profiles_user_id_fkey"',
            'duplicate key value violates unique constraint "profiles_pkey"',
        ],
    )
    def test_other_integrity_failures(self, message: str) -> None:
        error = IntegrityError("INSERT INTO profiles", {}, Exception(message))

        assert _is_duplicate_owner(error) is False
