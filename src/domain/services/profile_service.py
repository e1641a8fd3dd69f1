"""Profile service layer with business logic."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import ProfileNotFoundError
from domain.entities.profile import (
    Education,
    Experience,
    Profile,
    ProfileFields,
    ProfileWithOwner,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ProfileService:
    """Service layer for the Profile aggregate.

    Every operation runs in its own Unit of Work. Writes follow a
    fetch, modify, persist cycle; the repository's version guard turns a
    concurrent write into a ``ProfileConflictError`` instead of a lost update.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_own_profile(self, user_id: UUID) -> ProfileWithOwner:
        """Get the caller's profile with owner name and avatar."""
        async with self._uow_factory() as uow:
            result = await uow.profiles.get_with_owner_by_user(user_id)
            if not result:
                raise ProfileNotFoundError("There is no profile for this user")
            return result

    async def list_profiles(self) -> list[ProfileWithOwner]:
        """Get all profiles with owner name and avatar."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get_all_with_owner()  # type: ignore[no-any-return]

    async def get_profile_by_user_id(self, raw_user_id: str) -> ProfileWithOwner:
        """Public lookup by user id.

        A malformed id and an unknown id both raise the same
        ``ProfileNotFoundError``.
        """
        try:
            user_id = UUID(raw_user_id)
        except ValueError:
            raise ProfileNotFoundError() from None

        async with self._uow_factory() as uow:
            result = await uow.profiles.get_with_owner_by_user(user_id)
            if not result:
                raise ProfileNotFoundError()
            return result

    async def upsert_profile(self, user_id: UUID, fields: ProfileFields) -> Profile:
        """Create the caller's profile, or merge ``fields`` into the existing one."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_user(user_id)
            if profile:
                profile.apply(fields)
                saved = await uow.profiles.update(profile)
                event = "profile_updated"
            else:
                saved = await uow.profiles.create(Profile.create(user_id, fields))
                event = "profile_created"
            await uow.commit()

        logger.info(event, user_id=str(user_id), fields=sorted(fields))
        return saved

    async def add_experience(self, user_id: UUID, entry: Experience) -> Profile:
        """Insert an experience entry at the front of the caller's list."""
        return await self._edit(
            user_id,
            lambda profile: profile.add_experience(entry),
            "experience_added",
        )

    async def remove_experience(self, user_id: UUID, experience_id: str) -> Profile:
        """Remove an experience entry. Unknown ids leave the list unchanged."""
        entry_id = _normalize_entry_id(experience_id)
        return await self._edit(
            user_id,
            lambda profile: profile.remove_experience(entry_id),
            "experience_removed",
        )

    async def add_education(self, user_id: UUID, entry: Education) -> Profile:
        """Insert an education entry at the front of the caller's list."""
        return await self._edit(
            user_id,
            lambda profile: profile.add_education(entry),
            "education_added",
        )

    async def remove_education(self, user_id: UUID, education_id: str) -> Profile:
        """Remove an education entry. Unknown ids leave the list unchanged."""
        entry_id = _normalize_entry_id(education_id)
        return await self._edit(
            user_id,
            lambda profile: profile.remove_education(entry_id),
            "education_removed",
        )

    async def _edit(
        self,
        user_id: UUID,
        mutate: Callable[[Profile], object],
        event: str,
    ) -> Profile:
        """Apply an in-memory edit to the caller's profile and persist it.

        The caller must already have a profile; list edits never create one.
        """
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_user(user_id)
            if not profile:
                raise ProfileNotFoundError("There is no profile for this user")

            outcome = mutate(profile)
            saved = await uow.profiles.update(profile)
            await uow.commit()

        # remove_* report whether anything matched; add_* return None
        if outcome is False:
            logger.info(f"{event}_noop", user_id=str(user_id))
        else:
            logger.info(event, user_id=str(user_id))
        return saved


def _normalize_entry_id(raw: str) -> str:
    """Canonicalize a UUID string; anything unparseable is matched verbatim."""
    try:
        return str(UUID(raw))
    except ValueError:
        return raw
