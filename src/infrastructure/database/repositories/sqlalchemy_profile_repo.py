"""SQLAlchemy implementation of Profile repository."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from core.exceptions import ProfileConflictError
from domain.entities.profile import (
    Education,
    Experience,
    Profile,
    ProfileWithOwner,
    SocialLinks,
)
from domain.entities.user import UserSummary
from infrastructure.database.models import ProfileModel, UserModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by a user."""
        stmt = select(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_with_owner_by_user(self, user_id: UUID) -> ProfileWithOwner | None:
        """Get the profile owned by a user, joined with the owner's summary."""
        stmt = (
            select(ProfileModel, UserModel)
            .outerjoin(UserModel, UserModel.id == ProfileModel.user_id)
            .where(ProfileModel.user_id == user_id)
        )
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        profile_model, user_model = row
        return self._to_profile_with_owner(profile_model, user_model)

    async def get_all_with_owner(self) -> list[ProfileWithOwner]:
        """Get every profile joined with its owner's summary."""
        stmt = select(ProfileModel, UserModel).outerjoin(
            UserModel, UserModel.id == ProfileModel.user_id
        )
        result = await self._session.execute(stmt)
        return [
            self._to_profile_with_owner(profile_model, user_model)
            for profile_model, user_model in result
        ]

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile.

        A second profile for the same user trips the unique constraint on
        ``user_id`` and is reported as a conflict. Any other integrity
        failure, such as a missing owner row, propagates unchanged.
        """
        model = self._to_model(profile)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if _is_duplicate_owner(e):
                raise ProfileConflictError(str(profile.user_id)) from e
            raise
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Persist a modified profile if nobody else has written it since it was read."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")
        if model.version != profile.version:
            raise ProfileConflictError(str(profile.user_id))

        model.company = profile.company
        model.website = profile.website
        model.location = profile.location
        model.status = profile.status
        model.skills = list(profile.skills)
        model.bio = profile.bio
        model.github_username = profile.github_username
        model.social = profile.social.to_dict()
        model.experience = [_experience_to_doc(e) for e in profile.experience]
        model.education = [_education_to_doc(e) for e in profile.education]
        model.updated_at = profile.updated_at

        try:
            await self._session.flush()
        except StaleDataError as e:
            raise ProfileConflictError(str(profile.user_id)) from e
        return self._to_entity(model)

    async def delete_by_user(self, user_id: UUID) -> bool:
        """Delete the profile owned by a user."""
        stmt = delete(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    def _to_profile_with_owner(
        self, profile_model: ProfileModel, user_model: UserModel | None
    ) -> ProfileWithOwner:
        owner = (
            UserSummary(id=user_model.id, name=user_model.name, avatar=user_model.avatar)
            if user_model
            else None
        )
        return ProfileWithOwner(profile=self._to_entity(profile_model), owner=owner)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            user_id=model.user_id,
            company=model.company,
            website=model.website,
            location=model.location,
            status=model.status,
            skills=list(model.skills or []),
            bio=model.bio,
            github_username=model.github_username,
            social=SocialLinks(**(model.social or {})),
            experience=[_experience_from_doc(doc) for doc in model.experience or []],
            education=[_education_from_doc(doc) for doc in model.education or []],
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            user_id=entity.user_id,
            company=entity.company,
            website=entity.website,
            location=entity.location,
            status=entity.status,
            skills=list(entity.skills),
            bio=entity.bio,
            github_username=entity.github_username,
            social=entity.social.to_dict(),
            experience=[_experience_to_doc(e) for e in entity.experience],
            education=[_education_to_doc(e) for e in entity.education],
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


def _is_duplicate_owner(error: IntegrityError) -> bool:
    """True when the insert hit the one-profile-per-user unique index."""
    message = str(error.orig).lower()
    return ("unique" in message or "duplicate" in message) and "user_id" in message


# Embedded entries are stored as JSON objects; unset optionals are omitted.


def _entry_doc(entry: Experience | Education, **required: Any) -> dict[str, Any]:
    doc: dict[str, Any] = {"id": str(entry.id), **required}
    doc["from"] = entry.from_date.isoformat()
    if entry.to_date:
        doc["to"] = entry.to_date.isoformat()
    if entry.location:
        doc["location"] = entry.location
    if entry.description:
        doc["description"] = entry.description
    doc["current"] = entry.current
    return doc


def _experience_to_doc(entry: Experience) -> dict[str, Any]:
    return _entry_doc(entry, title=entry.title, company=entry.company)


def _education_to_doc(entry: Education) -> dict[str, Any]:
    return _entry_doc(
        entry,
        school=entry.school,
        degree=entry.degree,
        field_of_study=entry.field_of_study,
    )


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _experience_from_doc(doc: dict[str, Any]) -> Experience:
    return Experience(
        id=UUID(doc["id"]),
        title=doc["title"],
        company=doc["company"],
        from_date=date.fromisoformat(doc["from"]),
        to_date=_parse_date(doc.get("to")),
        location=doc.get("location"),
        current=bool(doc.get("current", False)),
        description=doc.get("description"),
    )


def _education_from_doc(doc: dict[str, Any]) -> Education:
    return Education(
        id=UUID(doc["id"]),
        school=doc["school"],
        degree=doc["degree"],
        field_of_study=doc["field_of_study"],
        from_date=date.fromisoformat(doc["from"]),
        to_date=_parse_date(doc.get("to")),
        location=doc.get("location"),
        current=bool(doc.get("current", False)),
        description=doc.get("description"),
    )
