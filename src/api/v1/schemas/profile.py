"""Pydantic schemas for Profile API."""

from datetime import date, datetime
from typing import cast
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import ProfileFields


class ProfileUpsert(BaseModel):
    """Schema for creating or updating the caller's profile.

    ``skills`` is a comma-separated string. Social handles are flat fields
    and replace the stored social links as a whole.
    """

    model_config = ConfigDict(extra="forbid")

    status: str = Field(..., min_length=1, max_length=100)
    skills: str = Field(..., min_length=1, max_length=1000)
    company: str | None = Field(None, max_length=255)
    website: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=255)
    bio: str | None = Field(None, max_length=2000)
    github_username: str | None = Field(None, max_length=100)
    facebook: str | None = Field(None, max_length=500)
    instagram: str | None = Field(None, max_length=500)
    twitter: str | None = Field(None, max_length=500)
    linkedin: str | None = Field(None, max_length=500)
    youtube: str | None = Field(None, max_length=500)

    def to_fields(self) -> ProfileFields:
        """Sparse field set of the values actually supplied.

        Empty strings and nulls count as not supplied, so they never clear
        a stored value.
        """
        supplied = self.model_dump(exclude_unset=True)
        return cast(ProfileFields, {key: value for key, value in supplied.items() if value})


class ExperienceCreate(BaseModel):
    """Schema for adding an experience entry."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    from_date: date = Field(..., alias="from")
    to_date: date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = Field(None, max_length=2000)


class EducationCreate(BaseModel):
    """Schema for adding an education entry."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    school: str = Field(..., min_length=1, max_length=255)
    degree: str = Field(..., min_length=1, max_length=255)
    field_of_study: str = Field(..., min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    from_date: date = Field(..., alias="from")
    to_date: date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = Field(None, max_length=2000)


class SocialResponse(BaseModel):
    """Social links; unset networks are omitted."""

    facebook: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    youtube: str | None = None


class ExperienceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    company: str
    location: str | None = None
    from_date: date = Field(..., alias="from")
    to_date: date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = None


class EducationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    school: str
    degree: str
    field_of_study: str
    location: str | None = None
    from_date: date = Field(..., alias="from")
    to_date: date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = None


class UserSummaryResponse(BaseModel):
    """Owner fields joined onto a profile."""

    id: UUID
    name: str
    avatar: str | None = None


class ProfileBase(BaseModel):
    """Fields shared by every profile representation."""

    id: UUID
    company: str | None = None
    website: str | None = None
    location: str | None = None
    status: str | None = None
    skills: list[str] = Field(default_factory=list)
    bio: str | None = None
    github_username: str | None = None
    social: SocialResponse = Field(default_factory=SocialResponse)
    experience: list[ExperienceResponse] = Field(default_factory=list)
    education: list[EducationResponse] = Field(default_factory=list)
    version: int
    created_at: datetime
    updated_at: datetime


class ProfileResponse(ProfileBase):
    """Profile as written; ``user`` is the owner's id."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user": "9b2f4a4e-1c3d-4f7a-8e55-2d0a1b6c7e90",
                "company": "Acme",
                "status": "Senior Developer",
                "skills": ["python", "fastapi", "postgres"],
                "social": {"twitter": "https://twitter.com/acme"},
                "experience": [],
                "education": [],
                "version": 1,
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    user: UUID


class ProfileWithOwnerResponse(ProfileBase):
    """Profile as read; ``user`` carries the owner's name and avatar."""

    user: UserSummaryResponse | None = None


class ProfileDetailResponse(BaseModel):
    """Schema for a single written Profile."""

    data: ProfileResponse


class ProfileWithOwnerDetailResponse(BaseModel):
    """Schema for a single Profile with owner."""

    data: ProfileWithOwnerResponse


class ProfileListResponse(BaseModel):
    """Schema for list of Profiles with owners."""

    data: list[ProfileWithOwnerResponse]
