"""Profile aggregate: professional metadata plus embedded experience/education."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, TypedDict
from uuid import UUID, uuid4

from domain.entities.user import UserSummary

SOCIAL_NETWORKS = ("facebook", "instagram", "twitter", "linkedin", "youtube")

PROFILE_SCALAR_FIELDS = (
    "company",
    "website",
    "location",
    "status",
    "bio",
    "github_username",
)


class ProfileFields(TypedDict, total=False):
    """Sparse field set for a profile write. Only supplied keys are present."""

    company: str
    website: str
    location: str
    status: str
    skills: str
    bio: str
    github_username: str
    facebook: str
    instagram: str
    twitter: str
    linkedin: str
    youtube: str


def parse_skills(raw: str) -> list[str]:
    """Split a comma-delimited skills string, trimming each token.

    Empty tokens are kept, so ``"a,,b"`` becomes ``["a", "", "b"]``.
    """
    return [skill.strip() for skill in raw.split(",")]


@dataclass
class SocialLinks:
    """Social network handles. Unset networks are omitted when serialized."""

    facebook: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    youtube: str | None = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "SocialLinks":
        """Build a fresh record from whichever social keys are present."""
        return cls(**{name: fields[name] for name in SOCIAL_NETWORKS if fields.get(name)})

    def to_dict(self) -> dict[str, str]:
        return {name: value for name in SOCIAL_NETWORKS if (value := getattr(self, name))}


@dataclass
class Experience:
    """Domain entity for a work experience entry."""

    title: str
    company: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    location: str | None = None
    to_date: date | None = None
    current: bool = False
    description: str | None = None


@dataclass
class Education:
    """Domain entity for an education entry."""

    school: str
    degree: str
    field_of_study: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    location: str | None = None
    to_date: date | None = None
    current: bool = False
    description: str | None = None


@dataclass
class Profile:
    """Aggregate root for a user's developer profile.

    Experience and education entries are owned by the profile and kept
    newest-first by insertion order.
    """

    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    company: str | None = None
    website: str | None = None
    location: str | None = None
    status: str | None = None
    skills: list[str] = field(default_factory=list)
    bio: str | None = None
    github_username: str | None = None
    social: SocialLinks = field(default_factory=SocialLinks)
    experience: list[Experience] = field(default_factory=list)
    education: list[Education] = field(default_factory=list)
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @classmethod
    def create(cls, user_id: UUID, fields: ProfileFields) -> "Profile":
        """Build a new profile for a user from a sparse field set."""
        profile = cls(user_id=user_id)
        profile.apply(fields)
        return profile

    def apply(self, fields: ProfileFields) -> None:
        """Merge a sparse field set into the profile.

        Scalars present in ``fields`` overwrite, absent ones are untouched.
        The social record is always rebuilt from the supplied keys alone.
        """
        for name in PROFILE_SCALAR_FIELDS:
            if name in fields:
                setattr(self, name, fields[name])  # type: ignore[literal-required]
        if "skills" in fields:
            self.skills = parse_skills(fields["skills"])
        self.social = SocialLinks.from_fields(fields)
        self.updated_at = datetime.utcnow()

    def add_experience(self, entry: Experience) -> None:
        self.experience.insert(0, entry)
        self.updated_at = datetime.utcnow()

    def remove_experience(self, entry_id: str) -> bool:
        """Drop the experience entry with ``entry_id``. Unknown ids are a no-op."""
        remaining = [e for e in self.experience if str(e.id) != entry_id]
        removed = len(remaining) != len(self.experience)
        self.experience = remaining
        self.updated_at = datetime.utcnow()
        return removed

    def add_education(self, entry: Education) -> None:
        self.education.insert(0, entry)
        self.updated_at = datetime.utcnow()

    def remove_education(self, entry_id: str) -> bool:
        """Drop the education entry with ``entry_id``. Unknown ids are a no-op."""
        remaining = [e for e in self.education if str(e.id) != entry_id]
        removed = len(remaining) != len(self.education)
        self.education = remaining
        self.updated_at = datetime.utcnow()
        return removed


@dataclass(frozen=True, slots=True)
class ProfileWithOwner:
    """Read-only value object: a Profile joined with its owner's summary."""

    profile: Profile
    owner: UserSummary | None
