"""User domain value objects."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class UserSummary:
    """Read-only projection of a User joined onto a profile."""

    id: UUID
    name: str
    avatar: str | None = None
