"""Profile API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_account_service, get_profile_service
from api.v1.schemas.common import ErrorResponse, MessageResponse
from api.v1.schemas.profile import (
    EducationCreate,
    EducationResponse,
    ExperienceCreate,
    ExperienceResponse,
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpsert,
    ProfileWithOwnerDetailResponse,
    ProfileWithOwnerResponse,
    SocialResponse,
    UserSummaryResponse,
)
from core.rate_limit import limiter
from domain.entities.profile import Education, Experience, Profile, ProfileWithOwner
from domain.services.account_service import AccountService
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Profile not found"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Concurrent modification, retry"}}


@router.get(
    "/me",
    response_model=ProfileWithOwnerDetailResponse,
    response_model_exclude_none=True,
    summary="Get current user's profile",
    responses=_NOT_FOUND,
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_own_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileWithOwnerDetailResponse:
    """Get the authenticated user's profile with their name and avatar."""
    result = await service.get_own_profile(user.id)
    return ProfileWithOwnerDetailResponse(data=_build_profile_with_owner_response(result))


@router.get(
    "",
    response_model=ProfileListResponse,
    response_model_exclude_none=True,
    summary="List all profiles",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_profiles(
    request: Request,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileListResponse:
    """Get every profile with its owner's name and avatar. Public."""
    results = await service.list_profiles()
    return ProfileListResponse(
        data=[_build_profile_with_owner_response(result) for result in results]
    )


@router.get(
    "/user/{user_id}",
    response_model=ProfileWithOwnerDetailResponse,
    response_model_exclude_none=True,
    summary="Get profile by user ID",
    responses=_NOT_FOUND,
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile_by_user_id(
    request: Request,
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileWithOwnerDetailResponse:
    """
    Get a user's profile. Public.

    Malformed and unknown user IDs get the same 404.
    """
    result = await service.get_profile_by_user_id(user_id)
    return ProfileWithOwnerDetailResponse(data=_build_profile_with_owner_response(result))


@router.post(
    "",
    response_model=ProfileDetailResponse,
    response_model_exclude_none=True,
    summary="Create or update profile",
    responses=_CONFLICT,
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def upsert_profile(
    request: Request,
    body: ProfileUpsert,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """
    Create the authenticated user's profile, or update it if it exists.

    Only supplied fields are written. Social links are replaced as a whole.
    """
    profile = await service.upsert_profile(user.id, body.to_fields())
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Delete profile and account",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_account(
    request: Request,
    user: CurrentUser,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """Delete the authenticated user's profile and user account."""
    await service.delete_account(user.id)
    return MessageResponse(message="User deleted")


@router.put(
    "/experience",
    response_model=ProfileDetailResponse,
    response_model_exclude_none=True,
    summary="Add profile experience",
    responses={**_NOT_FOUND, **_CONFLICT},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_experience(
    request: Request,
    body: ExperienceCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Add an experience entry at the top of the list."""
    entry = Experience(
        title=body.title,
        company=body.company,
        location=body.location,
        from_date=body.from_date,
        to_date=body.to_date,
        current=body.current,
        description=body.description,
    )
    profile = await service.add_experience(user.id, entry)
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.delete(
    "/experience/{experience_id}",
    response_model=ProfileDetailResponse,
    response_model_exclude_none=True,
    summary="Delete profile experience",
    responses={**_NOT_FOUND, **_CONFLICT},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_experience(
    request: Request,
    experience_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Remove an experience entry. Unknown IDs succeed and change nothing."""
    profile = await service.remove_experience(user.id, experience_id)
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.put(
    "/education",
    response_model=ProfileDetailResponse,
    response_model_exclude_none=True,
    summary="Add profile education",
    responses={**_NOT_FOUND, **_CONFLICT},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_education(
    request: Request,
    body: EducationCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Add an education entry at the top of the list."""
    entry = Education(
        school=body.school,
        degree=body.degree,
        field_of_study=body.field_of_study,
        location=body.location,
        from_date=body.from_date,
        to_date=body.to_date,
        current=body.current,
        description=body.description,
    )
    profile = await service.add_education(user.id, entry)
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.delete(
    "/education/{education_id}",
    response_model=ProfileDetailResponse,
    response_model_exclude_none=True,
    summary="Delete profile education",
    responses={**_NOT_FOUND, **_CONFLICT},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_education(
    request: Request,
    education_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Remove an education entry. Unknown IDs succeed and change nothing."""
    profile = await service.remove_education(user.id, education_id)
    return ProfileDetailResponse(data=_build_profile_response(profile))


def _profile_fields(profile: Profile) -> dict:
    """Shared response fields for both profile representations."""
    return {
        "id": profile.id,
        "company": profile.company,
        "website": profile.website,
        "location": profile.location,
        "status": profile.status,
        "skills": profile.skills,
        "bio": profile.bio,
        "github_username": profile.github_username,
        "social": SocialResponse(**profile.social.to_dict()),
        "experience": [
            ExperienceResponse(
                id=e.id,
                title=e.title,
                company=e.company,
                location=e.location,
                from_date=e.from_date,
                to_date=e.to_date,
                current=e.current,
                description=e.description,
            )
            for e in profile.experience
        ],
        "education": [
            EducationResponse(
                id=e.id,
                school=e.school,
                degree=e.degree,
                field_of_study=e.field_of_study,
                location=e.location,
                from_date=e.from_date,
                to_date=e.to_date,
                current=e.current,
                description=e.description,
            )
            for e in profile.education
        ],
        "version": profile.version,
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
    }


def _build_profile_response(profile: Profile) -> ProfileResponse:
    """Convert domain entity to response schema."""
    return ProfileResponse(user=profile.user_id, **_profile_fields(profile))


def _build_profile_with_owner_response(result: ProfileWithOwner) -> ProfileWithOwnerResponse:
    """Convert a joined profile to response schema with the owner summary."""
    owner = (
        UserSummaryResponse(id=result.owner.id, name=result.owner.name, avatar=result.owner.avatar)
        if result.owner
        else None
    )
    return ProfileWithOwnerResponse(user=owner, **_profile_fields(result.profile))
