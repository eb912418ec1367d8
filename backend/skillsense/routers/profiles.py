"""
Profiles Router - owner profile, public sharing, progress and expert search
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import SkillProfile
from ..services.auth import get_current_user_id
from ..services.public_profile import (
    count_public_profiles, get_or_create_profile, get_owned_profile,
    get_public_profile, get_public_skills, public_url, search_experts,
    update_share_settings,
)
from ..services.quests import compute_skill_progress
from ..services.skill_store import list_profile_skills
from ..schemas.profile import (
    ExpertProfile, ExpertStats, ProfileResponse, PublicProfileResponse,
    ShareSettingsResponse, ShareSettingsUpdate, SkillProgress,
)
from ..schemas.skill import SkillResponse

router = APIRouter(prefix="/api", tags=["Profiles"])


# ============================================================================
# Helper Functions
# ============================================================================

async def get_owned_profile_or_404(
    profile_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> SkillProfile:
    """Resolve the {profile_id} path parameter to the caller's own profile."""
    profile = await get_owned_profile(db, profile_id, user_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


# ============================================================================
# Owner Endpoints
# ============================================================================

@router.get("/profiles/me", response_model=ProfileResponse)
async def get_my_profile(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Get the caller's profile, creating an empty one on first visit."""
    return await get_or_create_profile(db, user_id)


@router.put("/profiles/{profile_id}/share", response_model=ShareSettingsResponse)
async def update_sharing(
    settings_update: ShareSettingsUpdate,
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    db: AsyncSession = Depends(get_db),
):
    """
    Update public sharing settings.
    Turning sharing on for the first time assigns a unique public slug.
    """
    profile = await update_share_settings(db, profile, settings_update)
    response = ShareSettingsResponse.model_validate(profile)
    response.public_url = public_url(profile.public_slug) if profile.is_public else None
    return response


@router.get("/profiles/{profile_id}/progress", response_model=SkillProgress)
async def get_progress(
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    db: AsyncSession = Depends(get_db),
):
    skills = await list_profile_skills(db, profile.id)
    return compute_skill_progress(skills)


# ============================================================================
# Public Endpoints (no caller identity)
# ============================================================================

@router.get("/public/{slug}", response_model=PublicProfileResponse)
async def get_shared_profile(slug: str, db: AsyncSession = Depends(get_db)):
    profile = await get_public_profile(db, slug)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found or not public",
        )

    skills = await get_public_skills(db, profile.id)
    return PublicProfileResponse(
        display_name=profile.display_name,
        bio=profile.bio,
        avatar_url=profile.avatar_url,
        public_slug=profile.public_slug,
        skills=[SkillResponse.model_validate(s) for s in skills],
    )


@router.get("/experts/stats", response_model=ExpertStats)
async def get_expert_stats(db: AsyncSession = Depends(get_db)):
    return ExpertStats(total_experts=await count_public_profiles(db))


@router.get("/experts", response_model=List[ExpertProfile])
async def find_experts(
    skill: str = Query(..., min_length=1, description="Skill name or fragment"),
    db: AsyncSession = Depends(get_db),
):
    """Search public profiles for a skill, best average confidence first."""
    return await search_experts(db, skill)
