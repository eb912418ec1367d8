"""
Analysis Router - skill gap analysis, CV enhancement and hidden skill discovery
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import DiscoveredSkill, SkillGap, SkillProfile, TargetRole
from ..services.auth import get_current_user_id
from ..services.cv_enhancer import enhance_cv
from ..services.gap_analysis import analyze_skill_gap
from ..services.gemini import GeminiError
from ..services.skill_discovery import MIN_SKILLS_FOR_DISCOVERY, discover_hidden_skills
from ..services.skill_store import list_profile_skills
from ..schemas.analysis import (
    CVEnhancementRequest, CVEnhancementResult, DiscoveryResponse,
    GapAnalysisRequest, GapAnalysisResponse,
)
from ..schemas.skill import DiscoveredSkillResponse
from .profiles import get_owned_profile_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analysis"])


def _ai_unavailable(e: GeminiError) -> HTTPException:
    logger.error(f"AI analysis failed: {e}")
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"AI processing failed: {e}",
    )


async def _get_owned_discovery(db: AsyncSession, discovery_id: int, user_id: str) -> DiscoveredSkill:
    result = await db.execute(
        select(DiscoveredSkill)
        .join(SkillProfile, DiscoveredSkill.profile_id == SkillProfile.id)
        .where(DiscoveredSkill.id == discovery_id, SkillProfile.user_id == user_id)
    )
    discovery = result.scalar_one_or_none()
    if not discovery:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Discovered skill not found",
        )
    return discovery


# ============================================================================
# Gap Analysis
# ============================================================================

@router.post("/profiles/{profile_id}/gap-analysis", response_model=GapAnalysisResponse)
async def run_gap_analysis(
    request: GapAnalysisRequest,
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Compare the profile's skills with a target role and store the result."""
    target_role = TargetRole(
        user_id=profile.user_id,
        role_title=request.role_title.strip(),
        role_description=request.role_description,
        required_skills=[],
    )
    db.add(target_role)
    await db.flush()

    skills = await list_profile_skills(db, profile.id)
    try:
        analysis = await analyze_skill_gap(
            [s.skill_name for s in skills],
            request.role_title,
            request.role_description,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GeminiError as e:
        raise _ai_unavailable(e)

    gap = SkillGap(
        profile_id=profile.id,
        target_role_id=target_role.id,
        missing_skills=analysis.missing_skills,
        matching_skills=analysis.matching_skills,
        recommendations=[r.model_dump() for r in analysis.recommendations],
    )
    db.add(gap)
    await db.commit()

    return GapAnalysisResponse(
        gap_id=gap.id,
        target_role_id=target_role.id,
        role_title=target_role.role_title,
        **analysis.model_dump(),
    )


# ============================================================================
# CV Enhancement
# ============================================================================

@router.post("/profiles/{profile_id}/enhance-cv", response_model=CVEnhancementResult)
async def run_cv_enhancement(
    request: CVEnhancementRequest,
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    db: AsyncSession = Depends(get_db),
):
    skills = await list_profile_skills(db, profile.id)
    try:
        return await enhance_cv(skills, request.original_text)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GeminiError as e:
        raise _ai_unavailable(e)


# ============================================================================
# Hidden Skill Discovery
# ============================================================================

@router.post("/profiles/{profile_id}/discover-skills", response_model=DiscoveryResponse)
async def run_skill_discovery(
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Infer transferable skills from a profile with enough existing skills."""
    skills = await list_profile_skills(db, profile.id)
    if len(skills) < MIN_SKILLS_FOR_DISCOVERY:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Need at least {MIN_SKILLS_FOR_DISCOVERY} skills to discover hidden patterns",
        )

    try:
        discovered = await discover_hidden_skills(skills)
    except GeminiError as e:
        raise _ai_unavailable(e)

    if not discovered:
        return DiscoveryResponse(discovered=0, message="No new hidden skills discovered")

    db.add_all([
        DiscoveredSkill(
            profile_id=profile.id,
            skill_name=item.skill_name,
            inferred_from=item.inferred_from,
            confidence_score=item.confidence_score,
            reasoning=item.reasoning,
        )
        for item in discovered
    ])
    await db.commit()

    return DiscoveryResponse(
        discovered=len(discovered),
        skills=discovered,
        message=f"Discovered {len(discovered)} hidden skills",
    )


@router.get("/profiles/{profile_id}/discovered-skills", response_model=List[DiscoveredSkillResponse])
async def list_discovered_skills(
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(DiscoveredSkill)
        .where(
            DiscoveredSkill.profile_id == profile.id,
            DiscoveredSkill.is_rejected.is_(False),
        )
        .order_by(DiscoveredSkill.confidence_score.desc())
    )
    return result.scalars().all()


@router.post("/discovered-skills/{discovery_id}/confirm", response_model=DiscoveredSkillResponse)
async def confirm_discovered_skill(
    discovery_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    discovery = await _get_owned_discovery(db, discovery_id, user_id)
    discovery.is_confirmed = True
    discovery.is_rejected = False
    await db.commit()
    await db.refresh(discovery)
    return discovery


@router.post("/discovered-skills/{discovery_id}/reject", response_model=DiscoveredSkillResponse)
async def reject_discovered_skill(
    discovery_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    discovery = await _get_owned_discovery(db, discovery_id, user_id)
    discovery.is_rejected = True
    discovery.is_confirmed = False
    await db.commit()
    await db.refresh(discovery)
    return discovery
