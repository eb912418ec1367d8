"""
Skills Router - list, confirm and delete stored skills
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import SkillProfile
from ..services.auth import get_current_user_id
from ..services.skill_store import confirm_skill, delete_skill, get_owned_skill, list_profile_skills
from ..schemas.skill import SkillResponse
from .profiles import get_owned_profile_or_404

router = APIRouter(prefix="/api", tags=["Skills"])


@router.get("/profiles/{profile_id}/skills", response_model=List[SkillResponse])
async def get_profile_skills(
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    db: AsyncSession = Depends(get_db),
):
    """All skills of a profile, most confident first."""
    return await list_profile_skills(db, profile.id)


@router.post("/skills/{skill_id}/confirm", response_model=SkillResponse)
async def confirm(
    skill_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    skill = await get_owned_skill(db, skill_id, user_id)
    if not skill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")
    return await confirm_skill(db, skill)


@router.delete("/skills/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove(
    skill_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    skill = await get_owned_skill(db, skill_id, user_id)
    if not skill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Skill not found")
    await delete_skill(db, skill)
