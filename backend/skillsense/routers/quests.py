"""
Quests Router - unlock tasks for low-confidence skills
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import SkillProfile
from ..services.auth import get_current_user_id
from ..services.quests import complete_quest, get_or_generate_quests, get_owned_quest
from ..schemas.quest import QuestBoard, QuestCompletion, QuestResponse
from .profiles import get_owned_profile_or_404

router = APIRouter(prefix="/api", tags=["Quests"])


@router.get("/profiles/{profile_id}/quests", response_model=QuestBoard)
async def get_quests(
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    db: AsyncSession = Depends(get_db),
):
    """Quests for every locked skill; two are generated per skill on first request."""
    quests = await get_or_generate_quests(db, profile.id)
    return QuestBoard(
        quests=[QuestResponse.model_validate(q) for q in quests],
        completed=sum(1 for q in quests if q.is_completed),
        total=len(quests),
    )


@router.post("/quests/{quest_id}/complete", response_model=QuestCompletion)
async def finish_quest(
    quest_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    quest = await get_owned_quest(db, quest_id, user_id)
    if not quest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quest not found")

    skill_unlocked = await complete_quest(db, quest)
    return QuestCompletion(
        quest=QuestResponse.model_validate(quest),
        skill_unlocked=skill_unlocked,
    )
