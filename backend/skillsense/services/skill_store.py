"""
Skill storage - bulk insert of merged skills and per-skill updates.
"""
import logging
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Skill, SkillProfile
from ..schemas.skill import MergedSkill

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The batch of skills could not be stored."""


async def save_merged_skills(
    db: AsyncSession,
    profile_id: int,
    skills: Sequence[MergedSkill],
) -> List[Skill]:
    """
    Insert merged skills for a profile as one unit.

    Args:
        db: Database session
        profile_id: Owning profile
        skills: Merged skills from the aggregator

    Returns:
        The inserted Skill rows (with IDs)

    Raises:
        PersistenceError if anything in the batch fails; nothing is kept
    """
    rows = [
        Skill(
            profile_id=profile_id,
            skill_name=skill.skill_name,
            skill_type=skill.skill_type,
            confidence_score=skill.confidence_score,
            evidence=list(skill.evidence),
            cluster=skill.cluster or "Other",
            microstory=skill.microstory or "",
            state=skill.state,
        )
        for skill in skills
    ]
    if not rows:
        return []

    try:
        db.add_all(rows)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to save {len(rows)} skills for profile {profile_id}: {e}")
        raise PersistenceError(f"Failed to save skills: {e}") from e

    logger.info(f"✅ Saved {len(rows)} skills for profile {profile_id}")
    return rows


async def list_profile_skills(db: AsyncSession, profile_id: int) -> List[Skill]:
    result = await db.execute(
        select(Skill)
        .where(Skill.profile_id == profile_id)
        .order_by(Skill.confidence_score.desc(), Skill.id)
    )
    return list(result.scalars().all())


async def get_owned_skill(db: AsyncSession, skill_id: int, user_id: str) -> Optional[Skill]:
    """Skill by ID, only if its profile belongs to the user."""
    result = await db.execute(
        select(Skill)
        .join(SkillProfile, Skill.profile_id == SkillProfile.id)
        .where(Skill.id == skill_id, SkillProfile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def confirm_skill(db: AsyncSession, skill: Skill) -> Skill:
    skill.is_confirmed = True
    await db.commit()
    await db.refresh(skill)
    return skill


async def delete_skill(db: AsyncSession, skill: Skill) -> None:
    await db.delete(skill)
    await db.commit()
