"""
Quest system - locked skills get small tasks; finishing them unlocks the skill.
"""
import random
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Quest, Skill, SkillProfile, SkillState
from ..schemas.profile import SkillProgress

QUESTS_PER_SKILL = 2

QUEST_TEMPLATES = [
    {
        "type": "add_github",
        "description": "Add your GitHub profile link to validate coding skills",
        "icon": "💻",
    },
    {
        "type": "write_reflection",
        "description": "Write a brief reflection on how you used this skill",
        "icon": "✍️",
    },
    {
        "type": "add_project",
        "description": "Add a project example that demonstrates this skill",
        "icon": "🚀",
    },
    {
        "type": "add_certification",
        "description": "Add a certification or course completion proof",
        "icon": "🎓",
    },
]


def build_quests(locked_skills: Sequence[Skill], rng: Optional[random.Random] = None) -> List[Quest]:
    """Pick two distinct random templates for each locked skill."""
    rng = rng or random.Random()
    quests = []
    for skill in locked_skills:
        for template in rng.sample(QUEST_TEMPLATES, QUESTS_PER_SKILL):
            quests.append(Quest(
                skill_id=skill.id,
                quest_type=template["type"],
                quest_description=f'{template["icon"]} {template["description"]} for "{skill.skill_name}"',
                is_completed=False,
            ))
    return quests


def compute_skill_progress(skills: Sequence[Skill]) -> SkillProgress:
    total = len(skills)
    unlocked = sum(1 for s in skills if s.state == SkillState.UNLOCKED)
    locked = sum(1 for s in skills if s.state == SkillState.LOCKED)
    percent = (unlocked / total) * 100 if total else 0.0
    return SkillProgress(total=total, unlocked=unlocked, locked=locked, percent=round(percent, 1))


async def get_locked_skills(db: AsyncSession, profile_id: int) -> List[Skill]:
    result = await db.execute(
        select(Skill).where(
            Skill.profile_id == profile_id,
            Skill.state == SkillState.LOCKED,
        )
    )
    return list(result.scalars().all())


async def get_or_generate_quests(
    db: AsyncSession,
    profile_id: int,
    rng: Optional[random.Random] = None,
) -> List[Quest]:
    """Quests for the profile's locked skills; skills without any get a fresh pair."""
    locked_skills = await get_locked_skills(db, profile_id)
    if not locked_skills:
        return []

    skill_ids = [skill.id for skill in locked_skills]
    result = await db.execute(
        select(Quest).where(Quest.skill_id.in_(skill_ids)).order_by(Quest.id)
    )
    quests = list(result.scalars().all())

    with_quests = {quest.skill_id for quest in quests}
    new_quests = build_quests([s for s in locked_skills if s.id not in with_quests], rng)
    if not new_quests:
        return quests

    db.add_all(new_quests)
    await db.commit()
    for quest in new_quests:
        await db.refresh(quest)
    return quests + new_quests


async def get_owned_quest(db: AsyncSession, quest_id: int, user_id: str) -> Optional[Quest]:
    result = await db.execute(
        select(Quest)
        .join(Skill, Quest.skill_id == Skill.id)
        .join(SkillProfile, Skill.profile_id == SkillProfile.id)
        .where(Quest.id == quest_id, SkillProfile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def complete_quest(db: AsyncSession, quest: Quest) -> bool:
    """
    Mark a quest complete.

    Returns:
        True if this completed the last open quest and unlocked the skill
    """
    if not quest.is_completed:
        quest.is_completed = True
        quest.completed_at = datetime.now(timezone.utc)
        await db.flush()

    result = await db.execute(select(Quest).where(Quest.skill_id == quest.skill_id))
    siblings = list(result.scalars().all())

    skill = await db.get(Skill, quest.skill_id)
    unlocked = False
    if skill is not None and skill.state == SkillState.LOCKED and all(q.is_completed for q in siblings):
        skill.state = SkillState.UNLOCKED
        unlocked = True

    await db.commit()
    await db.refresh(quest)
    return unlocked
