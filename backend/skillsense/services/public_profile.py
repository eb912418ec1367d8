"""
Profile ownership, public sharing and expert search.
"""
import re
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..models import Skill, SkillProfile, SkillState
from ..schemas.profile import ExpertProfile, ExpertSkill, ShareSettingsUpdate

settings = get_settings()


# ============================================================================
# Profiles
# ============================================================================

async def get_or_create_profile(db: AsyncSession, user_id: str) -> SkillProfile:
    """Return the user's first profile, creating a default one if needed."""
    result = await db.execute(
        select(SkillProfile)
        .where(SkillProfile.user_id == user_id)
        .order_by(SkillProfile.id)
        .limit(1)
    )
    profile = result.scalar_one_or_none()
    if profile:
        return profile

    profile = SkillProfile(user_id=user_id, profile_name="My Profile")
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def get_owned_profile(db: AsyncSession, profile_id: int, user_id: str) -> Optional[SkillProfile]:
    result = await db.execute(
        select(SkillProfile).where(
            SkillProfile.id == profile_id,
            SkillProfile.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


# ============================================================================
# Public Sharing
# ============================================================================

def slugify(base_text: str) -> str:
    """Lowercase, collapse non-alphanumerics to '-', trim dashes."""
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", base_text or "").lower().strip("-")
    return slug or "profile"


async def generate_profile_slug(db: AsyncSession, base_text: str) -> str:
    """Unique slug from a name; collisions get -1, -2, ... appended."""
    base_slug = slugify(base_text)
    slug = base_slug
    counter = 0
    while True:
        result = await db.execute(
            select(SkillProfile.id).where(SkillProfile.public_slug == slug)
        )
        if result.first() is None:
            return slug
        counter += 1
        slug = f"{base_slug}-{counter}"


def public_url(slug: Optional[str]) -> Optional[str]:
    if not slug:
        return None
    return f"{settings.frontend_url.rstrip('/')}/p/{slug}"


async def update_share_settings(
    db: AsyncSession,
    profile: SkillProfile,
    update: ShareSettingsUpdate,
) -> SkillProfile:
    """Apply sharing settings; enabling public access for the first time assigns a slug."""
    for field_name in ("display_name", "bio", "avatar_url", "is_public"):
        value = getattr(update, field_name)
        if value is not None:
            setattr(profile, field_name, value)

    if profile.is_public and not profile.public_slug:
        base = profile.display_name or (update.email or "").split("@")[0] or f"profile-{profile.id}"
        profile.public_slug = await generate_profile_slug(db, base)

    await db.commit()
    await db.refresh(profile)
    return profile


async def get_public_profile(db: AsyncSession, slug: str) -> Optional[SkillProfile]:
    result = await db.execute(
        select(SkillProfile).where(
            SkillProfile.public_slug == slug,
            SkillProfile.is_public.is_(True),
        )
    )
    return result.scalar_one_or_none()


async def get_public_skills(db: AsyncSession, profile_id: int) -> List[Skill]:
    """Only confirmed, unlocked skills are shown publicly."""
    result = await db.execute(
        select(Skill)
        .where(
            Skill.profile_id == profile_id,
            Skill.is_confirmed.is_(True),
            Skill.state == SkillState.UNLOCKED,
        )
        .order_by(Skill.confidence_score.desc())
    )
    return list(result.scalars().all())


# ============================================================================
# Expert Search (team intelligence)
# ============================================================================

async def count_public_profiles(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(SkillProfile.id)).where(SkillProfile.is_public.is_(True))
    )
    return result.scalar_one()


async def search_experts(db: AsyncSession, query: str) -> List[ExpertProfile]:
    """
    Find public profiles holding a matching skill with decent confidence.

    Ranked by the mean confidence of their matching skills.
    """
    term = query.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    result = await db.execute(
        select(Skill, SkillProfile)
        .join(SkillProfile, Skill.profile_id == SkillProfile.id)
        .where(
            func.lower(Skill.skill_name).like(f"%{term}%", escape="\\"),
            Skill.confidence_score >= settings.expert_min_confidence,
            SkillProfile.is_public.is_(True),
        )
    )

    by_profile: Dict[int, List[Skill]] = defaultdict(list)
    profiles: Dict[int, SkillProfile] = {}
    for skill, profile in result.all():
        by_profile[profile.id].append(skill)
        profiles[profile.id] = profile

    experts = [
        ExpertProfile(
            profile_id=profile_id,
            display_name=profiles[profile_id].display_name or "Anonymous User",
            skills=[
                ExpertSkill(skill_name=s.skill_name, confidence_score=s.confidence_score)
                for s in skills
            ],
            total_skills=len(skills),
        )
        for profile_id, skills in by_profile.items()
    ]
    experts.sort(
        key=lambda e: sum(s.confidence_score for s in e.skills) / len(e.skills),
        reverse=True,
    )
    return experts
