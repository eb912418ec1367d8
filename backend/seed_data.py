"""
Seed script to populate the database with a demo skill profile
Run with: python -m seed_data
"""
import asyncio
from skillsense.database import async_session_maker, init_db
from skillsense.models import Skill, SkillProfile, SkillType, SkillState
from skillsense.services.public_profile import generate_profile_slug
from skillsense.services.quests import build_quests

DEMO_USER_ID = "demo-user"


async def seed_database():
    await init_db()

    async with async_session_maker() as db:
        profile = SkillProfile(
            user_id=DEMO_USER_ID,
            profile_name="My Profile",
            display_name="Demo Developer",
            bio="Backend developer who enjoys data pipelines and mentoring.",
            is_public=True,
        )
        profile.public_slug = await generate_profile_slug(db, profile.display_name)
        db.add(profile)
        await db.flush()

        skills_data = [
            ("Python", SkillType.EXPLICIT, 0.9, "Programming & Development", "Document, GitHub"),
            ("FastAPI", SkillType.EXPLICIT, 0.8, "Programming & Development", "GitHub"),
            ("PostgreSQL", SkillType.EXPLICIT, 0.75, "Data & Analytics", "Document"),
            ("Docker", SkillType.EXPLICIT, 0.7, "Cloud & Infrastructure", "GitHub"),
            ("Team Leadership", SkillType.IMPLICIT, 0.65, "Management & Leadership", "Text"),
            ("Technical Writing", SkillType.IMPLICIT, 0.4, "Communication & Collaboration", "Text"),
            ("Kubernetes", SkillType.IMPLICIT, 0.35, "Cloud & Infrastructure", "GitHub"),
        ]

        skills = []
        for name, skill_type, confidence, cluster, source in skills_data:
            skill = Skill(
                profile_id=profile.id,
                skill_name=name,
                skill_type=skill_type,
                confidence_score=confidence,
                evidence=[f"Seeded from {source}"],
                is_confirmed=confidence >= 0.7,
                state=SkillState.LOCKED if confidence < 0.5 else SkillState.UNLOCKED,
                cluster=cluster,
                microstory=f"Demonstrated {name} across recent projects.",
            )
            db.add(skill)
            skills.append(skill)
        await db.flush()

        locked = [s for s in skills if s.state == SkillState.LOCKED]
        quests = build_quests(locked)
        db.add_all(quests)

        await db.commit()
        print("✅ Database seeded successfully!")
        print(f"   Demo user: X-User-Id: {DEMO_USER_ID}")
        print(f"   Public profile slug: {profile.public_slug}")
        print(f"   Skills: {len(skills)} ({len(locked)} locked, {len(quests)} quests)")


if __name__ == "__main__":
    asyncio.run(seed_database())
