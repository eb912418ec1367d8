from typing import List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from skillsense import models  # noqa: F401
from skillsense.database import Base, get_db
from skillsense.main import app
from skillsense.models import Skill, SkillProfile, SkillState, SkillType
from skillsense.routers.extraction import get_source_adapters
from skillsense.schemas.skill import SkillCandidate
from skillsense.services.adapters import SourceAdapter

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def make_candidate(
    name: str,
    confidence: float = 0.8,
    source: str = "Text",
    evidence: Optional[List[str]] = None,
    **fields,
) -> SkillCandidate:
    return SkillCandidate(
        skill_name=name,
        confidence_score=confidence,
        source=source,
        evidence=evidence or [],
        **fields,
    )


class FakeAdapter(SourceAdapter):
    def __init__(self, label, candidates=None, error=None):
        self.label = label
        self.candidates = candidates or []
        self.error = error
        self.payloads = []

    async def extract(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return list(self.candidates)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def profile(db) -> SkillProfile:
    profile = SkillProfile(user_id=USER_ID, profile_name="My Profile")
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


@pytest.fixture
def add_skill(db):
    async def _add_skill(profile_id, name, confidence=0.8, cluster="Other", locked=False, confirmed=False):
        skill = Skill(
            profile_id=profile_id,
            skill_name=name,
            skill_type=SkillType.EXPLICIT,
            confidence_score=confidence,
            evidence=[],
            cluster=cluster,
            microstory="",
            is_confirmed=confirmed,
            state=SkillState.LOCKED if locked else SkillState.UNLOCKED,
        )
        db.add(skill)
        await db.commit()
        await db.refresh(skill)
        return skill

    return _add_skill


@pytest.fixture
def adapters():
    """Adapters injected into the extraction endpoint; tests fill this dict."""
    return {}


@pytest.fixture
async def client(session_maker, adapters):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_source_adapters] = lambda: adapters

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-User-Id": USER_ID},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
