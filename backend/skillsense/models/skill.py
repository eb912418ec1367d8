"""
Skill models - merged skills stored per profile and AI-discovered hidden skills.
"""
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean, Float,
    ForeignKey, Enum as SQLEnum, JSON
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base
import enum


class SkillType(str, enum.Enum):
    EXPLICIT = "explicit"
    IMPLICIT = "implicit"


class SkillState(str, enum.Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


def _enum_values(enum_cls):
    # Persist "explicit"/"locked" rather than the member names
    return [member.value for member in enum_cls]


class Skill(Base):
    """One merged skill belonging to a profile"""
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey('skill_profiles.id', ondelete='CASCADE'), nullable=False, index=True)

    skill_name = Column(String(200), nullable=False)
    skill_type = Column(SQLEnum(SkillType, values_callable=_enum_values), nullable=False)
    confidence_score = Column(Float, nullable=False)
    evidence = Column(JSON, default=list)
    is_confirmed = Column(Boolean, default=False, nullable=False)

    # Gamification and grouping
    state = Column(SQLEnum(SkillState, values_callable=_enum_values), default=SkillState.UNLOCKED, nullable=False)
    cluster = Column(String(100), nullable=True)
    microstory = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    profile = relationship("SkillProfile", back_populates="skills")
    quests = relationship("Quest", back_populates="skill", cascade="all, delete-orphan")


class DiscoveredSkill(Base):
    """Transferable skill inferred from a profile's existing skills"""
    __tablename__ = "discovered_skills"

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey('skill_profiles.id', ondelete='CASCADE'), nullable=False, index=True)

    skill_name = Column(String(200), nullable=False)
    inferred_from = Column(JSON, default=list)  # source skill names
    confidence_score = Column(Float, nullable=False)
    reasoning = Column(Text, nullable=True)
    is_confirmed = Column(Boolean, default=False, nullable=False)
    is_rejected = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    profile = relationship("SkillProfile", back_populates="discovered_skills")
