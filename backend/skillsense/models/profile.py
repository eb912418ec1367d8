"""
Skill profile model - one per user, optionally shared under a public slug.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class SkillProfile(Base):
    """Owner of extracted skills, gap analyses and discoveries"""
    __tablename__ = "skill_profiles"

    id = Column(Integer, primary_key=True, index=True)
    # Opaque identity from the external auth provider
    user_id = Column(String(64), nullable=False, index=True)
    profile_name = Column(String(200), nullable=False, default="My Profile")
    raw_data = Column(JSON, nullable=True)

    # Public sharing
    public_slug = Column(String(120), unique=True, nullable=True, index=True)
    is_public = Column(Boolean, default=False, nullable=False)
    display_name = Column(String(200), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    skills = relationship("Skill", back_populates="profile", cascade="all, delete-orphan")
    discovered_skills = relationship("DiscoveredSkill", back_populates="profile", cascade="all, delete-orphan")
    skill_gaps = relationship("SkillGap", back_populates="profile", cascade="all, delete-orphan")
