"""
Target role and skill gap models for gap analysis results.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class TargetRole(Base):
    """A job role the user wants to compare their skills against"""
    __tablename__ = "target_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    role_title = Column(String(200), nullable=False)
    role_description = Column(Text, nullable=False, default="")
    required_skills = Column(JSON, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    skill_gaps = relationship("SkillGap", back_populates="target_role", cascade="all, delete-orphan")


class SkillGap(Base):
    __tablename__ = "skill_gaps"

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey('skill_profiles.id', ondelete='CASCADE'), nullable=False, index=True)
    target_role_id = Column(Integer, ForeignKey('target_roles.id', ondelete='CASCADE'), nullable=False)

    missing_skills = Column(JSON, default=list)
    matching_skills = Column(JSON, default=list)
    recommendations = Column(JSON, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    profile = relationship("SkillProfile", back_populates="skill_gaps")
    target_role = relationship("TargetRole", back_populates="skill_gaps")
