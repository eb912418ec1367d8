"""
Profile schemas for owners, public sharing, progress and expert search
"""
from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime

from .skill import SkillResponse


class ProfileResponse(BaseModel):
    """Full profile response for the owner"""
    id: int
    user_id: str
    profile_name: str
    public_slug: Optional[str] = None
    is_public: bool = False
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ShareSettingsUpdate(BaseModel):
    """Public sharing settings - only provided fields are updated"""
    is_public: Optional[bool] = None
    display_name: Optional[str] = Field(default=None, max_length=200)
    bio: Optional[str] = None
    avatar_url: Optional[str] = Field(default=None, max_length=500)
    # Used as slug base when no display name is set
    email: Optional[str] = None


class ShareSettingsResponse(ProfileResponse):
    public_url: Optional[str] = None


class PublicProfileResponse(BaseModel):
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    public_slug: str
    skills: List[SkillResponse] = Field(default_factory=list)


class SkillProgress(BaseModel):
    total: int
    unlocked: int
    locked: int
    percent: float


class ExpertSkill(BaseModel):
    skill_name: str
    confidence_score: float


class ExpertProfile(BaseModel):
    profile_id: int
    display_name: str
    skills: List[ExpertSkill]
    total_skills: int


class ExpertStats(BaseModel):
    total_experts: int
