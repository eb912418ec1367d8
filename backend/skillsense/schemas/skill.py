"""
Skill schemas - extraction candidates, merged skills and per-source status
"""
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field, model_validator
from datetime import datetime

from ..config import get_settings
from ..models.skill import SkillType, SkillState

settings = get_settings()


def state_for_confidence(confidence: float) -> SkillState:
    """Skills below the unlock threshold start locked behind quests."""
    if confidence < settings.skill_unlock_threshold:
        return SkillState.LOCKED
    return SkillState.UNLOCKED


# ============================================================================
# Extraction Schemas
# ============================================================================

class SkillCandidate(BaseModel):
    """One AI-produced skill observation from a single source."""
    skill_name: str = Field(min_length=1)
    skill_type: SkillType = SkillType.EXPLICIT
    confidence_score: float = Field(ge=0.0, le=1.0)
    evidence: List[str] = Field(default_factory=list)
    cluster: str = "Other"
    microstory: str = ""
    # Derived from confidence_score when not given
    state: Optional[SkillState] = None
    source: str

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def fill_missing_state(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("state") is not None:
            return data
        try:
            confidence = float(data.get("confidence_score"))
        except (TypeError, ValueError):
            return data
        return {**data, "state": state_for_confidence(confidence)}


class MergedSkill(SkillCandidate):
    """Deduplicated skill; `source` lists every contributing source."""


class SourceState(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class SourceStatus(BaseModel):
    name: str
    status: SourceState = SourceState.PENDING
    skills_count: int = 0
    error: Optional[str] = None


class AggregateExtractionResponse(BaseModel):
    total_skills: int
    saved: bool
    summary: str
    sources: List[SourceStatus]
    skills: List[MergedSkill]


# ============================================================================
# Stored Skill Schemas
# ============================================================================

class SkillResponse(BaseModel):
    id: int
    profile_id: int
    skill_name: str
    skill_type: SkillType
    confidence_score: float
    evidence: List[str] = Field(default_factory=list)
    is_confirmed: bool = False
    state: SkillState
    cluster: Optional[str] = None
    microstory: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DiscoveredSkillResponse(BaseModel):
    id: int
    skill_name: str
    inferred_from: List[str] = Field(default_factory=list)
    confidence_score: float
    reasoning: Optional[str] = None
    is_confirmed: bool = False
    is_rejected: bool = False

    class Config:
        from_attributes = True
