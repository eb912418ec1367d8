"""
Schemas for AI analysis features: gap analysis, CV enhancement, skill discovery
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


# ============================================================================
# Gap Analysis
# ============================================================================

class GapAnalysisRequest(BaseModel):
    role_title: str = Field(min_length=1, max_length=200)
    role_description: str = ""


class LearningResource(BaseModel):
    title: str
    url: str = ""
    type: Literal["course", "tutorial", "article", "documentation"] = "article"


class SkillRecommendation(BaseModel):
    skill: str
    resources: List[LearningResource] = Field(default_factory=list)
    practice_suggestion: str = ""


class GapAnalysisResult(BaseModel):
    matching_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    recommendations: List[SkillRecommendation] = Field(default_factory=list)


class GapAnalysisResponse(GapAnalysisResult):
    gap_id: int
    target_role_id: int
    role_title: str


# ============================================================================
# CV Enhancement
# ============================================================================

class CVEnhancementRequest(BaseModel):
    original_text: str


class ExperienceImprovement(BaseModel):
    original: str
    enhanced: str


class CVEnhancementResult(BaseModel):
    professional_summary: str = ""
    enhanced_skills_section: List[str] = Field(default_factory=list)
    experience_improvements: List[ExperienceImprovement] = Field(default_factory=list)
    additional_suggestions: List[str] = Field(default_factory=list)


# ============================================================================
# Hidden Skill Discovery
# ============================================================================

class InferredSkill(BaseModel):
    skill_name: str
    confidence_score: float = Field(ge=0.0, le=1.0)
    inferred_from: List[str] = Field(default_factory=list)
    reasoning: str


class DiscoveryResponse(BaseModel):
    discovered: int
    skills: List[InferredSkill] = Field(default_factory=list)
    message: Optional[str] = None
