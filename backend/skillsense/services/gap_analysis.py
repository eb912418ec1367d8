"""
Skill gap analysis against a target role.
"""
import logging
from typing import Any, List, Sequence

from ..schemas.analysis import GapAnalysisResult, LearningResource, SkillRecommendation
from .gemini import GeminiResponseError, generate_json

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ("course", "tutorial", "article", "documentation")

GAP_ANALYSIS_PROMPT = """You are a career development expert. Analyze the gap between a user's current skills and a target job role.

Compare the user's skills with the job requirements and identify:
1. Matching skills (skills the user has that align with the role)
2. Missing skills (skills required for the role that the user lacks)
3. Specific learning recommendations for each missing skill

Return ONLY a JSON object with this structure:
{{
    "matching_skills": ["..."],
    "missing_skills": ["..."],
    "recommendations": [
        {{
            "skill": "missing skill name",
            "resources": [{{"title": "...", "url": "...", "type": "course|tutorial|article|documentation"}}],
            "practice_suggestion": "..."
        }}
    ]
}}

User's Skills: {skills}

Target Role: {role_title}

Job Description: {role_description}
"""


def coerce_string_list(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [str(item).strip() for item in raw if isinstance(item, (str, int, float)) and str(item).strip()]


def _parse_resources(raw: Any) -> List[LearningResource]:
    resources = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict) or not item.get("title"):
            continue
        resource_type = item.get("type")
        resources.append(LearningResource(
            title=str(item["title"]),
            url=str(item.get("url") or ""),
            type=resource_type if resource_type in RESOURCE_TYPES else "article",
        ))
    return resources


def _parse_recommendations(raw: Any) -> List[SkillRecommendation]:
    recommendations = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, dict) or not item.get("skill"):
            continue
        recommendations.append(SkillRecommendation(
            skill=str(item["skill"]),
            resources=_parse_resources(item.get("resources")),
            practice_suggestion=str(item.get("practice_suggestion") or ""),
        ))
    return recommendations


async def analyze_skill_gap(
    user_skills: Sequence[str],
    role_title: str,
    role_description: str = "",
) -> GapAnalysisResult:
    """
    Compare a user's skills with a target role.

    An answer that is not valid JSON yields an empty analysis. An unreachable
    model still raises GeminiError.

    Raises:
        ValueError if the role title is blank
    """
    if not role_title or not role_title.strip():
        raise ValueError("Target role title is required")

    prompt = GAP_ANALYSIS_PROMPT.format(
        skills=", ".join(user_skills) or "None listed",
        role_title=role_title.strip(),
        role_description=role_description.strip() or "No description provided",
    )

    try:
        payload = await generate_json(prompt, temperature=0.5)
    except GeminiResponseError as e:
        logger.warning(f"Gap analysis answer unparseable, returning empty analysis: {e}")
        return GapAnalysisResult()

    if not isinstance(payload, dict):
        payload = {}

    result = GapAnalysisResult(
        matching_skills=coerce_string_list(payload.get("matching_skills")),
        missing_skills=coerce_string_list(payload.get("missing_skills")),
        recommendations=_parse_recommendations(payload.get("recommendations")),
    )
    logger.info(
        f"Gap analysis for '{role_title}': {len(result.matching_skills)} matching, "
        f"{len(result.missing_skills)} missing"
    )
    return result
