"""
CV enhancement suggestions built from extracted skills and the original CV text.
"""
import logging
from typing import Any, List, Sequence

from ..models import Skill
from ..schemas.analysis import CVEnhancementResult, ExperienceImprovement
from .gap_analysis import coerce_string_list
from .gemini import generate_json

logger = logging.getLogger(__name__)

MAX_CV_CHARS = 3000

CV_ENHANCEMENT_PROMPT = """You are a professional CV writer. Based on the user's original content and discovered skills, generate suggestions to enhance their CV.

Provide:
1. A professional summary highlighting key strengths (2-3 sentences)
2. Skill-based categories and recommendations
3. Experience improvements that showcase skills effectively
4. General CV improvement tips

Return ONLY a JSON object with this structure:
{{
    "professional_summary": "...",
    "enhanced_skills_section": ["Category: skill, skill"],
    "experience_improvements": [{{"original": "...", "enhanced": "..."}}],
    "additional_suggestions": ["..."]
}}

Skills discovered: {skills}

Original CV content: {text}
"""


def _parse_improvements(raw: Any) -> List[ExperienceImprovement]:
    improvements = []
    for item in raw if isinstance(raw, list) else []:
        if isinstance(item, dict) and item.get("original") and item.get("enhanced"):
            improvements.append(ExperienceImprovement(
                original=str(item["original"]),
                enhanced=str(item["enhanced"]),
            ))
    return improvements


async def enhance_cv(skills: Sequence[Skill], original_text: str) -> CVEnhancementResult:
    """
    Generate CV suggestions.

    Only the first 3000 characters of the CV are sent.

    Raises:
        ValueError if the original text is blank
        GeminiError if the model is unavailable or answers with invalid JSON
    """
    if not original_text or not original_text.strip():
        raise ValueError("Original text is required")

    skills_list = ", ".join(
        f"{s.skill_name} ({getattr(s.skill_type, 'value', s.skill_type)})" for s in skills
    )
    prompt = CV_ENHANCEMENT_PROMPT.format(
        skills=skills_list or "None",
        text=original_text[:MAX_CV_CHARS],
    )

    payload = await generate_json(prompt, temperature=0.7)
    if not isinstance(payload, dict):
        payload = {}

    summary = payload.get("professional_summary")
    result = CVEnhancementResult(
        professional_summary=summary if isinstance(summary, str) else "",
        enhanced_skills_section=coerce_string_list(payload.get("enhanced_skills_section")),
        experience_improvements=_parse_improvements(payload.get("experience_improvements")),
        additional_suggestions=coerce_string_list(payload.get("additional_suggestions")),
    )
    logger.info(
        f"CV enhancement: summary {len(result.professional_summary)} chars, "
        f"{len(result.experience_improvements)} improvements"
    )
    return result
