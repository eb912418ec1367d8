"""
Hidden skill discovery - infer transferable skills from a profile's existing ones.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, List, Sequence

from ..models import Skill
from ..schemas.analysis import InferredSkill
from .gemini import generate_json

logger = logging.getLogger(__name__)

MIN_DISCOVERY_CONFIDENCE = 0.6
MIN_SKILLS_FOR_DISCOVERY = 5
DEFAULT_DISCOVERY_CLUSTER = "general"

DISCOVERY_PROMPT = """You are an expert career analyst specializing in skill inference and transferable competency discovery.

Your task is to analyze a person's existing skills and discover HIDDEN or TRANSFERABLE skills that they likely possess but haven't explicitly stated.

INSTRUCTIONS:
1. Look for skill patterns, combinations, and relationships
2. Infer transferable skills from clusters of related skills
3. Identify meta-skills (e.g., multiple programming languages suggest "Rapid Technology Adoption")
4. Consider soft skills implied by technical competencies
5. Only suggest skills with high confidence (>0.6)
6. Provide clear reasoning for each inference
7. Return 5-15 discovered skills maximum

Return ONLY a JSON object:
{{"discovered_skills": [{{"skill_name": "...", "confidence_score": 0.0, "inferred_from": ["..."], "reasoning": "..."}}]}}

EXISTING SKILLS BY CLUSTER:
{skills_by_cluster}
"""


def group_skills_by_cluster(skills: Sequence[Skill]) -> Dict[str, List[Skill]]:
    grouped: Dict[str, List[Skill]] = defaultdict(list)
    for skill in skills:
        grouped[skill.cluster or DEFAULT_DISCOVERY_CLUSTER].append(skill)
    return dict(grouped)


def _format_clusters(grouped: Dict[str, List[Skill]]) -> str:
    blocks = []
    for cluster, skills in grouped.items():
        lines = "\n".join(
            f"  - {s.skill_name} (confidence: {s.confidence_score}, "
            f"type: {getattr(s.skill_type, 'value', s.skill_type)})"
            for s in skills
        )
        blocks.append(f"{cluster.upper()}:\n{lines}")
    return "\n\n".join(blocks)


def filter_discoveries(records: Any) -> List[InferredSkill]:
    """Keep confident, explained inferences that cite at least one source skill."""
    valid = []
    for record in records if isinstance(records, list) else []:
        if not isinstance(record, dict):
            continue
        name = str(record.get("skill_name") or "").strip()
        reasoning = str(record.get("reasoning") or "").strip()
        inferred_from = record.get("inferred_from")
        try:
            confidence = float(record.get("confidence_score"))
        except (TypeError, ValueError):
            continue

        if not name or not reasoning:
            continue
        if not isinstance(inferred_from, list) or not inferred_from:
            continue
        if not MIN_DISCOVERY_CONFIDENCE <= confidence <= 1.0:
            continue

        valid.append(InferredSkill(
            skill_name=name,
            confidence_score=confidence,
            inferred_from=[str(item) for item in inferred_from],
            reasoning=reasoning,
        ))
    return valid


async def discover_hidden_skills(existing_skills: Sequence[Skill]) -> List[InferredSkill]:
    """
    Ask Gemini for transferable skills implied by the existing ones.

    Raises:
        GeminiError if the model is unavailable or answers with invalid JSON
    """
    logger.info(f"Analyzing {len(existing_skills)} skills for hidden skill discovery")
    prompt = DISCOVERY_PROMPT.format(
        skills_by_cluster=_format_clusters(group_skills_by_cluster(existing_skills)),
    )

    payload = await generate_json(prompt, temperature=0.7, max_output_tokens=2048)
    records = payload.get("discovered_skills") if isinstance(payload, dict) else None

    discovered = filter_discoveries(records)
    logger.info(f"Discovered {len(discovered)} hidden skills")
    return discovered
