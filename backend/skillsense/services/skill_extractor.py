"""
Skill extraction from free text using Gemini.

Extracts explicit and implicit skills, then validates and coerces the raw
model output into SkillCandidate objects.
"""
import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from ..config import get_settings
from ..models.skill import SkillType, SkillState
from ..schemas.skill import SkillCandidate, state_for_confidence
from .gemini import generate_json

logger = logging.getLogger(__name__)
settings = get_settings()


SKILL_CLUSTERS = [
    "Programming & Development",
    "Data & Analytics",
    "Design & UX",
    "Management & Leadership",
    "Communication & Collaboration",
    "Cloud & Infrastructure",
    "Security & Compliance",
    "Marketing & Sales",
    "Product & Strategy",
    "Other",
]

DEFAULT_CLUSTER = "Other"
DEFAULT_CONFIDENCE = 0.8
DEFAULT_MICROSTORY = "No story available"
MAX_TEXT_EVIDENCE = 3


SKILL_EXTRACTION_PROMPT = """You are an AI skill extraction expert. Analyze the provided text and extract both explicit and implicit professional skills.

For each skill identified, provide:
1. skill_name: The name of the skill
2. skill_type: Either "explicit" (directly mentioned) or "implicit" (inferred from context)
3. confidence_score: A number between 0 and 1 indicating confidence
4. evidence: An array of text snippets from the original text that support this skill
5. cluster: Categorize the skill into one of these clusters: {clusters}
6. microstory: A brief 1-2 sentence story showing how this skill was demonstrated in the text
7. state: Set to "locked" if confidence < 0.5, otherwise "unlocked"

Extract a comprehensive list of skills including:
- Technical skills (programming languages, tools, frameworks)
- Soft skills (leadership, communication, teamwork)
- Domain knowledge (industry-specific expertise)
- Methodologies (Agile, DevOps, etc.)

Return ONLY a JSON object of the form {{"skills": [...]}}, nothing else.

Analyze this text and extract skills:

{text}
"""


def build_extraction_prompt(text: str) -> str:
    return SKILL_EXTRACTION_PROMPT.format(clusters=", ".join(SKILL_CLUSTERS), text=text)


def _coerce_confidence(record: Dict[str, Any], default: float) -> float:
    raw = record.get("confidence_score", record.get("confidence"))
    if raw is None:
        return default
    try:
        score = float(raw)
    except (TypeError, ValueError):
        return default
    if math.isnan(score):
        return default
    return max(0.0, min(1.0, score))


def _coerce_evidence(raw: Any, limit: int) -> List[str]:
    if not isinstance(raw, list):
        return []
    evidence = [item.strip() for item in raw if isinstance(item, str) and item.strip()]
    return evidence[:limit]


def normalize_skill_records(
    records: Iterable[Any],
    source: str,
    *,
    default_cluster: str = DEFAULT_CLUSTER,
    default_confidence: float = DEFAULT_CONFIDENCE,
    default_microstory: str = DEFAULT_MICROSTORY,
    max_evidence: int = MAX_TEXT_EVIDENCE,
    trust_state: bool = True,
) -> List[SkillCandidate]:
    """
    Normalize raw model output into validated skill candidates.

    Records without a usable name are dropped. Every other field falls back
    to a default instead of failing the whole batch.

    Args:
        records: Raw skill dicts from the model
        source: Label of the producing source (e.g. "Text", "GitHub")
        default_cluster: Cluster used when the model gives none
        default_confidence: Confidence used when missing or non-numeric
        default_microstory: Narrative used when missing
        max_evidence: Maximum evidence snippets kept per skill
        trust_state: Keep a valid model-provided state; otherwise derive it
            from the confidence score

    Returns:
        List of SkillCandidate objects
    """
    candidates = []
    for record in records or []:
        if not isinstance(record, dict):
            continue

        name = str(record.get("skill_name") or record.get("name") or "").strip()
        if not name:
            continue

        raw_type = record.get("skill_type")
        skill_type = SkillType(raw_type) if raw_type in ("explicit", "implicit") else SkillType.EXPLICIT

        confidence = _coerce_confidence(record, default_confidence)

        raw_state = record.get("state")
        if trust_state and raw_state in ("locked", "unlocked"):
            state = SkillState(raw_state)
        else:
            state = state_for_confidence(confidence)

        microstory = str(record.get("microstory") or "").strip() or default_microstory

        candidates.append(SkillCandidate(
            skill_name=name,
            skill_type=skill_type,
            confidence_score=confidence,
            evidence=_coerce_evidence(record.get("evidence"), max_evidence),
            cluster=str(record.get("cluster") or "").strip() or default_cluster,
            microstory=microstory,
            state=state,
            source=source,
        ))
    return candidates


def skills_from_payload(payload: Any) -> List[Any]:
    """Pull the skills array out of a model answer, tolerating bad shapes."""
    if isinstance(payload, dict) and isinstance(payload.get("skills"), list):
        return payload["skills"]
    if isinstance(payload, list):
        return payload
    logger.warning("Gemini answer had no skills array; treating as empty")
    return []


async def extract_skills_from_text(
    text: Optional[str],
    source: str = "Text",
    default_cluster: str = DEFAULT_CLUSTER,
) -> List[SkillCandidate]:
    """
    Extract skills from document or pasted text.

    Args:
        text: Raw text (resume, project notes, ...)
        source: Label recorded on every candidate
        default_cluster: Cluster for skills the model left uncategorised

    Returns:
        Normalized skill candidates (empty for blank text)
    """
    if not text or not text.strip():
        logger.info("Empty text received - skipping extraction")
        return []

    logger.info(f"Extracting skills from {source} text ({len(text)} chars)")
    payload = await generate_json(build_extraction_prompt(text), temperature=0.7)

    candidates = normalize_skill_records(
        skills_from_payload(payload),
        source,
        default_cluster=default_cluster,
    )
    logger.info(f"Extracted {len(candidates)} skills from {source}")
    return candidates
