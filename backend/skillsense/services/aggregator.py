"""
Merge skill candidates from several sources into one deduplicated set.

Candidates are keyed by their trimmed, lower-cased name. The first candidate
for a key fixes name, type, cluster, microstory and state. Later candidates
only contribute confidence, evidence and their source label.
"""
from typing import Dict, Iterable, List

from ..schemas.skill import MergedSkill, SkillCandidate

SOURCE_SEPARATOR = ", "


def skill_key(skill_name: str) -> str:
    return skill_name.strip().lower()


def _union_evidence(existing: List[str], new: List[str]) -> List[str]:
    return list(dict.fromkeys([*existing, *new]))


def _join_sources(existing: str, new: str) -> str:
    labels = [label for label in existing.split(SOURCE_SEPARATOR) if label]
    for label in new.split(SOURCE_SEPARATOR):
        if label and label not in labels:
            labels.append(label)
    return SOURCE_SEPARATOR.join(labels)


def merge_skill_candidates(candidates: Iterable[SkillCandidate]) -> List[MergedSkill]:
    """
    Deduplicate candidates by case-insensitive name.

    Confidence is a running pairwise average: each duplicate averages the
    current value with its own, so with three or more duplicates the result
    depends on order and is not the arithmetic mean.

    Args:
        candidates: Candidates in the order they were received

    Returns:
        Merged skills in first-seen order
    """
    merged: Dict[str, MergedSkill] = {}

    for candidate in candidates:
        key = skill_key(candidate.skill_name)
        existing = merged.get(key)

        if existing is None:
            merged[key] = MergedSkill(**candidate.model_dump())
            continue

        merged[key] = existing.model_copy(update={
            "confidence_score": (existing.confidence_score + candidate.confidence_score) / 2,
            "evidence": _union_evidence(existing.evidence, candidate.evidence),
            "source": _join_sources(existing.source, candidate.source),
        })

    return list(merged.values())
