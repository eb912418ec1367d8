"""
Aggregate extraction across document, text and GitHub sources.

Every present source runs concurrently. A failing source is recorded in its
own status entry and never aborts the others. Merging starts only after all
sources have settled.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..schemas.skill import MergedSkill, SkillCandidate, SourceState, SourceStatus
from .adapters import (
    DOCUMENT_SOURCE, TEXT_SOURCE, DocumentInput, GitHubAccount,
    SourceAdapter, default_adapters,
)
from .aggregator import merge_skill_candidates
from .github_extractor import GITHUB_SOURCE

logger = logging.getLogger(__name__)

ERROR_MESSAGE_LIMIT = 200


class NoInputError(ValueError):
    """No extraction source was provided."""


@dataclass
class ExtractionSources:
    document: Optional[DocumentInput] = None
    text: Optional[str] = None
    github: Optional[GitHubAccount] = None

    def present(self) -> List[Tuple[str, Any]]:
        """(label, payload) for each source that was actually supplied."""
        sources = []
        if self.document is not None:
            sources.append((DOCUMENT_SOURCE, self.document))
        if self.github is not None and self.github.username.strip():
            sources.append((GITHUB_SOURCE, self.github))
        if self.text is not None and self.text.strip():
            sources.append((TEXT_SOURCE, self.text))
        return sources


@dataclass
class AggregateExtractionResult:
    merged_skills: List[MergedSkill] = field(default_factory=list)
    sources: List[SourceStatus] = field(default_factory=list)
    candidate_count: int = 0

    @property
    def completed_sources(self) -> List[SourceStatus]:
        return [s for s in self.sources if s.status == SourceState.COMPLETED]

    @property
    def failed_sources(self) -> List[SourceStatus]:
        return [s for s in self.sources if s.status == SourceState.ERROR]


def _short_error(error: Exception) -> str:
    message = str(error).strip() or type(error).__name__
    return message[:ERROR_MESSAGE_LIMIT]


async def _run_source(
    adapters: Dict[str, SourceAdapter],
    payload: Any,
    status: SourceStatus,
) -> List[SkillCandidate]:
    """Run the adapter for one source, writing only to its own status entry."""
    status.status = SourceState.PROCESSING
    try:
        adapter = adapters.get(status.name)
        if adapter is None:
            raise LookupError(f"No extractor available for {status.name}")
        candidates = await adapter.extract(payload)
    except Exception as e:
        logger.warning(f"{status.name} extraction failed: {e}")
        status.status = SourceState.ERROR
        status.skills_count = 0
        status.error = _short_error(e)
        return []

    status.status = SourceState.COMPLETED
    status.skills_count = len(candidates)
    logger.info(f"{status.name} extraction completed with {len(candidates)} skills")
    return candidates


async def run_aggregate_extraction(
    sources: ExtractionSources,
    adapters: Optional[Dict[str, SourceAdapter]] = None,
    auto_merge: bool = True,
) -> AggregateExtractionResult:
    """
    Extract skills from every present source and merge the results.

    Args:
        sources: Up to three optional inputs
        adapters: Adapter per source label (defaults to the Gemini-backed ones)
        auto_merge: Deduplicate across sources; when False candidates pass through

    Returns:
        AggregateExtractionResult with merged skills and final source statuses

    Raises:
        NoInputError if no source is present
    """
    present = sources.present()
    if not present:
        raise NoInputError("Please provide at least one data source (Document, GitHub, or Text)")

    if adapters is None:
        adapters = default_adapters()
    statuses = [SourceStatus(name=label) for label, _ in present]

    results = await asyncio.gather(*(
        _run_source(adapters, payload, status)
        for (_, payload), status in zip(present, statuses)
    ))

    candidates = [candidate for batch in results for candidate in batch]
    if auto_merge:
        merged = merge_skill_candidates(candidates)
    else:
        merged = [MergedSkill(**candidate.model_dump()) for candidate in candidates]

    logger.info(
        f"Aggregate extraction: {len(candidates)} candidates -> {len(merged)} skills "
        f"from {len(present)} sources"
    )
    return AggregateExtractionResult(
        merged_skills=merged,
        sources=statuses,
        candidate_count=len(candidates),
    )


def summarize_extraction(result: AggregateExtractionResult, saved: bool) -> str:
    """
    Build the user-facing summary line.

    Distinguishes nothing extracted, extracted but not saved, saved, and
    partial success when some sources failed.
    """
    total = len(result.merged_skills)
    breakdown = " | ".join(f"{s.name}: {s.skills_count} skills" for s in result.completed_sources)
    failed = ", ".join(s.name for s in result.failed_sources)

    if total == 0:
        message = "No skills were extracted from the provided sources"
    elif not saved:
        message = f"Extracted {total} skills but failed to save them"
    else:
        message = f"Unified skill extraction complete: {total} total skills saved"

    if breakdown:
        message += f". {breakdown}"
    if failed and result.completed_sources:
        message += f". Partial success - failed sources: {failed}"
    elif failed:
        message += f". All sources failed: {failed}"
    return message
