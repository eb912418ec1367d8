"""
Extractor adapters - one per source type, all behind the same interface.

The orchestrator only knows `label` and `extract(payload)`. Each adapter
raises on failure and never touches state outside its own call.
"""
import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..schemas.skill import SkillCandidate
from .document_parser import DocumentParseError, parse_document
from .github_extractor import GITHUB_SOURCE, extract_skills_from_github
from .skill_extractor import extract_skills_from_text

DOCUMENT_SOURCE = "Document"
TEXT_SOURCE = "Text"


@dataclass(frozen=True)
class DocumentInput:
    filename: str
    content: bytes


@dataclass(frozen=True)
class GitHubAccount:
    username: str
    token: Optional[str] = None


class SourceAdapter(ABC):
    label: str

    @abstractmethod
    async def extract(self, payload: Any) -> List[SkillCandidate]:
        """Return skill candidates for the payload or raise."""


class DocumentAdapter(SourceAdapter):
    label = DOCUMENT_SOURCE

    async def extract(self, payload: DocumentInput) -> List[SkillCandidate]:
        # PDF/DOCX parsing is CPU-bound; keep it off the event loop
        text = await asyncio.to_thread(parse_document, payload.filename, payload.content)
        if not text or not text.strip():
            raise DocumentParseError("Failed to parse document")
        return await extract_skills_from_text(text, source=self.label)


class TextAdapter(SourceAdapter):
    label = TEXT_SOURCE

    async def extract(self, payload: str) -> List[SkillCandidate]:
        return await extract_skills_from_text(payload, source=self.label)


class GitHubAdapter(SourceAdapter):
    label = GITHUB_SOURCE

    async def extract(self, payload: GitHubAccount) -> List[SkillCandidate]:
        return await extract_skills_from_github(payload.username, token=payload.token)


def default_adapters() -> Dict[str, SourceAdapter]:
    adapters = [DocumentAdapter(), TextAdapter(), GitHubAdapter()]
    return {adapter.label: adapter for adapter in adapters}
