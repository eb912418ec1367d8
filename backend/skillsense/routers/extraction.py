"""
Extraction Router - aggregate skill extraction from document, text and GitHub
"""
import logging
from typing import Dict, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import SkillProfile
from ..services.adapters import DocumentInput, GitHubAccount, SourceAdapter, default_adapters
from ..services.orchestrator import (
    ExtractionSources, NoInputError, run_aggregate_extraction, summarize_extraction,
)
from ..services.skill_store import PersistenceError, save_merged_skills
from ..schemas.skill import AggregateExtractionResponse
from .profiles import get_owned_profile_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["Extraction"])


def get_source_adapters() -> Dict[str, SourceAdapter]:
    return default_adapters()


@router.post("/{profile_id}/aggregate-extract", response_model=AggregateExtractionResponse)
async def aggregate_extract(
    file: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
    github_username: Optional[str] = Form(None),
    github_token: Optional[str] = Form(None),
    auto_merge: bool = Form(True),
    profile: SkillProfile = Depends(get_owned_profile_or_404),
    adapters: Dict[str, SourceAdapter] = Depends(get_source_adapters),
    db: AsyncSession = Depends(get_db),
):
    """
    Extract skills from every provided source concurrently, merge and save them.

    - **file**: PDF, DOCX, TXT or MD document
    - **text**: Free text (project notes, bio, ...)
    - **github_username** / **github_token**: GitHub account to analyze
    - **auto_merge**: Deduplicate skills across sources (default true)

    A failing source is reported in `sources` and does not fail the request.
    """
    document = None
    if file is not None and file.filename:
        document = DocumentInput(filename=file.filename, content=await file.read())

    github = None
    if github_username and github_username.strip():
        github = GitHubAccount(
            username=github_username.strip(),
            token=(github_token or "").strip() or None,
        )

    sources = ExtractionSources(document=document, text=text, github=github)
    try:
        result = await run_aggregate_extraction(sources, adapters=adapters, auto_merge=auto_merge)
    except NoInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    saved = False
    if result.merged_skills:
        try:
            await save_merged_skills(db, profile.id, result.merged_skills)
            saved = True
        except PersistenceError as e:
            logger.error(f"Aggregate extraction for profile {profile.id} not saved: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=summarize_extraction(result, saved=False),
            )

    return AggregateExtractionResponse(
        total_skills=len(result.merged_skills),
        saved=saved,
        summary=summarize_extraction(result, saved=saved),
        sources=result.sources,
        skills=result.merged_skills,
    )
