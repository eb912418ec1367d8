from .auth import get_current_user_id
from .gemini import (
    GeminiError,
    GeminiResponseError,
    generate_json,
    parse_json_response
)
from .skill_extractor import (
    extract_skills_from_text,
    normalize_skill_records
)
from .github_extractor import (
    GitHubError,
    collect_github_activity,
    extract_skills_from_github
)
from .document_parser import (
    UnsupportedDocumentError,
    DocumentParseError,
    parse_document
)
from .adapters import (
    SourceAdapter,
    DocumentInput,
    GitHubAccount,
    default_adapters
)
from .aggregator import merge_skill_candidates
from .orchestrator import (
    NoInputError,
    ExtractionSources,
    AggregateExtractionResult,
    run_aggregate_extraction,
    summarize_extraction
)
from .skill_store import (
    PersistenceError,
    save_merged_skills
)

__all__ = [
    # Auth
    "get_current_user_id",
    # Gemini
    "GeminiError",
    "GeminiResponseError",
    "generate_json",
    "parse_json_response",
    # Extraction
    "extract_skills_from_text",
    "normalize_skill_records",
    "GitHubError",
    "collect_github_activity",
    "extract_skills_from_github",
    "UnsupportedDocumentError",
    "DocumentParseError",
    "parse_document",
    # Aggregation
    "SourceAdapter",
    "DocumentInput",
    "GitHubAccount",
    "default_adapters",
    "merge_skill_candidates",
    "NoInputError",
    "ExtractionSources",
    "AggregateExtractionResult",
    "run_aggregate_extraction",
    "summarize_extraction",
    # Persistence
    "PersistenceError",
    "save_merged_skills"
]
