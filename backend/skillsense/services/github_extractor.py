"""
GitHub skill extraction.

Collects public activity (languages, topics, READMEs, commit messages) for a
GitHub user and asks Gemini to infer technical skills from it.
"""
import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx

from ..config import get_settings
from ..schemas.skill import SkillCandidate
from .gemini import generate_json
from .skill_extractor import normalize_skill_records, skills_from_payload

logger = logging.getLogger(__name__)
settings = get_settings()

GITHUB_SOURCE = "GitHub"
REPOS_PER_PAGE = 30
COMMITS_PER_REPO = 10
README_CHAR_LIMIT = 2000
MAX_GITHUB_EVIDENCE = 5


class GitHubError(Exception):
    """GitHub user lookup failed."""


@dataclass
class GitHubActivity:
    username: str
    repositories_analyzed: int = 0
    languages: List[str] = field(default_factory=list)
    topics: List[str] = field(default_factory=list)
    descriptions: List[str] = field(default_factory=list)
    readmes: List[str] = field(default_factory=list)
    commit_messages: List[str] = field(default_factory=list)


def github_headers(token: Optional[str] = None) -> Dict[str, str]:
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": "SkillSense-App",
    }
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


def _add_unique(values: List[str], value: str) -> None:
    if value and value not in values:
        values.append(value)


def _decode_readme(payload: dict) -> str:
    try:
        content = base64.b64decode(payload.get("content") or "")
    except (binascii.Error, ValueError):
        return ""
    return content.decode("utf-8", errors="replace")[:README_CHAR_LIMIT]


async def _collect_repo_details(
    client: httpx.AsyncClient,
    username: str,
    repo: dict,
    activity: GitHubActivity,
) -> None:
    """Fetch languages, README and commits for one repo; failures only skip that piece."""
    name = repo.get("name", "")

    languages_url = repo.get("languages_url")
    if languages_url:
        try:
            response = await client.get(languages_url)
            if response.status_code == 200:
                languages = response.json()
                if isinstance(languages, dict):
                    for language in languages:
                        _add_unique(activity.languages, language)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Error fetching languages for {name}: {e}")

    try:
        response = await client.get(f"/repos/{username}/{name}/readme")
        if response.status_code == 200:
            payload = response.json()
            readme = _decode_readme(payload) if isinstance(payload, dict) else ""
            if readme:
                activity.readmes.append(readme)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Error fetching README for {name}: {e}")

    try:
        response = await client.get(
            f"/repos/{username}/{name}/commits",
            params={"per_page": COMMITS_PER_REPO},
        )
        if response.status_code == 200:
            commits = response.json()
            for commit in commits if isinstance(commits, list) else []:
                details = commit.get("commit") if isinstance(commit, dict) else None
                message = details.get("message") if isinstance(details, dict) else None
                if isinstance(message, str) and message:
                    activity.commit_messages.append(message)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Error fetching commits for {name}: {e}")


async def collect_github_activity(
    username: str,
    token: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> GitHubActivity:
    """
    Gather the raw signals used for skill inference.

    Args:
        username: GitHub login
        token: Optional personal access token (raises rate limits)
        client: Optional preconfigured client (base_url must be the GitHub API)

    Returns:
        GitHubActivity with deduplicated languages and topics

    Raises:
        GitHubError if the repository list cannot be fetched
    """
    username = username.strip()
    if not username:
        raise GitHubError("GitHub username is required")

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(
            base_url=settings.github_api_url,
            headers=github_headers(token),
            timeout=settings.github_timeout_seconds,
        )

    try:
        try:
            response = await client.get(
                f"/users/{username}/repos",
                params={"sort": "updated", "per_page": REPOS_PER_PAGE},
            )
        except httpx.HTTPError as e:
            raise GitHubError(f"GitHub request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"GitHub API error: {response.status_code} {response.text[:300]}")
            raise GitHubError(f"GitHub API error: {response.status_code}")

        try:
            repos = response.json()
        except ValueError as e:
            raise GitHubError("GitHub API returned an unreadable repository list") from e
        if not isinstance(repos, list):
            raise GitHubError("GitHub API returned an unexpected repository list")
        repos = [repo for repo in repos if isinstance(repo, dict)]
        logger.info(f"Found {len(repos)} repositories for {username}")

        activity = GitHubActivity(username=username, repositories_analyzed=len(repos))
        # Limit detail requests to stay under the unauthenticated rate limit
        for repo in repos[:settings.github_repo_limit]:
            language = repo.get("language")
            _add_unique(activity.languages, language if isinstance(language, str) else "")
            topics = repo.get("topics")
            for topic in topics if isinstance(topics, list) else []:
                if isinstance(topic, str):
                    _add_unique(activity.topics, topic)
            if isinstance(repo.get("description"), str) and repo["description"]:
                activity.descriptions.append(repo["description"])

            await _collect_repo_details(client, username, repo, activity)
    finally:
        if owns_client:
            await client.aclose()

    logger.info(
        f"Aggregated: {len(activity.languages)} languages, {len(activity.topics)} topics, "
        f"{len(activity.readmes)} READMEs, {len(activity.commit_messages)} commits"
    )
    return activity


def build_github_context(activity: GitHubActivity) -> str:
    readmes = "\n---\n".join(activity.readmes[:5])
    return f"""
GITHUB PROFILE ANALYSIS FOR: {activity.username}

PROGRAMMING LANGUAGES USED:
{', '.join(activity.languages)}

REPOSITORY TOPICS/TAGS:
{', '.join(activity.topics)}

PROJECT DESCRIPTIONS:
{chr(10).join(activity.descriptions[:20])}

SAMPLE README CONTENT:
{readmes}

SAMPLE COMMIT MESSAGES:
{chr(10).join(activity.commit_messages[:30])}
"""


GITHUB_SKILL_PROMPT = """You are an expert technical skill analyzer specializing in GitHub profile analysis.

Analyze the provided GitHub data and extract professional technical skills. Look for:
1. Programming languages and frameworks
2. Development tools and technologies
3. Architecture patterns and methodologies
4. Domain expertise (web dev, mobile, data science, DevOps, etc.)
5. Soft skills implied by commit messages and project types
6. Cloud platforms and infrastructure tools

Be comprehensive but accurate. Assign confidence scores based on:
- High (0.8-1.0): Languages/tools used extensively across multiple repos
- Medium (0.5-0.7): Technologies mentioned in READMEs or used occasionally
- Low (0.3-0.4): Implied skills or minor mentions

Return a JSON object {{"skills": [...]}} where each skill has skill_name, skill_type
("explicit" or "implicit"), confidence_score, evidence (array of strings from the
GitHub data), cluster and microstory.

{context}

Extract skills from this GitHub profile data.
"""


async def extract_skills_from_github(
    username: str,
    token: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[SkillCandidate]:
    """Collect GitHub activity and turn it into skill candidates."""
    activity = await collect_github_activity(username, token=token, client=client)

    payload = await generate_json(
        GITHUB_SKILL_PROMPT.format(context=build_github_context(activity)),
        temperature=0.7,
        max_output_tokens=3048,
    )

    candidates = normalize_skill_records(
        skills_from_payload(payload),
        GITHUB_SOURCE,
        default_cluster="Technical",
        default_confidence=0.5,
        default_microstory=f"Extracted from GitHub profile @{activity.username}",
        max_evidence=MAX_GITHUB_EVIDENCE,
        trust_state=False,
    )
    logger.info(f"Extracted {len(candidates)} skills from GitHub")
    return candidates
