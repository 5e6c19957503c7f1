"""GitHub repository summarizer, the action gated behind API keys."""

import asyncio
import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

import aiohttp
from fastapi import status
from pydantic import BaseModel

from src.api.core.constants import GITHUB_URL_PATTERN, PLACEHOLDER_SUMMARY
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.modules.keys.models import ValidatedKey
from src.utils.logger import get_logger
from src.utils.settings.github import GithubSettings

logger = get_logger(__name__)

_github_url_re = re.compile(GITHUB_URL_PATTERN)


class RepositoryRef(BaseModel):
    owner: str
    repo: str


class RepositorySummary(BaseModel):
    repository: str
    owner: str
    repo: str
    summary: str
    timestamp: datetime
    processed_by: str
    metadata: dict[str, Any] | None = None


def is_valid_github_url(url: Any) -> bool:
    if not url or not isinstance(url, str):
        return False
    return bool(_github_url_re.match(url.strip()))


def parse_github_url(url: Any) -> RepositoryRef | None:
    """Extract owner and repository name from a GitHub URL."""
    if not is_valid_github_url(url):
        return None

    path_parts = [part for part in urlparse(url.strip()).path.split("/") if part]
    if len(path_parts) < 2:
        return None
    repo = path_parts[1].removesuffix(".git")
    return RepositoryRef(owner=path_parts[0], repo=repo)


class GithubSummarizer:
    """Builds repository summaries, optionally enriched from the GitHub API."""

    def __init__(self, settings: GithubSettings | None = None):
        self.settings = settings or GithubSettings()
        self.timeout = self.settings.GITHUB_TIMEOUT_SECONDS

    async def summarize(
        self,
        api_key: ValidatedKey,
        github_url: str,
    ) -> RepositorySummary:
        ref = parse_github_url(github_url)
        if ref is None:
            raise KeyHubException(
                MessageCode.INVALID_GITHUB_URL,
                status.HTTP_400_BAD_REQUEST,
                {"github_url": github_url},
            )

        summary = PLACEHOLDER_SUMMARY
        metadata = None
        if self.settings.GITHUB_FETCH_ENABLED:
            metadata = await self._fetch_repository(ref)
            summary = self._describe(ref, metadata)

        return RepositorySummary(
            repository=github_url.strip(),
            owner=ref.owner,
            repo=ref.repo,
            summary=summary,
            timestamp=datetime.now(timezone.utc),
            processed_by=api_key.name,
            metadata=metadata,
        )

    async def _fetch_repository(self, ref: RepositoryRef) -> dict[str, Any]:
        """Fetch repository metadata from the GitHub REST API."""
        headers = {"Accept": "application/vnd.github+json"}
        if self.settings.GITHUB_TOKEN:
            headers["Authorization"] = f"Bearer {self.settings.GITHUB_TOKEN}"

        url = f"{self.settings.GITHUB_API_URL}/repos/{ref.owner}/{ref.repo}"
        async with aiohttp.ClientSession() as session:
            try:
                async with session.get(
                    url,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    response.raise_for_status()
                    data = await response.json()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(
                    f"GitHub request failed: {e}", owner=ref.owner, repo=ref.repo
                )
                raise KeyHubException(
                    MessageCode.EXTERNAL_SERVICE_ERROR,
                    status.HTTP_502_BAD_GATEWAY,
                    {"service": "github"},
                ) from e

        return {
            "full_name": data.get("full_name"),
            "description": data.get("description"),
            "language": data.get("language"),
            "stars": data.get("stargazers_count", 0),
            "forks": data.get("forks_count", 0),
            "open_issues": data.get("open_issues_count", 0),
            "topics": data.get("topics", []),
            "default_branch": data.get("default_branch"),
        }

    def _describe(self, ref: RepositoryRef, metadata: dict[str, Any]) -> str:
        name = metadata.get("full_name") or f"{ref.owner}/{ref.repo}"
        parts = [f"{name}: {metadata.get('description') or 'No description.'}"]
        if metadata.get("language"):
            parts.append(f"Written mostly in {metadata['language']}.")
        parts.append(
            f"{metadata['stars']} stars, {metadata['forks']} forks, "
            f"{metadata['open_issues']} open issues."
        )
        if metadata.get("topics"):
            parts.append("Topics: " + ", ".join(metadata["topics"]) + ".")
        return " ".join(parts)


async def get_github_summarizer() -> GithubSummarizer:
    """Get GitHub summarizer for dependency injection."""
    return GithubSummarizer()
