"""Tests for GitHub URL parsing and repository summaries."""

from datetime import datetime
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from src.api.core.constants import PLACEHOLDER_SUMMARY
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.database.models import ApiKeyStatus
from src.modules.keys.models import ValidatedKey
from src.modules.summarizer.github import (
    GithubSummarizer,
    RepositoryRef,
    is_valid_github_url,
    parse_github_url,
)
from src.utils.settings.github import GithubSettings
from tests.utils.assertions import assert_keyhub_exception


@pytest.fixture
def validated_key() -> ValidatedKey:
    now = datetime(2026, 1, 1)
    return ValidatedKey(
        id=uuid4(),
        name="Production Key",
        status=ApiKeyStatus.ACTIVE,
        usage_count=0,
        usage_limit=10,
        created_at=now,
        updated_at=now,
    )


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/octocat/hello-world",
        "https://github.com/octo.cat/hello_world.git",
        "  https://github.com/a/b/tree/main  ",
    ],
)
def test_valid_github_urls(url):
    assert is_valid_github_url(url)


@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "http://github.com/octocat/hello-world",
        "https://gitlab.com/octocat/hello-world",
        "https://github.com/octocat",
        42,
    ],
)
def test_invalid_github_urls(url):
    assert not is_valid_github_url(url)
    assert parse_github_url(url) is None


def test_parse_github_url_strips_git_suffix():
    ref = parse_github_url("https://github.com/octocat/hello-world.git")

    assert ref == RepositoryRef(owner="octocat", repo="hello-world")


@pytest.mark.asyncio
async def test_summarize_returns_placeholder_by_default(validated_key):
    summarizer = GithubSummarizer(GithubSettings(GITHUB_FETCH_ENABLED=False))

    summary = await summarizer.summarize(
        validated_key, " https://github.com/octocat/hello-world "
    )

    assert summary.repository == "https://github.com/octocat/hello-world"
    assert summary.owner == "octocat"
    assert summary.repo == "hello-world"
    assert summary.summary == PLACEHOLDER_SUMMARY
    assert summary.processed_by == "Production Key"
    assert summary.metadata is None


@pytest.mark.asyncio
async def test_summarize_rejects_invalid_url(validated_key):
    summarizer = GithubSummarizer(GithubSettings(GITHUB_FETCH_ENABLED=False))

    with pytest.raises(KeyHubException) as exc_info:
        await summarizer.summarize(validated_key, "https://example.com/a/b")

    assert_keyhub_exception(exc_info.value, MessageCode.INVALID_GITHUB_URL, 400)


@pytest.mark.asyncio
async def test_summarize_with_fetched_metadata(validated_key):
    summarizer = GithubSummarizer(GithubSettings(GITHUB_FETCH_ENABLED=True))
    metadata = {
        "full_name": "octocat/hello-world",
        "description": "My first repository",
        "language": "Python",
        "stars": 3,
        "forks": 1,
        "open_issues": 0,
        "topics": ["demo"],
        "default_branch": "main",
    }

    with patch.object(
        summarizer, "_fetch_repository", AsyncMock(return_value=metadata)
    ) as fetch:
        summary = await summarizer.summarize(
            validated_key, "https://github.com/octocat/hello-world"
        )

    fetch.assert_awaited_once_with(RepositoryRef(owner="octocat", repo="hello-world"))
    assert summary.metadata == metadata
    assert summary.summary.startswith("octocat/hello-world: My first repository")
    assert "Written mostly in Python." in summary.summary
    assert "3 stars, 1 forks, 0 open issues." in summary.summary
    assert summary.summary.endswith("Topics: demo.")


@pytest.mark.asyncio
async def test_unreachable_github_is_external_service_error(validated_key):
    summarizer = GithubSummarizer(
        GithubSettings(
            GITHUB_FETCH_ENABLED=True,
            GITHUB_API_URL="http://127.0.0.1:1",
            GITHUB_TIMEOUT_SECONDS=2,
        )
    )

    with pytest.raises(KeyHubException) as exc_info:
        await summarizer.summarize(
            validated_key, "https://github.com/octocat/hello-world"
        )

    assert_keyhub_exception(exc_info.value, MessageCode.EXTERNAL_SERVICE_ERROR, 502)
