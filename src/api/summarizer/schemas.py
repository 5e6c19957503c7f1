"""Summarizer API schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.api.core.messages import MessageCode
from src.modules.keys.models import UsageSnapshot
from src.modules.summarizer.github import RepositorySummary


class SummarizeRequest(BaseModel):
    api_key: str = Field(..., alias="apiKey")
    github_url: str = Field(..., alias="githubUrl")
    options: dict[str, Any] | None = None

    model_config = ConfigDict(populate_by_name=True)


class SummarizeResponse(BaseModel):
    message_code: MessageCode
    message: str
    result: RepositorySummary
    usage: UsageSnapshot
