"""GitHub summarizer settings configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class GithubSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Placeholder summaries unless explicitly enabled
    GITHUB_FETCH_ENABLED: bool = False
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TOKEN: str = ""
    GITHUB_TIMEOUT_SECONDS: int = 10
