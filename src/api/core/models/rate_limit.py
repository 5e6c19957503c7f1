"""Rate limiting types and models."""

from pydantic import BaseModel


class RateLimitResult(BaseModel):
    """Result of rate limit check."""

    is_allowed: bool
    current_count: int
    time_to_reset: int | None
    rate_key: str
    limit: int
    window_seconds: int

    @property
    def retry_after(self) -> int:
        return self.time_to_reset or self.window_seconds
