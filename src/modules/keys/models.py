"""API key domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.database.models import ApiKeyStatus


class ValidatedKey(BaseModel):
    """A key record that passed validation, without its secret value."""

    id: UUID
    name: str
    status: ApiKeyStatus
    usage_count: int
    usage_limit: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @property
    def limit_reached(self) -> bool:
        return self.usage_count >= self.usage_limit


class UsageSnapshot(BaseModel):
    """Usage of a key right after a gated request."""

    current: int
    limit: int


class UsageSummary(BaseModel):
    """Aggregate usage across every key, as shown on the plan card."""

    total_usage: int
    usage_limit: int
    usage_percentage: float
    key_count: int
