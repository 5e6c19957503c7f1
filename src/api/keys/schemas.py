"""Keys API schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from src.api.core.constants import MAX_KEY_NAME_LENGTH
from src.api.core.messages import APIResponse
from src.database.models import DEFAULT_USAGE_LIMIT, ApiKeyStatus
from src.modules.keys.generator import mask_api_key
from src.modules.keys.models import UsageSummary


class KeyModel(BaseModel):
    id: UUID
    name: str
    key_value: str
    status: ApiKeyStatus
    usage_count: int
    usage_limit: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def masked_key(self) -> str:
        return mask_api_key(self.key_value)


def _clean_name(value: str | None) -> str | None:
    if value is None:
        return None
    name = value.strip()
    if not name:
        raise ValueError("name cannot be empty")
    return name


class KeyCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_KEY_NAME_LENGTH)
    status: ApiKeyStatus = ApiKeyStatus.ACTIVE
    usage_limit: int = Field(DEFAULT_USAGE_LIMIT, ge=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value):
        return _clean_name(value)


class KeyUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_KEY_NAME_LENGTH)
    status: ApiKeyStatus | None = None
    usage_limit: int | None = Field(None, ge=1)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value):
        return _clean_name(value)

    @model_validator(mode="after")
    def check_not_empty(self) -> "KeyUpdateRequest":
        if not self.model_dump(exclude_none=True):
            raise ValueError("at least one of name, status, usage_limit is required")
        return self


KeyCreateResponse = APIResponse[KeyModel]
KeyResponse = APIResponse[KeyModel]
KeyListResponse = APIResponse[dict[str, list[KeyModel] | int]]
KeyDeleteResponse = APIResponse[dict[str, bool]]
KeyUsageResponse = APIResponse[UsageSummary]
