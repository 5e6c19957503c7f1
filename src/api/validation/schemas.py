"""Validation API schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.api.core.messages import MessageCode
from src.modules.keys.models import ValidatedKey


class ValidateKeyRequest(BaseModel):
    # Left untyped so blank or non-string keys get the same {valid: false} body
    api_key: Any = Field(None, alias="apiKey")

    model_config = ConfigDict(populate_by_name=True)


class ValidateKeyResponse(BaseModel):
    valid: bool
    message_code: MessageCode
    data: ValidatedKey | None = None
    error: str | None = None
