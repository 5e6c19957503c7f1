"""API key validation: read-only lookup of active keys."""

from typing import Any

from fastapi import status
from sqlalchemy import select

from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import ApiKey, ApiKeyStatus
from src.modules.keys.models import ValidatedKey


def normalize_api_key(raw_key: Any) -> str:
    """Trim a submitted key, rejecting missing, non-string or blank input."""
    if not raw_key or not isinstance(raw_key, str):
        raise KeyHubException(
            MessageCode.INVALID_INPUT,
            status.HTTP_400_BAD_REQUEST,
            {"description": "API key is required and must be a string"},
        )
    key_value = raw_key.strip()
    if not key_value:
        raise KeyHubException(
            MessageCode.INVALID_INPUT,
            status.HTTP_400_BAD_REQUEST,
            {"description": "API key cannot be empty"},
        )
    return key_value


class ApiKeyValidationService(BaseService):
    """Checks submitted keys against the store without mutating anything."""

    async def validate_api_key(self, raw_key: Any) -> ValidatedKey:
        """Return the active key matching ``raw_key``, minus its secret.

        Unknown, inactive and deleted keys all fail with the same
        API_KEY_INVALID error so callers cannot learn key status.
        """
        key_value = normalize_api_key(raw_key)

        stmt = select(ApiKey).where(
            ApiKey.key_value == key_value,
            ApiKey.status == ApiKeyStatus.ACTIVE.value,
        )
        result = await self.run_store_call("validate_api_key", self.db.execute(stmt))
        api_key = result.scalar_one_or_none()

        if api_key is None:
            self.logger.warning("API key validation failed: no active match")
            raise KeyHubException(
                MessageCode.API_KEY_INVALID,
                status.HTTP_401_UNAUTHORIZED,
            )

        self.logger.info(f"API key {api_key.id} validated")
        return ValidatedKey.model_validate(api_key)
