"""Database models for KeyHub API."""

from .api_keys import DEFAULT_USAGE_LIMIT, ApiKey, ApiKeyStatus
from .base import Base

__all__ = [
    # Base
    "Base",
    # Enums
    "ApiKeyStatus",
    # Models
    "ApiKey",
    "DEFAULT_USAGE_LIMIT",
]
