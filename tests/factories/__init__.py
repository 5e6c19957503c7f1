"""Test factories for KeyHub API models."""

from .base import AsyncSQLAlchemyModelFactory
from .api_keys import ApiKeyFactory

__all__ = [
    "AsyncSQLAlchemyModelFactory",
    "ApiKeyFactory",
]
