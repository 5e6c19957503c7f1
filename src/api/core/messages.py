"""Centralized message codes and default messages for API responses."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel


class MessageCode(str, Enum):
    """Centralized message codes for API responses."""

    # Success codes
    SUCCESS = "SUCCESS"

    # Authentication & Authorization
    AUTH_REQUIRED = "AUTH_REQUIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # API Key management
    API_KEY_CREATED = "API_KEY_CREATED"
    API_KEY_UPDATED = "API_KEY_UPDATED"
    API_KEY_DELETED = "API_KEY_DELETED"
    API_KEY_NOT_FOUND = "API_KEY_NOT_FOUND"
    API_KEY_CONFLICT = "API_KEY_CONFLICT"
    API_KEY_CREATE_FAILED = "API_KEY_CREATE_FAILED"
    API_KEY_UPDATE_FAILED = "API_KEY_UPDATE_FAILED"
    API_KEY_DELETE_FAILED = "API_KEY_DELETE_FAILED"

    # API Key validation
    API_KEY_VALID = "API_KEY_VALID"
    API_KEY_INVALID = "API_KEY_INVALID"

    # Usage accounting
    USAGE_LIMIT_EXCEEDED = "USAGE_LIMIT_EXCEEDED"

    # Rate limiting
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Summarizer
    SUMMARY_CREATED = "SUMMARY_CREATED"
    INVALID_GITHUB_URL = "INVALID_GITHUB_URL"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # Generic errors
    STORAGE_ERROR = "STORAGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"


# Default messages for each message code
DEFAULT_MESSAGES = {
    # Success messages
    MessageCode.SUCCESS: "Operation completed successfully",
    # Authentication & Authorization
    MessageCode.AUTH_REQUIRED: "Authentication required",
    MessageCode.INVALID_TOKEN: "Invalid authentication token",
    MessageCode.INSUFFICIENT_PERMISSIONS: "Insufficient permissions",
    # API Key management
    MessageCode.API_KEY_CREATED: "API key created successfully!",
    MessageCode.API_KEY_UPDATED: "API key updated successfully!",
    MessageCode.API_KEY_DELETED: "API key deleted successfully",
    MessageCode.API_KEY_NOT_FOUND: "API key not found",
    MessageCode.API_KEY_CONFLICT: "An API key with this value already exists",
    MessageCode.API_KEY_CREATE_FAILED: "Failed to create API key",
    MessageCode.API_KEY_UPDATE_FAILED: "Failed to update API key",
    MessageCode.API_KEY_DELETE_FAILED: "Failed to delete API key",
    # API Key validation
    MessageCode.API_KEY_VALID: "Valid API key",
    MessageCode.API_KEY_INVALID: "Invalid API key",
    # Usage accounting
    MessageCode.USAGE_LIMIT_EXCEEDED: "API key usage limit exceeded",
    # Rate limiting
    MessageCode.RATE_LIMIT_EXCEEDED: "Rate limit exceeded",
    # Summarizer
    MessageCode.SUMMARY_CREATED: "GitHub repository summarized successfully!",
    MessageCode.INVALID_GITHUB_URL: "Invalid GitHub URL format. Must be a valid GitHub repository URL.",
    MessageCode.EXTERNAL_SERVICE_ERROR: "External service error",
    # Validation errors
    MessageCode.INVALID_INPUT: "Invalid input provided",
    # Generic errors
    MessageCode.STORAGE_ERROR: "Database error occurred",
    MessageCode.INTERNAL_ERROR: "Internal server error",
    MessageCode.BAD_REQUEST: "Bad request",
    MessageCode.NOT_FOUND: "Resource not found",
}

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Base API response model with consistent structure and proper typing."""

    message_code: MessageCode
    message: str
    data: T | None = None

    @classmethod
    def success(
        cls,
        message_code: MessageCode = MessageCode.SUCCESS,
        message: str | None = None,
        data: T | None = None,
    ) -> "APIResponse[T]":
        """Create a success response."""
        return cls(
            message_code=message_code,
            message=message or DEFAULT_MESSAGES.get(message_code, "Success"),
            data=data,
        )


def get_default_message(message_code: MessageCode) -> str:
    """Get default message for a message code."""
    return DEFAULT_MESSAGES.get(message_code, "Operation completed")
