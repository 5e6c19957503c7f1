"""API Key model."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

DEFAULT_USAGE_LIMIT = 1000


class ApiKeyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApiKey(Base):
    __tablename__ = "api_keys"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    key_value: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=ApiKeyStatus.ACTIVE.value, index=True
    )
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    usage_limit: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_USAGE_LIMIT
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="ck_api_keys_status"),
        CheckConstraint("usage_count >= 0", name="ck_api_keys_usage_count"),
        CheckConstraint("usage_limit > 0", name="ck_api_keys_usage_limit"),
    )
