"""User-facing events emitted by request handlers."""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from uuid import UUID

from src.utils.logger import get_logger

logger = get_logger(__name__)


class EventLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class KeyEventKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    CREATE_FAILED = "create_failed"
    UPDATE_FAILED = "update_failed"
    DELETE_FAILED = "delete_failed"


@dataclass(frozen=True)
class KeyEvent:
    kind: KeyEventKind
    level: EventLevel
    message: str
    key_id: UUID | None = None


class EventEmitter(Protocol):
    def emit(self, event: KeyEvent) -> None: ...


class LoggingEventEmitter:
    """Default emitter: events go to the structured log."""

    def emit(self, event: KeyEvent) -> None:
        log = logger.warning if event.level == EventLevel.ERROR else logger.info
        log(
            event.message,
            event_kind=event.kind.value,
            event_level=event.level.value,
            key_id=str(event.key_id) if event.key_id else None,
        )


def get_event_emitter() -> EventEmitter:
    """Get event emitter for dependency injection."""
    return LoggingEventEmitter()
