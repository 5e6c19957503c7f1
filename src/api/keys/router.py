from uuid import UUID

from fastapi import APIRouter

from src.api.core.dependencies import (
    ApiKeyManagementServiceDep,
    CurrentOwnerDep,
    EventEmitterDep,
)
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import APIResponse, MessageCode, get_default_message
from src.api.keys.schemas import (
    KeyCreateRequest,
    KeyCreateResponse,
    KeyDeleteResponse,
    KeyListResponse,
    KeyModel,
    KeyResponse,
    KeyUpdateRequest,
    KeyUsageResponse,
)
from src.modules.notifications.events import EventLevel, KeyEvent, KeyEventKind
from src.utils.logger import get_logger
from src.utils.settings.app import AppSettings

logger = get_logger(__name__)

# Create router with prefix
router = APIRouter(prefix="/keys", tags=["keys"])


_FAILURE_CODES = {
    KeyEventKind.CREATE_FAILED: MessageCode.API_KEY_CREATE_FAILED,
    KeyEventKind.UPDATE_FAILED: MessageCode.API_KEY_UPDATE_FAILED,
    KeyEventKind.DELETE_FAILED: MessageCode.API_KEY_DELETE_FAILED,
}


def _failed_event(kind: KeyEventKind, error: KeyHubException, key_id=None) -> KeyEvent:
    return KeyEvent(
        kind=kind,
        level=EventLevel.ERROR,
        message=f"{get_default_message(_FAILURE_CODES[kind])}: {error.message}",
        key_id=key_id,
    )


@router.post("/", response_model=KeyCreateResponse)
async def create_key(
    key_data: KeyCreateRequest,
    service: ApiKeyManagementServiceDep,
    current_owner: CurrentOwnerDep,
    events: EventEmitterDep,
) -> KeyCreateResponse:
    """Create a new API key with a server-generated value."""
    try:
        api_key = await service.create_api_key(
            name=key_data.name,
            key_status=key_data.status,
            usage_limit=key_data.usage_limit,
        )
    except KeyHubException as e:
        events.emit(_failed_event(KeyEventKind.CREATE_FAILED, e))
        raise

    message = get_default_message(MessageCode.API_KEY_CREATED)
    events.emit(
        KeyEvent(KeyEventKind.CREATED, EventLevel.SUCCESS, message, api_key.id)
    )
    return APIResponse.success(
        message_code=MessageCode.API_KEY_CREATED,
        message=message,
        data=KeyModel.model_validate(api_key),
    )


@router.get("/", response_model=KeyListResponse)
async def list_keys(
    service: ApiKeyManagementServiceDep,
    current_owner: CurrentOwnerDep,
) -> KeyListResponse:
    """List all API keys, newest first."""
    keys = await service.list_api_keys()
    key_list = [KeyModel.model_validate(key) for key in keys]
    return APIResponse.success(data={"keys": key_list, "total": len(key_list)})


@router.get("/usage", response_model=KeyUsageResponse)
async def get_usage(
    service: ApiKeyManagementServiceDep,
    current_owner: CurrentOwnerDep,
) -> KeyUsageResponse:
    """Total usage across all keys against the plan limit."""
    summary = await service.usage_summary(AppSettings().PLAN_USAGE_LIMIT)
    return APIResponse.success(data=summary)


@router.get("/{key_id}", response_model=KeyResponse)
async def get_key(
    key_id: UUID,
    service: ApiKeyManagementServiceDep,
    current_owner: CurrentOwnerDep,
) -> KeyResponse:
    """Get a single API key."""
    api_key = await service.get_api_key(key_id)
    return APIResponse.success(data=KeyModel.model_validate(api_key))


@router.patch("/{key_id}", response_model=KeyResponse)
async def update_key(
    key_id: UUID,
    key_data: KeyUpdateRequest,
    service: ApiKeyManagementServiceDep,
    current_owner: CurrentOwnerDep,
    events: EventEmitterDep,
) -> KeyResponse:
    """Update name, status or usage limit of an API key."""
    try:
        api_key = await service.update_api_key(
            key_id, key_data.model_dump(exclude_none=True)
        )
    except KeyHubException as e:
        events.emit(_failed_event(KeyEventKind.UPDATE_FAILED, e, key_id))
        raise

    message = get_default_message(MessageCode.API_KEY_UPDATED)
    events.emit(KeyEvent(KeyEventKind.UPDATED, EventLevel.SUCCESS, message, key_id))
    return APIResponse.success(
        message_code=MessageCode.API_KEY_UPDATED,
        message=message,
        data=KeyModel.model_validate(api_key),
    )


@router.delete("/{key_id}", response_model=KeyDeleteResponse)
async def delete_key(
    key_id: UUID,
    service: ApiKeyManagementServiceDep,
    current_owner: CurrentOwnerDep,
    events: EventEmitterDep,
) -> KeyDeleteResponse:
    """Permanently delete an API key."""
    try:
        await service.delete_api_key(key_id)
    except KeyHubException as e:
        events.emit(_failed_event(KeyEventKind.DELETE_FAILED, e, key_id))
        raise

    message = get_default_message(MessageCode.API_KEY_DELETED)
    events.emit(KeyEvent(KeyEventKind.DELETED, EventLevel.INFO, message, key_id))
    return APIResponse.success(
        message_code=MessageCode.API_KEY_DELETED,
        message=message,
        data={"deleted": True},
    )
