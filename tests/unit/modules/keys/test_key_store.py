"""Tests for API key management (create, list, get, update, delete)."""

import asyncio
from datetime import datetime, timedelta
from unittest.mock import patch
from uuid import uuid4

import pytest

from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.database.models import ApiKeyStatus
from src.modules.keys.api_keys import ApiKeyManagementService
from tests.utils.assertions import assert_keyhub_exception


@pytest.mark.asyncio
async def test_create_api_key_defaults(db_session):
    service = ApiKeyManagementService(db_session)

    api_key = await service.create_api_key("Production Key")

    assert api_key.key_value.startswith("pk_live_")
    assert api_key.status == ApiKeyStatus.ACTIVE.value
    assert api_key.usage_count == 0
    assert api_key.usage_limit == 1000
    assert api_key.id is not None


@pytest.mark.asyncio
async def test_create_api_key_retries_on_collision(db_session, api_key_factory):
    existing = await api_key_factory.create_async(db_session, name="Staging")
    await db_session.commit()
    # the failed commit rolls back and expires every loaded instance
    existing_id, existing_value = existing.id, existing.key_value
    service = ApiKeyManagementService(db_session)

    with patch(
        "src.modules.keys.api_keys.generate_api_key",
        side_effect=[existing_value, "pk_dev_" + "z" * 32],
    ):
        api_key = await service.create_api_key("Staging")

    assert api_key.key_value == "pk_dev_" + "z" * 32
    assert api_key.id != existing_id


@pytest.mark.asyncio
async def test_create_api_key_conflict_after_repeated_collisions(
    db_session, api_key_factory
):
    existing = await api_key_factory.create_async(db_session, name="Staging")
    await db_session.commit()
    # the failed commit rolls back and expires every loaded instance
    existing_id, existing_value = existing.id, existing.key_value
    service = ApiKeyManagementService(db_session)

    with patch(
        "src.modules.keys.api_keys.generate_api_key",
        return_value=existing_value,
    ):
        with pytest.raises(KeyHubException) as exc_info:
            await service.create_api_key("Staging")

    assert_keyhub_exception(exc_info.value, MessageCode.API_KEY_CONFLICT, 409)
    keys = await service.list_api_keys()
    assert [k.id for k in keys] == [existing_id]


@pytest.mark.asyncio
async def test_list_api_keys_newest_first(db_session, api_key_factory):
    now = datetime(2026, 1, 1, 12, 0, 0)
    oldest = await api_key_factory.create_async(
        db_session, created_at=now - timedelta(days=2)
    )
    newest = await api_key_factory.create_async(db_session, created_at=now)
    middle = await api_key_factory.create_async(
        db_session, created_at=now - timedelta(days=1)
    )
    await db_session.commit()

    keys = await ApiKeyManagementService(db_session).list_api_keys()

    assert [k.id for k in keys] == [newest.id, middle.id, oldest.id]


@pytest.mark.asyncio
async def test_get_missing_api_key_is_not_found(db_session):
    with pytest.raises(KeyHubException) as exc_info:
        await ApiKeyManagementService(db_session).get_api_key(uuid4())

    assert_keyhub_exception(exc_info.value, MessageCode.API_KEY_NOT_FOUND, 404)


@pytest.mark.asyncio
async def test_update_name_advances_updated_at(db_session):
    service = ApiKeyManagementService(db_session)
    api_key = await service.create_api_key("Staging")
    original_updated_at = api_key.updated_at
    await asyncio.sleep(0.01)

    await service.update_api_key(api_key.id, {"name": "X"})
    fetched = await service.get_api_key(api_key.id)

    assert fetched.name == "X"
    assert fetched.updated_at > original_updated_at


@pytest.mark.asyncio
async def test_update_status_and_limit(db_session, test_api_key):
    service = ApiKeyManagementService(db_session)

    updated = await service.update_api_key(
        test_api_key.id,
        {"status": ApiKeyStatus.INACTIVE, "usage_limit": 5, "key_value": "ignored"},
    )

    assert updated.status == ApiKeyStatus.INACTIVE.value
    assert updated.usage_limit == 5
    assert updated.key_value == test_api_key.key_value


@pytest.mark.asyncio
async def test_update_with_nothing_writable_is_invalid(db_session, test_api_key):
    with pytest.raises(KeyHubException) as exc_info:
        await ApiKeyManagementService(db_session).update_api_key(
            test_api_key.id, {"usage_count": 0}
        )

    assert_keyhub_exception(exc_info.value, MessageCode.INVALID_INPUT, 400)


@pytest.mark.asyncio
async def test_update_missing_api_key_is_not_found(db_session):
    with pytest.raises(KeyHubException) as exc_info:
        await ApiKeyManagementService(db_session).update_api_key(
            uuid4(), {"name": "X"}
        )

    assert_keyhub_exception(exc_info.value, MessageCode.API_KEY_NOT_FOUND, 404)


@pytest.mark.asyncio
async def test_delete_api_key(db_session, test_api_key):
    service = ApiKeyManagementService(db_session)

    await service.delete_api_key(test_api_key.id)

    with pytest.raises(KeyHubException) as exc_info:
        await service.delete_api_key(test_api_key.id)
    assert_keyhub_exception(exc_info.value, MessageCode.API_KEY_NOT_FOUND, 404)


@pytest.mark.asyncio
async def test_usage_summary(db_session, api_key_factory):
    await api_key_factory.create_async(db_session, usage_count=100)
    await api_key_factory.create_async(db_session, usage_count=23)
    await db_session.commit()

    summary = await ApiKeyManagementService(db_session).usage_summary(1000)

    assert summary.total_usage == 123
    assert summary.usage_limit == 1000
    assert summary.usage_percentage == 12.3
    assert summary.key_count == 2


@pytest.mark.asyncio
async def test_usage_summary_without_keys(db_session):
    summary = await ApiKeyManagementService(db_session).usage_summary(1000)

    assert summary.total_usage == 0
    assert summary.usage_percentage == 0
    assert summary.key_count == 0
