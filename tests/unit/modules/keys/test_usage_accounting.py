"""Tests for atomic usage accounting."""

import asyncio

import pytest

from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.database.models import ApiKey
from src.modules.keys.models import UsageSnapshot, ValidatedKey
from src.modules.keys.usage import UsageAccountingService


@pytest.mark.asyncio
async def test_record_usage_increments_and_returns_snapshot(
    db_session, api_key_factory
):
    api_key = await api_key_factory.create_async(db_session, usage_limit=5)
    await db_session.commit()
    service = UsageAccountingService(db_session)

    usage = await service.record_usage(ValidatedKey.model_validate(api_key))

    assert usage == UsageSnapshot(current=1, limit=5)
    await db_session.refresh(api_key)
    assert api_key.usage_count == 1


@pytest.mark.asyncio
async def test_record_usage_at_limit_is_rejected(db_session, api_key_factory):
    api_key = await api_key_factory.create_async(
        db_session, usage_count=3, usage_limit=3
    )
    await db_session.commit()
    service = UsageAccountingService(db_session)

    with pytest.raises(KeyHubException) as exc_info:
        await service.record_usage(ValidatedKey.model_validate(api_key))

    assert exc_info.value.message_code == MessageCode.USAGE_LIMIT_EXCEEDED
    assert exc_info.value.status_code == 429
    assert exc_info.value.details == {"current": 3, "limit": 3}
    await db_session.refresh(api_key)
    assert api_key.usage_count == 3


@pytest.mark.asyncio
async def test_record_usage_for_deleted_key_is_unauthorized(
    db_session, api_key_factory
):
    api_key = await api_key_factory.create_async(db_session)
    await db_session.commit()
    validated = ValidatedKey.model_validate(api_key)
    await db_session.delete(api_key)
    await db_session.commit()

    with pytest.raises(KeyHubException) as exc_info:
        await UsageAccountingService(db_session).record_usage(validated)

    assert exc_info.value.message_code == MessageCode.API_KEY_INVALID
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_concurrent_usage_never_exceeds_limit(
    session_factory, db_session, api_key_factory
):
    api_key = await api_key_factory.create_async(db_session, usage_limit=1)
    await db_session.commit()
    validated = ValidatedKey.model_validate(api_key)

    async def consume():
        async with session_factory() as session:
            return await UsageAccountingService(session).record_usage(validated)

    results = await asyncio.gather(consume(), consume(), return_exceptions=True)

    successes = [r for r in results if isinstance(r, UsageSnapshot)]
    failures = [r for r in results if isinstance(r, KeyHubException)]
    assert len(successes) == 1
    assert successes[0] == UsageSnapshot(current=1, limit=1)
    assert len(failures) == 1
    assert failures[0].message_code == MessageCode.USAGE_LIMIT_EXCEEDED

    async with session_factory() as session:
        stored = await session.get(ApiKey, api_key.id)
        assert stored.usage_count == 1
