"""Usage accounting for gated requests."""

from fastapi import status
from sqlalchemy import select, update

from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import ApiKey
from src.database.models.api_keys import utc_now
from src.modules.keys.models import UsageSnapshot, ValidatedKey


class UsageAccountingService(BaseService):
    """Counts gated requests against each key's usage limit."""

    async def record_usage(self, api_key: ValidatedKey) -> UsageSnapshot:
        """Consume one usage unit of ``api_key``.

        The limit check and the increment are a single conditional UPDATE, so
        concurrent calls can never push usage_count past usage_limit.
        """
        stmt = (
            update(ApiKey)
            .where(
                ApiKey.id == api_key.id,
                ApiKey.usage_count < ApiKey.usage_limit,
            )
            .values(usage_count=ApiKey.usage_count + 1, updated_at=utc_now())
            .returning(ApiKey.usage_count, ApiKey.usage_limit)
            .execution_options(synchronize_session=False)
        )

        result = await self.run_store_call("record_usage", self.db.execute(stmt))
        row = result.first()
        await self.run_store_call("record_usage", self.db.commit())

        if row is not None:
            return UsageSnapshot(current=row.usage_count, limit=row.usage_limit)

        raise await self._rejection(api_key)

    async def _rejection(self, api_key: ValidatedKey) -> KeyHubException:
        stmt = select(ApiKey.usage_count, ApiKey.usage_limit).where(
            ApiKey.id == api_key.id
        )
        result = await self.run_store_call("record_usage", self.db.execute(stmt))
        row = result.first()

        if row is None:
            # Deleted between validation and accounting
            return KeyHubException(
                MessageCode.API_KEY_INVALID,
                status.HTTP_401_UNAUTHORIZED,
            )

        self.logger.warning(
            f"Usage limit reached for API key {api_key.id}",
            usage_count=row.usage_count,
            usage_limit=row.usage_limit,
        )
        return KeyHubException(
            MessageCode.USAGE_LIMIT_EXCEEDED,
            status.HTTP_429_TOO_MANY_REQUESTS,
            {"current": row.usage_count, "limit": row.usage_limit},
        )
