"""API key management service with proper error handling."""

from uuid import UUID

from fastapi import status
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from src.api.core.constants import KEY_GENERATION_MAX_ATTEMPTS
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import DEFAULT_USAGE_LIMIT, ApiKey, ApiKeyStatus
from src.database.models.api_keys import utc_now
from src.modules.keys.generator import generate_api_key, mask_api_key
from src.modules.keys.models import UsageSummary

UPDATABLE_FIELDS = frozenset({"name", "status", "usage_limit"})


class ApiKeyManagementService(BaseService):
    """CRUD over the api_keys table for the dashboard owner."""

    async def create_api_key(
        self,
        name: str,
        key_status: ApiKeyStatus = ApiKeyStatus.ACTIVE,
        usage_limit: int = DEFAULT_USAGE_LIMIT,
    ) -> ApiKey:
        """Create a key with a freshly generated value.

        A collision on the unique key value triggers a new generation, up to
        KEY_GENERATION_MAX_ATTEMPTS times, before giving up with a conflict.
        Existing records are never overwritten.
        """
        for attempt in range(1, KEY_GENERATION_MAX_ATTEMPTS + 1):
            key_value = generate_api_key(name)
            api_key = ApiKey(
                name=name,
                key_value=key_value,
                status=ApiKeyStatus(key_status).value,
                usage_count=0,
                usage_limit=usage_limit,
            )
            self.db.add(api_key)
            try:
                await self.run_store_call("create_api_key", self.db.commit())
            except IntegrityError:
                await self._rollback_quietly("create_api_key")
                self.logger.warning(
                    "API key value collision, regenerating",
                    attempt=attempt,
                    masked_key=mask_api_key(key_value),
                )
                continue

            await self.run_store_call("create_api_key", self.db.refresh(api_key))
            self.logger.info(f"Created API key {api_key.id}", name=name)
            return api_key

        raise KeyHubException(
            MessageCode.API_KEY_CONFLICT,
            status.HTTP_409_CONFLICT,
            {
                "description": "Could not generate a unique API key value",
                "attempts": KEY_GENERATION_MAX_ATTEMPTS,
            },
        )

    async def list_api_keys(self) -> list[ApiKey]:
        """List all API keys, newest first."""
        stmt = select(ApiKey).order_by(ApiKey.created_at.desc(), ApiKey.id)

        result = await self.run_store_call("list_api_keys", self.db.execute(stmt))
        return list(result.scalars().all())

    async def get_api_key(self, api_key_id: UUID) -> ApiKey:
        """Get API key by ID."""
        stmt = select(ApiKey).where(ApiKey.id == api_key_id)

        result = await self.run_store_call("get_api_key", self.db.execute(stmt))
        api_key = result.scalar_one_or_none()
        if api_key is None:
            raise _not_found(api_key_id)
        return api_key

    async def update_api_key(self, api_key_id: UUID, fields: dict) -> ApiKey:
        """Partially update name, status and/or usage limit."""
        values = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not values:
            raise KeyHubException(
                MessageCode.INVALID_INPUT,
                status.HTTP_400_BAD_REQUEST,
                {"description": "Nothing to update"},
            )
        if "status" in values:
            values["status"] = ApiKeyStatus(values["status"]).value
        values["updated_at"] = utc_now()

        stmt = (
            update(ApiKey)
            .where(ApiKey.id == api_key_id)
            .values(**values)
            .returning(ApiKey)
            .execution_options(synchronize_session=False)
        )

        result = await self.run_store_call("update_api_key", self.db.execute(stmt))
        updated_key = result.scalar_one_or_none()
        await self.run_store_call("update_api_key", self.db.commit())

        if updated_key is None:
            raise _not_found(api_key_id)
        # RETURNING does not refresh an instance already in the identity map
        await self.run_store_call("update_api_key", self.db.refresh(updated_key))

        self.logger.info(
            f"Updated API key {api_key_id}",
            fields=sorted(k for k in values if k != "updated_at"),
        )
        return updated_key

    async def delete_api_key(self, api_key_id: UUID) -> None:
        """Permanently delete an API key."""
        stmt = delete(ApiKey).where(ApiKey.id == api_key_id)

        result = await self.run_store_call("delete_api_key", self.db.execute(stmt))
        await self.run_store_call("delete_api_key", self.db.commit())

        if result.rowcount == 0:
            raise _not_found(api_key_id)
        self.logger.info(f"Deleted API key {api_key_id}")

    async def usage_summary(self, plan_limit: int) -> UsageSummary:
        """Total usage across all keys against the plan limit."""
        stmt = select(
            func.coalesce(func.sum(ApiKey.usage_count), 0), func.count(ApiKey.id)
        )

        result = await self.run_store_call("usage_summary", self.db.execute(stmt))
        total_usage, key_count = result.one()
        return UsageSummary(
            total_usage=total_usage,
            usage_limit=plan_limit,
            usage_percentage=round(total_usage / plan_limit * 100, 2),
            key_count=key_count,
        )


def _not_found(api_key_id: UUID) -> KeyHubException:
    return KeyHubException(
        MessageCode.API_KEY_NOT_FOUND,
        status.HTTP_404_NOT_FOUND,
        {"description": f"API key {api_key_id} not found"},
    )
