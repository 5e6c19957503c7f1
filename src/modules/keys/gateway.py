"""Authorization gateway for actions paid for with API key usage."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from fastapi import status

from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.modules.keys.models import UsageSnapshot, ValidatedKey
from src.modules.keys.usage import UsageAccountingService
from src.modules.keys.validation import ApiKeyValidationService

T = TypeVar("T")

GatedAction = Callable[[ValidatedKey], Awaitable[T]]


@dataclass
class GatedResult(Generic[T]):
    result: T
    usage: UsageSnapshot
    api_key_id: str


class GatewayService(BaseService):
    """Validate a key, run the action, then charge one usage unit.

    Authorization fails closed: nothing runs unless the key is active and
    under its limit. Accounting fails open: once the action has run, a
    failure to record usage is logged and the result is still returned.
    """

    def __init__(self, db):
        super().__init__(db)
        self.validator = ApiKeyValidationService(db)
        self.accountant = UsageAccountingService(db)

    async def run(self, raw_key: Any, action: GatedAction[T]) -> GatedResult[T]:
        api_key = await self.validator.validate_api_key(raw_key)

        if api_key.limit_reached:
            self.logger.warning(
                f"Rejected gated request for API key {api_key.id}: limit reached",
                usage_count=api_key.usage_count,
                usage_limit=api_key.usage_limit,
            )
            raise KeyHubException(
                MessageCode.USAGE_LIMIT_EXCEEDED,
                status.HTTP_429_TOO_MANY_REQUESTS,
                {"current": api_key.usage_count, "limit": api_key.usage_limit},
            )

        result = await action(api_key)

        try:
            usage = await self.accountant.record_usage(api_key)
        except KeyHubException as e:
            usage = self._usage_after_failed_charge(api_key, e)

        return GatedResult(result=result, usage=usage, api_key_id=str(api_key.id))

    def _usage_after_failed_charge(
        self, api_key: ValidatedKey, error: KeyHubException
    ) -> UsageSnapshot:
        if error.message_code == MessageCode.USAGE_LIMIT_EXCEEDED:
            # A concurrent request took the last unit after validation
            self.logger.warning(
                f"Lost the race for the last usage unit of API key {api_key.id}",
                usage_current=error.details["current"],
                usage_limit=error.details["limit"],
            )
            return UsageSnapshot(
                current=error.details["current"], limit=error.details["limit"]
            )

        self.logger.error(
            f"Failed to record usage for API key {api_key.id}",
            message_code=error.message_code.value,
        )
        return UsageSnapshot(
            current=api_key.usage_count + 1, limit=api_key.usage_limit
        )
