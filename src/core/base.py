import asyncio
from typing import Awaitable, TypeVar

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.database.errors import describe_store_error
from src.utils.logger import get_logger
from src.utils.settings.database import DatabaseSettings

T = TypeVar("T")


class BaseService:
    """Base service class with database dependency injection."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = get_logger(self.__class__.__name__)
        self.store_timeout = DatabaseSettings().DATABASE_TIMEOUT_SECONDS

    async def run_store_call(self, operation: str, call: Awaitable[T]) -> T:
        """Await a store call, mapping failures and timeouts to STORAGE_ERROR.

        IntegrityError is re-raised untouched so callers can map it to a
        domain conflict.
        """
        try:
            return await asyncio.wait_for(call, timeout=self.store_timeout)
        except IntegrityError:
            raise
        except (SQLAlchemyError, asyncio.TimeoutError) as e:
            self.logger.error(
                "Store call failed",
                operation=operation,
                error=describe_store_error(e),
                error_type=type(e).__name__,
            )
            await self._rollback_quietly(operation)
            raise KeyHubException(
                MessageCode.STORAGE_ERROR,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {"operation": operation},
            ) from e

    async def _rollback_quietly(self, operation: str) -> None:
        try:
            await self.db.rollback()
        except SQLAlchemyError as e:
            self.logger.error(
                "Rollback after failed store call also failed",
                operation=operation,
                error=describe_store_error(e),
            )
