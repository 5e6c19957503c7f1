from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession
import redis.asyncio as redis

from src.core.context import DashboardOwnerContext
from src.modules.auth.jwt_auth import extract_bearer_token, handle_jwt_auth
from src.modules.auth.rate_limiting import RateLimiter
from src.modules.keys.api_keys import ApiKeyManagementService
from src.modules.keys.gateway import GatewayService
from src.modules.keys.validation import ApiKeyValidationService
from src.modules.notifications.events import EventEmitter, get_event_emitter
from src.modules.summarizer.github import GithubSummarizer, get_github_summarizer
from src.redis.client import get_redis_client


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session from app state."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session


async def get_api_key_management_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiKeyManagementService:
    """Get API key management service with database session."""
    return ApiKeyManagementService(db)


async def get_api_key_validation_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiKeyValidationService:
    """Get API key validation service with database session."""
    return ApiKeyValidationService(db)


async def get_gateway_service(
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> GatewayService:
    """Get gateway service with database session."""
    return GatewayService(db)


async def get_rate_limit_service(
    redis_client: redis.Redis = Depends(get_redis_client),
) -> RateLimiter:
    """Get rate limit service."""
    return RateLimiter(redis_client)


async def get_current_owner(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> DashboardOwnerContext:
    """Dependency resolving the authenticated dashboard owner from the JWT."""
    token = extract_bearer_token(authorization)
    owner = handle_jwt_auth(token)
    request.state.owner_id = owner.user_id
    return owner


AsyncSessionDep = Annotated[AsyncSession, Depends(get_db_session)]
ApiKeyManagementServiceDep = Annotated[
    ApiKeyManagementService, Depends(get_api_key_management_service)
]
ApiKeyValidationServiceDep = Annotated[
    ApiKeyValidationService, Depends(get_api_key_validation_service)
]
GatewayServiceDep = Annotated[GatewayService, Depends(get_gateway_service)]
RateLimitServiceDep = Annotated[RateLimiter, Depends(get_rate_limit_service)]
EventEmitterDep = Annotated[EventEmitter, Depends(get_event_emitter)]
GithubSummarizerDep = Annotated[GithubSummarizer, Depends(get_github_summarizer)]

CurrentOwnerDep = Annotated[DashboardOwnerContext, Depends(get_current_owner)]
