from fastapi import Request, status

from src.api.core.constants import (
    PUBLIC_RATE_LIMIT,
    PUBLIC_RATE_LIMIT_WINDOW_SECONDS,
    RateLimitKeys,
)
from src.api.core.dependencies import RateLimitServiceDep
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.modules.auth.rate_limiting import RateLimiter
from src.utils.logger import get_client_ip, get_logger

logger = get_logger(__name__)


async def check_rate_limit(
    rate_limiter: RateLimiter,
    rate_key: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Check rate limit for a client key.

    Raises:
        KeyHubException: When rate limit is exceeded
    """
    result = await rate_limiter.is_allowed(rate_key, limit, window_seconds)

    if not result.is_allowed:
        logger.warning(
            f"Rate limit exceeded for {rate_key}: "
            f"{result.current_count}/{result.limit} in {result.window_seconds}s"
        )

        raise KeyHubException(
            MessageCode.RATE_LIMIT_EXCEEDED,
            status.HTTP_429_TOO_MANY_REQUESTS,
            details={
                "limit": result.limit,
                "window_seconds": result.window_seconds,
                "current_count": result.current_count,
                "retry_after": result.retry_after,
            },
            headers={
                "X-RateLimit-Limit": str(result.limit),
                "X-RateLimit-Reset": str(result.retry_after),
                "X-RateLimit-Retry-After": str(result.retry_after),
                "X-RateLimit-Window": str(result.window_seconds),
            },
        )


async def public_rate_limit(request: Request, rate_limiter: RateLimitServiceDep):
    """Throttle public key endpoints per client IP to slow key enumeration."""
    await check_rate_limit(
        rate_limiter,
        RateLimitKeys.public_ip(get_client_ip(request)),
        PUBLIC_RATE_LIMIT,
        PUBLIC_RATE_LIMIT_WINDOW_SECONDS,
    )
