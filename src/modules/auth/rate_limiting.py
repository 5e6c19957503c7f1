import time
import uuid

import redis.asyncio as redis

from src.api.core.models.rate_limit import RateLimitResult
from src.utils.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Rate limiter using Redis sliding window algorithm."""

    def __init__(self, redis_client: redis.Redis):
        self.redis_client = redis_client

    async def is_allowed(
        self, key: str, limit: int, window_seconds: int
    ) -> RateLimitResult:
        """
        Check if request is allowed within rate limit.

        Args:
            key: Redis key identifying the throttled client
            limit: Maximum requests allowed
            window_seconds: Time window in seconds

        Returns:
            RateLimitResult: Typed result with rate limit information
        """
        try:
            current_time = int(time.time())
            window_start = current_time - window_seconds

            # Use Redis pipeline for atomic operations
            pipe = self.redis_client.pipeline()

            # Remove expired entries
            pipe.zremrangebyscore(key, 0, window_start)

            # Count current requests in window
            pipe.zcard(key)

            # Score is the timestamp, member is unique per request
            request_id = f"req_{current_time}_{uuid.uuid4().hex}"
            pipe.zadd(key, {request_id: current_time})

            pipe.expire(key, window_seconds + 1)

            results = await pipe.execute()
            current_count = results[1] + 1  # zcard result + the request just added

            is_allowed = current_count <= limit

            if current_count > limit:
                oldest_requests = await self.redis_client.zrange(
                    key, 0, 0, withscores=True
                )
                if oldest_requests:
                    oldest_time = int(oldest_requests[0][1])
                    time_to_reset = max(
                        0, window_seconds - (current_time - oldest_time)
                    )
                else:
                    time_to_reset = window_seconds
            else:
                time_to_reset = None

            if not is_allowed:
                # Rejected requests do not occupy the window
                await self.redis_client.zrem(key, request_id)
                current_count -= 1

            return RateLimitResult(
                is_allowed=is_allowed,
                current_count=current_count,
                time_to_reset=time_to_reset,
                rate_key=key,
                limit=limit,
                window_seconds=window_seconds,
            )

        except Exception as e:
            logger.error(f"Rate limiter error for key {key}: {e}")
            # Fail open - allow request if Redis is down
            return RateLimitResult(
                is_allowed=True,
                current_count=0,
                time_to_reset=None,
                rate_key=key,
                limit=limit,
                window_seconds=window_seconds,
            )
