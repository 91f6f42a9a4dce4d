"""
Rate Limiting Module

Sliding-window rate limits backed by Redis sorted sets.
Falls back to in-memory storage if Redis is unavailable.

Applied to:
- Application and ticket creation (prevents spam submissions)
- Admin status transitions (prevents mass operations)
- Login (prevents brute force)
"""

import logging
import time
from uuid import UUID

from fastapi import HTTPException, status
from redis.asyncio import Redis

from app.core import redis as redis_module

logger = logging.getLogger(__name__)

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": (
                    f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds."
                ),
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using a Redis sorted set.

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using in-memory storage.

    Note: This doesn't work across multiple server instances.
    """
    now = time.time()
    window_start = now - window_seconds

    hits = [ts for ts in _memory_store.get(key, []) if ts > window_start]
    if len(hits) >= limit:
        _memory_store[key] = hits
        return False

    hits.append(now)
    _memory_store[key] = hits
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check if a request is within rate limits.

    Uses the shared Redis client when it is connected, otherwise the
    in-memory store.

    Args:
        key: Unique key for this rate limit (e.g., "admin:transition:user_123")
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = redis_module.redis_client

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


async def enforce_rate_limit(
    user_id: UUID | str,
    action: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Check the rate limit for one user's action.

    Args:
        user_id: The authenticated user's id
        action: Action name (e.g., "create_ticket", "admin_transition")
        limit: Maximum requests allowed
        window_seconds: Time window in seconds

    Raises:
        RateLimitExceeded: If rate limit is exceeded
    """
    key = f"rate_limit:{action}:{user_id}"
    allowed = await check_rate_limit(key, limit, window_seconds)

    if not allowed:
        logger.warning(
            f"Rate limit exceeded for user {user_id} on action '{action}': "
            f"{limit}/{window_seconds}s"
        )
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "check_rate_limit",
    "enforce_rate_limit",
    "RateLimitExceeded",
]
