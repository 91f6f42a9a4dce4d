"""
Unit tests for rate limiting.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from app.core import rate_limit
from app.core.rate_limit import RateLimitExceeded, check_rate_limit, enforce_rate_limit


@pytest.fixture(autouse=True)
def clean_memory_store():
    rate_limit._memory_store.clear()
    yield
    rate_limit._memory_store.clear()


@pytest.fixture
def no_redis():
    with patch("app.core.redis.redis_client", None):
        yield


def _redis_with_count(count):
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[0, count, 1, True])
    client = MagicMock()
    client.pipeline.return_value = pipe
    return client


class TestMemoryFallback:
    @pytest.mark.asyncio
    async def test_allows_up_to_limit(self, no_redis):
        results = [await check_rate_limit("k", 3, 60) for _ in range(4)]

        assert results == [True, True, True, False]

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, no_redis):
        assert await check_rate_limit("a", 1, 60)
        assert await check_rate_limit("b", 1, 60)
        assert not await check_rate_limit("a", 1, 60)

    @pytest.mark.asyncio
    async def test_old_hits_leave_the_window(self, no_redis):
        with patch("app.core.rate_limit.time.time", return_value=1000.0):
            assert await check_rate_limit("k", 1, 60)
        with patch("app.core.rate_limit.time.time", return_value=1061.0):
            assert await check_rate_limit("k", 1, 60)


class TestRedis:
    @pytest.mark.asyncio
    async def test_uses_redis_count(self):
        with patch("app.core.redis.redis_client", _redis_with_count(2)):
            assert await check_rate_limit("k", 3, 60)
        with patch("app.core.redis.redis_client", _redis_with_count(3)):
            assert not await check_rate_limit("k", 3, 60)

    @pytest.mark.asyncio
    async def test_redis_error_falls_back_to_memory(self):
        client = _redis_with_count(0)
        client.pipeline.return_value.execute = AsyncMock(side_effect=ConnectionError("down"))

        with patch("app.core.redis.redis_client", client):
            assert await check_rate_limit("k", 1, 60)
            assert not await check_rate_limit("k", 1, 60)

        assert "k" in rate_limit._memory_store


class TestEnforceRateLimit:
    @pytest.mark.asyncio
    async def test_raises_429_when_exceeded(self, no_redis):
        user_id = uuid4()
        await enforce_rate_limit(user_id, "create_ticket", 1, 3600)

        with pytest.raises(RateLimitExceeded) as exc_info:
            await enforce_rate_limit(user_id, "create_ticket", 1, 3600)

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["Retry-After"] == "3600"
        assert exc_info.value.detail["error"] == "RATE_LIMIT_EXCEEDED"

    @pytest.mark.asyncio
    async def test_limit_is_per_user_and_action(self, no_redis):
        user_id = uuid4()
        await enforce_rate_limit(user_id, "create_ticket", 1, 3600)
        await enforce_rate_limit(user_id, "admin_transition", 1, 3600)
        await enforce_rate_limit(uuid4(), "create_ticket", 1, 3600)
