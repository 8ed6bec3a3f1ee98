"""
Testes para o rate limiter baseado em Redis.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from redis.exceptions import ConnectionError as RedisConnectionError

from library_api.core.rate_limit import RateLimiter
from library_api.core.security import create_access_token


def make_request(host: str = "10.0.0.1", headers: dict | None = None) -> MagicMock:
    request = MagicMock()
    request.headers = headers or {}
    request.client = SimpleNamespace(host=host)
    return request


def make_redis(count: int = 1, ttl: int = 42) -> AsyncMock:
    client = AsyncMock()
    client.incr.return_value = count
    client.ttl.return_value = ttl
    return client


@pytest.fixture
def enabled_settings():
    with patch("library_api.core.rate_limit.settings") as mock_settings:
        mock_settings.RATE_LIMIT_ENABLED = True
        yield mock_settings


class TestRateLimiter:
    """Testes para RateLimiter.__call__."""

    @pytest.mark.asyncio
    async def test_disabled_skips_redis(self):
        limiter = RateLimiter(requests=1, window=60)
        redis_client = make_redis(count=99)

        with patch("library_api.core.rate_limit.settings") as mock_settings, patch(
            "library_api.core.rate_limit.get_redis_client", return_value=redis_client
        ):
            mock_settings.RATE_LIMIT_ENABLED = False
            await limiter(make_request(), None)

        redis_client.incr.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_without_redis_request_passes(self, enabled_settings):
        limiter = RateLimiter(requests=1, window=60)

        with patch("library_api.core.rate_limit.get_redis_client", return_value=None):
            await limiter(make_request(), None)

    @pytest.mark.asyncio
    async def test_first_request_sets_window(self, enabled_settings):
        limiter = RateLimiter(requests=5, window=60, key_prefix="rl")
        redis_client = make_redis(count=1)

        with patch("library_api.core.rate_limit.get_redis_client", return_value=redis_client):
            await limiter(make_request(host="10.0.0.7"), None)

        redis_client.incr.assert_awaited_once_with("rl:ip:10.0.0.7")
        redis_client.expire.assert_awaited_once_with("rl:ip:10.0.0.7", 60)

    @pytest.mark.asyncio
    async def test_over_limit_returns_429(self, enabled_settings):
        limiter = RateLimiter(requests=5, window=60)
        redis_client = make_redis(count=6, ttl=17)

        with patch("library_api.core.rate_limit.get_redis_client", return_value=redis_client):
            with pytest.raises(HTTPException) as exc_info:
                await limiter(make_request(), None)

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers == {"Retry-After": "17"}
        redis_client.expire.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_redis_error_fails_open(self, enabled_settings):
        limiter = RateLimiter(requests=5, window=60)
        redis_client = make_redis()
        redis_client.incr.side_effect = RedisConnectionError("down")

        with patch("library_api.core.rate_limit.get_redis_client", return_value=redis_client):
            await limiter(make_request(), None)


class TestIdentifier:
    """Testes para RateLimiter._get_identifier."""

    def test_authenticated_user(self):
        token = create_access_token(subject="user-123")
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        assert RateLimiter._get_identifier(make_request(), credentials) == "user:user-123"

    def test_invalid_token_falls_back_to_ip(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="invalido")

        assert RateLimiter._get_identifier(make_request(host="10.0.0.2"), credentials) == "ip:10.0.0.2"

    def test_forwarded_for(self):
        request = make_request(headers={"X-Forwarded-For": "203.0.113.5, 10.0.0.1"})

        assert RateLimiter._get_identifier(request, None) == "ip:203.0.113.5"
