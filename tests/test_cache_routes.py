"""
sharedstore: Cache Service Endpoint Tests
============================================

What:  GET / and GET /health of the cache service, plus startup behavior.
How:   The app runs its real lifespan around FakeRedis (see conftest.py).

What we test:
    ✅ GET / returns the fixed message on every call
    ✅ Store failures → 500 with the failure detail
    ✅ Health flips to unhealthy without taking the process down
    ✅ An unreachable store aborts startup
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from sharedstore.cache import CacheClient
from sharedstore.exceptions import CacheConnectionError
from sharedstore.main import create_cache_app

from tests.conftest import FakeRedis, running


class TestMessage:

    @pytest.mark.asyncio
    async def test_message_round_trip_is_stable(self, cache_client, fake_redis):
        for _ in range(3):
            response = await cache_client.get("/")

            assert response.status_code == 200
            assert response.json() == {"message": "Hello from Redis ?  !"}

        assert fake_redis.data == {"message": "Hello from Redis ?  !"}

    @pytest.mark.asyncio
    async def test_message_overwrites_previous_value(self, cache_client, fake_redis):
        fake_redis.data["message"] = "stale"

        response = await cache_client.get("/")

        assert response.json() == {"message": "Hello from Redis ?  !"}

    @pytest.mark.asyncio
    async def test_store_failure_is_500_with_details(self, cache_client, fake_redis):
        fake_redis.fail_with = RedisConnectionError("Connection reset by peer")

        response = await cache_client.get("/")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Redis operation failed",
            "details": "Connection reset by peer",
        }


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, cache_client):
        response = await cache_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["redis"] == "connected"
        assert body["timestamp"]

    @pytest.mark.asyncio
    async def test_unhealthy_then_recovers(self, cache_client, fake_redis):
        fake_redis.fail_with = RedisConnectionError("Connection refused")

        response = await cache_client.get("/health")

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["redis"] == "disconnected"
        assert body["timestamp"]

        fake_redis.fail_with = None
        assert (await cache_client.get("/health")).status_code == 200


class TestStartup:

    @pytest.mark.asyncio
    async def test_unreachable_store_aborts_startup(self, cache_settings):
        fake = FakeRedis()
        fake.fail_with = RedisConnectionError("Connection refused")
        app = create_cache_app(cache_settings, cache_client=CacheClient(fake, url="redis://down:6379"))

        with pytest.raises(CacheConnectionError):
            async with running(app):
                pass

        assert fake.closed is True

    @pytest.mark.asyncio
    async def test_client_closed_on_shutdown(self, cache_settings):
        fake = FakeRedis()
        app = create_cache_app(cache_settings, cache_client=CacheClient(fake))

        async with running(app):
            assert app.state.cache.redis is fake
            assert fake.closed is False

        assert fake.closed is True
