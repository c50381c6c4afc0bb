"""
sharedstore: Key-Value Store Handle
======================================

What:  Thin wrapper around one long-lived redis-py asyncio client.
Why:   The cache service needs exactly four operations (connect, get, set,
       ping); wrapping them keeps redis exceptions out of the routes and
       gives tests a single seam to replace.
How:   `CacheClient.from_url()` builds a `redis.asyncio.Redis` with
       decode_responses=True so values come back as str. The cache app
       lifespan calls `connect()` before serving and `close()` on shutdown.
Who:   Used by CacheService and the cache service health check.

Concurrency:
    All requests share this one client. redis-py's internal connection pool
    serializes or multiplexes commands; nothing here adds locking.
"""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from sharedstore.exceptions import CacheConnectionError, CacheError

logger = logging.getLogger(__name__)


class CacheClient:
    """
    Process-wide handle to the key-value store.

    Every store failure is re-raised as CacheError; the underlying redis
    error text travels in `CacheError.detail`.
    """

    def __init__(self, redis: Redis, url: str = ""):
        self.redis = redis
        self.url = url

    @classmethod
    def from_url(cls, url: str) -> "CacheClient":
        return cls(Redis.from_url(url, decode_responses=True), url=url)

    async def connect(self) -> None:
        """
        Confirm the server is reachable before the service accepts requests.

        Raises:
            CacheConnectionError: server unreachable. Callers at startup let
                this propagate so the process exits instead of serving.
        """
        try:
            await self.redis.ping()
        except (RedisError, OSError) as e:
            logger.error("Redis connection failed (%s): %s", self.url, e)
            raise CacheConnectionError(url=self.url, detail=str(e)) from e
        logger.info("Connected to Redis at %s", self.url)

    async def set(self, key: str, value: str) -> None:
        """Unconditional overwrite, no expiry."""
        try:
            await self.redis.set(key, value)
        except (RedisError, OSError) as e:
            raise CacheError(detail=str(e), context={"op": "set", "key": key}) from e

    async def get(self, key: str) -> Optional[str]:
        """Current value, or None when the key is absent."""
        try:
            return await self.redis.get(key)
        except (RedisError, OSError) as e:
            raise CacheError(detail=str(e), context={"op": "get", "key": key}) from e

    async def ping(self) -> None:
        try:
            await self.redis.ping()
        except (RedisError, OSError) as e:
            raise CacheError(detail=str(e), context={"op": "ping"}) from e

    async def close(self) -> None:
        await self.redis.aclose()
