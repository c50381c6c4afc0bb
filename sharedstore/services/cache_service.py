"""
sharedstore: Cache Service
=============================

What:  Write-then-read round trip against the key-value store.
How:   Overwrites the fixed key on every call, then reads it back, so every
       successful call returns the same message.
Who:   Called by GET / on the cache service.
"""

import logging

from sharedstore.cache import CacheClient
from sharedstore.exceptions import CacheError

logger = logging.getLogger(__name__)

MESSAGE_KEY = "message"
MESSAGE_VALUE = "Hello from Redis ?  !"


class CacheService:

    async def round_trip_message(self, cache: CacheClient) -> str:
        """
        SET message → GET message.

        Raises:
            CacheError: either command failed, or the key vanished between
                        the write and the read.
        """
        await cache.set(MESSAGE_KEY, MESSAGE_VALUE)
        message = await cache.get(MESSAGE_KEY)
        if message is None:
            # Another client deleted the key in between; nothing to return
            raise CacheError(detail=f"Key '{MESSAGE_KEY}' missing after write")
        logger.debug("Round trip on key '%s' returned %r", MESSAGE_KEY, message)
        return message


cache_service = CacheService()
