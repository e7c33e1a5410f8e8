"""
Redis-backed key-value store.

Uses redis.asyncio. Change notifications come from Redis keyspace events on
`__keyspace@<db>__:<key>`, which require `notify-keyspace-events` to include
K (keyspace channel) and a matching event class (A covers "set").
"""

import asyncio
import logging
from typing import AsyncIterator, Optional

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ..errors import StoreConnectionError
from .base import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://127.0.0.1:6379"
DEFAULT_CONNECT_RETRIES = 5
DEFAULT_CONNECT_BASE_DELAY_MS = 200

NOTIFY_CONFIG_KEY = "notify-keyspace-events"

# Owner-checked lock operations; GET and DEL/PEXPIRE must not interleave
DELETE_IF_EQUALS_LUA = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""

EXPIRE_IF_EQUALS_LUA = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("pexpire", KEYS[1], ARGV[2])
end
return 0
"""


def merge_notify_flags(current: str, required: str) -> str:
    """Add any missing flags from `required` to `current`, keeping existing ones."""
    merged = current
    for flag in required:
        if flag not in merged:
            merged += flag
    return merged


class RedisStore(KeyValueStore):
    """
    KeyValueStore on a single Redis connection pool.

    Usage:
        store = await RedisStore.connect("redis://127.0.0.1:6379")
        await store.set("posts", "[]")
    """

    def __init__(self, client: aioredis.Redis, db: int = 0):
        self.client = client
        self.db = db
        self._delete_if_equals = client.register_script(DELETE_IF_EQUALS_LUA)
        self._expire_if_equals = client.register_script(EXPIRE_IF_EQUALS_LUA)

    @classmethod
    async def connect(
        cls,
        url: str = DEFAULT_REDIS_URL,
        max_retries: int = DEFAULT_CONNECT_RETRIES,
        base_delay_ms: int = DEFAULT_CONNECT_BASE_DELAY_MS,
    ) -> "RedisStore":
        """
        Connect with bounded exponential backoff.

        delay = base_delay * 2^(attempt - 1), e.g. 200ms -> 400ms -> 800ms

        Raises:
            StoreConnectionError: If every attempt fails
        """
        client = aioredis.from_url(url, decode_responses=True)
        db = client.connection_pool.connection_kwargs.get("db", 0)

        for attempt in range(1, max_retries + 1):
            try:
                await client.ping()
                logger.info(f"[RedisStore] Connected: {url}")
                return cls(client, db=db)
            except (RedisConnectionError, RedisTimeoutError, OSError) as e:
                logger.error(f"[RedisStore] Connect attempt {attempt}/{max_retries} failed: {e}")
                if attempt == max_retries:
                    await client.aclose()
                    raise StoreConnectionError(
                        f"Redis connection failed after {max_retries} attempts: {e}"
                    ) from e
                delay = base_delay_ms * (2 ** (attempt - 1)) / 1000.0
                await asyncio.sleep(delay)

        raise StoreConnectionError("Redis connection failed")

    @classmethod
    async def from_settings(cls, settings) -> "RedisStore":
        return await cls.connect(
            settings.redis_url,
            max_retries=settings.redis_connect_retries,
            base_delay_ms=settings.redis_connect_base_delay_ms,
        )

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(key)

    async def set(
        self,
        key: str,
        value: str,
        nx: bool = False,
        px: Optional[int] = None,
        ex: Optional[int] = None,
    ) -> bool:
        result = await self.client.set(key, value, nx=nx, px=px, ex=ex)
        return bool(result)

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def delete_if_equals(self, key: str, value: str) -> bool:
        deleted = await self._delete_if_equals(keys=[key], args=[value])
        return bool(deleted)

    async def expire_if_equals(self, key: str, value: str, px: int) -> bool:
        renewed = await self._expire_if_equals(keys=[key], args=[value, px])
        return bool(renewed)

    async def ensure_keyspace_notifications(self, flags: str = "KEA") -> str:
        config = await self.client.config_get(NOTIFY_CONFIG_KEY)
        current = config.get(NOTIFY_CONFIG_KEY, "") or ""
        merged = merge_notify_flags(current, flags)
        if merged != current:
            logger.info(f"[RedisStore] Merging keyspace notification flags: '{current}' -> '{merged}'")
            await self.client.config_set(NOTIFY_CONFIG_KEY, merged)
        return merged

    async def watch(self, key: str) -> AsyncIterator[str]:
        channel = f"__keyspace@{self.db}__:{key}"
        pubsub = self.client.pubsub()
        await pubsub.psubscribe(channel)
        logger.info(f"[RedisStore] Subscribed to {channel}")
        try:
            async for message in pubsub.listen():
                if message.get("type") != "pmessage":
                    continue
                yield message["data"]
        finally:
            await pubsub.punsubscribe(channel)
            await pubsub.aclose()

    async def close(self) -> None:
        await self.client.aclose()
