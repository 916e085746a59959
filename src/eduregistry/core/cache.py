"""Cache store backing the registration counters."""

from typing import Protocol

from redis.asyncio import Redis, from_url


class CounterStore(Protocol):
    """Shared key/value store with TTL and atomic increment.

    Values are strings; `incr` must be a single atomic round-trip so that
    concurrent callers never observe the same result.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def incr(self, key: str) -> int: ...

    async def expire(self, key: str, ttl_seconds: int) -> None: ...


class RedisCounterStore:
    """CounterStore on top of an async Redis client."""

    def __init__(self, client: Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        if value is None:
            return None
        return str(value)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def incr(self, key: str) -> int:
        # Raises redis.ResponseError when the stored value is not an integer
        return int(await self._client.incr(key))

    async def expire(self, key: str, ttl_seconds: int) -> None:
        await self._client.expire(key, ttl_seconds)

    async def ping(self) -> bool:
        return bool(await self._client.ping())


def create_redis_client(redis_url: str) -> Redis:
    """Create an async Redis client returning str values."""
    return from_url(redis_url, encoding="utf-8", decode_responses=True)
