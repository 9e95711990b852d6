"""asyncio Redis bit store.

Same scripts and error mapping as RedisBitStore, over redis.asyncio so
an event loop can run many filter calls without a thread per request.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Any

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from netbloom.errors import StoreError, StoreUnavailable
from netbloom.store.base import AsyncBitStore
from netbloom.store.redis_store import (
    CHECK_AND_SET_BITS_SCRIPT,
    CHECK_BITS_SCRIPT,
    SET_BITS_SCRIPT,
)
from netbloom.store.settings import StoreSettings

log = logging.getLogger(__name__)


class AsyncRedisBitStore(AsyncBitStore):
    """AsyncBitStore over a ``redis.asyncio.Redis`` client."""

    def __init__(self, client: Any, owns_client: bool = False) -> None:
        self._client = client
        self._owns_client = owns_client
        self._set_bits = client.register_script(SET_BITS_SCRIPT)
        self._check_bits = client.register_script(CHECK_BITS_SCRIPT)
        self._check_and_set_bits = client.register_script(CHECK_AND_SET_BITS_SCRIPT)

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> AsyncRedisBitStore:
        client = aioredis.Redis(
            host=settings.host,
            port=settings.port,
            db=settings.db,
            username=settings.username,
            password=settings.password,
            ssl=settings.ssl,
            socket_timeout=settings.socket_timeout,
        )
        log.debug("connecting async bit store to %s:%s/%s", settings.host, settings.port, settings.db)
        return cls(client, owns_client=True)

    @classmethod
    def from_url(cls, url: str, socket_timeout: float | None = 5.0) -> AsyncRedisBitStore:
        return cls.from_settings(StoreSettings.from_url(url, socket_timeout=socket_timeout))

    @property
    def client(self) -> Any:
        return self._client

    async def set_bits(self, bucket: str, offsets: AbstractSet[int]) -> None:
        if not offsets:
            return
        await self._run(self._set_bits, bucket, offsets)

    async def check_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        if not offsets:
            return True
        return bool(await self._run(self._check_bits, bucket, offsets))

    async def check_and_set_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        if not offsets:
            return True
        return bool(await self._run(self._check_and_set_bits, bucket, offsets))

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _run(self, script: Any, bucket: str, offsets: AbstractSet[int]) -> Any:
        try:
            return await script(keys=[bucket], args=sorted(offsets))
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise StoreUnavailable(f"bit store unreachable for {bucket!r}: {exc}") from exc
        except RedisError as exc:
            raise StoreError(f"bit store request failed for {bucket!r}: {exc}") from exc
