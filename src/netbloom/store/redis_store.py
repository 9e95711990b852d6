"""Redis-backed bit store.

Each bucket is a Redis string used as a bitmap (SETBIT/GETBIT). A
filter operation touches several offsets, and doing that with one
command per bit would let another client's writes land in between. So
every operation is a small Lua script: Redis runs a script to
completion before serving anything else, which gives the offset batch
the all-or-nothing semantics the filter needs.

The bucket name is passed as KEYS[1] and the offsets as ARGV, so the
scripts are constant and get cached server-side by SHA (EVALSHA).

Failures are not retried here. Connection problems and timeouts raise
StoreUnavailable, anything else Redis reports raises StoreError, both
chained to the redis-py exception.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Any

import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from netbloom.errors import StoreError, StoreUnavailable
from netbloom.store.base import BitStore
from netbloom.store.settings import StoreSettings

log = logging.getLogger(__name__)


SET_BITS_SCRIPT = """
for i = 1, #ARGV do
    redis.call('SETBIT', KEYS[1], ARGV[i], 1)
end
return 1
"""

CHECK_BITS_SCRIPT = """
for i = 1, #ARGV do
    if redis.call('GETBIT', KEYS[1], ARGV[i]) == 0 then
        return 0
    end
end
return 1
"""

CHECK_AND_SET_BITS_SCRIPT = """
local present = 1
for i = 1, #ARGV do
    if redis.call('GETBIT', KEYS[1], ARGV[i]) == 0 then
        redis.call('SETBIT', KEYS[1], ARGV[i], 1)
        present = 0
    end
end
return present
"""


class RedisBitStore(BitStore):
    """BitStore over a redis-py client.

    Args:
        client: a ``redis.Redis`` instance (or anything with the same
            ``register_script``/``close`` API)
        owns_client: close the client when the store is closed
    """

    def __init__(self, client: Any, owns_client: bool = False) -> None:
        self._client = client
        self._owns_client = owns_client
        self._set_bits = client.register_script(SET_BITS_SCRIPT)
        self._check_bits = client.register_script(CHECK_BITS_SCRIPT)
        self._check_and_set_bits = client.register_script(CHECK_AND_SET_BITS_SCRIPT)

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> RedisBitStore:
        client = redis.Redis(
            host=settings.host,
            port=settings.port,
            db=settings.db,
            username=settings.username,
            password=settings.password,
            ssl=settings.ssl,
            socket_timeout=settings.socket_timeout,
        )
        log.debug("connecting bit store to %s:%s/%s", settings.host, settings.port, settings.db)
        return cls(client, owns_client=True)

    @classmethod
    def from_url(cls, url: str, socket_timeout: float | None = 5.0) -> RedisBitStore:
        return cls.from_settings(StoreSettings.from_url(url, socket_timeout=socket_timeout))

    @property
    def client(self) -> Any:
        return self._client

    def set_bits(self, bucket: str, offsets: AbstractSet[int]) -> None:
        if not offsets:
            return
        self._run(self._set_bits, bucket, offsets)

    def check_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        if not offsets:
            return True
        return bool(self._run(self._check_bits, bucket, offsets))

    def check_and_set_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        if not offsets:
            return True
        return bool(self._run(self._check_and_set_bits, bucket, offsets))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _run(self, script: Any, bucket: str, offsets: AbstractSet[int]) -> Any:
        try:
            return script(keys=[bucket], args=sorted(offsets))
        except (RedisConnectionError, RedisTimeoutError) as exc:
            raise StoreUnavailable(f"bit store unreachable for {bucket!r}: {exc}") from exc
        except RedisError as exc:
            raise StoreError(f"bit store request failed for {bucket!r}: {exc}") from exc
