"""Shared fixtures: a fake redis-py client.

register_script() returns a callable that runs the Python equivalent
of each known Lua script against an in-memory bitmap, so RedisBitStore
can be exercised without a server. Scripts run under one lock, like
Redis running a script to completion.
"""
from __future__ import annotations

import pytest

from netbloom.store.memory_store import MemoryBitStore
from netbloom.store.redis_store import (
    CHECK_AND_SET_BITS_SCRIPT,
    CHECK_BITS_SCRIPT,
    SET_BITS_SCRIPT,
)


class FakeScript:
    def __init__(self, client: FakeRedis, source: str) -> None:
        self.client = client
        self.source = source
        self.calls: list[tuple[list[str], list[int]]] = []
        self.error: Exception | None = None

    def __call__(self, keys=None, args=None, client=None):
        self.calls.append((list(keys), list(args)))
        if self.error is not None:
            raise self.error
        bucket = keys[0]
        offsets = {int(a) for a in args}
        bits = self.client.bits
        if self.source == SET_BITS_SCRIPT:
            bits.set_bits(bucket, offsets)
            return 1
        if self.source == CHECK_BITS_SCRIPT:
            return int(bits.check_bits(bucket, offsets))
        if self.source == CHECK_AND_SET_BITS_SCRIPT:
            return int(bits.check_and_set_bits(bucket, offsets))
        raise AssertionError("unexpected script")


class FakeRedis:
    def __init__(self) -> None:
        self.bits = MemoryBitStore()
        self.scripts: dict[str, FakeScript] = {}
        self.closed = False

    def register_script(self, source: str) -> FakeScript:
        script = FakeScript(self, source)
        self.scripts[source] = script
        return script

    def getbit(self, key: str, offset: int) -> int:
        return self.bits.get_bit(key, offset)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


class FakeAsyncScript(FakeScript):
    async def __call__(self, keys=None, args=None, client=None):
        return FakeScript.__call__(self, keys=keys, args=args, client=client)


class FakeAsyncRedis(FakeRedis):
    def register_script(self, source: str) -> FakeAsyncScript:
        script = FakeAsyncScript(self, source)
        self.scripts[source] = script
        return script

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_async_redis() -> FakeAsyncRedis:
    return FakeAsyncRedis()
