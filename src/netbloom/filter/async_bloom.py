"""asyncio version of the shared Bloom filter.

Offsets are computed exactly as in BloomFilter, so an AsyncBloomFilter
and a BloomFilter with the same FilterConfig read and write the same
bits.
"""
from __future__ import annotations

from itertools import islice
from typing import Iterable

from netbloom.filter.bloom import Item, check_batch_size, compute_offsets
from netbloom.filter.config import FilterConfig
from netbloom.store.base import AsyncBitStore


class AsyncBloomFilter:
    """Shared Bloom filter over an AsyncBitStore."""

    def __init__(self, store: AsyncBitStore, config: FilterConfig | None = None) -> None:
        self._store = store
        self._config = config or FilterConfig()

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def store(self) -> AsyncBitStore:
        return self._store

    def offsets(self, *items: Item) -> frozenset[int]:
        return compute_offsets(self._config, items)

    async def add(self, *items: Item) -> None:
        check_batch_size(self._config, len(items))
        if not items:
            return
        await self._store.set_bits(self._config.bucket_key, self.offsets(*items))

    async def add_many(self, items: Iterable[Item]) -> int:
        it = iter(items)
        limit = self._config.insertion_batch_limit
        total = 0
        while batch := tuple(islice(it, limit)):
            await self.add(*batch)
            total += len(batch)
        return total

    async def has(self, item: Item) -> bool:
        return await self._store.check_bits(self._config.bucket_key, self.offsets(item))

    async def has_add(self, item: Item) -> bool:
        return await self._store.check_and_set_bits(
            self._config.bucket_key, self.offsets(item)
        )
