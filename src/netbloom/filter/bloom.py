"""Bloom filter whose bit array lives in a shared store.

Answers "has anyone, in any process, seen this item before?" for a
population too large to keep in memory. False positives are possible
(the filter says "maybe" when the answer is "no"), but false negatives
are not: once add() returns, has() is True for that item in every
process, forever. Bits are never cleared, so there is no remove().

Each operation hashes its input with every configured hash function,
collects the offsets into one deduplicated set, and hands the set to
the store in a single atomic request:

    add(*items)   -> BitStore.set_bits
    has(item)     -> BitStore.check_bits
    has_add(item) -> BitStore.check_and_set_bits

The filter itself keeps no bits and takes no locks. All consistency
under concurrent clients comes from the store running each request as
one step. Two clients calling has_add() for the same new item at the
same moment may both get False; both correctly learn the item had not
been confirmed present, and the bits end up the same either way.
"""
from __future__ import annotations

import logging
from itertools import islice
from typing import Iterable, TypeAlias

from netbloom.errors import BatchTooLarge
from netbloom.filter.config import FilterConfig
from netbloom.store.base import BitStore

log = logging.getLogger(__name__)

Item: TypeAlias = bytes | str


def compute_offsets(config: FilterConfig, items: Iterable[Item]) -> frozenset[int]:
    """Deduplicated bit offsets for items across every configured hash function.

    Several (function, item) pairs can land on the same bit; it is
    listed once.
    """
    m = config.bit_space_size
    items = tuple(items)
    return frozenset(fn(item, m) for fn in config.hash_functions for item in items)


def check_batch_size(config: FilterConfig, size: int) -> None:
    if size > config.insertion_batch_limit:
        raise BatchTooLarge(size, config.insertion_batch_limit)


class BloomFilter:
    """Shared Bloom filter over a BitStore.

    Parameters:
        store: where the bits live (RedisBitStore for cross-process use).
        config: bit space, hash functions, bucket and batch limit.
            Defaults to FilterConfig().
    """

    def __init__(self, store: BitStore, config: FilterConfig | None = None) -> None:
        self._store = store
        self._config = config or FilterConfig()

    @property
    def config(self) -> FilterConfig:
        return self._config

    @property
    def bucket_key(self) -> str:
        return self._config.bucket_key

    @property
    def bit_space_size(self) -> int:
        return self._config.bit_space_size

    @property
    def store(self) -> BitStore:
        return self._store

    def offsets(self, *items: Item) -> frozenset[int]:
        """The offset set one request for these items would touch."""
        return compute_offsets(self._config, items)

    def add(self, *items: Item) -> None:
        """Insert items in one atomic store request.

        Raises BatchTooLarge, before touching the store, if more than
        insertion_batch_limit items are given.
        """
        check_batch_size(self._config, len(items))
        if not items:
            return
        offsets = self.offsets(*items)
        log.debug(
            "add: %d item(s) -> %d offset(s) in %s",
            len(items), len(offsets), self._config.bucket_key,
        )
        self._store.set_bits(self._config.bucket_key, offsets)

    def add_many(self, items: Iterable[Item]) -> int:
        """Insert any number of items, one add() per batch.

        Each batch is atomic; the iterable as a whole is not. If a batch
        fails, earlier batches stay inserted. Returns the number of items
        inserted.
        """
        it = iter(items)
        limit = self._config.insertion_batch_limit
        total = 0
        while batch := tuple(islice(it, limit)):
            self.add(*batch)
            total += len(batch)
        return total

    def has(self, item: Item) -> bool:
        """True if item may have been added; False if it definitely wasn't."""
        return self._store.check_bits(self._config.bucket_key, self.offsets(item))

    def has_add(self, item: Item) -> bool:
        """Check for item and insert it, in one atomic store request.

        Returns True if every bit was already set (item probably seen
        before), False if this call had to set at least one bit (item is
        new).
        """
        return self._store.check_and_set_bits(
            self._config.bucket_key, self.offsets(item)
        )

    def __contains__(self, item: Item) -> bool:
        return self.has(item)

    def __repr__(self) -> str:
        return (
            f"BloomFilter(bucket={self._config.bucket_key!r}, "
            f"bits={self._config.bit_space_size}, "
            f"hashes={list(self._config.hash_function_names)})"
        )
