"""Concurrent clients sharing one bucket.

Each operation is a single store request, so the store's atomicity is
all the filter relies on. These tests drive many threads through one
MemoryBitStore, whose lock plays the role of Redis running one script
at a time.
"""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from netbloom.filter.bloom import BloomFilter
from netbloom.filter.config import FilterConfig
from netbloom.store.memory_store import MemoryBitStore


def test_racing_has_add_reports_new_once():
    store = MemoryBitStore()
    cfg = FilterConfig(bucket_key="race")
    clients = [BloomFilter(store, cfg) for _ in range(16)]
    barrier = threading.Barrier(len(clients))

    def call(bf: BloomFilter) -> bool:
        barrier.wait()
        return bf.has_add("order-42")

    with ThreadPoolExecutor(max_workers=len(clients)) as pool:
        results = list(pool.map(call, clients))

    assert results.count(False) == 1
    assert all(bf.has("order-42") for bf in clients)


def test_concurrent_adds_no_false_negatives():
    store = MemoryBitStore()
    cfg = FilterConfig(bit_space_size=1 << 18, bucket_key="bulk", insertion_batch_limit=50)

    def worker(n: int) -> list[str]:
        bf = BloomFilter(store, cfg)
        items = [f"worker-{n}-item-{i}" for i in range(500)]
        bf.add_many(items)
        return items

    with ThreadPoolExecutor(max_workers=8) as pool:
        batches = list(pool.map(worker, range(8)))

    reader = BloomFilter(store, cfg)
    for items in batches:
        for item in items:
            assert reader.has(item)


def test_has_add_distinct_items_all_new():
    store = MemoryBitStore()
    cfg = FilterConfig(bit_space_size=1 << 23, bucket_key="distinct")
    bf = BloomFilter(store, cfg)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(bf.has_add, [f"id-{i}" for i in range(400)]))

    # 1200 bits in 2^23: every item should see at least one fresh bit.
    assert not any(results)
