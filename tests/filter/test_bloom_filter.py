"""Tests for the shared Bloom filter."""
from __future__ import annotations

import pytest

from netbloom.errors import BatchTooLarge, StoreUnavailable
from netbloom.filter.bloom import BloomFilter
from netbloom.filter.config import FilterConfig
from netbloom.hashing import get_hash_function
from netbloom.store.memory_store import MemoryBitStore
from netbloom.store.redis_store import RedisBitStore


class TestBasics:
    def test_empty_filter(self, bloom):
        assert not bloom.has("anything")

    def test_add_and_has(self, bloom):
        bloom.add("agent-001:api.openai.com")
        assert bloom.has("agent-001:api.openai.com")
        assert "agent-001:api.openai.com" in bloom

    def test_definitely_not_present(self, bloom):
        bloom.add("item-a", "item-b")
        # 6 bits set out of 2^23; a false positive here is vanishingly rare.
        assert not bloom.has("item-c")

    def test_bytes_and_str_are_the_same_item(self, bloom):
        bloom.add(b"caf\xc3\xa9")
        assert bloom.has("café")

    def test_empty_string_is_an_item(self, bloom):
        assert bloom.has_add("") is False
        assert bloom.has("")

    def test_properties(self, store):
        cfg = FilterConfig(bit_space_size=4096, bucket_key="b")
        bf = BloomFilter(store, cfg)
        assert bf.config is cfg
        assert bf.bucket_key == "b"
        assert bf.bit_space_size == 4096
        assert bf.store is store
        assert "bucket='b'" in repr(bf)

    def test_default_config(self, store):
        assert BloomFilter(store).config == FilterConfig()


class TestOffsets:
    def test_one_offset_per_function(self, bloom):
        offsets = bloom.offsets("Hello World!")
        expected = {
            get_hash_function(name)("Hello World!", 1 << 23)
            for name in ("fnv1_64", "md5", "sha1")
        }
        assert offsets == expected

    def test_golden_offsets(self, store):
        cfg = FilterConfig(hash_function_names=("djb", "crc32", "fnv"))
        bf = BloomFilter(store, cfg)
        assert bf.offsets("Hello World!") == {2383482, 2694307, 6738950}

    def test_deduplicated(self, store):
        cfg = FilterConfig(hash_function_names=("djb", "djb", "djb"))
        bf = BloomFilter(store, cfg)
        assert len(bf.offsets("x")) == 1

    def test_union_over_items(self, bloom):
        combined = bloom.offsets("a", "b")
        assert combined == bloom.offsets("a") | bloom.offsets("b")

    def test_within_bit_space(self, store):
        bf = BloomFilter(store, FilterConfig(bit_space_size=100))
        for i in range(200):
            assert all(0 <= o < 100 for o in bf.offsets(f"k{i}"))


class TestStoreRequests:
    def test_add_is_one_request(self, bloom, store):
        bloom.add("a", "b", "c")
        assert len(store.requests) == 1
        op, bucket, offsets = store.requests[0]
        assert op == "set"
        assert bucket == "test:bloom"
        assert offsets == bloom.offsets("a", "b", "c")

    def test_has_is_one_read(self, bloom, store):
        bloom.has("a")
        assert [r[0] for r in store.requests] == ["check"]

    def test_has_add_is_one_request(self, bloom, store):
        bloom.has_add("a")
        assert [r[0] for r in store.requests] == ["check_and_set"]

    def test_empty_add_is_noop(self, bloom, store):
        bloom.add()
        assert store.requests == []


class TestBatchLimit:
    def test_over_limit_rejected_without_store_call(self, store):
        bf = BloomFilter(store, FilterConfig(insertion_batch_limit=2000))
        items = [f"item-{i}" for i in range(2001)]
        with pytest.raises(BatchTooLarge) as excinfo:
            bf.add(*items)
        assert excinfo.value.size == 2001
        assert excinfo.value.limit == 2000
        assert store.requests == []
        assert store.buckets() == []

    def test_at_limit_accepted(self, store):
        bf = BloomFilter(store, FilterConfig(insertion_batch_limit=2000))
        bf.add(*(f"item-{i}" for i in range(2000)))
        assert len(store.requests) == 1

    def test_batch_too_large_is_value_error(self, store):
        bf = BloomFilter(store, FilterConfig(insertion_batch_limit=1))
        with pytest.raises(ValueError):
            bf.add("a", "b")

    def test_add_many_splits_batches(self, store):
        bf = BloomFilter(store, FilterConfig(insertion_batch_limit=10))
        count = bf.add_many(f"item-{i}" for i in range(25))
        assert count == 25
        assert len(store.requests) == 3
        assert all(bf.has(f"item-{i}") for i in range(25))

    def test_add_many_empty(self, bloom, store):
        assert bloom.add_many([]) == 0
        assert store.requests == []


class TestLaws:
    def test_no_false_negatives(self):
        """Every item that was added must return True."""
        store = MemoryBitStore()
        bf = BloomFilter(store, FilterConfig(bit_space_size=1 << 16))
        items = [f"item-{i}" for i in range(5000)]
        bf.add_many(items)
        for item in items:
            assert bf.has(item), f"False negative for {item}"

    def test_add_idempotent(self, bloom, store):
        bloom.add("x", "y")
        snapshot = bytes(store._buckets["test:bloom"])
        bloom.add("x", "y")
        assert bytes(store._buckets["test:bloom"]) == snapshot

    def test_has_add_twice(self, bloom):
        assert bloom.has_add("new-item") is False
        assert bloom.has_add("new-item") is True
        assert bloom.has("new-item")

    def test_has_add_after_add(self, bloom):
        bloom.add("seen")
        assert bloom.has_add("seen") is True

    def test_has_does_not_insert(self, bloom):
        assert bloom.has("ghost") is False
        assert bloom.has("ghost") is False
        assert bloom.has_add("ghost") is False

    def test_fp_rate_at_capacity(self):
        """5000 members in 2^16 bits with 6 hashes: expected FP ~0.25%."""
        cfg = FilterConfig(
            bit_space_size=1 << 16,
            hash_function_names=("fnv1_64", "md5", "sha1", "crc32", "js", "fnv"),
        )
        bf = BloomFilter(MemoryBitStore(), cfg)
        bf.add_many(f"item-{i}" for i in range(5000))

        false_positives = sum(
            1 for i in range(5000, 15_000) if bf.has(f"item-{i}")
        )
        fp_rate = false_positives / 10_000
        print(f"\n  FP rate at capacity: {fp_rate:.4f}")
        assert fp_rate < 0.01


class TestSharedBucket:
    def test_two_filters_share_bits(self):
        store = MemoryBitStore()
        cfg = FilterConfig(bucket_key="shared")
        writer = BloomFilter(store, cfg)
        reader = BloomFilter(store, cfg)
        writer.add("token-123")
        assert reader.has("token-123")

    def test_buckets_isolated(self):
        store = MemoryBitStore()
        a = BloomFilter(store, FilterConfig(bucket_key="a"))
        b = BloomFilter(store, FilterConfig(bucket_key="b"))
        a.add("item")
        assert not b.has("item")

    def test_through_redis_store(self, fake_redis):
        store = RedisBitStore(fake_redis)
        bf = BloomFilter(store, FilterConfig(bucket_key="crawler:seen"))
        assert bf.has_add("https://example.org/") is False
        bf.add("https://example.org/a", "https://example.org/b")
        assert bf.has("https://example.org/")
        assert bf.has("https://example.org/a")
        assert not bf.has("https://example.org/c")


class TestErrors:
    def test_store_error_propagates(self, fake_redis):
        from redis.exceptions import ConnectionError as RedisConnectionError
        from netbloom.store.redis_store import CHECK_BITS_SCRIPT

        bf = BloomFilter(RedisBitStore(fake_redis))
        fake_redis.scripts[CHECK_BITS_SCRIPT].error = RedisConnectionError("down")
        with pytest.raises(StoreUnavailable):
            bf.has("x")

    def test_failed_batch_leaves_earlier_batches(self, store):
        bf = BloomFilter(store, FilterConfig(insertion_batch_limit=2))
        calls = 0
        original = store.set_bits

        def flaky(bucket, offsets):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise StoreUnavailable("down")
            original(bucket, offsets)

        store.set_bits = flaky
        with pytest.raises(StoreUnavailable):
            bf.add_many(["a", "b", "c", "d"])
        assert bf.has("a") and bf.has("b")
        assert not bf.has("c")
