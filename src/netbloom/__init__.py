"""netbloom: a Bloom filter whose bits live in Redis.

    from netbloom import BloomFilter, FilterConfig, RedisBitStore

    store = RedisBitStore.from_url("redis://127.0.0.1:6379/0")
    seen = BloomFilter(store, FilterConfig(bucket_key="crawler:seen"))
    if not seen.has_add(url):
        crawl(url)
"""
from netbloom.errors import (
    BatchTooLarge,
    ConfigurationError,
    InvalidArgument,
    NetBloomError,
    StoreError,
    StoreUnavailable,
)
from netbloom.filter import AsyncBloomFilter, BloomFilter, FilterConfig
from netbloom.sizing import calibrate
from netbloom.store import (
    AsyncBitStore,
    AsyncRedisBitStore,
    BitStore,
    MemoryBitStore,
    RedisBitStore,
    StoreSettings,
)

__all__ = [
    "AsyncBitStore",
    "AsyncBloomFilter",
    "AsyncRedisBitStore",
    "BatchTooLarge",
    "BitStore",
    "BloomFilter",
    "ConfigurationError",
    "FilterConfig",
    "InvalidArgument",
    "MemoryBitStore",
    "NetBloomError",
    "RedisBitStore",
    "StoreError",
    "StoreSettings",
    "StoreUnavailable",
    "calibrate",
]
