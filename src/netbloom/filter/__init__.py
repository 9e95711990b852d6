"""Shared Bloom filter.

Public API:
    BloomFilter: add / has / has_add over a BitStore
    AsyncBloomFilter: the same over an AsyncBitStore
    FilterConfig: bit space, hash functions, bucket key, batch limit
"""

from netbloom.filter.async_bloom import AsyncBloomFilter
from netbloom.filter.bloom import BloomFilter, compute_offsets
from netbloom.filter.config import FilterConfig

__all__ = [
    "AsyncBloomFilter",
    "BloomFilter",
    "FilterConfig",
    "compute_offsets",
]
