"""Shared fixtures for filter tests."""
from __future__ import annotations

import pytest

from netbloom.filter.bloom import BloomFilter
from netbloom.filter.config import FilterConfig
from netbloom.store.memory_store import MemoryBitStore


class RecordingStore(MemoryBitStore):
    """MemoryBitStore that records every request it receives."""

    def __init__(self) -> None:
        super().__init__()
        self.requests: list[tuple[str, str, frozenset[int]]] = []

    def set_bits(self, bucket, offsets):
        self.requests.append(("set", bucket, frozenset(offsets)))
        super().set_bits(bucket, offsets)

    def check_bits(self, bucket, offsets):
        self.requests.append(("check", bucket, frozenset(offsets)))
        return super().check_bits(bucket, offsets)

    def check_and_set_bits(self, bucket, offsets):
        self.requests.append(("check_and_set", bucket, frozenset(offsets)))
        return super().check_and_set_bits(bucket, offsets)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def bloom(store) -> BloomFilter:
    return BloomFilter(store, FilterConfig(bucket_key="test:bloom"))
