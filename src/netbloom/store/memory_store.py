"""In-process bit store guarded by one lock.

Every operation takes the same threading.Lock, which is enough to make
each offset batch atomic for threads sharing the store. Nothing is
shared across processes; use RedisBitStore for that. Useful for tests
and for single-process deployments that want the filter API.
"""
from __future__ import annotations

import threading
from typing import AbstractSet

from netbloom.store.base import BitStore


class MemoryBitStore(BitStore):
    """Bit arrays held in bytearrays, grown on demand like a Redis string.

    Bit 0 is the most significant bit of byte 0, matching Redis SETBIT.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, bytearray] = {}
        self._lock = threading.Lock()

    def set_bits(self, bucket: str, offsets: AbstractSet[int]) -> None:
        if not offsets:
            return
        with self._lock:
            bits = self._grow(bucket, max(offsets))
            for offset in offsets:
                bits[offset >> 3] |= 0x80 >> (offset & 7)

    def check_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        with self._lock:
            bits = self._buckets.get(bucket, bytearray())
            for offset in offsets:
                if not self._read(bits, offset):
                    return False
            return True

    def check_and_set_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        if not offsets:
            return True
        with self._lock:
            bits = self._grow(bucket, max(offsets))
            present = True
            for offset in offsets:
                if not self._read(bits, offset):
                    bits[offset >> 3] |= 0x80 >> (offset & 7)
                    present = False
            return present

    def get_bit(self, bucket: str, offset: int) -> int:
        with self._lock:
            return self._read(self._buckets.get(bucket, bytearray()), offset)

    def bit_count(self, bucket: str) -> int:
        """Number of set bits in a bucket (0 for a missing bucket)."""
        with self._lock:
            bits = self._buckets.get(bucket, bytearray())
            return sum(bin(byte).count("1") for byte in bits)

    def buckets(self) -> list[str]:
        with self._lock:
            return sorted(self._buckets)

    @staticmethod
    def _read(bits: bytearray, offset: int) -> int:
        idx = offset >> 3
        if idx >= len(bits):
            return 0
        return 1 if bits[idx] & (0x80 >> (offset & 7)) else 0

    def _grow(self, bucket: str, max_offset: int) -> bytearray:
        # Caller holds the lock.
        bits = self._buckets.setdefault(bucket, bytearray())
        needed = (max_offset >> 3) + 1
        if len(bits) < needed:
            bits.extend(bytes(needed - len(bits)))
        return bits
