"""Abstract bit store that backs a shared Bloom filter.

A store owns the bit arrays. Each bucket key names one array of bits,
created lazily on first write. The filter never materialises the array;
it only hands over a set of offsets per call, and the store must apply
that whole set as one indivisible step. Bits only ever go 0 -> 1.

Both MemoryBitStore and RedisBitStore implement this interface.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AbstractSet


class BitStore(ABC):
    """Atomic multi-bit operations over named bit arrays."""

    @abstractmethod
    def set_bits(self, bucket: str, offsets: AbstractSet[int]) -> None:
        """Set every offset to 1. All or nothing."""
        ...

    @abstractmethod
    def check_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        """Return True iff every offset reads 1. Never writes."""
        ...

    @abstractmethod
    def check_and_set_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        """Return True iff every offset was already 1; set the ones that weren't.

        One linear pass in a single atomic step, no retry.
        """
        ...

    def close(self) -> None:
        """Release any connection held by the store."""

    def __enter__(self) -> BitStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncBitStore(ABC):
    """Coroutine flavour of BitStore, same semantics per operation.

    Cancelling a call abandons the reply, never half a batch: the
    request is a single script, which the server runs whole or not at
    all.
    """

    @abstractmethod
    async def set_bits(self, bucket: str, offsets: AbstractSet[int]) -> None:
        ...

    @abstractmethod
    async def check_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        ...

    @abstractmethod
    async def check_and_set_bits(self, bucket: str, offsets: AbstractSet[int]) -> bool:
        ...

    async def close(self) -> None:
        """Release any connection held by the store."""

    async def __aenter__(self) -> AsyncBitStore:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
