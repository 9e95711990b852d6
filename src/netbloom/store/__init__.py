"""Bit stores: where a shared filter's bits actually live.

BitStore is the contract (atomic set / check / check-and-set over a set
of offsets). RedisBitStore shares bits across processes through Lua
scripts; MemoryBitStore keeps them in-process behind a lock.
AsyncBitStore and AsyncRedisBitStore are the asyncio counterparts.
"""
from netbloom.store.async_redis_store import AsyncRedisBitStore
from netbloom.store.base import AsyncBitStore, BitStore
from netbloom.store.memory_store import MemoryBitStore
from netbloom.store.redis_store import RedisBitStore
from netbloom.store.settings import StoreSettings

__all__ = [
    "AsyncBitStore",
    "AsyncRedisBitStore",
    "BitStore",
    "MemoryBitStore",
    "RedisBitStore",
    "StoreSettings",
]
