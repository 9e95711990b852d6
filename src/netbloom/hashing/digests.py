"""Cryptographic digest hashes.

The digest is read as a big-endian integer and reduced with the same
32-bit masking rule as the string hashes. They are slower than the
classic hashes but are well distributed and mutually independent,
which makes them a safe default set.
"""
from __future__ import annotations

import hashlib

from netbloom.hashing.functions import prepare
from netbloom.hashing.int64 import MASK32, fold


def _digest_offset(name: str, buf: bytes, bit_space_size: int) -> int:
    digest = hashlib.new(name, buf).digest()
    return fold(int.from_bytes(digest, "big") & MASK32, bit_space_size)


def md5_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """128-bit MD5 digest."""
    return _digest_offset("md5", prepare(data, bit_space_size, length), bit_space_size)


def sha1_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """160-bit SHA-1 digest."""
    return _digest_offset("sha1", prepare(data, bit_space_size, length), bit_space_size)


def ripemd160_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """160-bit RIPEMD-160 digest.

    Only registered when the local OpenSSL build provides ripemd160.
    """
    return _digest_offset(
        "ripemd160", prepare(data, bit_space_size, length), bit_space_size
    )


def ripemd160_available() -> bool:
    # OpenSSL 3 can list ripemd160 while the legacy provider that
    # implements it is not loaded, so probe it.
    try:
        hashlib.new("ripemd160")
    except ValueError:
        return False
    return True
