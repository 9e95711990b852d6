"""Classic non-cryptographic string hashes.

Each function maps ``(data, bit_space_size, length=None)`` to an offset
in ``[0, bit_space_size)``. ``data`` may be bytes or str (UTF-8 encoded
first); ``length`` hashes only the first ``length`` bytes.

These offsets address bits in buckets shared by many clients, so the
arithmetic of every function is frozen: changing any of it silently
invalidates every filter already written with that function. The
accumulator rules live in ``netbloom.hashing.int64``.

Those rules cost accuracy on longer keys. bkdr, sdbm and djb overflow
into double precision after roughly a dozen bytes and stop seeing the
low-order bits of earlier input; pjw, elf and dek only keep the tail of
the key. For keys longer than a few bytes prefer js, fnv, crc32 or the
digest hashes.

Reference values for ``b"Hello World!"`` in a 2^23 bit space:

    js      7890106     sdbm    8201036
    pjw      696689     djb     2383482
    elf     4899185     dek     7520290
    bkdr    4837970     fnv     6738950
    crc32   2694307
"""
from __future__ import annotations

import zlib

from netbloom.errors import InvalidArgument
from netbloom.hashing.int64 import (
    MASK32,
    add,
    fold,
    mul,
    shl,
    shr,
    sub,
    to_int,
    trunc_rem,
)


def prepare(data: bytes | str, bit_space_size: int, length: int | None) -> bytes:
    """Validate arguments and return the bytes to hash."""
    if bit_space_size <= 0:
        raise InvalidArgument(f"bit_space_size must be positive, got {bit_space_size}")
    if isinstance(data, str):
        data = data.encode("utf-8")
    if length is None:
        return bytes(data)
    if length < 0:
        raise InvalidArgument(f"length must be non-negative, got {length}")
    return bytes(data[:length])


def js_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """Justin Sobel's bitwise hash."""
    h = 1315423911
    for c in prepare(data, bit_space_size, length):
        h = to_int(h) ^ to_int(add(add(shl(h, 5), c), shr(h, 2)))
    return fold(h, bit_space_size)


def pjw_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """Peter J. Weinberger's hash (Aho, Sethi and Ullman, "Compilers").

    Works in a 32-bit frame: bytes are shifted in an eighth of a word at
    a time and the top eighth is folded back once, after the loop.
    """
    bits = 32
    three_quarters = (bits * 3) // 4
    one_eighth = bits // 8
    high_bits = shl(MASK32, bits - one_eighth)
    h = 0
    for c in prepare(data, bit_space_size, length):
        h = add(shl(h, one_eighth), c)
    test = to_int(h) & high_bits
    if test != 0:
        h = (to_int(h) ^ (test >> three_quarters)) & ~high_bits
    return fold(h, bit_space_size)


def elf_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """The Unix ELF object-file hash, a PJW variant folding on every byte."""
    h = 0
    for c in prepare(data, bit_space_size, length):
        h = add(shl(h, 4), c)
        x = to_int(h) & 0xF0000000
        if x != 0:
            h = to_int(h) ^ (x >> 24)
        h = to_int(h) & ~x
    return fold(h, bit_space_size)


def bkdr_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """Brian Kernighan and Dennis Ritchie's hash from "The C Programming Language".

    The seed follows the 31, 131, 1313, 13131... pattern.
    """
    seed = 131
    h = 0
    for c in prepare(data, bit_space_size, length):
        h = to_int(add(mul(h, seed), c))
    return fold(h, bit_space_size)


def sdbm_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """The hash used by the SDBM database library."""
    h = 0
    for c in prepare(data, bit_space_size, length):
        h = to_int(sub(add(add(c, shl(h, 6)), shl(h, 16)), h))
    return fold(h, bit_space_size)


def djb_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """Daniel J. Bernstein's hash, ``h * 33 + c`` from seed 5381."""
    h = 5381
    for c in prepare(data, bit_space_size, length):
        h = add(to_int(add(shl(h, 5), h)), c)
    return fold(h, bit_space_size)


def dek_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """Donald E. Knuth's cyclic-shift hash (TAOCP vol. 3, section 6.4).

    Seeded with the input length.
    """
    buf = prepare(data, bit_space_size, length)
    h = len(buf)
    for c in buf:
        h = (shl(h, 5) ^ shr(h, 27)) ^ c
    return fold(h, bit_space_size)


def fnv_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """32-bit FNV-style multiply-then-XOR.

    The running value is reduced modulo 0xFFFFFFFF (not 2^32) after each
    multiply, so this is not byte-compatible with canonical FNV-1.
    """
    prime = 16777619
    h = 2166136261
    for c in prepare(data, bit_space_size, length):
        h = trunc_rem(to_int(mul(h, prime)), MASK32)
        h ^= c
    return fold(h, bit_space_size)


def crc32_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """CRC-32 with the zlib polynomial."""
    return zlib.crc32(prepare(data, bit_space_size, length)) % bit_space_size


_FNV64_OFFSET = 14695981039346656037
_FNV64_PRIME = 1099511628211
_MASK64 = (1 << 64) - 1


def fnv1_64_hash(data: bytes | str, bit_space_size: int, length: int | None = None) -> int:
    """Canonical 64-bit FNV-1, masked to 32 bits before the modulo."""
    h = _FNV64_OFFSET
    for c in prepare(data, bit_space_size, length):
        h = (h * _FNV64_PRIME) & _MASK64
        h ^= c
    return fold(h & MASK32, bit_space_size)
