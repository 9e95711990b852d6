"""Signed 64-bit accumulator arithmetic for the classic string hashes.

The string hashes in this package were first deployed by clients that
keep the running hash in a signed 64-bit integer. Shifts wrap at 64
bits, but an add, subtract or multiply that overflows is carried out in
double precision instead, and the (rounded) result is folded back to 64
bits the next time an integer is needed. Every offset already written
to a shared bucket depends on that exact behaviour, so the hashes go
through these helpers rather than plain Python ints.

A "value" here is either an int in the signed 64-bit range or a float
produced by an overflowing operation.
"""
from __future__ import annotations

import math
from typing import TypeAlias

Value: TypeAlias = int | float

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
_MOD64 = 1 << 64

MASK32 = 0xFFFFFFFF


def wrap(n: int) -> int:
    """Fold an arbitrary int into the signed 64-bit range (two's complement)."""
    n &= _MOD64 - 1
    return n - _MOD64 if n > INT64_MAX else n


def to_int(v: Value) -> int:
    """Convert a value to a signed 64-bit int.

    Floats truncate toward zero and then wrap modulo 2^64. Non-finite
    floats become 0.
    """
    if isinstance(v, int):
        return v
    if not math.isfinite(v):
        return 0
    return wrap(int(v))


def _fits(n: int) -> bool:
    return INT64_MIN <= n <= INT64_MAX


def add(a: Value, b: Value) -> Value:
    if isinstance(a, int) and isinstance(b, int):
        s = a + b
        if _fits(s):
            return s
    return float(a) + float(b)


def sub(a: Value, b: Value) -> Value:
    if isinstance(a, int) and isinstance(b, int):
        s = a - b
        if _fits(s):
            return s
    return float(a) - float(b)


def mul(a: Value, b: Value) -> Value:
    if isinstance(a, int) and isinstance(b, int):
        s = a * b
        if _fits(s):
            return s
    return float(a) * float(b)


def shl(a: Value, n: int) -> int:
    return wrap(to_int(a) << n)


def shr(a: Value, n: int) -> int:
    # Arithmetic shift: the sign bit is propagated.
    return to_int(a) >> n


def trunc_rem(a: int, m: int) -> int:
    """Remainder whose sign follows the dividend (C-style `%`)."""
    r = abs(a) % m
    return -r if a < 0 else r


def fold(h: Value, bit_space_size: int) -> int:
    """Reduce a raw hash into [0, bit_space_size).

    The value is first brought into the unsigned 32-bit range with
    ``(h rem 0xFFFFFFFF) & 0xFFFFFFFF`` and then taken modulo the bit
    space.
    """
    return (trunc_rem(to_int(h), MASK32) & MASK32) % bit_space_size
