"""Capacity planning for shared Bloom filters.

Given the number of members n a filter must hold and an acceptable
false positive rate p, the optimal bit array size and hash count are

    m = -(n * ln(p)) / (ln(2)^2)
    k = floor((m / n) * ln(2))

These numbers are advisory. A production filter usually pins its bit
space to an allocation that already exists in the store, so nothing
here reads or validates a FilterConfig. Use estimated_false_positive_rate
to see what a pinned allocation actually buys you.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from netbloom.errors import InvalidArgument


@dataclass(frozen=True, slots=True)
class CalibrationResult:
    """Derived sizing for one (n, p) pair. Recompute, don't cache."""
    bit_array_size: float
    hash_function_count: int

    @property
    def bit_space_size(self) -> int:
        """Smallest power of two that holds bit_array_size bits."""
        return next_power_of_two(self.bit_array_size)


def optimal_bit_array_size(expected_members: float, fp_rate: float) -> float:
    """Compute m for n members at false positive rate p."""
    if expected_members <= 0:
        raise InvalidArgument(f"expected_members must be positive, got {expected_members}")
    if not (0.0 < fp_rate < 1.0):
        raise InvalidArgument(f"fp_rate must be in (0, 1), got {fp_rate}")
    return -(expected_members * math.log(fp_rate)) / (math.log(2) ** 2)


def optimal_hash_function_count(bit_array_size: float, expected_members: float) -> int:
    """Compute k for a bit array of m bits holding n members.

    Pass the m produced by optimal_bit_array_size for the same n.
    """
    if bit_array_size <= 0:
        raise InvalidArgument(f"bit_array_size must be positive, got {bit_array_size}")
    if expected_members <= 0:
        raise InvalidArgument(f"expected_members must be positive, got {expected_members}")
    return math.floor((bit_array_size / expected_members) * math.log(2))


def calibrate(expected_members: float, fp_rate: float) -> CalibrationResult:
    m = optimal_bit_array_size(expected_members, fp_rate)
    return CalibrationResult(
        bit_array_size=m,
        hash_function_count=optimal_hash_function_count(m, expected_members),
    )


def estimated_false_positive_rate(
    bit_array_size: float, hash_count: int, members: float
) -> float:
    """Expected false positive rate (1 - e^(-k*n/m))^k.

    Zero members means an empty filter, which never reports a match.
    """
    if bit_array_size <= 0:
        raise InvalidArgument(f"bit_array_size must be positive, got {bit_array_size}")
    if hash_count < 1:
        raise InvalidArgument(f"hash_count must be at least 1, got {hash_count}")
    if members < 0:
        raise InvalidArgument(f"members must be non-negative, got {members}")
    return (1.0 - math.exp(-hash_count * members / bit_array_size)) ** hash_count


def next_power_of_two(n: float) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (math.ceil(n) - 1).bit_length()
