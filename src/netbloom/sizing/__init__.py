"""Bit array sizing from a capacity and false positive target.

Public API:
    calibrate: (n, p) -> CalibrationResult
    optimal_bit_array_size, optimal_hash_function_count: the two formulas
    estimated_false_positive_rate: FP rate of a given (m, k, n)
    next_power_of_two: round a size up to a store-friendly allocation
"""

from netbloom.sizing.calibrator import (
    CalibrationResult,
    calibrate,
    estimated_false_positive_rate,
    next_power_of_two,
    optimal_bit_array_size,
    optimal_hash_function_count,
)

__all__ = [
    "CalibrationResult",
    "calibrate",
    "estimated_false_positive_rate",
    "next_power_of_two",
    "optimal_bit_array_size",
    "optimal_hash_function_count",
]
