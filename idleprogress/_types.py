from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], int]

INT64_MAX = 2**63 - 1
# Currency ceiling kept below INT64_MAX so that one more grant can't overflow
GOLD_MAX = 9_000_000_000_000_000_000

VALUE_EPSILON = 1e-6


def system_clock() -> int:
    """Wall-clock time in milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


def approx_equal(left: float, right: float, tolerance: float = 1e-4) -> bool:
    """Absolute-tolerance comparison for values that drift through float math."""
    return abs(left - right) < tolerance


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


def saturating_add(value: int, amount: int, ceiling: int = INT64_MAX) -> int:
    """Add and clamp to ``[0, ceiling]``."""
    result = value + amount
    if result > ceiling:
        return ceiling
    if result < 0:
        return 0
    return result


def saturating_mul(value: int, factor: float, ceiling: int = INT64_MAX) -> int:
    """Multiply and clamp to ``[0, ceiling]``, rounding down."""
    if value <= 0 or factor <= 0:
        return 0
    if value > ceiling / factor:
        return ceiling
    return min(int(value * factor), ceiling)


def seconds_to_ms(seconds: float) -> int:
    return int(round(seconds * 1000))
