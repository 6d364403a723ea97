from __future__ import annotations

from typing import Callable

from idleprogress._types import INT64_MAX, saturating_mul


class CostScaling:
    """Determines how an upgrade price changes after each purchase.

    Every result is clamped to ``[0, INT64_MAX]``, so repeated growth
    saturates instead of wrapping.
    """

    def __init__(self, fn: Callable[[int], int]) -> None:
        self._fn = fn

    def next_price(self, price: int) -> int:
        return max(0, min(self._fn(price), INT64_MAX))

    def price_after(self, price: int, purchases: int) -> int:
        for _ in range(purchases):
            grown = self.next_price(price)
            if grown == price:
                break
            price = grown
        return price

    @classmethod
    def fixed(cls) -> CostScaling:
        """Price never changes."""
        return cls(lambda price: price)

    @classmethod
    def exponential(cls, growth_rate: float = 2.0) -> CostScaling:
        """Price = price * growth_rate, each purchase."""
        gr = growth_rate  # capture
        return cls(lambda price: saturating_mul(price, gr))

    @classmethod
    def custom(cls, fn: Callable[[int], int]) -> CostScaling:
        """Arbitrary price function."""
        return cls(fn)
