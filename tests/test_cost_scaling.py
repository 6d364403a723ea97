"""Tests for cost_scaling module."""
from idleprogress._types import INT64_MAX
from idleprogress.cost_scaling import CostScaling


def test_fixed():
    cs = CostScaling.fixed()
    assert cs.next_price(100) == 100
    assert cs.price_after(100, 10) == 100


def test_exponential():
    cs = CostScaling.exponential(2.0)
    assert cs.next_price(1000) == 2000
    assert cs.price_after(1000, 3) == 8000


def test_exponential_default_doubles():
    assert CostScaling.exponential().next_price(500) == 1000


def test_exponential_saturates():
    cs = CostScaling.exponential(2.0)
    price = cs.price_after(1000, 200)
    assert price == INT64_MAX
    assert cs.next_price(price) == INT64_MAX


def test_custom_clamped():
    cs = CostScaling.custom(lambda p: p + 7)
    assert cs.next_price(3) == 10
    assert CostScaling.custom(lambda p: -5).next_price(3) == 0
    assert CostScaling.custom(lambda p: INT64_MAX * 4).next_price(3) == INT64_MAX
