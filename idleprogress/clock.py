"""Deterministic epoch clock for headless sessions and tests."""
from __future__ import annotations

from idleprogress._types import seconds_to_ms, system_clock


class ManualClock:
    """Callable clock that only moves when told to.

    Returns epoch milliseconds like ``system_clock`` so it can be injected
    anywhere a ``Clock`` is expected.
    """

    def __init__(self, start_ms: int | None = None) -> None:
        self._now_ms = system_clock() if start_ms is None else start_ms

    def __call__(self) -> int:
        return self._now_ms

    @property
    def now_ms(self) -> int:
        return self._now_ms

    def advance(self, seconds: float) -> int:
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        self._now_ms += seconds_to_ms(seconds)
        return self._now_ms

    def advance_ms(self, ms: int) -> int:
        if ms < 0:
            raise ValueError("Cannot move a clock backwards")
        self._now_ms += ms
        return self._now_ms

    def set(self, now_ms: int) -> None:
        self._now_ms = now_ms
