from __future__ import annotations

from abc import ABC, abstractmethod


class Subsystem(ABC):
    """One stage of the per-tick pipeline."""

    @abstractmethod
    def tick(self, now_ms: int, delta: float) -> None: ...
