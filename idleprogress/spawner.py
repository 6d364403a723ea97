from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any

Position = tuple[float, float]


class Spawner(ABC):
    """Visual side-effect sink. Spawning may fail; callers treat None as a no-op."""

    @abstractmethod
    def spawn(self, position: Position, payload: Any) -> Any | None: ...

    def release(self, handle: Any) -> None:
        return None


class NullSpawner(Spawner):
    def spawn(self, position: Position, payload: Any) -> None:
        return None


@dataclass
class PooledEffect:
    """A reusable visual-effect handle."""

    index: int
    active: bool = False
    position: Position = (0.0, 0.0)
    payload: Any = field(default=None, repr=False)


class EffectPool(Spawner):
    """Prewarmed pool of effect handles.

    With ``can_expand`` false, ``spawn`` returns None once every handle
    is in use.
    """

    def __init__(self, prewarm: int = 80, can_expand: bool = True) -> None:
        self.can_expand = can_expand
        self._free: deque[PooledEffect] = deque()
        self._created = 0
        for _ in range(prewarm):
            self._free.append(self._create())

    def _create(self) -> PooledEffect:
        handle = PooledEffect(index=self._created)
        self._created += 1
        return handle

    @property
    def free_count(self) -> int:
        return len(self._free)

    @property
    def created_count(self) -> int:
        return self._created

    @property
    def active_count(self) -> int:
        return self._created - len(self._free)

    def spawn(self, position: Position, payload: Any) -> PooledEffect | None:
        if self._free:
            handle = self._free.popleft()
        elif self.can_expand:
            handle = self._create()
        else:
            return None
        handle.active = True
        handle.position = position
        handle.payload = payload
        return handle

    def release(self, handle: PooledEffect | None) -> None:
        # Releasing twice must not put the handle in the queue twice
        if handle is None or not handle.active:
            return
        handle.active = False
        handle.payload = None
        self._free.append(handle)
