"""Continuous income rate -> discrete resource drops.

A fractional accumulator collects ``rate * delta`` each tick and is drained
in whole units. Each unit picks one unlocked candidate by weight, so
early (low-id) rewards are common and later ones rare. Two independent
budgets bound the work done per tick: drops processed, and visual
effects spawned.
"""
from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING, Callable, Protocol, Sequence

from idleprogress.definition import AccrualConfig
from idleprogress.subsystem import Subsystem

if TYPE_CHECKING:
    from idleprogress.catalog import DropCandidate, RewardCatalog
    from idleprogress.spawner import Position, Spawner
    from idleprogress.store import SaveStore

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def random(self) -> float: ...


def drop_weight(candidate: DropCandidate, power: float) -> float:
    """``1 / (id + 1) ** power``; negative ids count as 0."""
    id = max(0, candidate.id)
    return 1.0 / math.pow(id + 1.0, power)


def pick_weighted(
    candidates: Sequence[DropCandidate | None],
    power: float,
    rng: RandomSource,
) -> DropCandidate | None:
    """Weighted random choice favouring low ids.

    None entries weigh nothing. If every weight is zero, or float error
    walks past the end, the last candidate is returned.
    """
    count = len(candidates)
    if count == 0:
        return None
    if count == 1:
        return candidates[0]

    weights = [0.0 if c is None else drop_weight(c, power) for c in candidates]
    total = sum(weights)
    if total <= 0:
        return candidates[-1]

    r = rng.random() * total
    for candidate, weight in zip(candidates, weights):
        r -= weight
        if r <= 0:
            return candidate if candidate is not None else candidates[-1]
    return candidates[-1]


class AccrualEngine(Subsystem):
    """Drains the income accumulator into resource grants each tick."""

    def __init__(
        self,
        store: SaveStore,
        catalog: RewardCatalog | None,
        config: AccrualConfig | None = None,
        spawner: Spawner | None = None,
        rng: random.Random | None = None,
        on_grant: Callable[[int, int], None] | None = None,
    ) -> None:
        self.config = config or AccrualConfig()
        self.catalog = catalog
        self._store = store
        self._spawner = spawner
        self._rng = rng or random.Random()
        self._on_grant = on_grant

        self.accumulator = 0.0
        self.last_tick_grants = 0
        self.cap_hit = False
        self._drop_counter = 0
        self._vfx_this_frame = 0

    @property
    def vfx_spawned_this_frame(self) -> int:
        return self._vfx_this_frame

    def tick(self, now_ms: int, delta: float) -> None:
        self.accrue(delta)

    def accrue(self, delta: float) -> int:
        """Advance by *delta* seconds. Returns the number of drops granted."""
        self.last_tick_grants = 0
        self.cap_hit = False

        state = self._store.state
        if state is None or self.catalog is None or not self.catalog.is_loaded:
            return 0
        if state.is_storage_full():
            return 0
        rate = state.income_per_second
        if rate <= 0:
            return 0

        if delta > 0:
            self.accumulator += delta * rate

        granted = 0
        cap = self.config.max_drops_per_tick
        while self.accumulator >= 1.0:
            if granted >= cap:
                # Leftover units wait for the next tick instead of bursting
                self.cap_hit = True
                break

            candidates = self.catalog.unlocked_candidates(state.distance_km)
            if not candidates:
                break

            picked = pick_weighted(candidates, self.config.weight_power, self._rng)
            if picked is None:
                break

            if not state.add_resource(picked.id, 1):
                logger.warning("Drop candidate %d has no resource slot", picked.id)
                break
            self.accumulator -= 1.0
            granted += 1
            self._drop_counter += 1
            if self._on_grant is not None:
                self._on_grant(picked.id, 1)

            if state.is_storage_full():
                break

            if self.config.spawn_vfx and self._should_spawn_vfx():
                self._spawn_vfx(picked)

        if granted:
            self._store.save()
            logger.debug("granted %d drops, accumulator %.3f", granted, self.accumulator)
        self.last_tick_grants = granted
        return granted

    def end_frame(self) -> None:
        """Reset the per-frame visual budget; call after the whole tick has run."""
        self._vfx_this_frame = 0

    # ── Private helpers ──────────────────────────────────────────────

    def _should_spawn_vfx(self) -> bool:
        every = self.config.vfx_every_n_drops
        if every > 1 and self._drop_counter % every != 0:
            return False
        return self._vfx_this_frame < self.config.max_vfx_per_tick

    def _spawn_position(self) -> Position:
        cfg = self.config
        angle = self._rng.uniform(0.0, 2.0 * math.pi)
        radius = self._rng.uniform(cfg.spawn_min_radius, cfg.spawn_max_radius)
        ox, oy = cfg.origin
        return (ox + math.cos(angle) * radius, oy + math.sin(angle) * radius)

    def _spawn_vfx(self, picked: DropCandidate) -> None:
        if self._spawner is None:
            return
        self._vfx_this_frame += 1
        self._spawner.spawn(self._spawn_position(), picked)
