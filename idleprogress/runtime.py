from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from idleprogress._types import Clock, seconds_to_ms, system_clock
from idleprogress.accrual import AccrualEngine
from idleprogress.catalog import RewardCatalog
from idleprogress.clock import ManualClock
from idleprogress.definition import GameDefinition
from idleprogress.effect import ActivationResult, TimedEffectEngine
from idleprogress.goal import MissionGoal, load_goals
from idleprogress.progress import ClaimResult, ProgressAggregator
from idleprogress.scheduler import DeadlineScheduler
from idleprogress.signal import ChangeSignal
from idleprogress.store import MemorySaveStore, SaveStore
from idleprogress.upgrade import BoostShop

if TYPE_CHECKING:
    from idleprogress.spawner import Spawner
    from idleprogress.state import SaveState
    from idleprogress.subsystem import Subsystem

logger = logging.getLogger(__name__)

BOOST_USE_KEY = "boost_use_count"
RESOURCE_COLLECT_KEY = "resource_collect_total"


class ProgressRuntime:
    """Builds the progression core once and drives it tick by tick.

    Every engine gets its collaborators passed in here; nothing looks
    anything up globally. The per-tick order is fixed: due deadlines,
    effect cooldowns, travel, accrual, goals, then any extra subsystems.
    """

    def __init__(
        self,
        definition: GameDefinition,
        store: SaveStore | None = None,
        clock: Clock | None = None,
        spawner: Spawner | None = None,
        rng: random.Random | None = None,
    ) -> None:
        errors = definition.validate()
        if errors:
            raise ValueError(
                "Invalid GameDefinition:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        cfg = definition.config
        self.definition = definition
        self.store = store if store is not None else MemorySaveStore()
        self.clock: Clock = clock if clock is not None else system_clock
        self.rng = rng or random.Random()

        self.signal = ChangeSignal()
        self.scheduler = DeadlineScheduler()
        self.catalog = RewardCatalog(definition.drop_candidates)

        self.progress = ProgressAggregator(
            self.store, self.signal, config=cfg.goals, clock=self.clock
        )
        self.boost = TimedEffectEngine(
            self.store,
            self.scheduler,
            read_value=self._read_speed,
            write_value=self._write_speed,
            config=cfg.boost,
            clock=self.clock,
        )
        self.accrual = AccrualEngine(
            self.store,
            self.catalog,
            config=cfg.accrual,
            spawner=spawner,
            rng=self.rng,
            on_grant=self._on_grant,
        )
        self.shop = BoostShop(self.store, cfg.boost, progress=self.progress)

        self._subsystems: list[Subsystem] = []
        self._started = False

    @property
    def state(self) -> SaveState | None:
        return self.store.state

    @property
    def started(self) -> bool:
        return self._started

    # ── Lifecycle ────────────────────────────────────────────────────

    def start(self) -> None:
        """Load persisted state, bring goals and the timed effect up to date."""
        self.store.load()
        self.progress.replace_goals(self._initial_goals())
        self.boost.restore()
        self._started = True
        logger.debug("runtime started at %d", self.clock())

    def shutdown(self) -> None:
        """Cancel pending deadlines and write everything out.

        Persisted effect timing is left untouched, so the next ``start``
        resumes an active window instead of ending it early.
        """
        self.boost.cancel()
        if self.progress.dirty:
            self.progress.flush_now()
        self.store.save()
        self._started = False

    # ── Core loop ────────────────────────────────────────────────────

    def tick(self, delta: float) -> None:
        """Advance the game by *delta* seconds at the clock's current time."""
        if delta < 0:
            raise ValueError(f"tick delta must not be negative, got {delta}")

        now = self.clock()
        self.scheduler.run_due(now)
        self.boost.tick(now, delta)
        self._travel(delta)
        self.accrual.tick(now, delta)
        self.progress.tick(now, delta)
        self.accrual.end_frame()

        for sub in self._subsystems:
            sub.tick(now, delta)

    def advance(self, seconds: float, step: float | None = None) -> None:
        """Move a ManualClock forward, ticking every *step* seconds on the way."""
        if not isinstance(self.clock, ManualClock):
            raise TypeError("advance() needs the runtime to run on a ManualClock")
        if seconds < 0:
            raise ValueError(f"Cannot advance by a negative duration: {seconds}")

        step = step or 1.0 / self.definition.config.tick_rate
        # Whole milliseconds, so the clock lands exactly on the target
        step_ms = max(1, seconds_to_ms(step))
        remaining_ms = seconds_to_ms(seconds)
        while remaining_ms > 0:
            dt_ms = min(step_ms, remaining_ms)
            self.clock.advance_ms(dt_ms)
            self.tick(dt_ms / 1000)
            remaining_ms -= dt_ms

    # ── Player actions ───────────────────────────────────────────────

    def activate_boost(self) -> ActivationResult:
        result = self.boost.try_activate()
        if result.success:
            self.progress.add(BOOST_USE_KEY, 1)
        return result

    def claim_reward(self, goal_key: str) -> ClaimResult:
        return self.progress.claim_reward(goal_key)

    # ── Extension points ─────────────────────────────────────────────

    def add_subsystem(self, subsystem: Subsystem) -> None:
        self._subsystems.append(subsystem)

    # ── Private helpers ──────────────────────────────────────────────

    def _initial_goals(self) -> list[MissionGoal]:
        saved = self.store.load_goals()
        if saved is not None:
            return load_goals(saved)
        return [MissionGoal.from_dict(g.to_dict()) for g in self.definition.goals]

    def _read_speed(self) -> float:
        state = self.store.state
        return state.speed if state is not None else 0.0

    def _write_speed(self, value: float) -> None:
        if self.store.state is not None:
            self.store.state.speed = value

    def _travel(self, delta: float) -> None:
        state = self.store.state
        if state is None or delta <= 0:
            return
        state.distance_km += state.speed * delta
        state.play_time_sec += delta

    def _on_grant(self, resource_id: int, amount: int) -> None:
        self.progress.add(RESOURCE_COLLECT_KEY, amount)
