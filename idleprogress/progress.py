"""Goal tracking with throttled persistence and coalesced change notification.

Mutations only mark the aggregator dirty. The goal catalog is written to
the store when the save interval has passed since it first went dirty,
so a burst of ``add`` calls costs a single write. Claiming a reward is
the exception: it moves currency, so it writes synchronously.

Observers get at most one ``ChangeSignal`` emission per tick, with no
payload: "something changed, re-read what you need".
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterable, Sequence

from idleprogress._types import Clock, seconds_to_ms, system_clock
from idleprogress.definition import GoalConfig
from idleprogress.goal import EACH_RESOURCE_KEY, GoalKind, MissionGoal, Tier
from idleprogress.subsystem import Subsystem

if TYPE_CHECKING:
    from idleprogress.signal import ChangeSignal
    from idleprogress.store import SaveStore

logger = logging.getLogger(__name__)

GOLD_KEY = "gold"
SPEED_KEY = "player_speed"
DISTANCE_KEY = "distance_km"
PLAY_TIME_KEY = "play_time"

_ADDITIVE = (GoalKind.ACCUMULATE, GoalKind.COUNT)
_TIER_PREREQUISITE = {Tier.NORMAL: Tier.EASY, Tier.HARD: Tier.NORMAL}


class ClaimRefusal(Enum):
    NOT_READY = auto()
    UNKNOWN_GOAL = auto()
    NOT_COMPLETED = auto()
    ALREADY_CLAIMED = auto()


@dataclass(frozen=True)
class ClaimResult:
    """Outcome of a reward claim."""

    success: bool
    reason: ClaimRefusal | None = None
    reward_amount: int = 0
    goal_id: str = ""


class ProgressAggregator(Subsystem):
    """Owns the runtime goal list and keeps it consistent with the save state."""

    def __init__(
        self,
        store: SaveStore,
        signal: ChangeSignal,
        goals: Iterable[MissionGoal] | None = None,
        config: GoalConfig | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self.config = config or GoalConfig()
        self._store = store
        self._signal = signal
        self._clock = clock
        self.goals: list[MissionGoal] = list(goals) if goals is not None else []

        self._dirty = False
        self._next_flush_ms = 0

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def next_flush_ms(self) -> int:
        return self._next_flush_ms

    def replace_goals(self, goals: Iterable[MissionGoal]) -> None:
        self.goals = list(goals)
        self._dirty = False
        self._signal.publish()

    # ── Progress events ──────────────────────────────────────────────

    def add(self, goal_key: str, delta: float) -> bool:
        """Add *delta* to every open accumulate/count goal on *goal_key*."""
        changed = self._add(goal_key, delta, _ADDITIVE)
        if changed:
            self._mark_dirty()
        return changed

    def set_value(self, goal_key: str, value: float) -> bool:
        """Set the absolute value of every open reach_value goal on *goal_key*."""
        changed = self._set_value(goal_key, value)
        if changed:
            self._mark_dirty()
        return changed

    def set_unlocked(self, goal_key: str, unlocked: bool = True) -> bool:
        """One-shot completion of unlock goals; never reverts."""
        if not unlocked:
            return False
        key = goal_key.strip()
        changed = False
        for goal in self._open_goals(key, (GoalKind.UNLOCK,)):
            if not goal.is_completed:
                goal.current_value = 1.0
                goal.is_completed = True
                changed = True
        if changed:
            self._mark_dirty()
        return changed

    def check_each_at_least(self, values: Sequence[float], threshold: float) -> bool:
        """Complete multi-reach goals when every value is >= *threshold*."""
        changed = self._check_each_at_least(values, threshold)
        if changed:
            self._mark_dirty()
        return changed

    def notify_ui_only(self) -> None:
        """Queue a change notification without touching goal data."""
        self._signal.publish()

    # ── Rewards ──────────────────────────────────────────────────────

    def claim_reward(self, goal_key: str) -> ClaimResult:
        """Grant a completed goal's reward.

        *goal_key* is matched against goal ids first, then against goal
        keys; with several goals on one key the first claimable one wins.
        """
        state = self._store.state
        if state is None:
            return ClaimResult(False, ClaimRefusal.NOT_READY)

        goal, refusal = self._resolve_claim(goal_key.strip())
        if goal is None:
            return ClaimResult(False, refusal)

        state.add_gold(goal.reward_amount)
        self._store.save()

        goal.reward_claimed = True
        self.flush_now()
        self._signal.publish()
        logger.debug("claimed %s for %d", goal.id, goal.reward_amount)
        return ClaimResult(True, reward_amount=goal.reward_amount, goal_id=goal.id)

    # ── Tier gating ──────────────────────────────────────────────────

    def goals_for_tier(self, tier: Tier) -> list[MissionGoal]:
        return [g for g in self.goals if g.tier is tier]

    def is_tier_cleared(self, tier: Tier) -> bool:
        goals = self.goals_for_tier(tier)
        return bool(goals) and all(g.reward_claimed for g in goals)

    def is_tier_unlocked(self, tier: Tier) -> bool:
        prerequisite = _TIER_PREREQUISITE.get(tier)
        if prerequisite is None:
            return True
        return self.is_tier_cleared(prerequisite)

    def claimable(self) -> list[MissionGoal]:
        return [g for g in self.goals if g.claimable]

    # ── Tick ─────────────────────────────────────────────────────────

    def tick(self, now_ms: int, delta: float) -> None:
        """Re-derive ambient goals, flush if due, and emit at most one notification."""
        state = self._store.state
        if state is not None:
            changed = False
            changed |= self._set_value(GOLD_KEY, state.gold)
            changed |= self._set_value(SPEED_KEY, state.speed)
            changed |= self._set_value(DISTANCE_KEY, state.distance_km)
            changed |= self._set_value(PLAY_TIME_KEY, state.play_time_sec)
            changed |= self._check_each_at_least(
                state.resources, self.config.each_resource_threshold
            )
            if changed:
                self._mark_dirty(now_ms)

        if self._dirty and now_ms >= self._next_flush_ms:
            self.flush_now()

        self._signal.flush()

    def flush_now(self) -> None:
        """Write the goal list immediately, regardless of the throttle."""
        self._dirty = False
        self._store.save_goals(self.goals)

    # ── Private helpers ──────────────────────────────────────────────

    def _mark_dirty(self, now_ms: int | None = None) -> None:
        # The deadline is fixed when the list first goes dirty; later
        # mutations ride along instead of pushing the write further out.
        if not self._dirty:
            now = self._clock() if now_ms is None else now_ms
            self._next_flush_ms = now + seconds_to_ms(self.config.save_interval_sec)
            self._dirty = True
        self._signal.publish()

    def _open_goals(self, key: str, kinds: tuple[GoalKind, ...]) -> Iterable[MissionGoal]:
        for goal in self.goals:
            if goal.reward_claimed:
                continue
            if goal.kind not in kinds or goal.key != key:
                continue
            yield goal

    def _add(self, goal_key: str, delta: float, kinds: tuple[GoalKind, ...]) -> bool:
        changed = False
        for goal in self._open_goals(goal_key.strip(), kinds):
            before_value, before_completed = goal.current_value, goal.is_completed
            goal.current_value = max(0.0, goal.current_value + delta)
            changed |= goal.settle(before_value, before_completed)
        return changed

    def _set_value(self, goal_key: str, value: float) -> bool:
        changed = False
        for goal in self._open_goals(goal_key.strip(), (GoalKind.REACH_VALUE,)):
            before_value, before_completed = goal.current_value, goal.is_completed
            goal.current_value = float(value)
            changed |= goal.settle(before_value, before_completed)
        return changed

    def _check_each_at_least(self, values: Sequence[float], threshold: float) -> bool:
        if not values:
            return False
        ok = all(v >= threshold for v in values)
        changed = False
        for goal in self._open_goals(EACH_RESOURCE_KEY, (GoalKind.MULTI_REACH,)):
            before_value, before_completed = goal.current_value, goal.is_completed
            goal.current_value = float(threshold) if ok else 0.0
            if ok:
                goal.is_completed = True
            changed |= goal.settle(before_value, before_completed)
        return changed

    def _resolve_claim(self, key: str) -> tuple[MissionGoal | None, ClaimRefusal | None]:
        matches = [g for g in self.goals if g.id == key]
        if not matches:
            matches = [g for g in self.goals if g.key == key]
        if not matches:
            return None, ClaimRefusal.UNKNOWN_GOAL

        for goal in matches:
            if goal.claimable:
                return goal, None
        if any(not g.reward_claimed for g in matches):
            return None, ClaimRefusal.NOT_COMPLETED
        return None, ClaimRefusal.ALREADY_CLAIMED
