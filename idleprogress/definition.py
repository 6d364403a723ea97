from __future__ import annotations

import warnings
from dataclasses import dataclass, field

from idleprogress.catalog import DropCandidate
from idleprogress.goal import EACH_RESOURCE_KEY, GoalKind, MissionGoal
from idleprogress.state import MAX_EFFECT_DURATION_SEC, RESOURCE_SLOTS


@dataclass
class BoostConfig:
    """Tuning for the timed speed multiplier and its shop."""

    effect_name: str = "boost"
    min_duration_sec: float = 0.01
    max_duration_sec: float = MAX_EFFECT_DURATION_SEC
    duration_upgrade_cap_sec: float = 30.0
    multiplier_step_percent: float = 25.0
    duration_step_factor: float = 1.25
    unlock_price: int = 5000
    price_growth: float = 2.0
    value_tolerance: float = 1e-4


@dataclass
class AccrualConfig:
    """Tuning for rate-to-drop conversion and its per-tick budgets."""

    weight_power: float = 1.5
    max_drops_per_tick: int = 64
    spawn_vfx: bool = True
    max_vfx_per_tick: int = 8
    vfx_every_n_drops: int = 1
    spawn_min_radius: float = 0.6
    spawn_max_radius: float = 1.4
    origin: tuple[float, float] = (0.0, 0.0)


@dataclass
class GoalConfig:
    save_interval_sec: float = 0.5
    each_resource_threshold: int = 500


@dataclass
class GameConfig:
    """Top-level game configuration."""

    name: str = "Untitled"
    tick_rate: int = 10
    boost: BoostConfig = field(default_factory=BoostConfig)
    accrual: AccrualConfig = field(default_factory=AccrualConfig)
    goals: GoalConfig = field(default_factory=GoalConfig)


@dataclass
class GameDefinition:
    """Static configuration plus the reward and goal catalogs."""

    config: GameConfig = field(default_factory=GameConfig)
    drop_candidates: list[DropCandidate] = field(default_factory=list)
    goals: list[MissionGoal] = field(default_factory=list)

    _goals_by_id: dict[str, MissionGoal] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._goals_by_id = {g.id: g for g in self.goals}

    def get_goal(self, id: str) -> MissionGoal | None:
        return self._goals_by_id.get(id)

    def validate(self) -> list[str]:
        """Check for common definition errors. Returns list of error messages."""
        errors: list[str] = []
        cfg = self.config

        if cfg.tick_rate <= 0:
            errors.append(f"tick_rate must be positive, got {cfg.tick_rate}")

        b = cfg.boost
        if not b.effect_name:
            errors.append("BoostConfig.effect_name must not be empty")
        if b.min_duration_sec <= 0 or b.min_duration_sec > b.max_duration_sec:
            errors.append(
                f"Boost duration bounds are invalid: "
                f"[{b.min_duration_sec}, {b.max_duration_sec}]"
            )
        if b.duration_step_factor <= 1.0:
            errors.append(
                f"Boost duration_step_factor must exceed 1, got {b.duration_step_factor}"
            )
        if b.unlock_price < 0:
            errors.append(f"Boost unlock_price must not be negative, got {b.unlock_price}")
        if b.value_tolerance <= 0:
            errors.append("Boost value_tolerance must be positive")

        a = cfg.accrual
        if a.max_drops_per_tick < 1:
            errors.append(f"max_drops_per_tick must be at least 1, got {a.max_drops_per_tick}")
        if a.max_vfx_per_tick < 0:
            errors.append(f"max_vfx_per_tick must not be negative, got {a.max_vfx_per_tick}")
        if a.spawn_min_radius > a.spawn_max_radius:
            errors.append("spawn_min_radius exceeds spawn_max_radius")

        if cfg.goals.save_interval_sec < 0:
            errors.append("save_interval_sec must not be negative")

        seen_ids: set[int] = set()
        for c in self.drop_candidates:
            if c.id in seen_ids:
                errors.append(f"Duplicate drop candidate ID: {c.id}")
            seen_ids.add(c.id)
            if c.id < 0 or c.id >= RESOURCE_SLOTS:
                errors.append(
                    f"Drop candidate {c.id} is outside the {RESOURCE_SLOTS} resource slots"
                )

        seen_goals: set[str] = set()
        for g in self.goals:
            if g.id in seen_goals:
                errors.append(f"Duplicate goal ID: {g.id!r}")
            seen_goals.add(g.id)
            if not g.key:
                errors.append(f"Goal {g.id!r} has an empty key")
            if g.reward_amount < 0:
                errors.append(f"Goal {g.id!r} has a negative reward")

        for g in self.goals:
            if g.kind is GoalKind.MULTI_REACH and g.key != EACH_RESOURCE_KEY:
                warnings.warn(
                    f"Goal {g.id!r} is multi_reach but keyed {g.key!r}; only "
                    f"{EACH_RESOURCE_KEY!r} is ever evaluated, so it will never complete.",
                    stacklevel=2,
                )

        return errors
