"""Black-hole drift example: a slow traveller collecting supplies by distance."""
from __future__ import annotations

from idleprogress.catalog import DropCandidate
from idleprogress.definition import (
    AccrualConfig,
    BoostConfig,
    GameConfig,
    GameDefinition,
    GoalConfig,
)
from idleprogress.goal import GoalKind, MissionGoal, Tier

_SUPPLIES = [
    # (id, name, unlock distance in km, price)
    (0, "Scrap Plate", 0.0, 5),
    (1, "Ion Cell", 0.0, 8),
    (2, "Coolant", 0.5, 12),
    (3, "Nav Chip", 1.0, 20),
    (4, "Gyro Core", 2.0, 35),
    (5, "Plasma Coil", 3.0, 60),
    (6, "Dark Crystal", 5.0, 100),
    (7, "Graviton Lens", 8.0, 180),
    (8, "Quantum Seed", 12.0, 320),
    (9, "Event Shard", 20.0, 600),
]


def _goal(
    id: str,
    title: str,
    key: str,
    kind: GoalKind,
    target: float,
    tier: Tier,
    reward: int,
    category: str = "",
) -> MissionGoal:
    return MissionGoal(
        key=key,
        kind=kind,
        target_value=target,
        tier=tier,
        category=category,
        reward_amount=reward,
        id=id,
        title=title,
    )


def define_game() -> GameDefinition:
    return GameDefinition(
        config=GameConfig(
            name="Black Hole Drift",
            tick_rate=10,
            boost=BoostConfig(unlock_price=5000),
            accrual=AccrualConfig(weight_power=1.5, max_vfx_per_tick=8),
            goals=GoalConfig(save_interval_sec=0.5),
        ),
        drop_candidates=[
            DropCandidate(id=i, unlock_threshold=km, name=name, price=price)
            for i, name, km, price in _SUPPLIES
        ],
        goals=[
            # Easy
            _goal("collect_10", "First haul", "resource_collect_total",
                  GoalKind.ACCUMULATE, 10, Tier.EASY, 100, "resource"),
            _goal("travel_1", "Leave the dock", "distance_km",
                  GoalKind.REACH_VALUE, 1, Tier.EASY, 200, "travel"),
            _goal("play_60", "One minute adrift", "play_time",
                  GoalKind.REACH_VALUE, 60, Tier.EASY, 50, "time"),
            # Normal
            _goal("boost_unlock", "Afterburner", "boost_unlock",
                  GoalKind.UNLOCK, 1, Tier.NORMAL, 500, "boost"),
            _goal("boost_use_3", "Burn three times", "boost_use_count",
                  GoalKind.COUNT, 3, Tier.NORMAL, 300, "boost"),
            _goal("collect_50", "Full hold", "resource_collect_total",
                  GoalKind.ACCUMULATE, 50, Tier.NORMAL, 400, "resource"),
            _goal("travel_5", "Past the rim", "distance_km",
                  GoalKind.REACH_VALUE, 5, Tier.NORMAL, 600, "travel"),
            # Hard
            _goal("boost_speed_75", "Overdrive", "boost_speed",
                  GoalKind.REACH_VALUE, 75, Tier.HARD, 2000, "boost"),
            _goal("boost_time_2", "Long burn", "boost_time",
                  GoalKind.REACH_VALUE, 2, Tier.HARD, 2000, "boost"),
            _goal("gold_10k", "Hoarder", "gold",
                  GoalKind.REACH_VALUE, 10_000, Tier.HARD, 1000, "gold"),
            _goal("each_500", "Collector", "each_resource_amount",
                  GoalKind.MULTI_REACH, 500, Tier.HARD, 5000, "resource"),
        ],
    )
