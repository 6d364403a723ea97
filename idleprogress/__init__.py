# idleprogress: persisted progression core with timed boosts, resource accrual and goals

from idleprogress._types import Clock, system_clock, approx_equal
from idleprogress.clock import ManualClock
from idleprogress.cost_scaling import CostScaling
from idleprogress.definition import (
    GameDefinition,
    GameConfig,
    BoostConfig,
    AccrualConfig,
    GoalConfig,
)
from idleprogress.state import SaveState, EffectRecord
from idleprogress.store import SaveStore, MemorySaveStore, JsonSaveStore
from idleprogress.scheduler import DeadlineScheduler
from idleprogress.signal import ChangeSignal
from idleprogress.subsystem import Subsystem
from idleprogress.effect import TimedEffectEngine, ActivationRefusal, ActivationResult
from idleprogress.catalog import DropCandidate, RewardCatalog
from idleprogress.spawner import Spawner, NullSpawner, EffectPool, PooledEffect
from idleprogress.accrual import AccrualEngine, drop_weight, pick_weighted
from idleprogress.goal import GoalKind, Tier, MissionGoal, load_goals, dump_goals
from idleprogress.progress import ProgressAggregator, ClaimRefusal, ClaimResult
from idleprogress.upgrade import BoostShop, ShopRefusal, PurchaseResult
from idleprogress.runtime import ProgressRuntime
from idleprogress.formatting import format_status

__all__ = [
    # Types
    "Clock",
    "system_clock",
    "approx_equal",
    "ManualClock",
    # Cost
    "CostScaling",
    # Definition
    "GameDefinition",
    "GameConfig",
    "BoostConfig",
    "AccrualConfig",
    "GoalConfig",
    # State
    "SaveState",
    "EffectRecord",
    "SaveStore",
    "MemorySaveStore",
    "JsonSaveStore",
    # Plumbing
    "DeadlineScheduler",
    "ChangeSignal",
    "Subsystem",
    # Timed effect
    "TimedEffectEngine",
    "ActivationRefusal",
    "ActivationResult",
    # Accrual
    "DropCandidate",
    "RewardCatalog",
    "Spawner",
    "NullSpawner",
    "EffectPool",
    "PooledEffect",
    "AccrualEngine",
    "drop_weight",
    "pick_weighted",
    # Goals
    "GoalKind",
    "Tier",
    "MissionGoal",
    "load_goals",
    "dump_goals",
    "ProgressAggregator",
    "ClaimRefusal",
    "ClaimResult",
    # Shop
    "BoostShop",
    "ShopRefusal",
    "PurchaseResult",
    # Runtime
    "ProgressRuntime",
    # Formatting
    "format_status",
]
