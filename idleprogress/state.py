from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

from idleprogress._types import GOLD_MAX, clamp, saturating_add

RESOURCE_SLOTS = 30

DEFAULT_SPEED = 0.01
DEFAULT_INCOME = 0.5
DEFAULT_STORAGE_MAX = 100

DEFAULT_COOLDOWN_SEC = 60.0
MAX_EFFECT_DURATION_SEC = 45.0
DEFAULT_MULTIPLIER_PRICE = 1000
DEFAULT_DURATION_PRICE = 500


@dataclass
class EffectRecord:
    """Persisted state of one timed multiplier slot.

    ``active_until_ms`` and ``cooldown_until_ms`` are absolute epoch
    milliseconds; 0 means "not set". ``base_value`` is the shared value
    captured at activation and is only meaningful while the effect is
    active.
    """

    active_until_ms: int = 0
    cooldown_until_ms: int = 0
    base_value: float = 0.0
    multiplier_percent: float = 25.0
    duration_sec: float = 1.0
    cooldown_sec: float = DEFAULT_COOLDOWN_SEC
    unlocked: bool = False
    multiplier_price: int = DEFAULT_MULTIPLIER_PRICE
    duration_price: int = DEFAULT_DURATION_PRICE

    def clear_active(self) -> None:
        self.active_until_ms = 0
        self.base_value = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EffectRecord:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class SaveState:
    """Mutable container for everything that survives a restart."""

    def __init__(self) -> None:
        self.gold: int = 0
        self.speed: float = DEFAULT_SPEED
        self.distance_km: float = 0.0
        self.play_time_sec: float = 0.0

        self.income_per_second: float = DEFAULT_INCOME
        self.income_level: int = 0
        self.storage_level: int = 0
        self.storage_max: int = DEFAULT_STORAGE_MAX

        self.resources: list[int] = [0] * RESOURCE_SLOTS
        self.effects: dict[str, EffectRecord] = {}

    # ── Currency ─────────────────────────────────────────────────────

    def add_gold(self, amount: int) -> int:
        """Add (or with a negative amount, remove) gold, saturating."""
        self.gold = saturating_add(self.gold, int(amount), GOLD_MAX)
        return self.gold

    def spend_gold(self, amount: int) -> bool:
        if amount < 0 or self.gold < amount:
            return False
        self.gold -= amount
        return True

    # ── Resources ────────────────────────────────────────────────────

    def get_resource(self, id: int) -> int:
        if id < 0 or id >= len(self.resources):
            return 0
        return self.resources[id]

    def add_resource(self, id: int, amount: int) -> bool:
        if id < 0 or id >= len(self.resources):
            return False
        self.resources[id] = max(0, self.resources[id] + amount)
        return True

    def total_resources(self) -> int:
        return sum(self.resources)

    def is_storage_full(self) -> bool:
        if self.storage_max <= 0:
            return False
        return self.total_resources() >= self.storage_max

    # ── Effects ──────────────────────────────────────────────────────

    def effect(self, name: str) -> EffectRecord | None:
        return self.effects.get(name)

    def ensure_effect(self, name: str) -> EffectRecord:
        record = self.effects.get(name)
        if record is None:
            record = EffectRecord()
            self.effects[name] = record
        return record

    # ── Load-time repair ─────────────────────────────────────────────

    def fixup(self) -> None:
        """Repair values a stale or hand-edited save may carry."""
        for record in self.effects.values():
            if record.cooldown_sec <= 0:
                record.cooldown_sec = DEFAULT_COOLDOWN_SEC
            record.duration_sec = clamp(record.duration_sec, 0.0, MAX_EFFECT_DURATION_SEC)
            if record.multiplier_price <= 0:
                record.multiplier_price = DEFAULT_MULTIPLIER_PRICE
            if record.duration_price <= 0:
                record.duration_price = DEFAULT_DURATION_PRICE

        if len(self.resources) != RESOURCE_SLOTS:
            resized = [0] * RESOURCE_SLOTS
            for i, count in enumerate(self.resources[:RESOURCE_SLOTS]):
                resized[i] = count
            self.resources = resized

        self.gold = saturating_add(self.gold, 0, GOLD_MAX)

    # ── Serialization ────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "player": {
                "gold": self.gold,
                "speed": self.speed,
                "distance_km": self.distance_km,
                "play_time_sec": self.play_time_sec,
            },
            "income": {
                "income_per_second": self.income_per_second,
                "income_level": self.income_level,
                "storage_level": self.storage_level,
                "storage_max": self.storage_max,
            },
            "effects": {name: rec.to_dict() for name, rec in self.effects.items()},
            "resources": list(self.resources),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SaveState:
        state = cls()
        player = data.get("player") or {}
        state.gold = int(player.get("gold", state.gold))
        state.speed = float(player.get("speed", state.speed))
        state.distance_km = float(player.get("distance_km", state.distance_km))
        state.play_time_sec = float(player.get("play_time_sec", state.play_time_sec))

        income = data.get("income") or {}
        state.income_per_second = float(
            income.get("income_per_second", state.income_per_second)
        )
        state.income_level = int(income.get("income_level", state.income_level))
        state.storage_level = int(income.get("storage_level", state.storage_level))
        state.storage_max = int(income.get("storage_max", state.storage_max))

        for name, raw in (data.get("effects") or {}).items():
            state.effects[name] = EffectRecord.from_dict(raw)

        resources = data.get("resources")
        if isinstance(resources, list):
            state.resources = [int(v) for v in resources]

        state.fixup()
        return state
