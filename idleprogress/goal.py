from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from idleprogress._types import VALUE_EPSILON

logger = logging.getLogger(__name__)


class GoalKind(Enum):
    ACCUMULATE = "accumulate"
    COUNT = "count"
    REACH_VALUE = "reach_value"
    UNLOCK = "unlock"
    MULTI_REACH = "multi_reach"


class Tier(Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


# Goals of this kind are keyed by a fixed sentinel rather than a game value
EACH_RESOURCE_KEY = "each_resource_amount"


@dataclass
class MissionGoal:
    """A progress goal loaded from the static catalog and mutated at runtime."""

    key: str
    kind: GoalKind
    target_value: float
    tier: Tier = Tier.EASY
    category: str = ""
    reward_amount: int = 0
    id: str = ""
    title: str = ""
    description: str = ""
    current_value: float = 0.0
    is_completed: bool = False
    reward_claimed: bool = False

    def __post_init__(self) -> None:
        self.key = self.key.strip()
        if not self.id:
            self.id = f"{self.key}:{self.tier.value}:{self.target_value:g}"

    @property
    def claimable(self) -> bool:
        return self.is_completed and not self.reward_claimed

    def settle(self, before_value: float, before_completed: bool) -> bool:
        """Apply the completion rule; return True if anything observable changed."""
        if not self.is_completed and self.current_value >= self.target_value:
            self.is_completed = True
        return (
            abs(self.current_value - before_value) > VALUE_EPSILON
            or self.is_completed != before_completed
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "desc": self.description,
            "tier": self.tier.value,
            "category": self.category,
            "goalType": self.kind.value,
            "goalKey": self.key,
            "goalTarget": self.target_value,
            "rewardGold": self.reward_amount,
            "currentValue": self.current_value,
            "isCompleted": self.is_completed,
            "rewardClaimed": self.reward_claimed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MissionGoal:
        return cls(
            key=str(data["goalKey"]),
            kind=GoalKind(data["goalType"]),
            target_value=float(data.get("goalTarget", 0.0)),
            tier=Tier(data.get("tier", "easy")),
            category=str(data.get("category", "")),
            reward_amount=int(data.get("rewardGold", 0)),
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            description=str(data.get("desc", "")),
            current_value=float(data.get("currentValue", 0.0)),
            is_completed=bool(data.get("isCompleted", False)),
            reward_claimed=bool(data.get("rewardClaimed", False)),
        )


def load_goals(source: str | list | dict) -> list[MissionGoal]:
    """Parse a goal catalog.

    *source* is JSON text, a list of goal dicts, or a ``{"missions": [...]}``
    wrapper. Malformed input degrades to an empty list.
    """
    data: Any = source
    if isinstance(source, str):
        if not source.strip():
            return []
        try:
            data = json.loads(source)
        except json.JSONDecodeError as e:
            logger.warning("Goal catalog is not valid JSON: %s", e)
            return []

    if isinstance(data, dict):
        data = data.get("missions")
    if not isinstance(data, list):
        return []

    goals: list[MissionGoal] = []
    for raw in data:
        try:
            goals.append(MissionGoal.from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed goal %r: %s", raw, e)
    return goals


def dump_goals(goals: list[MissionGoal]) -> dict[str, Any]:
    return {"missions": [g.to_dict() for g in goals]}
