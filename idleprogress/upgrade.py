"""Gold sinks for the boost effect: unlock, multiplier and duration upgrades."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from idleprogress.cost_scaling import CostScaling
from idleprogress.definition import BoostConfig

if TYPE_CHECKING:
    from idleprogress.progress import ProgressAggregator
    from idleprogress.state import EffectRecord
    from idleprogress.store import SaveStore

logger = logging.getLogger(__name__)

BOOST_UNLOCK_KEY = "boost_unlock"
BOOST_SPEED_KEY = "boost_speed"
BOOST_TIME_KEY = "boost_time"


class ShopRefusal(Enum):
    NOT_READY = auto()
    LOCKED = auto()
    ALREADY_UNLOCKED = auto()
    INSUFFICIENT_GOLD = auto()
    AT_CAP = auto()


@dataclass(frozen=True)
class PurchaseResult:
    """Outcome of a shop purchase."""

    success: bool
    reason: ShopRefusal | None = None
    price: int = 0


class BoostShop:
    def __init__(
        self,
        store: SaveStore,
        config: BoostConfig | None = None,
        progress: ProgressAggregator | None = None,
        scaling: CostScaling | None = None,
    ) -> None:
        self.config = config or BoostConfig()
        self._store = store
        self._progress = progress
        self.scaling = scaling or CostScaling.exponential(self.config.price_growth)

    def buy_unlock(self) -> PurchaseResult:
        record = self._record()
        if record is None:
            return PurchaseResult(False, ShopRefusal.NOT_READY)
        if record.unlocked:
            return PurchaseResult(False, ShopRefusal.ALREADY_UNLOCKED)

        price = self.config.unlock_price
        if not self._store.state.spend_gold(price):
            return PurchaseResult(False, ShopRefusal.INSUFFICIENT_GOLD, price)

        record.unlocked = True
        self._store.save()
        if self._progress is not None:
            self._progress.set_unlocked(BOOST_UNLOCK_KEY, True)
        logger.debug("%s unlocked for %d", self.config.effect_name, price)
        return PurchaseResult(True, price=price)

    def upgrade_multiplier(self) -> PurchaseResult:
        record = self._record()
        if record is None:
            return PurchaseResult(False, ShopRefusal.NOT_READY)
        if not record.unlocked:
            return PurchaseResult(False, ShopRefusal.LOCKED)

        price = record.multiplier_price
        if not self._store.state.spend_gold(price):
            return PurchaseResult(False, ShopRefusal.INSUFFICIENT_GOLD, price)

        record.multiplier_percent += self.config.multiplier_step_percent
        record.multiplier_price = self.scaling.next_price(price)
        self._store.save()
        if self._progress is not None:
            self._progress.set_value(BOOST_SPEED_KEY, record.multiplier_percent)
        return PurchaseResult(True, price=price)

    def upgrade_duration(self) -> PurchaseResult:
        record = self._record()
        if record is None:
            return PurchaseResult(False, ShopRefusal.NOT_READY)
        if not record.unlocked:
            return PurchaseResult(False, ShopRefusal.LOCKED)

        cap = self.config.duration_upgrade_cap_sec
        if record.duration_sec >= cap:
            record.duration_sec = cap
            return PurchaseResult(False, ShopRefusal.AT_CAP)

        price = record.duration_price
        if not self._store.state.spend_gold(price):
            return PurchaseResult(False, ShopRefusal.INSUFFICIENT_GOLD, price)

        record.duration_sec = min(record.duration_sec * self.config.duration_step_factor, cap)
        record.duration_price = self.scaling.next_price(price)
        self._store.save()
        if self._progress is not None:
            self._progress.set_value(BOOST_TIME_KEY, record.duration_sec)
        return PurchaseResult(True, price=price)

    def _record(self) -> EffectRecord | None:
        state = self._store.state
        if state is None:
            return None
        return state.ensure_effect(self.config.effect_name)
