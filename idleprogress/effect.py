"""Timed multiplier over a shared value, anchored to wall-clock epoch time.

The engine never owns the value it boosts. It records the baseline at
activation and, when the active window ends, restores that baseline only
if the value still equals what the engine itself wrote. Anything else
means another actor changed it in the meantime, and that change wins.

All timing lives in ``EffectRecord`` as absolute epoch milliseconds, so a
restart can tell exactly where the effect stands without any in-memory
counters.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable

from idleprogress._types import Clock, approx_equal, clamp, seconds_to_ms, system_clock
from idleprogress.definition import BoostConfig
from idleprogress.subsystem import Subsystem

if TYPE_CHECKING:
    from idleprogress.scheduler import DeadlineScheduler
    from idleprogress.state import EffectRecord
    from idleprogress.store import SaveStore

logger = logging.getLogger(__name__)


class ActivationRefusal(Enum):
    NOT_READY = auto()
    NOT_UNLOCKED = auto()
    ON_COOLDOWN = auto()
    ALREADY_ACTIVE = auto()


@dataclass(frozen=True)
class ActivationResult:
    """Outcome of an activation attempt."""

    success: bool
    reason: ActivationRefusal | None = None
    boosted_value: float = 0.0
    active_until_ms: int = 0


class TimedEffectEngine(Subsystem):
    """Idle -> Active -> Cooldown -> Idle for one named effect slot."""

    def __init__(
        self,
        store: SaveStore,
        scheduler: DeadlineScheduler,
        read_value: Callable[[], float],
        write_value: Callable[[float], None],
        config: BoostConfig | None = None,
        clock: Clock = system_clock,
        on_activated: Callable[[], None] | None = None,
    ) -> None:
        self.config = config or BoostConfig()
        self.name = self.config.effect_name
        self._store = store
        self._scheduler = scheduler
        self._read = read_value
        self._write = write_value
        self._clock = clock
        self._on_activated = on_activated

        # Values for the window in flight; mirrored in the record for restarts
        self._base = 0.0
        self._boosted = 0.0

    @property
    def expiry_key(self) -> str:
        return f"{self.name}:expire"

    # ── Actions ──────────────────────────────────────────────────────

    def try_activate(self) -> ActivationResult:
        record = self._record(create=True)
        if record is None:
            return ActivationResult(False, ActivationRefusal.NOT_READY)
        if not record.unlocked:
            return ActivationResult(False, ActivationRefusal.NOT_UNLOCKED)

        now = self._clock()
        self._expire_if_due(record, now)
        if now < record.cooldown_until_ms:
            logger.debug("[%s] refused: cooldown", self.name)
            return ActivationResult(False, ActivationRefusal.ON_COOLDOWN)
        if now < record.active_until_ms:
            return ActivationResult(False, ActivationRefusal.ALREADY_ACTIVE)

        duration = clamp(
            record.duration_sec, self.config.min_duration_sec, self.config.max_duration_sec
        )
        base = self._read()
        boosted = self._boost(base, record.multiplier_percent)

        record.active_until_ms = now + seconds_to_ms(duration)
        record.base_value = base
        record.cooldown_until_ms = 0
        self._write(boosted)
        self._store.save()

        self._arm(base, boosted, record.active_until_ms)
        logger.debug("[%s] on for %.2fs: %s -> %s", self.name, duration, base, boosted)

        if self._on_activated is not None:
            self._on_activated()
        return ActivationResult(
            True, boosted_value=boosted, active_until_ms=record.active_until_ms
        )

    def restore(self) -> None:
        """Bring the effect back in line with wall-clock time after a (re)start."""
        record = self._record()
        if record is None:
            return

        now = self._clock()
        if now < record.active_until_ms:
            # The live value may have been reset to a default, so rebuild
            # from the persisted baseline, never from what is live now.
            base = record.base_value if record.base_value > 0 else self._read()
            boosted = self._boost(base, record.multiplier_percent)
            self._write(boosted)
            self._arm(base, boosted, record.active_until_ms)
            logger.debug(
                "[%s] resumed, %.2fs left", self.name, (record.active_until_ms - now) / 1000
            )
            return

        changed = False
        if record.active_until_ms != 0:
            record.active_until_ms = 0
            changed = True
        if record.base_value > 0:
            # Expired while not running; the restore never happened
            self._write(record.base_value)
            record.base_value = 0.0
            changed = True
        if changed:
            self._store.save()
            logger.debug("[%s] expired while stopped, restored baseline", self.name)

    def cancel(self) -> None:
        """Forget the pending expiry without running it.

        Persisted state is left as-is, so the next ``restore`` picks the
        window back up.
        """
        self._scheduler.cancel(self.expiry_key)

    def tick(self, now_ms: int, delta: float) -> None:
        record = self._record()
        if record is None:
            return
        if record.cooldown_until_ms and now_ms >= record.cooldown_until_ms:
            record.cooldown_until_ms = 0
            self._store.save()
            logger.debug("[%s] cooldown over", self.name)

    # ── Queries ──────────────────────────────────────────────────────

    def is_active(self) -> bool:
        record = self._record()
        return record is not None and self._clock() < record.active_until_ms

    def is_on_cooldown(self) -> bool:
        record = self._record()
        if record is None:
            return False
        now = self._clock()
        self._expire_if_due(record, now)
        return now < record.cooldown_until_ms

    def is_unlocked(self) -> bool:
        record = self._record()
        return record is not None and record.unlocked

    def remaining_active_seconds(self) -> float:
        record = self._record()
        if record is None:
            return 0.0
        return max(0.0, (record.active_until_ms - self._clock()) / 1000)

    def remaining_cooldown_seconds(self) -> float:
        record = self._record()
        if record is None:
            return 0.0
        now = self._clock()
        self._expire_if_due(record, now)
        return max(0.0, (record.cooldown_until_ms - now) / 1000)

    # ── Private helpers ──────────────────────────────────────────────

    def _record(self, create: bool = False) -> EffectRecord | None:
        state = self._store.state
        if state is None:
            return None
        if create:
            return state.ensure_effect(self.name)
        return state.effect(self.name)

    @staticmethod
    def _boost(base: float, percent: float) -> float:
        return base * (1.0 + percent / 100.0)

    def _arm(self, base: float, boosted: float, deadline_ms: int) -> None:
        self._base = base
        self._boosted = boosted
        self._scheduler.schedule(self.expiry_key, deadline_ms, self._expire)

    def _expire_if_due(self, record: EffectRecord, now_ms: int) -> None:
        # The window can end between ticks; settle it before anyone reads it
        if record.active_until_ms != 0 and now_ms >= record.active_until_ms:
            if self._scheduler.cancel(self.expiry_key):
                self._expire(now_ms)

    def _expire(self, now_ms: int) -> None:
        record = self._record()
        if record is None:
            return

        current = self._read()
        if approx_equal(current, self._boosted, self.config.value_tolerance):
            self._write(self._base)
        else:
            logger.debug(
                "[%s] value changed externally (%s), leaving it", self.name, current
            )

        record.cooldown_until_ms = now_ms + seconds_to_ms(record.cooldown_sec)
        record.clear_active()
        self._store.save()
        logger.debug("[%s] off, cooldown %.1fs", self.name, record.cooldown_sec)
