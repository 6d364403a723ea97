"""Tests for state module."""
from idleprogress._types import GOLD_MAX
from idleprogress.state import (
    DEFAULT_COOLDOWN_SEC,
    DEFAULT_DURATION_PRICE,
    DEFAULT_MULTIPLIER_PRICE,
    RESOURCE_SLOTS,
    EffectRecord,
    SaveState,
)


def _make_state() -> SaveState:
    state = SaveState()
    state.gold = 1234
    state.speed = 0.5
    state.distance_km = 12.5
    state.play_time_sec = 90.0
    state.income_per_second = 2.0
    state.storage_max = 300
    state.resources[0] = 7
    state.resources[29] = 3
    rec = state.ensure_effect("boost")
    rec.unlocked = True
    rec.multiplier_percent = 75
    rec.active_until_ms = 5000
    rec.base_value = 0.4
    return state


def test_fresh_defaults():
    state = SaveState()
    assert state.gold == 0
    assert state.speed == 0.01
    assert state.income_per_second == 0.5
    assert state.storage_max == 100
    assert len(state.resources) == RESOURCE_SLOTS
    assert state.effects == {}

    rec = EffectRecord()
    assert rec.multiplier_percent == 25
    assert rec.duration_sec == 1
    assert rec.cooldown_sec == 60
    assert rec.multiplier_price == 1000
    assert rec.duration_price == 500
    assert not rec.unlocked


def test_gold_saturates_and_floors():
    state = SaveState()
    state.add_gold(GOLD_MAX - 5)
    state.add_gold(100)
    assert state.gold == GOLD_MAX
    state.add_gold(-2 * GOLD_MAX)
    assert state.gold == 0


def test_spend_gold():
    state = SaveState()
    state.gold = 100
    assert not state.spend_gold(101)
    assert state.gold == 100
    assert state.spend_gold(40)
    assert state.gold == 60
    assert not state.spend_gold(-1)


def test_resources_range_checked():
    state = SaveState()
    assert state.add_resource(3, 5)
    assert state.get_resource(3) == 5
    assert not state.add_resource(30, 1)
    assert not state.add_resource(-1, 1)
    assert state.get_resource(99) == 0
    state.add_resource(3, -10)
    assert state.get_resource(3) == 0


def test_storage_full():
    state = SaveState()
    state.storage_max = 5
    state.add_resource(0, 4)
    assert not state.is_storage_full()
    state.add_resource(1, 1)
    assert state.is_storage_full()

    state.storage_max = 0
    assert not state.is_storage_full()


def test_ensure_effect_is_lazy():
    state = SaveState()
    assert state.effect("boost") is None
    rec = state.ensure_effect("boost")
    assert state.ensure_effect("boost") is rec


def test_clear_active():
    rec = EffectRecord(active_until_ms=10, base_value=3.0, cooldown_until_ms=99)
    rec.clear_active()
    assert rec.active_until_ms == 0
    assert rec.base_value == 0.0
    assert rec.cooldown_until_ms == 99


def test_dict_round_trip_keeps_timers():
    state = _make_state()
    loaded = SaveState.from_dict(state.to_dict())

    assert loaded.gold == 1234
    assert loaded.distance_km == 12.5
    assert loaded.storage_max == 300
    assert loaded.resources[0] == 7
    assert loaded.resources[29] == 3
    rec = loaded.effect("boost")
    assert rec.unlocked
    assert rec.multiplier_percent == 75
    assert rec.active_until_ms == 5000
    assert rec.base_value == 0.4


def test_from_dict_ignores_unknown_and_fills_missing():
    data = {
        "player": {"gold": 5, "nickname": "x"},
        "effects": {"boost": {"unlocked": True, "legacy_field": 1}},
    }
    state = SaveState.from_dict(data)
    assert state.gold == 5
    assert state.speed == 0.01
    assert state.effect("boost").unlocked
    assert len(state.resources) == RESOURCE_SLOTS


def test_fixup_repairs_bad_values():
    state = SaveState()
    rec = state.ensure_effect("boost")
    rec.cooldown_sec = 0
    rec.duration_sec = 120
    rec.multiplier_price = -1
    rec.duration_price = 0
    state.resources = [1, 2, 3]

    state.fixup()
    assert rec.cooldown_sec == DEFAULT_COOLDOWN_SEC
    assert rec.duration_sec == 45
    assert rec.multiplier_price == DEFAULT_MULTIPLIER_PRICE
    assert rec.duration_price == DEFAULT_DURATION_PRICE
    assert len(state.resources) == RESOURCE_SLOTS
    assert state.resources[:4] == [1, 2, 3, 0]


def test_fixup_truncates_long_resource_array():
    state = SaveState()
    state.resources = list(range(40))
    state.fixup()
    assert state.resources == list(range(30))
