"""Tests for MCP server tool functions."""
import pytest

from idleprogress.catalog import DropCandidate
from idleprogress.definition import GameConfig, GameDefinition
from idleprogress.goal import GoalKind, MissionGoal

from idleprogress.mcp.server import (
    _GameHolder,
    _new_holder,
    _tool_activate_boost,
    _tool_buy_boost,
    _tool_claim_reward,
    _tool_get_goals,
    _tool_get_status,
    _tool_new_game,
    _tool_restart,
    _tool_upgrade_boost_duration,
    _tool_upgrade_boost_multiplier,
    _tool_wait,
)


def _make_test_definition() -> GameDefinition:
    """A small but complete game definition for testing."""
    return GameDefinition(
        config=GameConfig(name="Test Game"),
        drop_candidates=[DropCandidate(0), DropCandidate(1, unlock_threshold=0.1)],
        goals=[
            MissionGoal("resource_collect_total", GoalKind.ACCUMULATE, 3,
                        id="collect_3", reward_amount=6000),
            MissionGoal("boost_unlock", GoalKind.UNLOCK, 1, id="unlock",
                        reward_amount=100),
        ],
    )


def _make_holder() -> _GameHolder:
    return _new_holder(_make_test_definition())


def _rich_holder() -> _GameHolder:
    holder = _make_holder()
    holder.runtime.state.gold = 50_000
    return holder


def test_get_status_fresh():
    holder = _make_holder()
    status = _tool_get_status(holder)
    assert status["gold"] == 0
    assert status["speed"] == 0.01
    assert status["boost"]["unlocked"] is False
    assert status["boost"]["unlock_price"] == 5000
    assert status["resources"]["total"] == 0
    assert status["resources"]["storage_max"] == 100


def test_get_goals():
    holder = _make_holder()
    result = _tool_get_goals(holder)
    assert [g["id"] for g in result["goals"]] == ["collect_3", "unlock"]
    assert result["goals"][0]["tier_unlocked"] is True
    assert result["claimable"] == []


def test_wait_validation():
    holder = _make_holder()
    assert "error" in _tool_wait(holder, 0)
    assert "error" in _tool_wait(holder, -5)
    assert "error" in _tool_wait(holder, 100_000)


def test_wait_advances_and_reports_new_goals():
    holder = _make_holder()
    result = _tool_wait(holder, 10)
    assert result["waited"] == 10
    assert result["resources_gained"] == 5
    assert result["distance_km"] == pytest.approx(0.1)
    assert result["newly_completed_goals"] == ["collect_3"]

    again = _tool_wait(holder, 1)
    assert "newly_completed_goals" not in again


def test_claim_reward():
    holder = _make_holder()
    _tool_wait(holder, 10)
    result = _tool_claim_reward(holder, "collect_3")
    assert result == {"success": True, "goal_id": "collect_3", "reward": 6000, "gold": 6000}

    again = _tool_claim_reward(holder, "collect_3")
    assert again == {"success": False, "reason": "ALREADY_CLAIMED"}
    assert _tool_claim_reward(holder, "missing")["reason"] == "UNKNOWN_GOAL"


def test_boost_requires_unlock():
    holder = _make_holder()
    result = _tool_activate_boost(holder)
    assert result == {"success": False, "reason": "NOT_UNLOCKED"}
    assert _tool_buy_boost(holder) == {
        "success": False, "reason": "INSUFFICIENT_GOLD", "price": 5000,
    }


def test_buy_and_activate_boost():
    holder = _rich_holder()
    assert _tool_buy_boost(holder) == {"success": True, "price": 5000}
    assert _tool_get_goals(holder)["claimable"] == ["unlock"]

    result = _tool_activate_boost(holder)
    assert result["success"]
    assert result["speed"] == pytest.approx(0.0125)
    assert result["active_seconds"] == pytest.approx(1.0)

    status = _tool_get_status(holder)
    assert status["boost"]["active"] is True
    assert _tool_activate_boost(holder)["reason"] == "ALREADY_ACTIVE"

    _tool_wait(holder, 1)
    status = _tool_get_status(holder)
    assert status["boost"]["active"] is False
    assert status["boost"]["on_cooldown"] is True
    assert status["speed"] == pytest.approx(0.01)


def test_upgrades():
    holder = _rich_holder()
    assert _tool_upgrade_boost_multiplier(holder)["reason"] == "LOCKED"
    _tool_buy_boost(holder)

    assert _tool_upgrade_boost_multiplier(holder) == {"success": True, "price": 1000}
    assert _tool_upgrade_boost_duration(holder) == {"success": True, "price": 500}
    boost = _tool_get_status(holder)["boost"]
    assert boost["multiplier_percent"] == 50
    assert boost["duration_sec"] == pytest.approx(1.25)
    assert boost["multiplier_price"] == 2000
    assert boost["duration_price"] == 1000


def test_restart_resumes_active_boost():
    holder = _rich_holder()
    _tool_buy_boost(holder)
    holder.runtime.state.effect("boost").duration_sec = 10
    _tool_activate_boost(holder)
    old_runtime = holder.runtime

    result = _tool_restart(holder)
    assert result["success"]
    assert holder.runtime is not old_runtime
    assert result["boost_active"] is True
    assert result["speed"] == pytest.approx(0.0125)
    assert holder.runtime.state.gold == 45_000


def test_new_game_resets():
    holder = _rich_holder()
    _tool_buy_boost(holder)
    _tool_wait(holder, 10)
    old_runtime = holder.runtime

    result = _tool_new_game(holder)
    assert result["success"]
    assert holder.runtime is not old_runtime
    status = _tool_get_status(holder)
    assert status["gold"] == 0
    assert status["boost"]["unlocked"] is False
    assert status["resources"]["total"] == 0

    # Goals completed before the reset are reported again
    assert _tool_wait(holder, 10)["newly_completed_goals"] == ["collect_3"]


def test_create_server():
    from idleprogress.mcp.server import create_server

    server = create_server(_make_test_definition())
    assert server is not None
