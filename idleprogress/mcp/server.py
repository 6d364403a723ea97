"""MCP server wrapping ProgressRuntime for interactive AI playtesting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mcp.server.fastmcp import FastMCP

from idleprogress.clock import ManualClock
from idleprogress.definition import GameDefinition
from idleprogress.goal import MissionGoal
from idleprogress.runtime import ProgressRuntime
from idleprogress.store import MemorySaveStore, SaveStore
from idleprogress.upgrade import PurchaseResult

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400
# Seconds per tick while waiting
_WAIT_STEP = 1.0


@dataclass
class _GameHolder:
    """Holds the active definition, runtime and the store it persists to."""

    definition: GameDefinition
    runtime: ProgressRuntime
    store: SaveStore
    clock: ManualClock
    _completed_seen: set[str] = field(default_factory=set)


def _new_holder(definition: GameDefinition) -> _GameHolder:
    store = MemorySaveStore()
    clock = ManualClock()
    runtime = ProgressRuntime(definition, store=store, clock=clock)
    runtime.start()
    return _GameHolder(definition=definition, runtime=runtime, store=store, clock=clock)


def _goal_entry(goal: MissionGoal) -> dict[str, Any]:
    return {
        "id": goal.id,
        "key": goal.key,
        "kind": goal.kind.value,
        "tier": goal.tier.value,
        "title": goal.title,
        "current": round(goal.current_value, 4),
        "target": goal.target_value,
        "completed": goal.is_completed,
        "claimed": goal.reward_claimed,
        "reward": goal.reward_amount,
    }


def _purchase_entry(result: PurchaseResult) -> dict[str, Any]:
    if result.success:
        return {"success": True, "price": result.price}
    entry: dict[str, Any] = {"success": False, "reason": result.reason.name}
    if result.price:
        entry["price"] = result.price
    return entry


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_status(holder: _GameHolder) -> dict[str, Any]:
    runtime = holder.runtime
    state = runtime.state
    if state is None:
        return {"error": "Save state not loaded"}

    boost = runtime.boost
    record = state.effect(boost.name)
    boost_info: dict[str, Any] = {
        "unlocked": boost.is_unlocked(),
        "active": boost.is_active(),
        "active_seconds_left": round(boost.remaining_active_seconds(), 2),
        "on_cooldown": boost.is_on_cooldown(),
        "cooldown_seconds_left": round(boost.remaining_cooldown_seconds(), 2),
    }
    if record is not None:
        boost_info.update(
            multiplier_percent=record.multiplier_percent,
            duration_sec=round(record.duration_sec, 4),
            multiplier_price=record.multiplier_price,
            duration_price=record.duration_price,
        )
    else:
        boost_info["unlock_price"] = runtime.shop.config.unlock_price

    return {
        "gold": state.gold,
        "speed": round(state.speed, 6),
        "distance_km": round(state.distance_km, 4),
        "play_time_sec": round(state.play_time_sec, 2),
        "income_per_second": state.income_per_second,
        "boost": boost_info,
        "resources": {
            "total": state.total_resources(),
            "storage_max": state.storage_max,
            "full": state.is_storage_full(),
            "by_id": {str(i): n for i, n in enumerate(state.resources) if n},
        },
    }


def _tool_get_goals(holder: _GameHolder) -> dict[str, Any]:
    progress = holder.runtime.progress
    return {
        "goals": [
            dict(_goal_entry(g), tier_unlocked=progress.is_tier_unlocked(g.tier))
            for g in progress.goals
        ],
        "claimable": [g.id for g in progress.claimable()],
    }


def _tool_activate_boost(holder: _GameHolder) -> dict[str, Any]:
    result = holder.runtime.activate_boost()
    if not result.success:
        return {"success": False, "reason": result.reason.name}
    return {
        "success": True,
        "speed": round(result.boosted_value, 6),
        "active_seconds": round(holder.runtime.boost.remaining_active_seconds(), 2),
    }


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    state = holder.runtime.state
    if state is None:
        return {"error": "Save state not loaded"}
    resources_before = state.total_resources()

    holder.runtime.advance(seconds, step=_WAIT_STEP)

    completed = {g.id for g in holder.runtime.progress.goals if g.is_completed}
    new_completed = sorted(completed - holder._completed_seen)
    holder._completed_seen.update(new_completed)

    result: dict[str, Any] = {
        "waited": seconds,
        "gold": state.gold,
        "distance_km": round(state.distance_km, 4),
        "resources_gained": state.total_resources() - resources_before,
        "boost_active": holder.runtime.boost.is_active(),
    }
    if new_completed:
        result["newly_completed_goals"] = new_completed
    return result


def _tool_claim_reward(holder: _GameHolder, goal_id: str) -> dict[str, Any]:
    result = holder.runtime.claim_reward(goal_id)
    if not result.success:
        return {"success": False, "reason": result.reason.name}
    return {
        "success": True,
        "goal_id": result.goal_id,
        "reward": result.reward_amount,
        "gold": holder.runtime.state.gold,
    }


def _tool_buy_boost(holder: _GameHolder) -> dict[str, Any]:
    return _purchase_entry(holder.runtime.shop.buy_unlock())


def _tool_upgrade_boost_multiplier(holder: _GameHolder) -> dict[str, Any]:
    return _purchase_entry(holder.runtime.shop.upgrade_multiplier())


def _tool_upgrade_boost_duration(holder: _GameHolder) -> dict[str, Any]:
    return _purchase_entry(holder.runtime.shop.upgrade_duration())


def _tool_restart(holder: _GameHolder) -> dict[str, Any]:
    """Shut the runtime down and bring a fresh one up against the same store."""
    holder.runtime.shutdown()
    holder.runtime = ProgressRuntime(
        holder.definition, store=holder.store, clock=holder.clock
    )
    holder.runtime.start()
    return {
        "success": True,
        "boost_active": holder.runtime.boost.is_active(),
        "speed": round(holder.runtime.state.speed, 6),
    }


def _tool_new_game(holder: _GameHolder) -> dict[str, Any]:
    fresh = _new_holder(holder.definition)
    holder.runtime = fresh.runtime
    holder.store = fresh.store
    holder.clock = fresh.clock
    holder._completed_seen = set()
    return {"success": True, "message": "Game reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(definition: GameDefinition) -> FastMCP:
    """Create an MCP server wrapping a ProgressRuntime for the given definition."""
    holder = _new_holder(definition)

    mcp = FastMCP(
        name=f"idleprogress: {definition.config.name}",
    )

    @mcp.tool()
    def get_status() -> dict[str, Any]:
        """Get current state: gold, speed, distance, boost timers and prices, resources."""
        return _tool_get_status(holder)

    @mcp.tool()
    def get_goals() -> dict[str, Any]:
        """List every goal with progress, tier gating and which rewards are claimable."""
        return _tool_get_goals(holder)

    @mcp.tool()
    def activate_boost() -> dict[str, Any]:
        """Activate the speed boost. Returns the boosted speed or why it was refused."""
        return _tool_activate_boost(holder)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance game time by the given seconds (max 86400), in 1s ticks."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def claim_reward(goal_id: str) -> dict[str, Any]:
        """Claim a completed goal's gold reward, by goal id or goal key."""
        return _tool_claim_reward(holder, goal_id)

    @mcp.tool()
    def buy_boost() -> dict[str, Any]:
        """Unlock the speed boost for gold."""
        return _tool_buy_boost(holder)

    @mcp.tool()
    def upgrade_boost_multiplier() -> dict[str, Any]:
        """Raise the boost multiplier by one step."""
        return _tool_upgrade_boost_multiplier(holder)

    @mcp.tool()
    def upgrade_boost_duration() -> dict[str, Any]:
        """Lengthen the boost by one step, up to the cap."""
        return _tool_upgrade_boost_duration(holder)

    @mcp.tool()
    def restart() -> dict[str, Any]:
        """Simulate a process restart: same save, fresh runtime, timers recovered."""
        return _tool_restart(holder)

    @mcp.tool()
    def new_game() -> dict[str, Any]:
        """Reset the game to initial state."""
        return _tool_new_game(holder)

    return mcp
