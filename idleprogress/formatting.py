from __future__ import annotations

from typing import TYPE_CHECKING

from idleprogress.goal import Tier

if TYPE_CHECKING:
    from idleprogress.runtime import ProgressRuntime


def format_status(runtime: ProgressRuntime) -> str:
    """Format the runtime's current state for console output."""
    state = runtime.state
    name = runtime.definition.config.name
    lines: list[str] = []

    lines.append("=" * 30 + f" {name} " + "=" * 30)
    if state is None:
        lines.append("Save state not loaded")
        return "\n".join(lines)

    lines.append(f"Gold: {state.gold:,}")
    lines.append(f"Speed: {state.speed:.4f} km/s")
    lines.append(f"Distance: {state.distance_km:.3f} km")
    lines.append(f"Play time: {state.play_time_sec:.1f}s")
    lines.append("")

    # Boost
    boost = runtime.boost
    lines.append("BOOST:")
    if not boost.is_unlocked():
        lines.append("  locked")
    elif boost.is_active():
        lines.append(f"  active, {boost.remaining_active_seconds():.1f}s left")
    elif boost.is_on_cooldown():
        lines.append(f"  cooling down, {boost.remaining_cooldown_seconds():.1f}s left")
    else:
        lines.append("  ready")
    record = state.effect(boost.name)
    if record is not None:
        lines.append(
            f"  +{record.multiplier_percent:g}% for {record.duration_sec:.2f}s, "
            f"cooldown {record.cooldown_sec:g}s"
        )
    lines.append("")

    # Resources
    total = state.total_resources()
    cap = "unlimited" if state.storage_max <= 0 else f"{state.storage_max}"
    lines.append(f"RESOURCES: {total} / {cap}")
    for i, count in enumerate(state.resources):
        if count:
            lines.append(f"  #{i:<3d} {count}")
    lines.append("")

    # Goals
    lines.append("GOALS:")
    progress = runtime.progress
    for tier in Tier:
        goals = progress.goals_for_tier(tier)
        if not goals:
            continue
        lock = "" if progress.is_tier_unlocked(tier) else " (locked)"
        lines.append(f"  {tier.value.upper()}{lock}")
        for g in goals:
            if g.reward_claimed:
                marker = "[x]"
            elif g.is_completed:
                marker = "[!]"
            else:
                marker = "[ ]"
            lines.append(
                f"    {marker} {g.id:.<36s} {g.current_value:g}/{g.target_value:g}"
                f" ({g.reward_amount} gold)"
            )

    return "\n".join(lines)
