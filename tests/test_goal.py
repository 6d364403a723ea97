"""Tests for goal records and catalog parsing."""
import json

from idleprogress.goal import GoalKind, MissionGoal, Tier, dump_goals, load_goals


def test_key_trimmed_and_id_defaulted():
    goal = MissionGoal("  gold ", GoalKind.REACH_VALUE, 500, tier=Tier.NORMAL)
    assert goal.key == "gold"
    assert goal.id == "gold:normal:500"


def test_settle_completes_at_target():
    goal = MissionGoal("gold", GoalKind.REACH_VALUE, 10)
    goal.current_value = 9.0
    assert goal.settle(0.0, False)
    assert not goal.is_completed

    goal.current_value = 10.0
    assert goal.settle(9.0, False)
    assert goal.is_completed
    assert goal.claimable


def test_settle_never_uncompletes():
    goal = MissionGoal("gold", GoalKind.REACH_VALUE, 10, is_completed=True, current_value=12)
    goal.current_value = 3.0
    goal.settle(12.0, True)
    assert goal.is_completed


def test_settle_reports_no_change_for_identical_value():
    goal = MissionGoal("gold", GoalKind.REACH_VALUE, 10, current_value=4.0)
    assert not goal.settle(4.0, False)


def test_dict_uses_catalog_field_names():
    goal = MissionGoal(
        "distance_km", GoalKind.REACH_VALUE, 5,
        tier=Tier.HARD, category="travel", reward_amount=300,
        id="d5", title="Far", description="Go far",
    )
    data = goal.to_dict()
    assert data["goalKey"] == "distance_km"
    assert data["goalType"] == "reach_value"
    assert data["goalTarget"] == 5
    assert data["rewardGold"] == 300
    assert data["tier"] == "hard"
    assert data["desc"] == "Go far"
    assert MissionGoal.from_dict(data) == goal


def test_load_goals_accepts_wrapper_list_and_text():
    raw = [{"id": "g1", "goalKey": "gold", "goalType": "count", "goalTarget": 3}]
    assert [g.id for g in load_goals(raw)] == ["g1"]
    assert [g.id for g in load_goals({"missions": raw})] == ["g1"]
    assert [g.id for g in load_goals(json.dumps(raw))] == ["g1"]


def test_load_goals_degrades_on_bad_input(caplog):
    assert load_goals("") == []
    assert load_goals("[broken") == []
    assert load_goals({"other": []}) == []
    assert "not valid JSON" in caplog.text


def test_load_goals_skips_malformed_entries():
    raw = [
        {"goalKey": "gold", "goalType": "not_a_kind", "goalTarget": 1},
        {"goalType": "count"},
        {"goalKey": "gold", "goalType": "count", "goalTarget": 2},
    ]
    goals = load_goals(raw)
    assert len(goals) == 1
    assert goals[0].kind is GoalKind.COUNT


def test_dump_goals_wraps():
    goals = [MissionGoal("gold", GoalKind.COUNT, 1, id="a")]
    data = dump_goals(goals)
    assert list(data) == ["missions"]
    assert load_goals(data)[0].id == "a"
