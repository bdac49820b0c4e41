import pytest

from achievements import evaluate_achievements, unlock_achievement, ACHIEVEMENT_RULES
from catalog import load_achievements
from economy import settle_mission


def _ids(unlocks):
    return [u["achievement"] for u in unlocks]


def test_rule_table_covers_catalog():
    assert [r.achievement_id for r in ACHIEVEMENT_RULES] == \
        [a.id for a in load_achievements()]


def test_nothing_unlocks_on_fresh_state(state):
    assert evaluate_achievements(state) == []


def test_first_mission_pays_once_across_two_settlements(state):
    settle_mission(state, state.get_mission("basic_budget"), 1.0)
    assert state.progress.credits == 400

    result = settle_mission(state, state.get_mission("stock_basics"), 1.0)

    # 240 settlement + 74 investing boost, no second achievement bonus
    assert state.progress.credits == 400 + 240 + 74
    assert result["achievements"] == []
    assert state.progress.unlocked_achievements == {"first_mission"}
    assert state.get_achievement("first_mission").is_unlocked


def test_budget_master_grants_energy(state):
    state.progress.completed_missions.update({"basic_budget", "zero_based_budget"})
    energy = state.colony.resource("Energy").amount
    unlocks = evaluate_achievements(state)
    assert "budget_master" in _ids(unlocks)
    assert state.colony.resource("Energy").amount == energy + 100


def test_investment_guru_grants_credits(state):
    state.progress.completed_missions.update({"stock_basics", "compound_growth"})
    state.progress.unlocked_achievements.add("first_mission")
    evaluate_achievements(state)
    assert state.progress.credits == 600


def test_risk_expert_boosts_every_resource(state):
    state.progress.completed_missions.update({"insurance_basics", "basic_budget"})
    before = {r.name: r.amount for r in state.colony.resources}
    unlocks = evaluate_achievements(state)
    assert _ids(unlocks) == ["risk_expert"]
    for res in state.colony.resources:
        assert res.amount == before[res.name] + 50


def test_wealth_unlock_can_chain_into_colony_growth(state):
    state.progress.credits = 5000
    state.colony.population = 450
    unlocks = evaluate_achievements(state)
    assert _ids(unlocks) == ["wealth_builder", "colony_growth"]
    assert state.colony.population == 500


def test_happy_colony_grants_credits(state):
    state.colony.add_to_all_resources(10_000)
    unlocks = evaluate_achievements(state)
    assert _ids(unlocks) == ["happy_colony"]
    assert state.progress.credits == 400


@pytest.mark.parametrize("level,expected", [
    (4, []),
    (5, ["experienced_commander"]),
    (10, ["experienced_commander", "veteran_commander"]),
])
def test_level_badges(state, level, expected):
    state.progress.level = level
    assert _ids(evaluate_achievements(state)) == expected


def test_sweep_is_idempotent(state):
    state.progress.credits = 5000
    state.progress.level = 10
    first = evaluate_achievements(state)
    snapshot = (state.progress.credits, state.colony.population,
                set(state.progress.unlocked_achievements))

    assert evaluate_achievements(state) == []
    assert (state.progress.credits, state.colony.population,
            set(state.progress.unlocked_achievements)) == snapshot
    assert len(first) == 3


def test_unlock_records_date_once(state):
    assert unlock_achievement(state, "colony_growth", when="2026-10-19T10:00:00")
    assert not unlock_achievement(state, "colony_growth", when="2026-10-20T10:00:00")
    assert state.get_achievement("colony_growth").unlocked_date == "2026-10-19T10:00:00"
