import json

import pytest

from models import (
    GameResource, Building, BuildingType, PlanetColony, UserProgress, Mission,
    MissionStatus, Achievement, AchievementStatus, DifficultyLevel, ChallengeType,
    RESOURCE_NAMES, progress_to_json, progress_from_json,
)


# ── GameResource ──

@pytest.mark.parametrize("amount,value,expected", [
    (100, 50, 150),
    (950, 100, 1000),
    (1000, 1, 1000),
    (0, 0, 0),
])
def test_resource_add_saturates(amount, value, expected):
    res = GameResource("Energy", amount, 1000)
    assert res.add(value) == expected
    assert res.amount == min(amount + value, 1000)
    assert res.amount <= res.max_capacity


def test_resource_subtract_rejects_overdraw():
    res = GameResource("Food", 40, 800)
    assert res.subtract(41) is False
    assert res.amount == 40
    assert res.subtract(40) is True
    assert res.amount == 0


def test_resource_percentage_and_capacity():
    res = GameResource("Research", 100, 400)
    assert res.percentage == pytest.approx(0.25)
    assert not res.is_at_capacity
    res.add(1000)
    assert res.is_at_capacity


# ── Buildings ──

def test_building_costs_follow_level():
    b = Building("energy", "Solar Array", BuildingType.ENERGY)
    assert b.construction_cost == 200
    assert b.upgrade_cost == 0
    b.construct()
    assert b.is_built and b.level == 1
    assert b.construction_cost == 500
    assert b.upgrade_cost == 100
    b.upgrade()
    assert b.level == 2
    assert b.production_rate == 15


def test_unbuilt_building_reports_no_production():
    b = Building("food", "Hydroponic Farm", BuildingType.FOOD)
    assert b.production_text == "Not producing"
    assert b.to_dict(credits=1000)["can_afford_upgrade"] is False


# ── Colony ──

def test_default_colony_layout():
    colony = PlanetColony()
    assert tuple(r.name for r in colony.resources) == RESOURCE_NAMES
    assert [b.type for b in colony.buildings] == list(BuildingType)
    admin = colony.get_building("administrative")
    assert admin.is_built and admin.level == 1
    assert all(not b.is_built and b.level == 0
               for b in colony.buildings if b is not admin)


def test_colony_happiness_is_mean_fill():
    colony = PlanetColony()
    expected = (100 / 1000 + 50 / 800 + 30 / 600 + 0 / 400) / 4
    assert colony.happiness == pytest.approx(expected)

    colony.add_to_all_resources(10_000)
    assert colony.happiness == pytest.approx(1.0)


def test_colony_unknown_resource_raises():
    with pytest.raises(KeyError):
        PlanetColony().resource("Water")


# ── UserProgress ──

def test_fresh_progress_defaults():
    p = UserProgress()
    assert p.credits == 100
    assert p.level == 1
    assert p.experience == 0
    assert p.current_difficulty == DifficultyLevel.BEGINNER


def test_level_up_uses_pre_increment_threshold():
    p = UserProgress(experience=90)
    assert p.add_experience(50) == [2]
    assert p.level == 2
    assert p.experience == 40


def test_level_up_rolls_over_multiple_levels():
    p = UserProgress()
    # 100 (1->2) + 200 (2->3) + 300 (3->4) = 600, 50 left over
    assert p.add_experience(650) == [2, 3, 4]
    assert p.level == 4
    assert p.experience == 50


def test_spend_credits_rejects_instead_of_clamping():
    p = UserProgress(credits=150)
    assert p.spend_credits(200) is False
    assert p.credits == 150
    assert p.spend_credits(150) is True
    assert p.credits == 0


def test_add_credits_refuses_negative():
    with pytest.raises(ValueError):
        UserProgress().add_credits(-5)


# ── Lifecycle tags ──

def _mission(**kw):
    defaults = dict(id="m1", title="T", description="D",
                    difficulty=DifficultyLevel.INTERMEDIATE, rewards=100,
                    educational_content="", challenge_type=ChallengeType.SAVING)
    defaults.update(kw)
    return Mission(**defaults)


def test_mission_completion_is_one_way():
    m = _mission()
    assert m.mark_completed() is True
    assert m.mark_completed() is False
    assert m.refresh_lock(False) is False
    assert m.status == MissionStatus.COMPLETED


def test_mission_lock_refresh():
    m = _mission(prerequisites=["m0"])
    assert m.refresh_lock(False) is True
    assert m.is_locked and not m.is_available
    assert m.refresh_lock(True) is True
    assert m.is_available


def test_mission_adjusted_rewards():
    assert _mission(rewards=250).adjusted_rewards == 375
    assert _mission(difficulty=DifficultyLevel.EXPERT, rewards=101).adjusted_rewards == 252


def test_achievement_unlocks_once():
    a = Achievement("x", "X", "desc")
    assert a.unlock("2026-01-01T00:00:00") is True
    assert a.unlock("2027-01-01T00:00:00") is False
    assert a.status == AchievementStatus.UNLOCKED
    assert a.unlocked_date == "2026-01-01T00:00:00"


def test_difficulty_parse_accepts_names_and_values():
    assert DifficultyLevel.parse("Admiral") is DifficultyLevel.EXPERT
    assert DifficultyLevel.parse("intermediate") is DifficultyLevel.INTERMEDIATE
    assert DifficultyLevel.parse(DifficultyLevel.ADVANCED) is DifficultyLevel.ADVANCED
    with pytest.raises(ValueError):
        DifficultyLevel.parse("Captain")


# ── Serialization ──

def test_progress_json_uses_sorted_lists():
    p = UserProgress(credits=420, completed_missions={"b", "a"},
                     current_difficulty=DifficultyLevel.ADVANCED)
    data = json.loads(progress_to_json(p))
    assert data["completed_missions"] == ["a", "b"]
    assert data["current_difficulty"] == "Commander"
    assert data["credits"] == 420


def test_progress_from_json_fills_missing_fields():
    p = progress_from_json('{"credits": 900, "current_difficulty": "Nonsense"}')
    assert p.credits == 900
    assert p.level == 1
    assert p.completed_missions == set()
    assert p.current_difficulty == DifficultyLevel.BEGINNER


def test_progress_from_json_rejects_non_object():
    with pytest.raises(ValueError):
        progress_from_json("[1, 2, 3]")
