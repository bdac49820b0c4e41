"""
Galaxy Finance Quest - Reward Economy
Deterministic rules over a GameState: mission settlement, category side
effects, mission availability, construction, upgrades and the production tick.

Every function mutates the state it is given and returns a result dict that
doubles as an audit entry. Locking and persistence are the GameLoop's job;
nothing here touches disk or threads.

Each operation validates before its first write, so a rejection leaves the
state exactly as it was.
"""

import math
import logging

from models import (
    GameState, Mission, Building, DifficultyLevel, ChallengeType, BuildingType,
    BUILDING_OUTPUT,
)
from achievements import evaluate_achievements

logger = logging.getLogger("galaxy.economy")


# ─────────────────────────────────────────────────────
# CONSTANTS
# ─────────────────────────────────────────────────────

EXPERIENCE_AWARDS = {
    DifficultyLevel.BEGINNER: 50,
    DifficultyLevel.INTERMEDIATE: 100,
}
DEFAULT_EXPERIENCE_AWARD = 200     # advanced and expert

CATEGORY_BONUS_RATE = 0.1
ADMINISTRATIVE_BONUS = 2

# Per-category colony effects. "bonus" entries add floor(total * 0.1) on top
# of the listed amount; "flat" entries do not.
CATEGORY_EFFECTS = {
    ChallengeType.BUDGETING: {
        "resources": {"Energy": 30},
        "population": 5,
    },
    ChallengeType.INVESTING: {
        "credits": 50,
        "resources": {"Research": 15},
    },
    ChallengeType.SAVING: {
        "resources": {"Food": 25},
        "population": 10,
    },
    ChallengeType.DEBT_MANAGEMENT: {
        "resources": {"Materials": 35},
        "credits": 25,
    },
    ChallengeType.RISK_MANAGEMENT: {
        "resources": {"Research": 20},
        "all_resources_flat": 5,
    },
    ChallengeType.EMERGENCY_PLANNING: {
        "all_resources": 15,
        "population": 3,
    },
}


# ─────────────────────────────────────────────────────
# REWARD MATH
# ─────────────────────────────────────────────────────

def mission_rewards(mission: Mission, score: float) -> dict:
    """Base, bonus and total credits for settling a mission at a score."""
    base = math.floor(mission.rewards * mission.difficulty.multiplier)
    bonus = math.floor(base * score)
    return {"base": base, "bonus": bonus, "total": base + bonus}


def experience_award(difficulty: DifficultyLevel) -> int:
    return EXPERIENCE_AWARDS.get(difficulty, DEFAULT_EXPERIENCE_AWARD)


def category_bonus(total_reward: int) -> int:
    return math.floor(total_reward * CATEGORY_BONUS_RATE)


# ─────────────────────────────────────────────────────
# MISSION AVAILABILITY
# ─────────────────────────────────────────────────────

def update_mission_availability(state: GameState) -> list:
    """Recompute LOCKED/AVAILABLE from prerequisites. Returns ids whose status changed."""
    done = state.progress.completed_missions
    changed = []
    for mission in state.missions.values():
        met = all(p in done for p in mission.prerequisites)
        if mission.refresh_lock(met):
            changed.append(mission.id)
    return changed


# ─────────────────────────────────────────────────────
# CATEGORY SIDE EFFECTS
# ─────────────────────────────────────────────────────

def apply_category_effects(state: GameState, challenge_type: ChallengeType,
                           total_reward: int) -> dict:
    """Apply the colony boost for a settled mission's category."""
    effect = CATEGORY_EFFECTS[challenge_type]
    bonus = category_bonus(total_reward)
    colony = state.colony
    applied = {"category": challenge_type.value, "bonus": bonus, "changes": []}

    if "credits" in effect:
        amount = bonus + effect["credits"]
        state.progress.add_credits(amount)
        applied["changes"].append({"target": "credits", "amount": amount})

    for name, base in effect.get("resources", {}).items():
        amount = bonus + base
        colony.resource(name).add(amount)
        applied["changes"].append({"target": name, "amount": amount})

    if "all_resources" in effect:
        amount = bonus + effect["all_resources"]
        for res in colony.resources:
            res.add(amount)
        applied["changes"].append({"target": "all_resources", "amount": amount})

    if "all_resources_flat" in effect:
        amount = effect["all_resources_flat"]
        for res in colony.resources:
            res.add(amount)
        applied["changes"].append({"target": "all_resources", "amount": amount})

    if "population" in effect:
        colony.population += effect["population"]
        applied["changes"].append({"target": "population",
                                   "amount": effect["population"]})

    colony.update_happiness()
    return applied


# ─────────────────────────────────────────────────────
# SETTLEMENT
# ─────────────────────────────────────────────────────

def settle_mission(state: GameState, mission: Mission, score: float) -> dict:
    """
    Convert a passing challenge score into credits, experience, colony
    boosts and achievements. A mission that is already completed settles
    as a no-op with "duplicate": True.
    """
    if not 0.0 <= score <= 1.0:
        raise ValueError(f"Score fraction must be within [0, 1], got {score}")

    progress = state.progress
    if mission.id in progress.completed_missions or mission.is_completed:
        logger.warning(f"Mission {mission.id} already completed; settlement skipped")
        return {"action": "settle", "mission": mission.id, "duplicate": True}

    progress.complete_mission(mission.id)

    rewards = mission_rewards(mission, score)
    progress.add_credits(rewards["total"])

    xp = experience_award(mission.difficulty)
    levels = progress.add_experience(xp)

    mission.mark_completed()
    newly_changed = update_mission_availability(state)

    effects = apply_category_effects(state, mission.challenge_type, rewards["total"])
    unlocks = evaluate_achievements(state)

    result = {
        "action": "settle",
        "mission": mission.id,
        "duplicate": False,
        "score": score,
        "base_reward": rewards["base"],
        "bonus_reward": rewards["bonus"],
        "total_reward": rewards["total"],
        "experience": xp,
        "levels_reached": levels,
        "unlocked_missions": [mid for mid in newly_changed
                              if state.missions[mid].is_available],
        "colony_effects": effects,
        "achievements": unlocks,
        "credits": progress.credits,
    }
    logger.info(f"Settled {mission.id}: +{rewards['total']} credits, +{xp} XP"
                + (f", level {levels[-1]}" if levels else ""))
    return result


# ─────────────────────────────────────────────────────
# CONSTRUCTION & UPGRADES
# ─────────────────────────────────────────────────────

def construct_building(state: GameState, building: Building) -> dict:
    """Build an unbuilt building. Cost 200 from level 0, else 500."""
    cost = building.construction_cost
    if building.is_built:
        return {"success": False, "building": building.id,
                "error": f"{building.name} is already built"}
    if not state.progress.spend_credits(cost):
        return {"success": False, "building": building.id,
                "error": f"Insufficient credits: need {cost}, "
                         f"have {state.progress.credits}"}
    building.construct()
    logger.info(f"Constructed {building.name} for {cost} credits")
    return {"success": True, "building": building.id, "cost": cost,
            "level": building.level, "credits": state.progress.credits}


def upgrade_building(state: GameState, building: Building) -> dict:
    """Raise a built building one level for level*100 credits. No level cap."""
    cost = building.upgrade_cost
    if not building.is_built:
        return {"success": False, "building": building.id,
                "error": f"{building.name} must be constructed first"}
    if not state.progress.spend_credits(cost):
        return {"success": False, "building": building.id,
                "error": f"Insufficient credits: need {cost}, "
                         f"have {state.progress.credits}"}
    building.upgrade()
    logger.info(f"Upgraded {building.name} to level {building.level} for {cost} credits")
    return {"success": True, "building": building.id, "cost": cost,
            "level": building.level, "production_rate": building.production_rate,
            "credits": state.progress.credits}


# ─────────────────────────────────────────────────────
# PRODUCTION
# ─────────────────────────────────────────────────────

def run_production_tick(state: GameState) -> dict:
    """One pass of resource generation over every built building."""
    colony = state.colony
    before = {r.name: r.amount for r in colony.resources}

    for building in colony.built_buildings():
        if building.type == BuildingType.ADMINISTRATIVE:
            for res in colony.resources:
                res.add(ADMINISTRATIVE_BONUS)
        else:
            colony.resource(BUILDING_OUTPUT[building.type]).add(building.production_rate)

    colony.update_happiness()
    gained = {r.name: r.amount - before[r.name] for r in colony.resources}
    logger.debug(f"Production tick: {gained}")
    return {"action": "production", "gained": gained,
            "happiness": colony.happiness}
