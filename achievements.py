"""
Galaxy Finance Quest - Achievement Rules
Ordered unlock predicates and their one-time rewards.

The sweep is idempotent: every rule is checked on every pass, guarded by
"not already unlocked" immediately before its reward is applied, so one
settlement can fire several unlocks and a re-run never pays twice.
Rules run in table order and see the rewards of earlier rules.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from models import GameState, ChallengeType

logger = logging.getLogger("galaxy.achievements")


# ─────────────────────────────────────────────────────
# REWARDS
# ─────────────────────────────────────────────────────

def _credits(amount: int) -> Callable:
    def apply(state: GameState) -> str:
        state.progress.add_credits(amount)
        return f"+{amount} credits"
    return apply


def _resource(name: str, amount: int) -> Callable:
    def apply(state: GameState) -> str:
        state.colony.add_resource(name, amount)
        return f"+{amount} {name}"
    return apply


def _all_resources(amount: int) -> Callable:
    def apply(state: GameState) -> str:
        state.colony.add_to_all_resources(amount)
        return f"+{amount} all resources"
    return apply


def _population(amount: int) -> Callable:
    def apply(state: GameState) -> str:
        state.colony.grow_population(amount)
        return f"+{amount} population"
    return apply


# ─────────────────────────────────────────────────────
# RULE TABLE
# ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class AchievementRule:
    achievement_id: str
    predicate: Callable          # (GameState) -> bool
    reward: Callable = None      # (GameState) -> str, or None for badge-only


ACHIEVEMENT_RULES = (
    AchievementRule("first_mission",
                    lambda s: len(s.progress.completed_missions) == 1,
                    _credits(100)),
    AchievementRule("budget_master",
                    lambda s: s.completed_in_category(ChallengeType.BUDGETING) >= 2,
                    _resource("Energy", 100)),
    AchievementRule("investment_guru",
                    lambda s: s.completed_in_category(ChallengeType.INVESTING) >= 2,
                    _credits(500)),
    AchievementRule("risk_expert",
                    lambda s: s.completed_in_category(ChallengeType.RISK_MANAGEMENT) >= 1,
                    _all_resources(50)),
    AchievementRule("wealth_builder",
                    lambda s: s.progress.credits >= 5000,
                    _population(50)),
    AchievementRule("colony_growth",
                    lambda s: s.colony.population >= 500),
    AchievementRule("happy_colony",
                    lambda s: s.colony.happiness >= 0.9,
                    _credits(300)),
    AchievementRule("experienced_commander",
                    lambda s: s.progress.level >= 5),
    AchievementRule("veteran_commander",
                    lambda s: s.progress.level >= 10),
)


# ─────────────────────────────────────────────────────
# EVALUATION
# ─────────────────────────────────────────────────────

def unlock_achievement(state: GameState, achievement_id: str, when: str = "") -> bool:
    """Record an unlock on both the progress set and the catalog entry.
    Returns False when it was already unlocked."""
    if not state.progress.unlock_achievement(achievement_id):
        return False
    achievement = state.get_achievement(achievement_id)
    if achievement is not None:
        achievement.unlock(when or datetime.now().isoformat())
    return True


def evaluate_achievements(state: GameState, rules: tuple = ACHIEVEMENT_RULES) -> list:
    """
    Run one sweep over the rule table. Returns one entry per new unlock:
    {"achievement": id, "title": ..., "reward": "..."}.
    """
    unlocked = []
    for rule in rules:
        if rule.achievement_id in state.progress.unlocked_achievements:
            continue
        if not rule.predicate(state):
            continue
        # Checked and applied back to back so the reward pays at most once.
        if not unlock_achievement(state, rule.achievement_id):
            continue
        reward_text = rule.reward(state) if rule.reward else ""
        achievement = state.get_achievement(rule.achievement_id)
        entry = {
            "achievement": rule.achievement_id,
            "title": achievement.title if achievement else rule.achievement_id,
            "reward": reward_text,
        }
        unlocked.append(entry)
        logger.info(f"Achievement unlocked: {entry['title']}"
                    + (f" ({reward_text})" if reward_text else ""))
    return unlocked
