"""
Galaxy Finance Quest - Data Models
Economy primitives, catalog content types and the GameState aggregate.

Only UserProgress is persisted. The colony, missions and achievements are
rebuilt from the catalogs on load and re-flagged from the progress id sets,
so the snapshot stays small and catalog edits apply to old saves.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from enum import Enum


# ─────────────────────────────────────────────────────
# ENUMS
# ─────────────────────────────────────────────────────

class DifficultyLevel(str, Enum):
    BEGINNER = "Cadet"
    INTERMEDIATE = "Officer"
    ADVANCED = "Commander"
    EXPERT = "Admiral"

    @property
    def multiplier(self) -> float:
        return DIFFICULTY_MULTIPLIERS[self]

    @property
    def description(self) -> str:
        return DIFFICULTY_DESCRIPTIONS[self]

    @classmethod
    def parse(cls, value) -> "DifficultyLevel":
        """Accept an enum member, its value ("Cadet") or its name ("beginner")."""
        if isinstance(value, cls):
            return value
        for level in cls:
            if value == level.value or str(value).upper() == level.name:
                return level
        raise ValueError(f"Unknown difficulty: {value}")


DIFFICULTY_MULTIPLIERS = {
    DifficultyLevel.BEGINNER: 1.0,
    DifficultyLevel.INTERMEDIATE: 1.5,
    DifficultyLevel.ADVANCED: 2.0,
    DifficultyLevel.EXPERT: 2.5,
}

DIFFICULTY_DESCRIPTIONS = {
    DifficultyLevel.BEGINNER: "Perfect for space cadets new to financial planning",
    DifficultyLevel.INTERMEDIATE: "For officers ready to tackle complex scenarios",
    DifficultyLevel.ADVANCED: "Challenging missions for experienced commanders",
    DifficultyLevel.EXPERT: "Elite-level financial strategy for admirals",
}

ESTIMATED_DURATIONS = {
    DifficultyLevel.BEGINNER: "5-10 min",
    DifficultyLevel.INTERMEDIATE: "10-15 min",
    DifficultyLevel.ADVANCED: "15-25 min",
    DifficultyLevel.EXPERT: "25-40 min",
}


class ChallengeType(str, Enum):
    BUDGETING = "Budgeting"
    INVESTING = "Investing"
    SAVING = "Saving"
    DEBT_MANAGEMENT = "Debt Management"
    RISK_MANAGEMENT = "Risk Management"
    EMERGENCY_PLANNING = "Emergency Planning"


class BuildingType(str, Enum):
    ADMINISTRATIVE = "Administrative"
    ENERGY = "Energy"
    FOOD = "Food"
    MATERIALS = "Materials"
    RESEARCH = "Research"


class MissionStatus(str, Enum):
    LOCKED = "locked"
    AVAILABLE = "available"
    COMPLETED = "completed"       # terminal


class AchievementStatus(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"         # terminal


class AchievementCategory(str, Enum):
    GENERAL = "General"
    MISSIONS = "Missions"
    LEARNING = "Learning"
    PROGRESS = "Progress"
    SPECIAL = "Special"


class AchievementRarity(str, Enum):
    COMMON = "Common"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"


# ─────────────────────────────────────────────────────
# RESOURCES
# ─────────────────────────────────────────────────────

# Fixed identity and order of the colony resources.
RESOURCE_NAMES = ("Energy", "Food", "Materials", "Research")

# Building type -> resource it feeds. Administrative feeds everything.
BUILDING_OUTPUT = {
    BuildingType.ENERGY: "Energy",
    BuildingType.FOOD: "Food",
    BuildingType.MATERIALS: "Materials",
    BuildingType.RESEARCH: "Research",
}


@dataclass
class GameResource:
    """A bounded colony stockpile. 0 <= amount <= max_capacity."""
    name: str
    amount: int
    max_capacity: int
    icon: str = ""
    description: str = ""

    @property
    def percentage(self) -> float:
        return self.amount / self.max_capacity

    @property
    def is_at_capacity(self) -> bool:
        return self.amount >= self.max_capacity

    def add(self, value: int) -> int:
        """Add and saturate at capacity. Returns the new amount."""
        self.amount = min(self.amount + value, self.max_capacity)
        return self.amount

    def subtract(self, value: int) -> bool:
        if value > self.amount:
            return False
        self.amount -= value
        return True

    def to_dict(self) -> dict:
        return {
            "name": self.name, "amount": self.amount,
            "max_capacity": self.max_capacity,
            "percentage": self.percentage,
            "is_at_capacity": self.is_at_capacity,
            "icon": self.icon, "description": self.description,
        }


def default_resources() -> list:
    return [
        GameResource("Energy", 100, 1000, "bolt.fill",
                     "Powers all colony operations"),
        GameResource("Food", 50, 800, "leaf.fill",
                     "Keeps colonists healthy and productive"),
        GameResource("Materials", 30, 600, "cube.fill",
                     "Used for construction and repairs"),
        GameResource("Research", 0, 400, "brain.head.profile",
                     "Unlocks new technologies"),
    ]


# ─────────────────────────────────────────────────────
# BUILDINGS
# ─────────────────────────────────────────────────────

FIRST_CONSTRUCTION_COST = 200
REBUILD_CONSTRUCTION_COST = 500
UPGRADE_COST_PER_LEVEL = 100
BASE_PRODUCTION_RATE = 10
PRODUCTION_PER_UPGRADE = 5


@dataclass
class Building:
    """
    A colony building. Unbuilt buildings sit at level 0 and produce nothing.
    Ids are stable (the lowercased type) since there is one building per type.
    """
    id: str
    name: str
    type: BuildingType
    level: int = 0
    is_built: bool = False
    production_rate: int = BASE_PRODUCTION_RATE

    @property
    def construction_cost(self) -> int:
        return FIRST_CONSTRUCTION_COST if self.level == 0 else REBUILD_CONSTRUCTION_COST

    @property
    def upgrade_cost(self) -> int:
        return self.level * UPGRADE_COST_PER_LEVEL

    @property
    def production_text(self) -> str:
        if not self.is_built or self.level == 0:
            return "Not producing"
        if self.type == BuildingType.ADMINISTRATIVE:
            return "+2 all resources/tick"
        return f"+{self.production_rate}/tick"

    def construct(self):
        self.is_built = True
        if self.level == 0:
            self.level = 1

    def upgrade(self):
        self.level += 1
        self.production_rate += PRODUCTION_PER_UPGRADE

    def to_dict(self, credits: int = None) -> dict:
        data = {
            "id": self.id, "name": self.name, "type": self.type.value,
            "level": self.level, "is_built": self.is_built,
            "production_rate": self.production_rate,
            "production_text": self.production_text,
            "construction_cost": self.construction_cost,
            "upgrade_cost": self.upgrade_cost,
        }
        if credits is not None:
            data["can_afford_construction"] = (
                not self.is_built and credits >= self.construction_cost)
            data["can_afford_upgrade"] = (
                self.is_built and credits >= self.upgrade_cost)
        return data


def default_buildings() -> list:
    return [
        # The command center is never constructed explicitly.
        Building("administrative", "Command Center", BuildingType.ADMINISTRATIVE,
                 level=1, is_built=True),
        Building("energy", "Solar Array", BuildingType.ENERGY),
        Building("food", "Hydroponic Farm", BuildingType.FOOD),
        Building("materials", "Mining Facility", BuildingType.MATERIALS),
        Building("research", "Research Lab", BuildingType.RESEARCH),
    ]


# ─────────────────────────────────────────────────────
# PLANET COLONY
# ─────────────────────────────────────────────────────

@dataclass
class PlanetColony:
    """The player's colony. Happiness tracks the mean resource fill."""
    name: str = "New Terra"
    population: int = 25
    happiness: float = 0.0
    resources: list = field(default_factory=default_resources)
    buildings: list = field(default_factory=default_buildings)

    def __post_init__(self):
        self.update_happiness()

    def resource(self, name: str) -> GameResource:
        for res in self.resources:
            if res.name == name:
                return res
        raise KeyError(f"Unknown resource: {name}")

    def get_building(self, building_id: str) -> Optional[Building]:
        for b in self.buildings:
            if b.id == building_id:
                return b
        return None

    def built_buildings(self) -> list:
        return [b for b in self.buildings if b.is_built]

    def add_resource(self, name: str, amount: int):
        self.resource(name).add(amount)
        self.update_happiness()

    def add_to_all_resources(self, amount: int):
        for res in self.resources:
            res.add(amount)
        self.update_happiness()

    def grow_population(self, amount: int):
        self.population = max(0, self.population + amount)
        self.update_happiness()

    def update_happiness(self) -> float:
        satisfaction = sum(r.percentage for r in self.resources) / len(self.resources)
        self.happiness = min(1.0, max(0.0, satisfaction))
        return self.happiness

    def to_dict(self, credits: int = None) -> dict:
        return {
            "name": self.name,
            "population": self.population,
            "happiness": self.happiness,
            "resources": [r.to_dict() for r in self.resources],
            "buildings": [b.to_dict(credits) for b in self.buildings],
        }


# ─────────────────────────────────────────────────────
# USER PROGRESS (the persisted snapshot)
# ─────────────────────────────────────────────────────

STARTING_CREDITS = 100
EXPERIENCE_PER_LEVEL = 100


@dataclass
class UserProgress:
    """Player economy and completion record. Credits never go negative."""
    credits: int = STARTING_CREDITS
    level: int = 1
    experience: int = 0
    completed_missions: set = field(default_factory=set)
    unlocked_achievements: set = field(default_factory=set)
    current_difficulty: DifficultyLevel = DifficultyLevel.BEGINNER
    last_play_date: str = field(default_factory=lambda: datetime.now().isoformat())

    def add_credits(self, amount: int):
        if amount < 0:
            raise ValueError("Use spend_credits() to debit")
        self.credits += amount

    def can_afford(self, cost: int) -> bool:
        return self.credits >= cost

    def spend_credits(self, cost: int) -> bool:
        """Debit cost. Rejected (not clamped) when the balance is short."""
        if not self.can_afford(cost):
            return False
        self.credits -= cost
        return True

    def add_experience(self, amount: int) -> list:
        """Add experience and roll over as many levels as it pays for.
        Returns the list of levels reached."""
        self.experience += amount
        reached = []
        while self.experience >= self.level * EXPERIENCE_PER_LEVEL:
            required = self.level * EXPERIENCE_PER_LEVEL
            self.level += 1
            self.experience -= required
            reached.append(self.level)
        return reached

    def complete_mission(self, mission_id: str) -> bool:
        if mission_id in self.completed_missions:
            return False
        self.completed_missions.add(mission_id)
        return True

    def unlock_achievement(self, achievement_id: str) -> bool:
        if achievement_id in self.unlocked_achievements:
            return False
        self.unlocked_achievements.add(achievement_id)
        return True

    def to_dict(self) -> dict:
        return {
            "credits": self.credits,
            "level": self.level,
            "experience": self.experience,
            "experience_to_next_level": self.level * EXPERIENCE_PER_LEVEL,
            "completed_missions": sorted(self.completed_missions),
            "unlocked_achievements": sorted(self.unlocked_achievements),
            "current_difficulty": self.current_difficulty.value,
            "last_play_date": self.last_play_date,
        }


# ─────────────────────────────────────────────────────
# MISSION
# ─────────────────────────────────────────────────────

@dataclass
class Mission:
    """A quiz mission from the catalog. Status only moves toward COMPLETED."""
    id: str
    title: str
    description: str
    difficulty: DifficultyLevel
    rewards: int
    educational_content: str
    challenge_type: ChallengeType
    prerequisites: list = field(default_factory=list)
    status: MissionStatus = MissionStatus.AVAILABLE

    @property
    def is_completed(self) -> bool:
        return self.status == MissionStatus.COMPLETED

    @property
    def is_locked(self) -> bool:
        return self.status == MissionStatus.LOCKED

    @property
    def is_available(self) -> bool:
        return self.status == MissionStatus.AVAILABLE

    @property
    def adjusted_rewards(self) -> int:
        return int(self.rewards * self.difficulty.multiplier)

    @property
    def estimated_duration(self) -> str:
        return ESTIMATED_DURATIONS[self.difficulty]

    def mark_completed(self) -> bool:
        if self.is_completed:
            return False
        self.status = MissionStatus.COMPLETED
        return True

    def refresh_lock(self, prerequisites_met: bool) -> bool:
        """Recompute LOCKED/AVAILABLE. Completed missions never change.
        Returns True when the status changed."""
        if self.is_completed:
            return False
        new_status = MissionStatus.AVAILABLE if prerequisites_met else MissionStatus.LOCKED
        changed = new_status != self.status
        self.status = new_status
        return changed

    def to_dict(self) -> dict:
        return {
            "id": self.id, "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "rewards": self.rewards,
            "adjusted_rewards": self.adjusted_rewards,
            "educational_content": self.educational_content,
            "challenge_type": self.challenge_type.value,
            "prerequisites": list(self.prerequisites),
            "status": self.status.value,
            "estimated_duration": self.estimated_duration,
        }


# ─────────────────────────────────────────────────────
# ACHIEVEMENT
# ─────────────────────────────────────────────────────

@dataclass
class Achievement:
    """An unlockable badge. Unlocks once and is never re-locked."""
    id: str
    title: str
    description: str
    icon: str = ""
    category: AchievementCategory = AchievementCategory.GENERAL
    rarity: AchievementRarity = AchievementRarity.COMMON
    status: AchievementStatus = AchievementStatus.LOCKED
    unlocked_date: str = ""

    @property
    def is_unlocked(self) -> bool:
        return self.status == AchievementStatus.UNLOCKED

    def unlock(self, when: str = "") -> bool:
        if self.is_unlocked:
            return False
        self.status = AchievementStatus.UNLOCKED
        self.unlocked_date = when
        return True

    def to_dict(self) -> dict:
        return {
            "id": self.id, "title": self.title,
            "description": self.description, "icon": self.icon,
            "category": self.category.value, "rarity": self.rarity.value,
            "status": self.status.value,
            "unlocked_date": self.unlocked_date,
        }


# ─────────────────────────────────────────────────────
# GAME STATE
# ─────────────────────────────────────────────────────

@dataclass
class GameState:
    """The single mutable aggregate owned by the GameLoop."""
    progress: UserProgress = field(default_factory=UserProgress)
    colony: PlanetColony = field(default_factory=PlanetColony)
    missions: dict = field(default_factory=dict)        # id -> Mission, catalog order
    achievements: dict = field(default_factory=dict)    # id -> Achievement, catalog order

    # ── Helpers ──

    def get_mission(self, mission_id: str) -> Optional[Mission]:
        return self.missions.get(mission_id)

    def get_achievement(self, achievement_id: str) -> Optional[Achievement]:
        return self.achievements.get(achievement_id)

    def get_building(self, building_id: str) -> Optional[Building]:
        return self.colony.get_building(building_id)

    def add_mission(self, mission: Mission):
        self.missions[mission.id] = mission

    def add_achievement(self, achievement: Achievement):
        self.achievements[achievement.id] = achievement

    def missions_in_category(self, challenge_type: ChallengeType) -> list:
        return [m for m in self.missions.values()
                if m.challenge_type == challenge_type]

    def completed_in_category(self, challenge_type: ChallengeType) -> int:
        done = self.progress.completed_missions
        return sum(1 for m in self.missions_in_category(challenge_type)
                   if m.id in done)

    def completion_percentage(self) -> float:
        if not self.missions:
            return 0.0
        return len(self.progress.completed_missions) / len(self.missions)


# ─────────────────────────────────────────────────────
# SERIALIZATION
# ─────────────────────────────────────────────────────

def progress_to_json(progress: UserProgress) -> str:
    """Serialize the persisted snapshot (UserProgress only)."""
    data = {
        "credits": progress.credits,
        "level": progress.level,
        "experience": progress.experience,
        "completed_missions": sorted(progress.completed_missions),
        "unlocked_achievements": sorted(progress.unlocked_achievements),
        "current_difficulty": progress.current_difficulty.value,
        "last_play_date": progress.last_play_date,
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def progress_from_json(json_str: str) -> UserProgress:
    """Deserialize a snapshot. Missing fields fall back to defaults."""
    data = json.loads(json_str)
    if not isinstance(data, dict):
        raise ValueError("Progress snapshot must be a JSON object")

    progress = UserProgress()
    progress.credits = max(0, int(data.get("credits", STARTING_CREDITS)))
    progress.level = max(1, int(data.get("level", 1)))
    progress.experience = max(0, int(data.get("experience", 0)))
    progress.completed_missions = set(data.get("completed_missions", []))
    progress.unlocked_achievements = set(data.get("unlocked_achievements", []))
    try:
        progress.current_difficulty = DifficultyLevel.parse(
            data.get("current_difficulty", DifficultyLevel.BEGINNER.value))
    except ValueError:
        progress.current_difficulty = DifficultyLevel.BEGINNER
    progress.last_play_date = data.get("last_play_date", progress.last_play_date)
    return progress
