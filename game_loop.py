"""
Galaxy Finance Quest - Game Loop
The single engine instance for a player session. It owns the GameState,
serializes every mutation behind one lock, runs the production timer and
saves the progress snapshot after each successful change.

The web server (and tests) drive it through the public methods only.
"""

import logging
import threading
from datetime import datetime
from typing import Optional

from models import GameState, DifficultyLevel
from catalog import new_game_state
from economy import (
    settle_mission, construct_building as _construct, upgrade_building as _upgrade,
    run_production_tick as _produce, update_mission_availability,
)
from challenge import ChallengeSession, is_passing
from persistence import ProgressStore, MemoryStore

logger = logging.getLogger("galaxy.engine")

PRODUCTION_INTERVAL = 30.0
ACTION_LOG_LIMIT = 200


# ─────────────────────────────────────────────────────
# PRODUCTION TIMER
# ─────────────────────────────────────────────────────

class ProductionTimer:
    """
    Fixed-interval background trigger for production ticks.
    Ticks that fall while paused or stopped are dropped, never replayed.
    """

    def __init__(self, tick, interval: float = PRODUCTION_INTERVAL):
        self._tick = tick
        self.interval = interval
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self._paused = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_paused(self) -> bool:
        return self._paused.is_set()

    def start(self):
        if self.is_running:
            return
        self._stop.clear()
        self._paused.clear()
        self._thread = threading.Thread(
            target=self._run, name="production-timer", daemon=True)
        self._thread.start()
        logger.info(f"Production timer started ({self.interval}s)")

    def stop(self):
        if not self.is_running:
            return
        self._stop.set()
        if self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None
        logger.info("Production timer stopped")

    def pause(self):
        self._paused.set()

    def resume(self):
        self._paused.clear()

    def _run(self):
        while not self._stop.wait(self.interval):
            if self._paused.is_set():
                continue
            try:
                self._tick()
            except Exception:
                logger.exception("Production tick failed")


# ─────────────────────────────────────────────────────
# GAME LOOP
# ─────────────────────────────────────────────────────

class GameLoop:
    """
    Owner of all economy state. Every public mutator takes the same lock as
    the production tick, so no two read-modify-write sequences interleave.
    """

    def __init__(self, store: ProgressStore = None,
                 tick_interval: float = PRODUCTION_INTERVAL):
        self.state: GameState = None
        self.store: ProgressStore = store if store is not None else MemoryStore()
        self.timer = ProductionTimer(self._timer_tick, tick_interval)
        self.challenge: Optional[ChallengeSession] = None
        self.action_log: list[dict] = []
        self._lock = threading.RLock()

        # Callbacks - the web layer registers these to push updates
        self._on_state_update = None     # (state dict), after timer ticks
        self._on_log_entry = None        # (entry dict)

    # ─────────────────────────────────────────────────
    # LOADING
    # ─────────────────────────────────────────────────

    def load_game_data(self) -> tuple:
        """
        Load the snapshot (or start fresh) and rebuild the colony, missions
        and achievements around it.
        Returns (progress, colony, missions, achievements).
        """
        progress = self.store.load()
        first_run = progress is None
        state = new_game_state(progress)
        state.progress.last_play_date = datetime.now().isoformat()
        update_mission_availability(state)

        with self._lock:
            self.state = state
            self.challenge = None

        if first_run:
            self._log_action("SESSION", "No saved progress; starting a new colony")
        else:
            self._log_action("SESSION",
                             f"Loaded progress: level {state.progress.level}, "
                             f"{state.progress.credits} credits, "
                             f"{len(state.progress.completed_missions)} missions done")
        return self._snapshot_tuple()

    def _snapshot_tuple(self) -> tuple:
        s = self.state
        return (s.progress, s.colony,
                list(s.missions.values()), list(s.achievements.values()))

    def _require_state(self) -> GameState:
        if self.state is None:
            raise RuntimeError("Game data not loaded; call load_game_data() first")
        return self.state

    # ─────────────────────────────────────────────────
    # MISSIONS
    # ─────────────────────────────────────────────────

    def complete_mission(self, mission_id: str, score: float) -> dict:
        """
        Settle a passed mission. Unknown ids raise KeyError; a locked mission
        is refused with "locked": True and nothing changes.
        """
        with self._lock:
            state = self._require_state()
            mission = state.get_mission(mission_id)
            if mission is None:
                raise KeyError(f"Unknown mission: {mission_id}")
            if mission.is_locked:
                logger.warning(f"Settlement rejected: {mission_id} is locked")
                return {"action": "settle", "mission": mission_id, "duplicate": False,
                        "locked": True, "error": f"Mission {mission_id} is locked"}

            result = settle_mission(state, mission, score)
            if result["duplicate"]:
                self._log_action("MISSION", f"{mission.title}: already completed")
                return result

            self._log_action("MISSION",
                             f"{mission.title}: +{result['total_reward']} credits, "
                             f"+{result['experience']} XP")
            for level in result["levels_reached"]:
                self._log_action("MISSION", f"Level up! Now level {level}")
            for unlock in result["achievements"]:
                self._log_action("ACHIEVEMENT", f"{unlock['title']} {unlock['reward']}".strip())
            self._auto_save()
            return result

    # ─────────────────────────────────────────────────
    # CHALLENGES
    # ─────────────────────────────────────────────────

    def start_challenge(self, mission_id: str) -> dict:
        with self._lock:
            state = self._require_state()
            mission = state.get_mission(mission_id)
            if mission is None:
                raise KeyError(f"Unknown mission: {mission_id}")
            if not mission.is_available:
                return {"success": False,
                        "error": f"Mission {mission.title} is {mission.status.value}"}
            self.challenge = ChallengeSession(mission)
            self._log_action("MISSION", f"Challenge started: {mission.title}")
            return {"success": True, "challenge": self.challenge.to_dict()}

    def answer_challenge(self, answer_index: int) -> dict:
        with self._lock:
            if self.challenge is None:
                return {"success": False, "error": "No active challenge"}
            result = self.challenge.submit_answer(answer_index)
            result["challenge"] = self.challenge.to_dict()
            return result

    def finish_challenge(self) -> dict:
        """
        Close the active challenge. A passing score is settled; a failing
        one keeps the session so it can be retried without reward.
        """
        with self._lock:
            session = self.challenge
            if session is None:
                return {"success": False, "error": "No active challenge"}
            if not session.is_completed:
                session.finish()

            fraction = session.score_fraction()
            summary = session.to_dict()
            if not is_passing(fraction):
                session.reset()
                self._log_action("MISSION",
                                 f"Challenge failed: {session.mission.title} "
                                 f"({fraction:.0%}); retry available")
                return {"success": True, "passed": False, "challenge": summary}

            self.challenge = None
            settlement = self.complete_mission(session.mission.id, fraction)
            return {"success": True, "passed": True, "challenge": summary,
                    "settlement": settlement}

    # ─────────────────────────────────────────────────
    # COLONY
    # ─────────────────────────────────────────────────

    def construct_building(self, building_id: str) -> bool:
        with self._lock:
            state = self._require_state()
            building = state.get_building(building_id)
            if building is None:
                raise KeyError(f"Unknown building: {building_id}")
            result = _construct(state, building)
            if not result["success"]:
                logger.warning(f"Construction rejected: {result['error']}")
                return False
            self._log_action("BUILD", f"{building.name} constructed (-{result['cost']} credits)")
            self._auto_save()
            return True

    def upgrade_building(self, building_id: str) -> bool:
        with self._lock:
            state = self._require_state()
            building = state.get_building(building_id)
            if building is None:
                raise KeyError(f"Unknown building: {building_id}")
            result = _upgrade(state, building)
            if not result["success"]:
                logger.warning(f"Upgrade rejected: {result['error']}")
                return False
            self._log_action("UPGRADE",
                             f"{building.name} -> level {building.level} "
                             f"(-{result['cost']} credits)")
            self._auto_save()
            return True

    def run_production_tick(self) -> dict:
        with self._lock:
            result = _produce(self._require_state())
        return result

    def _timer_tick(self):
        if self.state is None:
            return
        result = self.run_production_tick()
        gained = sum(result["gained"].values())
        if gained:
            self._log_action("PRODUCTION", f"+{gained} resources produced")
        if self._on_state_update:
            self._on_state_update(self.get_full_state())

    # ─────────────────────────────────────────────────
    # DIFFICULTY & RESET
    # ─────────────────────────────────────────────────

    def change_difficulty(self, difficulty) -> DifficultyLevel:
        """Accepts a DifficultyLevel, its value or its name."""
        tier = DifficultyLevel.parse(difficulty)
        with self._lock:
            state = self._require_state()
            changed = state.progress.current_difficulty != tier
            state.progress.current_difficulty = tier
            if changed:
                self._log_action("DIFFICULTY", f"Difficulty set to {tier.value}")
            self._auto_save()
        return tier

    def reset_game(self):
        """
        Wipe saved progress and start over from catalog defaults. The timer
        is stopped for the swap and started again, unpaused, afterwards.
        """
        self.timer.stop()

        fresh = new_game_state()
        update_mission_availability(fresh)
        with self._lock:
            self.store.clear()
            self.state = fresh
            self.challenge = None
            self.action_log = []

        self._log_action("RESET", "Game reset to a new colony")
        self.timer.start()

    # ─────────────────────────────────────────────────
    # VIEWS
    # ─────────────────────────────────────────────────

    def get_full_state(self) -> dict:
        """Everything the presentation layer needs to render."""
        with self._lock:
            s = self.state
            if s is None:
                return {"error": "No state loaded"}
            credits = s.progress.credits
            achievements = list(s.achievements.values())
            return {
                "progress": s.progress.to_dict(),
                "colony": s.colony.to_dict(credits),
                "missions": [m.to_dict() for m in s.missions.values()],
                "achievements": [a.to_dict() for a in achievements],
                "stats": {
                    "completion_percentage": s.completion_percentage(),
                    "missions_completed": len(s.progress.completed_missions),
                    "missions_total": len(s.missions),
                    "achievements_unlocked": sum(1 for a in achievements if a.is_unlocked),
                    "achievements_total": len(achievements),
                },
                "difficulties": [
                    {"name": d.value, "multiplier": d.multiplier,
                     "description": d.description}
                    for d in DifficultyLevel
                ],
                "production": {
                    "interval": self.timer.interval,
                    "running": self.timer.is_running,
                    "paused": self.timer.is_paused,
                },
                "challenge": self.challenge.to_dict() if self.challenge else None,
                "log": self.action_log[-20:],
            }

    # ─────────────────────────────────────────────────
    # INTERNAL HELPERS
    # ─────────────────────────────────────────────────

    def _auto_save(self):
        """Persist after a successful mutation. Failures never undo the change."""
        try:
            self.store.save(self.state.progress)
        except Exception as e:
            logger.error(f"Failed to save progress: {e}")
            self._log_action("ERROR", f"Failed to save progress: {e}")

    def _log_action(self, action_type: str, detail: str):
        """Add an entry to the action log."""
        entry = {
            "type": action_type,
            "detail": detail,
            "timestamp": datetime.now().isoformat(),
        }
        with self._lock:
            self.action_log.append(entry)
            if len(self.action_log) > ACTION_LOG_LIMIT:
                del self.action_log[:-ACTION_LOG_LIMIT]
        logger.info(f"[{action_type}] {detail}")
        if self._on_log_entry:
            self._on_log_entry(entry)
