"""
Galaxy Finance Quest - FastAPI Routes
Thin presentation host over the single GameLoop instance.
"""

import json
import logging
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from game_loop import GameLoop, PRODUCTION_INTERVAL
from challenge import is_passing, PASS_THRESHOLD
from persistence import ProgressStore, JsonFileStore
from web.websocket import ConnectionManager

logger = logging.getLogger("galaxy.web")


# ─────────────────────────────────────────────────────
# APP SETUP
# ─────────────────────────────────────────────────────

app = FastAPI(title="Galaxy Finance Quest", version="1.0")
manager = ConnectionManager()
game = GameLoop()


def init_game(data_dir: str = None, store: ProgressStore = None,
              tick_interval: float = PRODUCTION_INTERVAL) -> GameLoop:
    """Build and load the game loop. Called from galaxy_quest.py and tests."""
    global game
    if store is None and data_dir is not None:
        store = JsonFileStore.in_directory(data_dir)
    game.timer.stop()
    game = GameLoop(store=store, tick_interval=tick_interval)
    game.load_game_data()

    def on_state_update(state_data):
        manager.broadcast_threadsafe("state_update", state_data)

    def on_log_entry(entry):
        manager.broadcast_threadsafe("log_entry", entry)

    game._on_state_update = on_state_update
    game._on_log_entry = on_log_entry
    return game


def _not_found(e: KeyError) -> JSONResponse:
    return JSONResponse({"success": False, "error": str(e.args[0])}, status_code=404)


async def _push_state():
    await manager.broadcast("state_update", game.get_full_state())


# ─────────────────────────────────────────────────────
# WEBSOCKET
# ─────────────────────────────────────────────────────

@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)
    try:
        await ws.send_text(json.dumps({"event": "state_update",
                                       "data": game.get_full_state()}))
        # Keep connection alive; client messages are only pings
        while True:
            await ws.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(ws)


# ─────────────────────────────────────────────────────
# STATE
# ─────────────────────────────────────────────────────

@app.get("/api/state")
async def get_state():
    """Full game state for UI rendering."""
    return JSONResponse(game.get_full_state())


@app.get("/api/missions")
async def list_missions(category: str = None):
    """Mission list, optionally filtered by challenge category."""
    missions = game.get_full_state().get("missions", [])
    if category:
        missions = [m for m in missions
                    if m["challenge_type"].lower() == category.lower()]
    return JSONResponse({"missions": missions})


# ─────────────────────────────────────────────────────
# MISSIONS
# ─────────────────────────────────────────────────────

class CompleteRequest(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0)


@app.post("/api/missions/{mission_id}/complete")
async def complete_mission(mission_id: str, req: CompleteRequest):
    """Settle an externally run challenge. Failing scores are not settled."""
    if not is_passing(req.score):
        return JSONResponse({
            "success": False, "passed": False,
            "error": f"Score below pass threshold ({PASS_THRESHOLD:.0%}); retry the mission",
        })
    try:
        result = game.complete_mission(mission_id, req.score)
    except KeyError as e:
        return _not_found(e)
    if result.get("locked"):
        return JSONResponse({"success": False, "error": result["error"]}, status_code=409)
    await _push_state()
    return JSONResponse({"success": True, "passed": True, "settlement": result})


@app.post("/api/missions/{mission_id}/challenge")
async def start_challenge(mission_id: str):
    try:
        result = game.start_challenge(mission_id)
    except KeyError as e:
        return _not_found(e)
    return JSONResponse(result)


class AnswerRequest(BaseModel):
    answer_index: int


@app.post("/api/challenge/answer")
async def answer_challenge(req: AnswerRequest):
    return JSONResponse(game.answer_challenge(req.answer_index))


@app.post("/api/challenge/finish")
async def finish_challenge():
    result = game.finish_challenge()
    if result.get("passed"):
        await _push_state()
    return JSONResponse(result)


# ─────────────────────────────────────────────────────
# COLONY
# ─────────────────────────────────────────────────────

@app.post("/api/buildings/{building_id}/construct")
async def construct_building(building_id: str):
    try:
        ok = game.construct_building(building_id)
    except KeyError as e:
        return _not_found(e)
    if ok:
        await _push_state()
    return JSONResponse({"success": ok, "credits": game.state.progress.credits})


@app.post("/api/buildings/{building_id}/upgrade")
async def upgrade_building(building_id: str):
    try:
        ok = game.upgrade_building(building_id)
    except KeyError as e:
        return _not_found(e)
    if ok:
        await _push_state()
    return JSONResponse({"success": ok, "credits": game.state.progress.credits})


# ─────────────────────────────────────────────────────
# SETTINGS
# ─────────────────────────────────────────────────────

class DifficultyRequest(BaseModel):
    difficulty: str


@app.post("/api/difficulty")
async def change_difficulty(req: DifficultyRequest):
    try:
        tier = game.change_difficulty(req.difficulty)
    except ValueError as e:
        return JSONResponse({"success": False, "error": str(e)}, status_code=400)
    await _push_state()
    return JSONResponse({"success": True, "difficulty": tier.value})


@app.post("/api/reset")
async def reset_game():
    game.reset_game()
    await _push_state()
    return JSONResponse({"success": True})


@app.post("/api/production/pause")
async def pause_production():
    game.timer.pause()
    return JSONResponse({"success": True, "paused": True})


@app.post("/api/production/resume")
async def resume_production():
    game.timer.resume()
    return JSONResponse({"success": True, "paused": False})
