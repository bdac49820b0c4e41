"""
Galaxy Finance Quest - Server Launcher
Loads saved progress, starts the production timer and serves the API.

Run:  python galaxy_quest.py
Env:  GALAXY_PORT, GALAXY_DATA_DIR, GALAXY_TICK_SECONDS, GALAXY_LOG_LEVEL
"""

import os
import sys
import logging
import uvicorn

# Ensure engine directory is on the path
ENGINE_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, ENGINE_DIR)

from web.routes import app, init_game

PORT = int(os.environ.get("GALAXY_PORT", "8000"))
DATA_DIR = os.environ.get("GALAXY_DATA_DIR", os.path.join(ENGINE_DIR, "data"))
TICK_SECONDS = float(os.environ.get("GALAXY_TICK_SECONDS", "30"))
LOG_LEVEL = os.environ.get("GALAXY_LOG_LEVEL", "INFO").upper()


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    game = init_game(DATA_DIR, tick_interval=TICK_SECONDS)
    game.timer.start()

    print("=" * 50)
    print("  GALAXY FINANCE QUEST")
    print("=" * 50)
    print(f"  Server: http://localhost:{PORT}")
    print(f"  Data:   {DATA_DIR}")
    print(f"  Production tick: every {TICK_SECONDS:g}s")
    print("  Press Ctrl+C to stop.")
    print("=" * 50)
    print()

    try:
        uvicorn.run(app, host="0.0.0.0", port=PORT, log_level="warning")
    finally:
        game.timer.stop()


if __name__ == "__main__":
    main()
