"""
Galaxy Finance Quest - WebSocket Manager
Pushes real-time state updates to connected clients.
"""

import json
import asyncio
import logging
from fastapi import WebSocket

logger = logging.getLogger("galaxy.web")


class ConnectionManager:
    """Manages active WebSocket connections and broadcasts events."""

    def __init__(self):
        self.active: list[WebSocket] = []
        self.loop: asyncio.AbstractEventLoop = None

    async def connect(self, ws: WebSocket):
        await ws.accept()
        # Remember the server loop so timer-thread callbacks can reach it.
        self.loop = asyncio.get_running_loop()
        self.active.append(ws)

    def disconnect(self, ws: WebSocket):
        if ws in self.active:
            self.active.remove(ws)

    async def broadcast(self, event: str, data: dict = None):
        """Send an event to all connected clients."""
        message = json.dumps({"event": event, "data": data or {}})
        disconnected = []
        for ws in self.active:
            try:
                await ws.send_text(message)
            except Exception as e:
                logger.debug(f"Dropping WebSocket client: {e}")
                disconnected.append(ws)
        for ws in disconnected:
            self.disconnect(ws)

    def broadcast_threadsafe(self, event: str, data: dict = None):
        """
        Schedule a broadcast from any thread. From inside the event loop it
        becomes a task; from a worker thread it is handed to the server loop.
        Without clients (or a loop) there is nobody to tell.
        """
        if not self.active:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            loop.create_task(self.broadcast(event, data))
        elif self.loop is not None and not self.loop.is_closed():
            asyncio.run_coroutine_threadsafe(self.broadcast(event, data), self.loop)
