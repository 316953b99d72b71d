from __future__ import annotations

import asyncio

from fastapi import WebSocket


class GameWebSocketHub:
    """In-process WebSocket fan-out for the single game session.

    Contract:
      - register a connection with `connect(websocket)`.
      - broadcast lightweight events with `broadcast(payload)`.

    Payloads should be JSON-serializable dicts.
    """

    def __init__(self) -> None:
        self._conns: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._conns.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(websocket)

    async def broadcast(self, payload: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._conns)

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(payload)
            except Exception:
                dead.append(ws)

        if dead:
            async with self._lock:
                self._conns.difference_update(dead)


hub = GameWebSocketHub()
