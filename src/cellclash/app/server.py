from __future__ import annotations

import logging
import math
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..sim.core.config import AppConfig
from ..sim.core.errors import CellClashError, RoomFull, RoomNotFound
from .rooms import RoomService

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _load_app_config() -> AppConfig:
    path = os.environ.get("CELLCLASH_CONFIG")
    if path:
        return AppConfig.from_yaml(Path(path))
    return AppConfig()


def _error(message: str) -> JSONResponse:
    return JSONResponse({"ok": False, "error": message})


app_config = _load_app_config()
service = RoomService(app_config)
app = FastAPI(title="CellClash Arena Server")
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_config.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def _startup() -> None:
    await service.start()


@app.on_event("shutdown")
async def _shutdown() -> None:
    await service.stop()


@app.get("/api/status")
async def status() -> JSONResponse:
    rooms = {}
    for code, room in service.rooms.items():
        rooms[code] = {
            "tick": room.tick,
            "humans": room.human_count(),
            "agents": len(room.agents),
            "metrics": asdict(room.metrics) if room.metrics is not None else None,
        }
    return JSONResponse({"running": service.running, "rooms": rooms})


@app.post("/create")
async def create_room(payload: dict) -> JSONResponse:
    room = await service.create_room(payload.get("maxPlayers"), payload.get("bots"))
    return JSONResponse({"ok": True, "code": room.code})


@app.post("/join")
async def join_room(payload: dict) -> JSONResponse:
    code = str(payload.get("code") or "").upper()
    try:
        agent = await service.join_room(code, payload.get("name"), payload.get("id"))
    except RoomNotFound:
        return _error("Room not found")
    except RoomFull:
        return _error("Room full")
    except CellClashError as exc:
        return _error(str(exc))
    return JSONResponse({"ok": True, "id": agent.id, "code": code, "world": app_config.simulation.world.size})


@app.post("/input")
async def submit_input(payload: dict) -> JSONResponse:
    accepted = await service.submit_input(
        str(payload.get("code") or ""),
        str(payload.get("id") or ""),
        _as_float(payload.get("aimX")),
        _as_float(payload.get("aimY")),
        bool(payload.get("boost")),
        payload.get("split") is True,
    )
    return JSONResponse({"ok": accepted})


@app.get("/state")
async def get_state(code: str = "") -> JSONResponse:
    try:
        snapshot = await service.get_snapshot(code)
    except RoomNotFound:
        return _error("Room not found")
    return JSONResponse(
        {
            "ok": True,
            "t": snapshot.clock,
            "tick": snapshot.tick,
            "world": snapshot.world.size,
            "pellets": snapshot.pellets,
            "viruses": snapshot.viruses,
            "players": snapshot.agents,
            "leaderboard": snapshot.leaderboard,
        }
    )


def main() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    port = int(os.environ.get("PORT", app_config.port))
    logger.info("CellClash server starting on %s:%d", app_config.host, port)
    uvicorn.run(app, host=app_config.host, port=port)


if __name__ == "__main__":
    main()


__all__ = ["app", "service", "main"]
