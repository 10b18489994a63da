from __future__ import annotations

import asyncio
import logging
import random
import secrets
import time
from typing import Callable, Dict, List

from ..sim.core.config import AppConfig
from ..sim.core.entities import Agent
from ..sim.core.errors import RoomNotFound
from ..sim.core.room import Room
from ..sim.types.snapshot import Snapshot

logger = logging.getLogger(__name__)

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6


class RoomService:
    """Process-wide store of rooms plus the fixed-rate loop that ticks them.

    Every read or write of a room happens under that room's lock, so client
    input lands between ticks and snapshots only ever see finished ticks.
    """

    def __init__(self, config: AppConfig | None = None, clock: Callable[[], float] = time.monotonic):
        self.config = config if config is not None else AppConfig()
        self._clock = clock
        self._rooms: Dict[str, Room] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._idle_since: Dict[str, float] = {}
        self._code_rng = random.Random()
        self._loop_task: asyncio.Task | None = None
        self.running = False

    @property
    def rooms(self) -> Dict[str, Room]:
        return self._rooms

    async def start(self) -> None:
        if self._loop_task is None:
            self._loop_task = asyncio.create_task(self._loop())
        self.running = True

    async def stop(self) -> None:
        self.running = False
        if self._loop_task is not None:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.simulation.time_step)
            if not self.running:
                continue
            await self.tick_all()
            await self.expire_idle_rooms()

    def _make_code(self) -> str:
        code = "".join(self._code_rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        while code in self._rooms:
            code = "".join(self._code_rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        return code

    def _lookup(self, code: str) -> tuple[Room, asyncio.Lock]:
        key = str(code or "").upper()
        room = self._rooms.get(key)
        if room is None:
            raise RoomNotFound(key)
        return room, self._locks[key]

    async def create_room(self, max_players=None, bot_count=None, code: str | None = None) -> Room:
        code = code.upper() if code else self._make_code()
        room = Room(code, self.config.simulation, max_players=max_players, bot_count=bot_count, clock=self._clock)
        self._rooms[code] = room
        self._locks[code] = asyncio.Lock()
        self._idle_since[code] = self._clock()
        logger.info(
            "created room %s (max_players=%d, bots=%d, seed=%d)", code, room.max_players, room.bot_count, room.seed
        )
        return room

    async def join_room(self, code: str, name: str | None = None, agent_id: str | None = None) -> Agent:
        room, lock = self._lookup(code)
        limit = self.config.simulation.room.name_max_length
        name = str(name or "Player")[:limit]
        agent_id = str(agent_id or f"p_{secrets.token_hex(5)}")
        async with lock:
            agent = room.join(name, agent_id)
        self._idle_since.pop(room.code, None)
        logger.info("room %s: %s joined as %s", room.code, agent_id, name)
        return agent

    async def submit_input(
        self,
        code: str,
        agent_id: str,
        aim_x: float = 0.0,
        aim_y: float = 0.0,
        boost: bool = False,
        split: bool = False,
    ) -> bool:
        try:
            room, lock = self._lookup(code)
        except RoomNotFound:
            return False
        async with lock:
            return room.submit_input(agent_id, aim_x, aim_y, boost, split)

    async def get_snapshot(self, code: str) -> Snapshot:
        room, lock = self._lookup(code)
        async with lock:
            return room.snapshot()

    async def tick_all(self) -> None:
        now = self._clock()
        for code, room in list(self._rooms.items()):
            lock = self._locks.get(code)
            if lock is None:
                continue
            async with lock:
                room.step(now)

    async def expire_idle_rooms(self, now: float | None = None) -> List[str]:
        """Drop rooms that have had no human players for longer than the idle window."""
        now = self._clock() if now is None else now
        idle_limit = self.config.room_idle_seconds
        expired = []
        for code, room in list(self._rooms.items()):
            if room.human_count() > 0:
                self._idle_since.pop(code, None)
                continue
            since = self._idle_since.setdefault(code, now)
            if now - since > idle_limit:
                expired.append(code)
        for code in expired:
            self._rooms.pop(code, None)
            self._locks.pop(code, None)
            self._idle_since.pop(code, None)
            logger.info("expired idle room %s", code)
        return expired
