from __future__ import annotations

import math
import time
from time import perf_counter
from typing import Any, Callable, Dict, List

from .config import SimulationConfig
from .entities import Agent, Pellet, Virus
from .errors import IdentityInUse, RoomFull
from .rng import DeterministicRng, hash_seed
from .spatial_grid import SpatialGrid
from ..systems import bots, consumption, lifecycle, physics, spawn
from ..systems import metrics as metrics_system
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotWorld
from ..utils.math2d import _safe_normalize_xy


def _clamp_int(value: Any, low: int, high: int, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        number = default
    return max(low, min(high, number))


class Room:
    """One independent arena: owns its agents, pellets and viruses and steps them.

    A room is not thread-safe. The caller serializes `step`, `join`,
    `submit_input` and `snapshot` for a given room; rooms never touch each
    other's state.
    """

    def __init__(
        self,
        code: str,
        config: SimulationConfig | None = None,
        max_players: Any = None,
        bot_count: Any = None,
        clock: Callable[[], float] | None = time.monotonic,
    ):
        self._config = config if config is not None else SimulationConfig()
        room_config = self._config.room
        self.code = code
        self.max_players = _clamp_int(
            room_config.default_max_players if max_players is None else max_players,
            room_config.min_players,
            room_config.max_players,
            room_config.default_max_players,
        )
        self.bot_count = _clamp_int(
            room_config.default_bots if bot_count is None else bot_count,
            room_config.min_bots,
            room_config.max_bots,
            room_config.default_bots,
        )
        # None ties agent timestamps to the simulation clock instead of wall time.
        self._clock = clock if clock is not None else (lambda: self.clock)
        self._rng = DeterministicRng(hash_seed(code))
        self._grid = SpatialGrid(self._config.bots.cell_size)
        self.clock = 0.0
        self.tick = 0
        self.agents: Dict[str, Agent] = {}
        self.pellets: List[Pellet] = []
        self.viruses: List[Virus] = []
        self._metrics: TickMetrics | None = None
        self._populate()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def rng(self) -> DeterministicRng:
        return self._rng

    @property
    def seed(self) -> int:
        return self._rng.seed

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def now(self) -> float:
        return self._clock()

    def human_count(self) -> int:
        return sum(1 for agent in self.agents.values() if not agent.is_bot)

    def _populate(self) -> None:
        config = self._config
        rng = self._rng
        for _ in range(config.world.pellet_target):
            self.pellets.append(spawn.spawn_pellet(rng, config))
        for _ in range(config.world.virus_count):
            self.viruses.append(spawn.spawn_virus(rng, config))
        now = self.now()
        for agent_id, name in spawn.bot_roster(self.bot_count, self.code, rng):
            self.agents[agent_id] = spawn.spawn_agent(agent_id, name, True, rng, config, now)

    def join(self, name: str, agent_id: str) -> Agent:
        existing = self.agents.get(agent_id)
        if existing is not None and existing.is_bot:
            raise IdentityInUse(self.code, agent_id)
        if existing is None and self.human_count() >= self.max_players:
            raise RoomFull(self.code, self.max_players)
        agent = spawn.spawn_agent(agent_id, name, False, self._rng, self._config, self.now())
        self.agents[agent_id] = agent
        return agent

    def submit_input(self, agent_id: str, aim_x: float, aim_y: float, boost: bool, split: bool) -> bool:
        agent = self.agents.get(agent_id)
        if agent is None or agent.is_bot or not agent.alive:
            return False
        agent.last_seen = self.now()
        agent.aim = _safe_normalize_xy(aim_x, aim_y)
        agent.boost = boost
        if split:
            agent.split_requested = True
        return True

    def step(self, now: float | None = None) -> TickMetrics:
        start = perf_counter()
        now = self.now() if now is None else now
        config = self._config
        self.clock += config.time_step
        self.tick += 1
        counters: Dict[str, int] = {}

        counters["humans_removed"] = len(lifecycle.remove_inactive_humans(self, now))
        counters["splits"] = lifecycle.apply_split_requests(self)
        bots.steer_bots(self, self._grid)
        physics.apply_movement(self)
        counters["pellets_eaten"] = consumption.eat_pellets(self)
        consumption.refill_pellets(self)
        counters["viruses_popped"] = consumption.apply_viruses(self)
        counters["blobs_engulfed"], counters["deaths"] = consumption.engulf_agents(self)
        counters["bots_respawned"] = lifecycle.respawn_bots(self, now)

        elapsed_ms = (perf_counter() - start) * 1000.0
        metrics = metrics_system.create_metrics(self, counters, elapsed_ms)
        self._metrics = metrics
        return metrics

    def snapshot(self) -> Snapshot:
        living = [agent for agent in self.agents.values() if agent.alive]
        agents_payload = [self._agent_snapshot(agent) for agent in living]
        ranked = sorted(agents_payload, key=lambda entry: entry["mass"], reverse=True)
        leaderboard = [
            {"id": entry["id"], "name": entry["name"], "mass": entry["mass"]}
            for entry in ranked[: self._config.room.leaderboard_size]
        ]
        return Snapshot(
            code=self.code,
            tick=self.tick,
            clock=self.clock,
            world=SnapshotWorld(
                size=self._config.world.size,
                tick_rate=self._config.tick_rate,
                seed=self.seed,
                config_version=self._config.config_version,
            ),
            pellets=[
                {"x": p.position.x, "y": p.position.y, "r": p.radius, "v": p.value} for p in self.pellets
            ],
            viruses=[{"x": v.position.x, "y": v.position.y, "r": v.radius} for v in self.viruses],
            agents=agents_payload,
            leaderboard=leaderboard,
        )

    @staticmethod
    def _agent_snapshot(agent: Agent) -> Dict[str, Any]:
        r, g, b = agent.color
        return {
            "id": agent.id,
            "name": agent.name,
            "col": {"r": r, "g": g, "b": b},
            "bot": agent.is_bot,
            "blobs": [{"x": blob.position.x, "y": blob.position.y, "r": blob.radius} for blob in agent.blobs],
            "mass": int(math.floor(agent.total_mass)),
        }
