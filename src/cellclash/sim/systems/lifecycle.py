from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from .spawn import spawn_agent
from .splitting import split_agent

if TYPE_CHECKING:
    from ..core.room import Room

logger = logging.getLogger(__name__)


def remove_inactive_humans(room: Room, now: float) -> List[str]:
    timeout = room.config.room.human_timeout_seconds
    stale = [
        agent_id
        for agent_id, agent in room.agents.items()
        if not agent.is_bot and now - agent.last_seen > timeout
    ]
    for agent_id in stale:
        room.agents.pop(agent_id, None)
        logger.info("room %s: removed inactive player %s", room.code, agent_id)
    return stale


def apply_split_requests(room: Room) -> int:
    splits = 0
    for agent in room.agents.values():
        if not agent.split_requested:
            continue
        agent.split_requested = False
        if agent.alive and split_agent(agent, room.config):
            splits += 1
    return splits


def respawn_bots(room: Room, now: float) -> int:
    respawned = 0
    for agent_id, agent in list(room.agents.items()):
        if not agent.is_bot or agent.alive:
            continue
        room.agents[agent_id] = spawn_agent(agent_id, agent.name, True, room.rng, room.config, now)
        respawned += 1
        logger.debug("room %s: respawned bot %s (%s)", room.code, agent_id, agent.name)
    return respawned
