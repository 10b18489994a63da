from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from ..types.metrics import TickMetrics

if TYPE_CHECKING:
    from ..core.room import Room


def create_metrics(room: Room, counters: Dict[str, int], duration_ms: float) -> TickMetrics:
    humans = 0
    bots = 0
    blobs = 0
    total_mass = 0.0
    for agent in room.agents.values():
        if not agent.alive:
            continue
        if agent.is_bot:
            bots += 1
        else:
            humans += 1
        blobs += len(agent.blobs)
        total_mass += agent.total_mass
    return TickMetrics(
        tick=room.tick,
        clock=room.clock,
        agents=humans + bots,
        humans=humans,
        bots=bots,
        blobs=blobs,
        total_mass=total_mass,
        pellets_eaten=counters.get("pellets_eaten", 0),
        blobs_engulfed=counters.get("blobs_engulfed", 0),
        viruses_popped=counters.get("viruses_popped", 0),
        splits=counters.get("splits", 0),
        deaths=counters.get("deaths", 0),
        bots_respawned=counters.get("bots_respawned", 0),
        humans_removed=counters.get("humans_removed", 0),
        tick_duration_ms=duration_ms,
    )
