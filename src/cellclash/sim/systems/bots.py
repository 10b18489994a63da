from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..core.entities import Agent, Blob
from ..core.spatial_grid import GridEntry, SpatialGrid
from ..utils.math2d import _safe_normalize_xy

if TYPE_CHECKING:
    from ..core.room import Room


def choose_target(bot: Agent, neighbors: List[GridEntry], distances: List[float], room: Room) -> None:
    """Greedy flee / chase / forage decision for one bot, recomputed every tick."""
    config = room.config.bots
    rng = room.rng
    own = bot.blobs[0]

    threat: Blob | None = None
    threat_distance = float("inf")
    prey: Blob | None = None
    prey_distance = float("inf")
    for (_, other), distance in zip(neighbors, distances):
        if other.radius > own.radius * config.threat_margin and distance < threat_distance:
            threat = other
            threat_distance = distance
        if own.radius > other.radius * config.prey_margin and distance < prey_distance:
            prey = other
            prey_distance = distance

    aim_x = 0.0
    aim_y = 0.0
    if threat is not None:
        aim_x = own.position.x - threat.position.x
        aim_y = own.position.y - threat.position.y
        bot.boost = False
    elif prey is not None:
        aim_x = prey.position.x - own.position.x
        aim_y = prey.position.y - own.position.y
        bot.boost = rng.next_float() < config.chase_boost_chance
    else:
        pellet = rng.sample_choice(room.pellets)
        if pellet is not None:
            aim_x = pellet.position.x - own.position.x
            aim_y = pellet.position.y - own.position.y
        bot.boost = False
    bot.aim = _safe_normalize_xy(aim_x, aim_y)


def steer_bots(room: Room, grid: SpatialGrid) -> None:
    config = room.config.bots
    grid.clear()
    for agent in room.agents.values():
        if not agent.alive:
            continue
        for blob in agent.blobs:
            grid.insert(agent, blob)

    cell_offsets = grid.build_neighbor_cell_offsets(config.perception_radius)
    neighbors: List[GridEntry] = []
    distances: List[float] = []
    for agent in list(room.agents.values()):
        if not agent.is_bot or not agent.alive:
            continue
        grid.collect_neighbors_precomputed(
            agent.blobs[0].position,
            cell_offsets,
            config.perception_radius,
            neighbors,
            distances,
            exclude_id=agent.id,
        )
        choose_target(agent, neighbors, distances, room)
