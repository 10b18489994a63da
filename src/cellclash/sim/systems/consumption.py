from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.config import SimulationConfig
from ..core.entities import Agent, Blob
from ..utils.math2d import _circles_overlap, _clamp_value, _distance, _safe_normalize_xy
from .spawn import spawn_pellet
from .splitting import can_pop, pop_blob

if TYPE_CHECKING:
    from ..core.room import Room


def grow(blob: Blob, amount: float, config: SimulationConfig) -> float:
    """Add mass to a blob, scaled down above the soft cap. Returns the mass applied."""
    growth = config.growth
    penalty = 1.0
    if blob.mass > growth.soft_cap:
        penalty = _clamp_value(growth.soft_cap / blob.mass, growth.min_gain_fraction, 1.0)
    gain = amount * penalty
    blob.mass += gain
    blob.radius += gain * growth.radius_per_mass
    return gain


def can_eat(eater_radius: float, prey_radius: float, config: SimulationConfig) -> bool:
    return eater_radius > prey_radius * config.engulf.eat_margin


def can_engulf(eater: Blob, prey: Blob, config: SimulationConfig) -> bool:
    """Size margin plus near-total overlap; touching edges is not enough."""
    if not can_eat(eater.radius, prey.radius, config):
        return False
    return _distance(eater.position, prey.position) < eater.radius - prey.radius * config.engulf.overlap_factor


def engulf_gain(eater: Blob, prey: Blob, config: SimulationConfig) -> float:
    engulf = config.engulf
    ratio = _clamp_value(prey.mass / max(1.0, eater.mass), engulf.min_mass_fraction, engulf.max_mass_fraction)
    return prey.mass * ratio


def eat_pellets(room: Room) -> int:
    config = room.config
    pellets = room.pellets
    eaten = 0
    for agent in list(room.agents.values()):
        if not agent.alive:
            continue
        for blob in agent.blobs:
            for index in range(len(pellets) - 1, -1, -1):
                pellet = pellets[index]
                if _circles_overlap(blob.position, blob.radius, pellet.position, pellet.radius):
                    grow(blob, pellet.value, config)
                    del pellets[index]
                    eaten += 1
    return eaten


def refill_pellets(room: Room) -> int:
    config = room.config
    added = 0
    while len(room.pellets) < config.world.pellet_target:
        room.pellets.append(spawn_pellet(room.rng, config))
        added += 1
    return added


def apply_viruses(room: Room) -> int:
    """Pop large blobs touching a virus and bounce every other touching blob off it."""
    config = room.config
    virus_config = config.virus
    popped = 0
    for agent in list(room.agents.values()):
        if not agent.alive:
            continue
        blobs = agent.blobs
        for index in range(len(blobs) - 1, -1, -1):
            blob = blobs[index]
            for virus in room.viruses:
                if not _circles_overlap(blob.position, blob.radius, virus.position, virus.radius):
                    continue
                if can_pop(blob, config):
                    blobs[index:index + 1] = pop_blob(blob, config, room.rng)
                    popped += 1
                    break
                away = _safe_normalize_xy(blob.position.x - virus.position.x, blob.position.y - virus.position.y)
                blob.velocity += away * virus_config.bounce_impulse
    return popped


def engulf_pair(first: Agent, second: Agent, config: SimulationConfig) -> int:
    """Resolve every blob combination between two agents; returns blobs eaten.

    Both blob lists are walked from the back so removals never shift a blob
    that is still waiting to be checked.
    """
    eaten = 0
    first_blobs = first.blobs
    second_blobs = second.blobs
    for i in range(len(first_blobs) - 1, -1, -1):
        a = first_blobs[i]
        for j in range(len(second_blobs) - 1, -1, -1):
            b = second_blobs[j]
            if can_engulf(a, b, config):
                grow(a, engulf_gain(a, b, config), config)
                del second_blobs[j]
                eaten += 1
            elif can_engulf(b, a, config):
                grow(b, engulf_gain(b, a, config), config)
                del first_blobs[i]
                eaten += 1
                break
    return eaten


def engulf_agents(room: Room) -> tuple[int, int]:
    """Pairwise engulfment over living agents. Returns (blobs eaten, agents killed)."""
    config = room.config
    agents = list(room.agents.values())
    eaten = 0
    killed = 0
    for i, first in enumerate(agents):
        if not first.alive:
            continue
        for second in agents[i + 1:]:
            if not second.alive:
                continue
            eaten += engulf_pair(first, second, config)
            if not second.alive:
                killed += 1
            if not first.alive:
                killed += 1
                break
    return eaten, killed
