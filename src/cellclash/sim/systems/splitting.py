from __future__ import annotations

import math
from typing import List


from ..core.config import SimulationConfig
from ..core.entities import Agent, Blob
from ..core.rng import DeterministicRng
from ..utils.math2d import _safe_normalize


def pop_blob(blob: Blob, config: SimulationConfig, rng: DeterministicRng) -> List[Blob]:
    """Explode a blob into evenly sized fragments flying out around the full circle."""
    virus = config.virus
    pieces = max(1, virus.fragment_count)
    piece_mass = blob.mass / pieces
    piece_radius = max(config.decay.min_radius, blob.radius / math.sqrt(pieces))
    reach = blob.radius + virus.fragment_offset

    fragments = []
    for _ in range(pieces):
        direction = rng.next_unit_circle()
        speed = virus.fragment_speed_min + rng.next_float() * virus.fragment_speed_spread
        fragments.append(
            Blob(
                position=blob.position + direction * reach,
                mass=piece_mass,
                radius=piece_radius,
                velocity=direction * speed,
                split_timer=0.0,
            )
        )
    return fragments


def can_pop(blob: Blob, config: SimulationConfig) -> bool:
    """Large enough to burst, and every fragment would still sit at or above the mass floor."""
    virus = config.virus
    if blob.radius < virus.pop_radius:
        return False
    return blob.mass / max(1, virus.fragment_count) >= config.decay.min_mass


def largest_blob_index(agent: Agent) -> int:
    best = 0
    for index in range(1, len(agent.blobs)):
        if agent.blobs[index].radius > agent.blobs[best].radius:
            best = index
    return best


def split_agent(agent: Agent, config: SimulationConfig) -> bool:
    """Split the agent's largest blob along its aim.

    Returns False, leaving the agent untouched, when the agent has no blob
    large enough to divide or when halving it would drop below the mass
    floor.
    """
    if not agent.blobs:
        return False
    split = config.split
    min_radius = config.decay.min_radius
    blob = agent.blobs[largest_blob_index(agent)]
    if blob.radius < min_radius * split.min_radius_multiple:
        return False
    if blob.mass * 0.5 < config.decay.min_mass:
        return False

    direction = _safe_normalize(agent.aim)
    half = blob.mass * 0.5
    blob.mass = half
    blob.radius = max(min_radius, blob.radius * split.radius_factor)
    blob.split_timer = 0.0

    sibling = Blob(
        position=blob.position + direction * (blob.radius + split.offset),
        mass=half,
        radius=blob.radius,
        velocity=direction * split.impulse,
        split_timer=0.0,
    )
    agent.blobs.append(sibling)
    return True
