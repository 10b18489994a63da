from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.config import SimulationConfig
from ..core.entities import Agent
from ..utils.math2d import _clamp_to_bounds, _clamp_value

if TYPE_CHECKING:
    from ..core.room import Room


def effective_speed(radius: float, total_mass: float, boosting: bool, config: SimulationConfig) -> float:
    movement = config.movement
    soft_cap = config.growth.soft_cap
    size_penalty = max(movement.size_penalty_floor, 1.0 - radius / movement.size_penalty_radius)
    congestion = 1.0
    if total_mass > soft_cap:
        over = (total_mass - soft_cap) / soft_cap
        congestion = _clamp_value(1.0 - over * movement.congestion_slope, movement.congestion_floor, 1.0)
    speed = movement.base_speed * size_penalty * congestion
    if boosting:
        speed *= movement.boost_multiplier
    return speed


def integrate_agent(agent: Agent, config: SimulationConfig, dt: float) -> None:
    """Move, clamp, settle knockback and decay every blob of one agent."""
    world_size = config.world.size
    decay = config.decay
    total_mass = agent.total_mass
    damping = 1.0 - _clamp_value(dt * config.movement.knockback_damping_per_second, 0.0, 1.0)
    decay_rate = decay.bot_mass_per_second if agent.is_bot else decay.human_mass_per_second
    mass_decay = decay_rate * dt
    pay_boost = agent.boost and not agent.is_bot

    for blob in agent.blobs:
        speed = effective_speed(blob.radius, total_mass, agent.boost, config)
        blob.position.x += agent.aim.x * speed * dt
        blob.position.y += agent.aim.y * speed * dt
        _clamp_to_bounds(blob.position, blob.radius, world_size)

        blob.position.x += blob.velocity.x * dt
        blob.position.y += blob.velocity.y * dt
        _clamp_to_bounds(blob.position, blob.radius, world_size)
        blob.velocity *= damping
        blob.split_timer += dt

        blob.mass = max(decay.min_mass, blob.mass - mass_decay)
        blob.radius = max(decay.min_radius, blob.radius - mass_decay * decay.radius_fraction)

        if pay_boost:
            cost = decay.boost_mass_per_second * dt * (blob.mass / max(1.0, total_mass))
            blob.mass = max(decay.min_mass, blob.mass - cost)
            blob.radius = max(decay.min_radius, blob.radius - cost * decay.boost_radius_fraction)


def apply_movement(room: Room) -> None:
    config = room.config
    dt = config.time_step
    for agent in list(room.agents.values()):
        if not agent.alive:
            continue
        integrate_agent(agent, config, dt)
