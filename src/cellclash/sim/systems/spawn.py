from __future__ import annotations

from typing import List, Tuple

from pygame.math import Vector2

from ..core.config import SimulationConfig, SpawnConfig
from ..core.entities import Agent, Blob, Pellet, Virus
from ..core.rng import DeterministicRng

BOT_NAMES = (
    "Nova", "Jax", "Raven", "Milo", "Sable", "Kairo", "Vex", "Lyra", "Nico", "Aria", "Blitz", "Echo",
    "Zane", "Iris", "Orion", "Skye", "Rune", "Onyx", "Atlas", "Luna", "Koda", "Seraph", "Quinn", "Nyx",
    "Axel", "Rowan", "Dante", "Freya", "Kai", "Mako", "Haze", "Drift", "Hex", "Titan", "Ghost", "Feral",
    "Sol", "Astra", "Rook", "Saffron", "Vanta", "Mira", "Piper", "Juno", "Vale", "Cove", "Wren", "Indi",
)
_NAME_ATTEMPTS = 200


def _random_color(rng: DeterministicRng, spawn: SpawnConfig) -> Tuple[int, int, int]:
    return (
        int(spawn.color_min + rng.next_float() * spawn.color_spread),
        int(spawn.color_min + rng.next_float() * spawn.color_spread),
        int(spawn.color_min + rng.next_float() * spawn.color_spread),
    )


def spawn_agent(
    agent_id: str,
    name: str,
    is_bot: bool,
    rng: DeterministicRng,
    config: SimulationConfig,
    now: float = 0.0,
) -> Agent:
    """Create an agent with a single blob placed away from the world edges.

    Bots draw their starting mass and radius from a range so a room holds a
    spread of easy and hard opponents; humans always start from the same
    values.
    """
    spawn = config.spawn
    if is_bot:
        mass = spawn.bot_mass_min + rng.next_float() * spawn.bot_mass_spread
        radius = spawn.bot_radius_min + rng.next_float() * spawn.bot_radius_spread
    else:
        mass = spawn.human_mass
        radius = spawn.human_radius
    color = _random_color(rng, spawn)

    usable = max(0.0, config.world.size - 2.0 * spawn.margin)
    position = Vector2(
        spawn.margin + rng.next_float() * usable,
        spawn.margin + rng.next_float() * usable,
    )
    blob = Blob(position=position, mass=mass, radius=radius, split_timer=spawn.initial_split_timer)
    return Agent(id=agent_id, name=name, color=color, is_bot=is_bot, blobs=[blob], last_seen=now)


def spawn_pellet(rng: DeterministicRng, config: SimulationConfig) -> Pellet:
    world = config.world
    position = Vector2(rng.next_float() * world.size, rng.next_float() * world.size)
    radius = rng.next_range(world.pellet_radius_min, world.pellet_radius_max)
    value = 1 + rng.next_int(max(1, world.pellet_value_max))
    return Pellet(position=position, radius=radius, value=value)


def spawn_virus(rng: DeterministicRng, config: SimulationConfig) -> Virus:
    world = config.world
    usable = max(0.0, world.size - 2.0 * world.virus_margin)
    position = Vector2(
        world.virus_margin + rng.next_float() * usable,
        world.virus_margin + rng.next_float() * usable,
    )
    return Virus(position=position, radius=world.virus_radius)


def bot_roster(count: int, code: str, rng: DeterministicRng) -> List[Tuple[str, str]]:
    """Return (identity, name) pairs for a room's bots, names unique while the list lasts."""
    used: set[str] = set()
    roster = []
    for index in range(count):
        name = f"Bot{100 + rng.next_int(900)}"
        for _ in range(_NAME_ATTEMPTS):
            candidate = BOT_NAMES[rng.next_int(len(BOT_NAMES))]
            if candidate not in used:
                used.add(candidate)
                name = candidate
                break
        roster.append((f"bot_{index}_{code}", name))
    return roster
