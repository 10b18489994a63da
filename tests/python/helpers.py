from __future__ import annotations

from pygame.math import Vector2

from cellclash.sim.core.entities import Agent, Blob


def make_blob(x: float, y: float, radius: float, mass: float, split_timer: float = 999.0) -> Blob:
    return Blob(position=Vector2(x, y), mass=mass, radius=radius, split_timer=split_timer)


def make_agent(agent_id: str, *blobs: Blob, is_bot: bool = False, last_seen: float = 1000.0) -> Agent:
    return Agent(
        id=agent_id,
        name=agent_id,
        color=(100, 100, 100),
        is_bot=is_bot,
        blobs=list(blobs),
        last_seen=last_seen,
    )
