from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from pygame.math import Vector2


@dataclass(slots=True)
class Pellet:
    position: Vector2
    radius: float
    value: int


@dataclass(slots=True)
class Virus:
    position: Vector2
    radius: float


@dataclass(slots=True)
class Blob:
    position: Vector2
    mass: float
    radius: float
    velocity: Vector2 = field(default_factory=Vector2)
    split_timer: float = 0.0


@dataclass(slots=True)
class Agent:
    id: str
    name: str
    color: Tuple[int, int, int]
    is_bot: bool
    blobs: List[Blob] = field(default_factory=list)
    aim: Vector2 = field(default_factory=Vector2)
    boost: bool = False
    split_requested: bool = False
    last_seen: float = 0.0

    @property
    def alive(self) -> bool:
        return bool(self.blobs)

    @property
    def total_mass(self) -> float:
        return sum(blob.mass for blob in self.blobs)

