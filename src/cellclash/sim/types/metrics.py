from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    clock: float
    agents: int
    humans: int
    bots: int
    blobs: int
    total_mass: float
    pellets_eaten: int
    blobs_engulfed: int
    viruses_popped: int
    splits: int
    deaths: int
    bots_respawned: int
    humans_removed: int
    tick_duration_ms: float = 0.0
