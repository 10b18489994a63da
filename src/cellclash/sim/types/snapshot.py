from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass(slots=True)
class Snapshot:
    code: str
    tick: int
    clock: float
    world: "SnapshotWorld"
    pellets: List[Dict[str, float]]
    viruses: List[Dict[str, float]]
    agents: List[Dict[str, Any]]
    leaderboard: List[Dict[str, Any]]


@dataclass(slots=True)
class SnapshotWorld:
    size: float
    tick_rate: float
    seed: int
    config_version: str
