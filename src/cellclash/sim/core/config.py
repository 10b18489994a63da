from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

import yaml


@dataclass
class WorldConfig:
    size: float = 5200.0
    pellet_target: int = 700
    pellet_radius_min: float = 4.0
    pellet_radius_max: float = 9.0
    pellet_value_max: int = 2
    virus_count: int = 32
    virus_radius: float = 36.0
    virus_margin: float = 240.0


@dataclass
class SpawnConfig:
    margin: float = 280.0
    human_mass: float = 55.0
    human_radius: float = 36.0
    bot_mass_min: float = 32.0
    bot_mass_spread: float = 70.0
    bot_radius_min: float = 22.0
    bot_radius_spread: float = 20.0
    color_min: int = 70
    color_spread: int = 185
    initial_split_timer: float = 999.0


@dataclass
class MovementConfig:
    base_speed: float = 260.0
    size_penalty_radius: float = 215.0
    size_penalty_floor: float = 0.26
    congestion_slope: float = 0.55
    congestion_floor: float = 0.55
    boost_multiplier: float = 1.55
    knockback_damping_per_second: float = 3.8


@dataclass
class DecayConfig:
    min_mass: float = 10.0
    min_radius: float = 14.0
    human_mass_per_second: float = 0.22
    bot_mass_per_second: float = 0.16
    radius_fraction: float = 0.08
    boost_mass_per_second: float = 1.75
    boost_radius_fraction: float = 0.12


@dataclass
class GrowthConfig:
    soft_cap: float = 1400.0
    min_gain_fraction: float = 0.25
    radius_per_mass: float = 0.22


@dataclass
class EngulfConfig:
    eat_margin: float = 1.12
    overlap_factor: float = 0.65
    min_mass_fraction: float = 0.12
    max_mass_fraction: float = 0.50


@dataclass
class VirusConfig:
    pop_radius: float = 62.0
    fragment_count: int = 8
    fragment_offset: float = 10.0
    fragment_speed_min: float = 270.0
    fragment_speed_spread: float = 220.0
    bounce_impulse: float = 220.0


@dataclass
class SplitConfig:
    min_radius_multiple: float = 2.2
    radius_factor: float = 0.72
    offset: float = 8.0
    impulse: float = 580.0


@dataclass
class BotConfig:
    perception_radius: float = 900.0
    threat_margin: float = 1.10
    prey_margin: float = 1.20
    chase_boost_chance: float = 0.20
    cell_size: float = 450.0


@dataclass
class RoomConfig:
    default_max_players: int = 60
    min_players: int = 8
    max_players: int = 80
    default_bots: int = 45
    min_bots: int = 0
    max_bots: int = 120
    human_timeout_seconds: float = 12.0
    name_max_length: int = 14
    leaderboard_size: int = 10


@dataclass
class SimulationConfig:
    time_step: float = 1.0 / 20.0
    config_version: str = "v1"
    world: WorldConfig = field(default_factory=WorldConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)
    movement: MovementConfig = field(default_factory=MovementConfig)
    decay: DecayConfig = field(default_factory=DecayConfig)
    growth: GrowthConfig = field(default_factory=GrowthConfig)
    engulf: EngulfConfig = field(default_factory=EngulfConfig)
    virus: VirusConfig = field(default_factory=VirusConfig)
    split: SplitConfig = field(default_factory=SplitConfig)
    bots: BotConfig = field(default_factory=BotConfig)
    room: RoomConfig = field(default_factory=RoomConfig)

    @property
    def tick_rate(self) -> float:
        return 0.0 if self.time_step <= 0 else 1.0 / self.time_step

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data.get("simulation", data))


@dataclass
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    host: str = "0.0.0.0"
    port: int = 8080
    room_idle_seconds: float = 300.0
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        raw = yaml.safe_load(Path(path).read_text()) or {}
        simulation = load_config(raw.get("simulation", {}))
        app_values = {k: v for k, v in raw.items() if k != "simulation"}
        return AppConfig(simulation=simulation, **app_values)


_SECTIONS = {
    "world": WorldConfig,
    "spawn": SpawnConfig,
    "movement": MovementConfig,
    "decay": DecayConfig,
    "growth": GrowthConfig,
    "engulf": EngulfConfig,
    "virus": VirusConfig,
    "split": SplitConfig,
    "bots": BotConfig,
    "room": RoomConfig,
}


def load_config(raw: Dict[str, Any]) -> SimulationConfig:
    known = {f.name for f in fields(SimulationConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"unknown simulation config keys: {sorted(unknown)}")
    sections = {name: cls(**(raw.get(name) or {})) for name, cls in _SECTIONS.items()}
    sim_values = {k: v for k, v in raw.items() if k not in _SECTIONS}
    return SimulationConfig(**sections, **sim_values)
