from __future__ import annotations

import pytest

from cellclash.sim.core.config import AppConfig, SimulationConfig, load_config


def test_defaults_match_arena_tuning():
    config = SimulationConfig()
    assert config.tick_rate == pytest.approx(20.0)
    assert config.world.size == 5200.0
    assert config.world.pellet_target == 700
    assert config.world.virus_count == 32
    assert config.decay.min_mass == 10.0
    assert config.decay.min_radius == 14.0
    assert config.room.human_timeout_seconds == 12.0


def test_load_config_overrides_sections():
    config = load_config({"time_step": 0.1, "world": {"size": 1000.0}, "bots": {"perception_radius": 50.0}})
    assert config.time_step == 0.1
    assert config.world.size == 1000.0
    assert config.world.pellet_target == 700
    assert config.bots.perception_radius == 50.0


def test_load_config_rejects_unknown_keys():
    with pytest.raises(ValueError):
        load_config({"wrld": {}})
    with pytest.raises(TypeError):
        load_config({"world": {"sise": 10}})


def test_yaml_round_trip(tmp_path):
    sim_path = tmp_path / "sim.yaml"
    sim_path.write_text("world:\n  size: 2000\nroom:\n  default_bots: 3\n")
    config = SimulationConfig.from_yaml(sim_path)
    assert config.world.size == 2000
    assert config.room.default_bots == 3

    app_path = tmp_path / "app.yaml"
    app_path.write_text("port: 9000\nroom_idle_seconds: 5\nsimulation:\n  growth:\n    soft_cap: 900\n")
    app_config = AppConfig.from_yaml(app_path)
    assert app_config.port == 9000
    assert app_config.room_idle_seconds == 5
    assert app_config.simulation.growth.soft_cap == 900
