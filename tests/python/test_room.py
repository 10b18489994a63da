from __future__ import annotations

import pytest
from pytest import approx

from cellclash.sim.core.config import SimulationConfig
from cellclash.sim.core.errors import IdentityInUse, RoomFull
from cellclash.sim.core.room import Room

from helpers import make_agent, make_blob


def test_room_clamps_capacity_and_bots(empty_config, clock):
    room = Room("CLAMP1", empty_config, max_players=500, bot_count=-3, clock=clock)
    assert room.max_players == 80
    assert room.bot_count == 0

    room = Room("CLAMP2", empty_config, max_players=2, bot_count=500, clock=clock)
    assert room.max_players == 8
    assert room.bot_count == 120

    room = Room("CLAMP3", empty_config, max_players="lots", clock=clock)
    assert room.max_players == 60

    room = Room("CLAMP4", empty_config, max_players=float("inf"), bot_count=float("nan"), clock=clock)
    assert room.max_players == 60
    assert room.bot_count == 0


def test_new_room_is_populated(clock):
    room = Room("FULLUP", SimulationConfig(), bot_count=5, clock=clock)
    assert len(room.pellets) == 700
    assert len(room.viruses) == 32
    assert sorted(room.agents) == [f"bot_{i}_FULLUP" for i in range(5)]
    assert all(agent.is_bot and agent.alive for agent in room.agents.values())


def test_held_aim_moves_player_to_world_edge(empty_room):
    agent = empty_room.join("Runner", "p_runner")
    assert empty_room.submit_input("p_runner", 1.0, 0.0, False, False)

    world_size = empty_room.config.world.size
    previous = agent.blobs[0].position.x
    at_wall = False
    for _ in range(600):
        empty_room.step()
        blob = agent.blobs[0]
        x = blob.position.x
        if at_wall:
            assert x == approx(world_size - blob.radius)
        else:
            assert x > previous
            at_wall = x == approx(world_size - blob.radius)
        previous = x

    assert at_wall


def test_larger_player_engulfs_smaller_on_contact(empty_room):
    big = make_agent("big", make_blob(2000.0, 2000.0, 100.0, 400.0))
    small = make_agent("small", make_blob(2000.0, 2000.0, 50.0, 100.0))
    empty_room.agents.update({"big": big, "small": small})

    metrics = empty_room.step()

    assert not small.alive
    assert big.total_mass > 410.0
    assert metrics.blobs_engulfed == 1
    assert metrics.deaths == 1
    ids = [entry["id"] for entry in empty_room.snapshot().agents]
    assert ids == ["big"]
    # Dead humans keep their slot until they time out.
    assert "small" in empty_room.agents


def test_split_request_below_mass_floor_is_dropped(empty_room):
    agent = empty_room.join("Crumb", "p_crumb")
    blob = agent.blobs[0]
    blob.mass = 10.0
    blob.radius = 32.0
    empty_room.submit_input("p_crumb", 1.0, 0.0, False, True)

    metrics = empty_room.step()

    assert len(agent.blobs) == 1
    assert metrics.splits == 0
    assert agent.total_mass == approx(10.0)
    assert agent.split_requested is False


def test_dead_bot_respawns_with_same_identity(empty_config, clock):
    room = Room("BOTS01", empty_config, bot_count=2, clock=clock)
    bot_id = "bot_0_BOTS01"
    name = room.agents[bot_id].name
    room.agents[bot_id].blobs.clear()

    metrics = room.step()

    bot = room.agents[bot_id]
    assert bot.alive
    assert bot.is_bot
    assert bot.name == name
    assert metrics.bots_respawned == 1
    assert len(room.agents) == 2


def test_inactive_human_is_removed(empty_room, clock):
    empty_room.join("Quiet", "p_quiet")
    empty_room.join("Busy", "p_busy")
    clock.advance(6.0)
    empty_room.submit_input("p_busy", 0.0, 1.0, False, False)
    clock.advance(7.0)

    metrics = empty_room.step()

    assert "p_quiet" not in empty_room.agents
    assert "p_busy" in empty_room.agents
    assert metrics.humans_removed == 1


def test_join_respects_capacity_and_allows_rejoin(empty_config, clock):
    room = Room("CAPS01", empty_config, max_players=8, bot_count=0, clock=clock)
    for index in range(8):
        room.join(f"P{index}", f"p_{index}")
    with pytest.raises(RoomFull):
        room.join("Late", "p_late")

    room.agents["p_3"].blobs.clear()
    rejoined = room.join("Again", "p_3")
    assert rejoined.alive
    assert rejoined.name == "Again"
    assert room.human_count() == 8


def test_join_cannot_take_over_bot(empty_config, clock):
    room = Room("BOTS02", empty_config, bot_count=1, clock=clock)
    with pytest.raises(IdentityInUse):
        room.join("Impostor", "bot_0_BOTS02")
    assert room.agents["bot_0_BOTS02"].is_bot


def test_input_rejected_for_unknown_dead_or_bot(empty_config, clock):
    room = Room("INPUT1", empty_config, bot_count=1, clock=clock)
    agent = room.join("Ghost", "p_ghost")
    assert not room.submit_input("p_nobody", 1.0, 0.0, False, False)
    assert not room.submit_input("bot_0_INPUT1", 1.0, 0.0, False, False)
    agent.blobs.clear()
    assert not room.submit_input("p_ghost", 1.0, 0.0, False, False)


def test_input_normalizes_aim(empty_room):
    agent = empty_room.join("Aim", "p_aim")
    empty_room.submit_input("p_aim", 3.0, 4.0, True, False)
    assert agent.aim.x == approx(0.6)
    assert agent.aim.y == approx(0.8)
    assert agent.boost is True

    empty_room.submit_input("p_aim", 0.0, 0.0, False, False)
    assert agent.aim.length() == 0.0


def test_split_request_applies_on_next_tick(empty_room):
    agent = empty_room.join("Split", "p_split")
    empty_room.submit_input("p_split", 1.0, 0.0, False, True)
    assert len(agent.blobs) == 1

    metrics = empty_room.step()

    assert len(agent.blobs) == 2
    assert metrics.splits == 1
    assert agent.split_requested is False


def test_same_code_replays_identically():
    config = SimulationConfig()
    first = Room("SAME01", config, bot_count=12, clock=None)
    second = Room("SAME01", config, bot_count=12, clock=None)
    for room in (first, second):
        room.join("Twin", "p_twin")
        room.submit_input("p_twin", -1.0, 0.5, False, False)
        for _ in range(60):
            room.step()
    assert first.snapshot() == second.snapshot()


def test_snapshot_leaderboard_is_sorted_and_capped(clock):
    room = Room("BOARD1", SimulationConfig(), bot_count=25, clock=clock)
    room.step()
    snapshot = room.snapshot()
    masses = [entry["mass"] for entry in snapshot.leaderboard]
    assert len(masses) == 10
    assert masses == sorted(masses, reverse=True)
    assert all(isinstance(mass, int) for mass in masses)
    assert snapshot.world.size == room.config.world.size
    assert snapshot.world.seed == room.seed
