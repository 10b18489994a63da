from __future__ import annotations

import asyncio

import pytest

from cellclash.app.rooms import CODE_ALPHABET, CODE_LENGTH, RoomService
from cellclash.sim.core.config import AppConfig
from cellclash.sim.core.errors import RoomNotFound


@pytest.fixture
def service(empty_config, clock) -> RoomService:
    return RoomService(AppConfig(simulation=empty_config, room_idle_seconds=300.0), clock=clock)


def test_create_join_input_snapshot(service):
    async def scenario():
        room = await service.create_room()
        assert len(room.code) == CODE_LENGTH
        assert set(room.code) <= set(CODE_ALPHABET)

        agent = await service.join_room(room.code.lower(), "A very long player name", None)
        assert agent.id.startswith("p_")
        assert agent.name == "A very long pl"

        assert await service.submit_input(room.code, agent.id, 1.0, 0.0, False, False)
        await service.tick_all()
        snapshot = await service.get_snapshot(room.code)
        return agent, snapshot

    agent, snapshot = asyncio.run(scenario())
    assert snapshot.tick == 1
    assert [entry["id"] for entry in snapshot.agents] == [agent.id]


def test_unknown_room(service):
    async def scenario():
        with pytest.raises(RoomNotFound):
            await service.join_room("NOPE00", "x", None)
        with pytest.raises(RoomNotFound):
            await service.get_snapshot("NOPE00")
        return await service.submit_input("NOPE00", "p_x", 1.0, 0.0, False, False)

    assert asyncio.run(scenario()) is False


def test_create_room_clamps_options(service):
    room = asyncio.run(service.create_room(max_players=1000, bot_count=999))
    assert room.max_players == 80
    assert room.bot_count == 120
    assert service.rooms[room.code] is room


def test_codes_are_unique(service):
    async def scenario():
        return [(await service.create_room()).code for _ in range(50)]

    codes = asyncio.run(scenario())
    assert len(set(codes)) == 50


def test_idle_rooms_expire(service, clock):
    async def scenario():
        idle = await service.create_room()
        busy = await service.create_room()
        await service.join_room(busy.code, "Stay", "p_stay")
        clock.advance(200.0)
        first = await service.expire_idle_rooms()
        clock.advance(101.0)
        second = await service.expire_idle_rooms()
        return idle.code, busy.code, first, second

    idle_code, busy_code, first, second = asyncio.run(scenario())
    assert first == []
    assert second == [idle_code]
    assert idle_code not in service.rooms
    assert busy_code in service.rooms


def test_start_and_stop_loop(service):
    async def scenario():
        room = await service.create_room()
        await service.start()
        assert service.running
        await asyncio.sleep(0.2)
        await service.stop()
        return room.tick

    ticks = asyncio.run(scenario())
    assert ticks >= 1
    assert not service.running
