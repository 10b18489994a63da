from __future__ import annotations


class CellClashError(Exception):
    """Base class for errors surfaced to the request layer."""


class RoomNotFound(CellClashError):
    def __init__(self, code: str):
        super().__init__(f"room {code!r} not found")
        self.code = code


class RoomFull(CellClashError):
    def __init__(self, code: str, max_players: int):
        super().__init__(f"room {code!r} is full ({max_players} players)")
        self.code = code
        self.max_players = max_players


class IdentityInUse(CellClashError):
    def __init__(self, code: str, agent_id: str):
        super().__init__(f"identity {agent_id!r} is taken by a bot in room {code!r}")
        self.code = code
        self.agent_id = agent_id
