"""Error taxonomy shared by the engine and the server layer."""

from __future__ import annotations


class CheckersError(Exception):
    pass


class InvalidMove(CheckersError, ValueError):
    pass


class InvalidCapture(InvalidMove):
    pass


class NotYourTurn(InvalidMove):
    pass


class GameNotFound(CheckersError, LookupError):
    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game '{game_id}' not found")
        self.game_id = game_id


class ProtocolError(CheckersError, ValueError):
    pass
