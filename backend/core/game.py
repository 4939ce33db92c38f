from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .board import Board
from .errors import InvalidMove, NotYourTurn
from .move import Move
from .pieces import Color, Piece

logger = logging.getLogger(__name__)


class GameState(Enum):
    WAITING_FOR_PLAYERS = "WaitingForPlayers"
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"


@dataclass
class MoveRecord:
    player_id: str
    move: Move
    captured: Optional[Piece] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None


@dataclass(frozen=True)
class MoveOutcome:
    success: bool
    error: Optional[str] = None

    @classmethod
    def rejected(cls, reason: str) -> "MoveOutcome":
        return cls(success=False, error=reason)


class Game:
    """One match between two players: board, turn and lifecycle state."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        self.board = Board()
        self.current_player = Color.WHITE
        self.state = GameState.WAITING_FOR_PLAYERS
        self.player1_id: Optional[str] = None
        self.player2_id: Optional[str] = None
        self.winner: Optional[Color] = None
        self.finished_at: Optional[float] = None
        self.move_history: list[MoveRecord] = []

    # players -------------------------------------------------------------

    def addFirstPlayer(self, player_id: str) -> None:
        if self.state is not GameState.WAITING_FOR_PLAYERS or self.player1_id is not None:
            raise RuntimeError(f"Game {self.game_id} already has a first player.")
        self.player1_id = player_id

    def startGame(self, player2_id: str) -> None:
        if self.state is not GameState.WAITING_FOR_PLAYERS:
            raise RuntimeError(f"Game {self.game_id} is already in progress.")
        if self.player1_id is None:
            raise RuntimeError(f"Game {self.game_id} cannot start without a first player.")
        self.player2_id = player2_id
        self.state = GameState.IN_PROGRESS
        logger.info("Game %s started: %s (white) vs %s (black)", self.game_id, self.player1_id, player2_id)

    @property
    def is_waiting_for_opponent(self) -> bool:
        return (
            self.state is GameState.WAITING_FOR_PLAYERS
            and self.player1_id is not None
            and self.player2_id is None
        )

    @property
    def is_finished(self) -> bool:
        return self.state is GameState.FINISHED

    def participants(self) -> list[str]:
        return [player for player in (self.player1_id, self.player2_id) if player is not None]

    def hasPlayer(self, player_id: str) -> bool:
        return player_id in self.participants()

    def getPlayerColor(self, player_id: str) -> Color:
        if player_id == self.player1_id:
            return Color.WHITE
        if player_id == self.player2_id:
            return Color.BLACK
        raise ValueError(f"Player {player_id} is not in game {self.game_id}.")

    def getPlayerId(self, color: Color) -> Optional[str]:
        return self.player1_id if color is Color.WHITE else self.player2_id

    def isPlayerTurn(self, player_id: str) -> bool:
        if self.state is not GameState.IN_PROGRESS:
            return False
        return player_id is not None and player_id == self.getPlayerId(self.current_player)

    # moves ---------------------------------------------------------------

    def attemptMove(self, player_id: str, from_row: int, from_col: int, to_row: int, to_col: int) -> bool:
        return self.tryMove(player_id, from_row, from_col, to_row, to_col).success

    def tryMove(self, player_id: str, from_row: int, from_col: int, to_row: int, to_col: int) -> MoveOutcome:
        """Like attemptMove, but a rejection carries a readable reason."""
        move = Move((from_row, from_col), (to_row, to_col))
        try:
            self._check_mover(player_id, move)
            record = self._apply(player_id, move)
        except InvalidMove as exc:
            logger.debug("Game %s rejected %s from %s: %s", self.game_id, move, player_id, exc)
            return MoveOutcome.rejected(str(exc))

        self.move_history.append(record)
        self.switchTurn()
        return MoveOutcome(success=True)

    def _check_mover(self, player_id: str, move: Move) -> None:
        if self.state is not GameState.IN_PROGRESS:
            raise InvalidMove(f"Game is not in progress ({self.state.value}).")
        if not self.isPlayerTurn(player_id):
            raise NotYourTurn(f"Not your turn: {self.current_player.value} to move.")
        row, col = move.start
        piece = self.board.getPiece(row, col)
        if piece is None:
            raise InvalidMove(f"No piece at row {row}, col {col}.")
        if piece.color is not self.current_player:
            raise InvalidMove(f"Piece at row {row}, col {col} is not yours.")

    def _apply(self, player_id: str, move: Move) -> MoveRecord:
        # capture first, then simple move
        (from_row, from_col), (to_row, to_col) = move.start, move.end
        if self.board.isLegalCapture(from_row, from_col, to_row, to_col):
            captured = self.board.applyCapture(from_row, from_col, to_row, to_col)
            return MoveRecord(player_id=player_id, move=move, captured=captured)
        self.board.applyMove(from_row, from_col, to_row, to_col)
        return MoveRecord(player_id=player_id, move=move)

    def switchTurn(self) -> None:
        self.current_player = self.current_player.opponent
        self.evaluateGameOver()

    def evaluateGameOver(self) -> bool:
        if self.is_finished:
            return True
        if self.board.hasAnyLegalMove(self.current_player):
            return False
        logger.info("Game %s over: %s has no legal move", self.game_id, self.current_player.value)
        self.finish(winner=self.current_player.opponent)
        return True

    def finish(self, winner: Optional[Color] = None, now: Optional[float] = None) -> bool:
        """Move to Finished. Returns False when the game had already finished."""
        if self.is_finished:
            return False
        self.state = GameState.FINISHED
        self.winner = winner
        self.finished_at = time.monotonic() if now is None else now
        return True

    def __repr__(self) -> str:
        return f"Game({self.game_id!r}, {self.state.value}, turn={self.current_player.value})"
