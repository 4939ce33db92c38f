"""Core checkers engine package."""

from .board import BOARD_SIZE, Board
from .errors import CheckersError, GameNotFound, InvalidCapture, InvalidMove, NotYourTurn, ProtocolError
from .game import Game, GameState, MoveOutcome, MoveRecord
from .move import Coordinate, Move
from .pieces import Color, Piece, PieceType

__all__ = [
	"BOARD_SIZE",
	"Board",
	"Game",
	"GameState",
	"MoveOutcome",
	"MoveRecord",
	"Move",
	"Coordinate",
	"Color",
	"Piece",
	"PieceType",
	"CheckersError",
	"GameNotFound",
	"InvalidCapture",
	"InvalidMove",
	"NotYourTurn",
	"ProtocolError",
]
