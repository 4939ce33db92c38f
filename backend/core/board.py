from __future__ import annotations

import logging
from typing import Optional

from .errors import InvalidCapture, InvalidMove
from .move import Coordinate, Move
from .pieces import Color, Piece

logger = logging.getLogger(__name__)

BOARD_SIZE = 8
ROWS_TO_FILL = 3

Grid = list[list[Optional[Piece]]]


class Board:
    def __init__(self) -> None:
        self.board: Grid = [[None for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]
        self.boardSize = BOARD_SIZE
        self._set_start_pieces()

    @classmethod
    def empty(cls) -> "Board":
        board = cls.__new__(cls)
        board.boardSize = BOARD_SIZE
        board.board = [[None for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]
        return board

    def getPiece(self, row: int, col: int) -> Optional[Piece]:
        if self._is_within_bounds(row, col):
            return self.board[row][col]
        return None

    def placePiece(self, piece: Piece) -> Piece:
        if not self._is_within_bounds(piece.row, piece.col):
            raise ValueError(f"Square ({piece.row},{piece.col}) is off the board.")
        if self.board[piece.row][piece.col] is not None:
            raise ValueError(f"Square ({piece.row},{piece.col}) is already occupied.")
        self.board[piece.row][piece.col] = piece
        return piece

    def getAllPieces(self, color: Optional[Color] = None) -> list[Piece]:
        pieces: list[Piece] = []
        for row in range(self.boardSize):
            for col in range(self.boardSize):
                piece = self.board[row][col]
                if piece is None:
                    continue
                if color is None or piece.color is color:
                    pieces.append(piece)
        return pieces

    def pieceCount(self, color: Optional[Color] = None) -> int:
        return len(self.getAllPieces(color))

    # legality ------------------------------------------------------------

    def isLegalSimpleMove(self, from_row: int, from_col: int, to_row: int, to_col: int) -> bool:
        piece = self._movable_piece(from_row, from_col, to_row, to_col)
        if piece is None:
            return False
        return piece.isLegalMove(to_row, to_col)

    def isLegalCapture(self, from_row: int, from_col: int, to_row: int, to_col: int) -> bool:
        piece = self._movable_piece(from_row, from_col, to_row, to_col)
        if piece is None:
            return False
        if not piece.isLegalMove(to_row, to_col, is_capture=True):
            return False
        mid_row, mid_col = Move((from_row, from_col), (to_row, to_col)).midpoint
        captured = self.getPiece(mid_row, mid_col)
        return captured is not None and captured.color is not piece.color

    def legalDestinations(self, row: int, col: int) -> list[Coordinate]:
        if self.getPiece(row, col) is None:
            return []
        destinations: list[Coordinate] = []
        for to_row in range(self.boardSize):
            for to_col in range(self.boardSize):
                if self.isLegalSimpleMove(row, col, to_row, to_col) or self.isLegalCapture(
                    row, col, to_row, to_col
                ):
                    destinations.append((to_row, to_col))
        return destinations

    def hasAnyLegalMove(self, color: Color) -> bool:
        return any(self.legalDestinations(piece.row, piece.col) for piece in self.getAllPieces(color))

    # mutation ------------------------------------------------------------

    def applyMove(self, from_row: int, from_col: int, to_row: int, to_col: int) -> Piece:
        if not self.isLegalSimpleMove(from_row, from_col, to_row, to_col):
            raise InvalidMove(f"Illegal move from ({from_row},{from_col}) to ({to_row},{to_col}).")
        return self._relocate(from_row, from_col, to_row, to_col)

    def applyCapture(self, from_row: int, from_col: int, to_row: int, to_col: int) -> Piece:
        """Jump over the midpoint piece and remove it. Returns the captured piece."""
        if not self.isLegalCapture(from_row, from_col, to_row, to_col):
            raise InvalidCapture(f"Illegal capture from ({from_row},{from_col}) to ({to_row},{to_col}).")
        mid_row, mid_col = Move((from_row, from_col), (to_row, to_col)).midpoint
        captured = self.board[mid_row][mid_col]
        self.board[mid_row][mid_col] = None
        self._relocate(from_row, from_col, to_row, to_col)
        return captured

    def _relocate(self, from_row: int, from_col: int, to_row: int, to_col: int) -> Piece:
        piece = self.board[from_row][from_col]
        self.board[from_row][from_col] = None
        self.board[to_row][to_col] = piece
        piece.move(to_row, to_col)
        self._handle_promotion(piece)
        return piece

    def _handle_promotion(self, piece: Piece) -> None:
        last_row = 0 if piece.color is Color.WHITE else self.boardSize - 1
        if piece.row == last_row and piece.promote():
            logger.debug("Promoted %r to king", piece)

    # helpers -------------------------------------------------------------

    def _movable_piece(self, from_row: int, from_col: int, to_row: int, to_col: int) -> Optional[Piece]:
        if not self._is_within_bounds(from_row, from_col) or not self._is_within_bounds(to_row, to_col):
            return None
        if self.board[to_row][to_col] is not None:
            return None
        return self.board[from_row][from_col]

    def _set_start_pieces(self) -> None:
        for row in range(self.boardSize):
            for col in range(self.boardSize):
                if (row + col) % 2 == 1:
                    if row < ROWS_TO_FILL:
                        self.board[row][col] = Piece(Color.BLACK, row, col)
                    elif row >= self.boardSize - ROWS_TO_FILL:
                        self.board[row][col] = Piece(Color.WHITE, row, col)

    def _is_within_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.boardSize and 0 <= col < self.boardSize

    def __str__(self) -> str:
        lines = []
        for row in self.board:
            cells = []
            for piece in row:
                if piece is None:
                    cells.append(".")
                    continue
                symbol = "w" if piece.color is Color.WHITE else "b"
                cells.append(symbol.upper() if piece.is_king else symbol)
            lines.append(" ".join(cells))
        return "\n".join(lines)
