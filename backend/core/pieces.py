from __future__ import annotations

from enum import Enum

from .move import Coordinate


class Color(Enum):
    BLACK = "Black"
    WHITE = "White"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceType(Enum):
    NORMAL = "Normal"
    KING = "King"


class Piece:
    def __init__(self, color: Color, row: int, col: int, piece_type: PieceType = PieceType.NORMAL) -> None:
        self._color = color
        self.row = row
        self.col = col
        self.piece_type = piece_type

    @property
    def color(self) -> Color:
        return self._color

    @property
    def is_king(self) -> bool:
        return self.piece_type is PieceType.KING

    @property
    def position(self) -> Coordinate:
        return (self.row, self.col)

    def move(self, new_row: int, new_col: int) -> None:
        self.row = new_row
        self.col = new_col

    def promote(self) -> bool:
        """Crown a Normal piece. Returns True only when the type actually changed."""
        if self.is_king:
            return False
        self.piece_type = PieceType.KING
        return True

    def isLegalMove(self, to_row: int, to_col: int, is_capture: bool = False) -> bool:
        """Movement geometry only: occupancy and board bounds are the board's job."""
        row_diff = to_row - self.row
        col_diff = to_col - self.col
        distance = abs(row_diff)
        if distance != abs(col_diff):
            return False
        if distance != (2 if is_capture else 1):
            return False
        if self.is_king:
            return True
        if self.color is Color.WHITE:
            return row_diff < 0
        return row_diff > 0

    def __repr__(self) -> str:
        piece_type = "K" if self.is_king else "N"
        return f"{piece_type}({self.color.name},{self.row},{self.col})"
