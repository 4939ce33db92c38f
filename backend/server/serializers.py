from __future__ import annotations

from typing import Any, Optional

from core.board import Board
from core.game import Game
from core.pieces import Color, Piece

from .schemas import BoardStateModel, GameStartedMessage, GameStateMessage, MoveResultMessage, PieceStateModel


def serialize_piece(piece: Piece) -> PieceStateModel:
    return PieceStateModel(
        type=piece.piece_type,
        color=piece.color,
        row=piece.row,
        column=piece.col,
    )


def serialize_board(board: Board) -> BoardStateModel:
    return [
        [None if piece is None else serialize_piece(piece) for piece in row]
        for row in board.board
    ]


def game_started_message(game: Game, player_id: str) -> GameStartedMessage:
    return GameStartedMessage(
        gameId=game.game_id,
        playerId=player_id,
        player1Id=game.player1_id,
        player2Id=game.player2_id,
        yourColor=game.getPlayerColor(player_id),
    )


def game_state_message(game: Game, player_id: str) -> GameStateMessage:
    return GameStateMessage(
        gameId=game.game_id,
        playerId=player_id,
        boardState=serialize_board(game.board),
        currentPlayer=game.current_player,
        gameState=game.state,
    )


def move_rejected_message(
    error: str,
    player_id: str,
    game: Optional[Game] = None,
    game_id: Optional[str] = None,
) -> MoveResultMessage:
    if game is None:
        return MoveResultMessage(gameId=game_id, playerId=player_id, success=False, errorMessage=error)
    return MoveResultMessage(
        gameId=game.game_id,
        playerId=player_id,
        success=False,
        errorMessage=error,
        boardState=serialize_board(game.board),
        currentPlayer=game.current_player,
        gameState=game.state,
    )


def serialize_game(game: Game) -> dict[str, Any]:
    """Status payload for HTTP queries; not part of the WebSocket protocol."""
    last_record = game.move_history[-1] if game.move_history else None
    return {
        "gameId": game.game_id,
        "gameState": game.state.value,
        "currentPlayer": game.current_player.value,
        "player1Id": game.player1_id,
        "player2Id": game.player2_id,
        "winner": game.winner.value if game.winner else None,
        "pieceCounts": {
            color.value: game.board.pieceCount(color) for color in Color
        },
        "moveCount": len(game.move_history),
        "lastMove": None
        if last_record is None
        else {
            "from": {"row": last_record.move.start[0], "col": last_record.move.start[1]},
            "to": {"row": last_record.move.end[0], "col": last_record.move.end[1]},
            "isCapture": last_record.is_capture,
        },
        "boardState": [
            [None if cell is None else cell.model_dump(mode="json") for cell in row]
            for row in serialize_board(game.board)
        ],
    }
