from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from core.game import GameState
from core.pieces import Color, PieceType


class PieceStateModel(BaseModel):
    type: PieceType
    color: Color
    row: int = Field(..., ge=0)
    column: int = Field(..., ge=0)


BoardStateModel = list[list[Optional[PieceStateModel]]]


class GameMessage(BaseModel):
    gameId: Optional[str] = None
    playerId: Optional[str] = None


class JoinGameMessage(GameMessage):
    messageType: Literal["JoinGame"] = "JoinGame"


class GameStartedMessage(GameMessage):
    messageType: Literal["GameStarted"] = "GameStarted"
    player1Id: Optional[str] = None
    player2Id: Optional[str] = None
    yourColor: Color


class MakeMoveMessage(GameMessage):
    messageType: Literal["MakeMove"] = "MakeMove"
    fromRow: int
    fromCol: int
    toRow: int
    toCol: int


class GameStateMessage(GameMessage):
    messageType: Literal["GameState"] = "GameState"
    boardState: BoardStateModel
    currentPlayer: Color
    gameState: GameState


class MoveResultMessage(GameMessage):
    messageType: Literal["MoveResult"] = "MoveResult"
    success: bool
    errorMessage: Optional[str] = None
    boardState: Optional[BoardStateModel] = None
    currentPlayer: Optional[Color] = None
    gameState: Optional[GameState] = None


AnyMessage = Annotated[
    Union[JoinGameMessage, GameStartedMessage, MakeMoveMessage, GameStateMessage, MoveResultMessage],
    Field(discriminator="messageType"),
]

CLIENT_MESSAGES = (JoinGameMessage, MakeMoveMessage)
