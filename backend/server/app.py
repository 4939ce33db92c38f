from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from core.errors import GameNotFound, ProtocolError

from .config import ServerSettings
from .protocol import decode_message
from .registry import Dispatch, SessionRegistry, deliver
from .schemas import CLIENT_MESSAGES, GameMessage, JoinGameMessage

logger = logging.getLogger(__name__)


def handle_message(registry: SessionRegistry, player_id: str, message: GameMessage) -> list[Dispatch]:
    """Route one decoded client message to the registry."""
    if not isinstance(message, CLIENT_MESSAGES):
        raise ProtocolError(f"Unexpected {type(message).__name__} from a client.")
    if isinstance(message, JoinGameMessage):
        game, color, dispatches = registry.join(player_id)
        logger.info("Player %s joined game %s as %s", player_id, game.game_id, color.value)
        return dispatches
    # MakeMove: the connection's own id is authoritative, the client-supplied playerId is ignored.
    return registry.move(
        player_id,
        message.gameId,
        message.fromRow,
        message.fromCol,
        message.toRow,
        message.toCol,
    )


async def serve_connection(websocket: WebSocket, registry: SessionRegistry) -> None:
    await websocket.accept()
    player_id = str(uuid.uuid4())
    registry.connect(player_id, websocket)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                raw = frame.get("bytes")
            try:
                message = decode_message(raw)
                dispatches = handle_message(registry, player_id, message)
            except ProtocolError as exc:
                logger.warning("Discarding message from player %s: %s", player_id, exc)
                continue
            await deliver(dispatches)
    except WebSocketDisconnect as exc:
        logger.debug("Player %s socket closed with code %s", player_id, exc.code)
    finally:
        await deliver(registry.disconnect(player_id))


def create_app(settings: Optional[ServerSettings] = None, registry: Optional[SessionRegistry] = None) -> FastAPI:
    settings = settings or ServerSettings()
    app = FastAPI(title="Checkers Session Server", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    if registry is None:
        registry = SessionRegistry(finished_game_ttl=settings.finished_game_ttl)
    app.state.registry = registry

    def get_registry() -> SessionRegistry:
        return registry

    @app.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/games/{game_id}")
    def read_game(game_id: str, registry: SessionRegistry = Depends(get_registry)):
        try:
            return registry.describe(game_id)
        except GameNotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await serve_connection(websocket, registry)

    return app


app = create_app(ServerSettings.from_env())
