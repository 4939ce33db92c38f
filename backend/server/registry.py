from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Optional, Protocol

from core.errors import GameNotFound
from core.game import Game
from core.pieces import Color

from .protocol import encode_message
from .schemas import GameMessage
from .serializers import game_started_message, game_state_message, move_rejected_message, serialize_game

logger = logging.getLogger(__name__)

DEFAULT_FINISHED_GAME_TTL = 300.0


class Connection(Protocol):
    async def send_text(self, data: str) -> None: ...


@dataclass(frozen=True)
class Dispatch:
    player_id: str
    connection: Connection
    message: GameMessage


class SessionRegistry:
    """Thread-safe table of games and player connections.

    Every public method runs under one lock and returns the notifications it
    produced as Dispatch records. Sending them is left to the caller, after
    the lock has been released; see deliver().
    """

    def __init__(
        self,
        finished_game_ttl: Optional[float] = DEFAULT_FINISHED_GAME_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.lock = Lock()
        self.games: dict[str, Game] = {}
        self.connections: dict[str, Connection] = {}
        self.finished_game_ttl = finished_game_ttl
        self._clock = clock

    # public API ---------------------------------------------------------

    def connect(self, player_id: str, connection: Connection) -> None:
        with self.lock:
            self.connections[player_id] = connection
            logger.info("Player %s connected", player_id)

    def join(self, player_id: str) -> tuple[Game, Color, list[Dispatch]]:
        with self.lock:
            self._evict_finished_locked(self._clock())
            game = self._find_waiting_game(player_id)
            if game is None:
                game = Game(str(uuid.uuid4()))
                game.addFirstPlayer(player_id)
                self.games[game.game_id] = game
                logger.info("New game %s created by player %s", game.game_id, player_id)
                recipients = [player_id]
            else:
                game.startGame(player_id)
                recipients = game.participants()

            dispatches: list[Dispatch] = []
            for recipient in recipients:
                dispatches += self._dispatch(recipient, game_started_message(game, recipient))
                dispatches += self._dispatch(recipient, game_state_message(game, recipient))
            return game, game.getPlayerColor(player_id), dispatches

    def move(
        self,
        player_id: str,
        game_id: Optional[str],
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
    ) -> list[Dispatch]:
        with self.lock:
            try:
                game = self._require_game(game_id)
            except GameNotFound as exc:
                logger.warning("Player %s moved in unknown game %s", player_id, game_id)
                return self._dispatch(player_id, move_rejected_message(str(exc), player_id, game_id=game_id))

            outcome = game.tryMove(player_id, from_row, from_col, to_row, to_col)
            if not outcome.success:
                return self._dispatch(player_id, move_rejected_message(outcome.error, player_id, game=game))
            if game.is_finished:
                game.finished_at = self._clock()
                logger.info("Game %s finished, winner %s", game.game_id, game.winner.value if game.winner else None)
            return self._broadcast_state(game)

    def disconnect(self, player_id: str) -> list[Dispatch]:
        with self.lock:
            self.connections.pop(player_id, None)
            logger.info("Player %s disconnected", player_id)
            dispatches: list[Dispatch] = []
            for game in self.games.values():
                if not game.hasPlayer(player_id) or game.is_finished:
                    continue
                remaining = [other for other in game.participants() if other != player_id]
                winner = game.getPlayerColor(remaining[0]) if remaining else None
                game.finish(winner=winner, now=self._clock())
                logger.info("Game %s finished: player %s left", game.game_id, player_id)
                for other in remaining:
                    dispatches += self._dispatch(other, game_state_message(game, other))
            return dispatches

    def describe(self, game_id: str) -> dict[str, Any]:
        with self.lock:
            self._evict_finished_locked(self._clock())
            return serialize_game(self._require_game(game_id))

    def evict_finished(self, now: Optional[float] = None) -> list[str]:
        with self.lock:
            return self._evict_finished_locked(self._clock() if now is None else now)

    def is_connected(self, player_id: str) -> bool:
        with self.lock:
            return player_id in self.connections

    # helpers ------------------------------------------------------------

    def _find_waiting_game(self, player_id: str) -> Optional[Game]:
        for game in self.games.values():
            if game.is_waiting_for_opponent and game.player1_id != player_id:
                return game
        return None

    def _require_game(self, game_id: Optional[str]) -> Game:
        game = self.games.get(game_id or "")
        if game is None:
            raise GameNotFound(game_id or "")
        return game

    def _broadcast_state(self, game: Game) -> list[Dispatch]:
        dispatches: list[Dispatch] = []
        for participant in game.participants():
            dispatches += self._dispatch(participant, game_state_message(game, participant))
        return dispatches

    def _dispatch(self, player_id: str, message: GameMessage) -> list[Dispatch]:
        connection = self.connections.get(player_id)
        if connection is None:
            return []
        return [Dispatch(player_id=player_id, connection=connection, message=message)]

    def _evict_finished_locked(self, now: float) -> list[str]:
        if self.finished_game_ttl is None:
            return []
        expired = [
            game_id
            for game_id, game in self.games.items()
            if game.is_finished and game.finished_at is not None and now - game.finished_at >= self.finished_game_ttl
        ]
        for game_id in expired:
            del self.games[game_id]
        if expired:
            logger.debug("Evicted %d finished game(s)", len(expired))
        return expired


async def deliver(dispatches: list[Dispatch]) -> int:
    """Send every notification, best effort. Returns how many were delivered."""
    if not dispatches:
        return 0
    # Preserve per-recipient ordering (GameStarted before GameState) while
    # letting different recipients proceed concurrently.
    by_recipient: dict[str, list[Dispatch]] = {}
    for dispatch in dispatches:
        by_recipient.setdefault(dispatch.player_id, []).append(dispatch)

    async def _send_all(batch: list[Dispatch]) -> int:
        sent = 0
        for dispatch in batch:
            await dispatch.connection.send_text(encode_message(dispatch.message))
            sent += 1
        return sent

    results = await asyncio.gather(*[_send_all(batch) for batch in by_recipient.values()], return_exceptions=True)
    delivered = 0
    for player_id, result in zip(by_recipient, results):
        if isinstance(result, BaseException):
            logger.warning("Dropped notification(s) to player %s: %r", player_id, result)
            continue
        delivered += result
    return delivered
