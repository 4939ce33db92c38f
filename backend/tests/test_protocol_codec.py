from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path


BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))


from core.errors import ProtocolError  # noqa: E402
from core.game import Game, GameState  # noqa: E402
from core.pieces import Color, PieceType  # noqa: E402
from server.app import handle_message  # noqa: E402
from server.protocol import decode_message, encode_message  # noqa: E402
from server.registry import SessionRegistry  # noqa: E402
from server.schemas import JoinGameMessage, MakeMoveMessage, MoveResultMessage  # noqa: E402
from server.serializers import game_started_message, game_state_message, move_rejected_message  # noqa: E402


class DecodeTests(unittest.TestCase):
    def test_join_game(self) -> None:
        message = decode_message('{"messageType": "JoinGame"}')
        self.assertIsInstance(message, JoinGameMessage)
        self.assertIsNone(message.gameId)

    def test_make_move(self) -> None:
        raw = json.dumps(
            {
                "messageType": "MakeMove",
                "gameId": "g-1",
                "playerId": "whoever",
                "fromRow": 5,
                "fromCol": 0,
                "toRow": 4,
                "toCol": 1,
            }
        )
        message = decode_message(raw)
        self.assertIsInstance(message, MakeMoveMessage)
        self.assertEqual((message.fromRow, message.fromCol, message.toRow, message.toCol), (5, 0, 4, 1))
        self.assertEqual(message.gameId, "g-1")

    def test_bytes_payload_is_accepted(self) -> None:
        self.assertIsInstance(decode_message(b'{"messageType": "JoinGame"}'), JoinGameMessage)

    def test_server_messages_decode_too(self) -> None:
        game = Game("g-1")
        game.addFirstPlayer("alice")
        encoded = encode_message(move_rejected_message("nope", "alice", game=game))
        decoded = decode_message(encoded)
        self.assertIsInstance(decoded, MoveResultMessage)
        self.assertEqual(decoded.errorMessage, "nope")
        self.assertIs(decoded.gameState, GameState.WAITING_FOR_PLAYERS)

    def test_rejections(self) -> None:
        bad_inputs = [
            "not json",
            "[1, 2, 3]",
            "{}",
            '{"messageType": "Resign"}',
            '{"messageType": "MakeMove", "gameId": "g-1", "fromRow": 5}',
            '{"messageType": "MakeMove", "fromRow": "five", "fromCol": 0, "toRow": 4, "toCol": 1}',
            None,
        ]
        for raw in bad_inputs:
            with self.assertRaises(ProtocolError, msg=repr(raw)):
                decode_message(raw)

    def test_deep_nesting_is_a_protocol_error(self) -> None:
        raw = '{"messageType": "JoinGame", "x": ' + "[" * 100_000 + "]" * 100_000 + "}"
        with self.assertRaises(ProtocolError):
            decode_message(raw)


class ClientDispatchTests(unittest.TestCase):
    def test_server_bound_message_from_client_is_rejected(self) -> None:
        registry = SessionRegistry()
        message = decode_message('{"messageType": "GameStarted", "yourColor": "White"}')
        with self.assertRaises(ProtocolError):
            handle_message(registry, "alice", message)
        self.assertEqual(registry.games, {})

    def test_join_is_routed_to_registry(self) -> None:
        registry = SessionRegistry()
        handle_message(registry, "alice", decode_message('{"messageType": "JoinGame"}'))
        self.assertEqual(len(registry.games), 1)


class EncodeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.game = Game("g-1")
        self.game.addFirstPlayer("alice")
        self.game.startGame("bob")

    def test_game_state_shape(self) -> None:
        payload = json.loads(encode_message(game_state_message(self.game, "bob")))

        self.assertEqual(payload["messageType"], "GameState")
        self.assertEqual(payload["gameId"], "g-1")
        self.assertEqual(payload["playerId"], "bob")
        self.assertEqual(payload["currentPlayer"], "White")
        self.assertEqual(payload["gameState"], "InProgress")
        board = payload["boardState"]
        self.assertEqual(len(board), 8)
        self.assertTrue(all(len(row) == 8 for row in board))
        self.assertIsNone(board[0][0])
        self.assertEqual(board[0][1], {"type": "Normal", "color": "Black", "row": 0, "column": 1})
        self.assertEqual(board[7][0], {"type": "Normal", "color": "White", "row": 7, "column": 0})

    def test_game_started_shape(self) -> None:
        payload = json.loads(encode_message(game_started_message(self.game, "bob")))
        self.assertEqual(payload["messageType"], "GameStarted")
        self.assertEqual(payload["player1Id"], "alice")
        self.assertEqual(payload["player2Id"], "bob")
        self.assertEqual(payload["yourColor"], "Black")

    def test_king_is_encoded(self) -> None:
        self.game.board.getPiece(0, 1).promote()
        payload = json.loads(encode_message(game_state_message(self.game, "alice")))
        self.assertEqual(payload["boardState"][0][1]["type"], PieceType.KING.value)
        self.assertEqual(Color(payload["boardState"][0][1]["color"]), Color.BLACK)

    def test_not_found_result_has_no_board(self) -> None:
        payload = json.loads(encode_message(move_rejected_message("Game 'x' not found", "bob", game_id="x")))
        self.assertEqual(payload["messageType"], "MoveResult")
        self.assertFalse(payload["success"])
        self.assertIsNone(payload["boardState"])
        self.assertIsNone(payload["gameState"])


if __name__ == "__main__":
    unittest.main()
