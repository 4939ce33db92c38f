"""Text codec for the message envelope exchanged over the WebSocket."""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from core.errors import ProtocolError

from .schemas import AnyMessage, GameMessage

_MESSAGE_ADAPTER: TypeAdapter[AnyMessage] = TypeAdapter(AnyMessage)


def decode_message(text: str | bytes) -> GameMessage:
    if not isinstance(text, (str, bytes, bytearray)):
        raise ProtocolError(f"Message must be text or bytes, got {type(text).__name__}.")
    try:
        return _MESSAGE_ADAPTER.validate_json(text)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.error_count() else {}
        raise ProtocolError(
            f"Malformed message: {first.get('msg', 'invalid payload')} ({exc.error_count()} error(s))."
        ) from exc
    except RecursionError as exc:
        raise ProtocolError("Message is nested too deeply.") from exc


def encode_message(message: GameMessage) -> str:
    return message.model_dump_json()
