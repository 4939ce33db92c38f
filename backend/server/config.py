from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .registry import DEFAULT_FINISHED_GAME_TTL

# Levels understood by both the logging module and uvicorn.
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


def parse_log_level(raw: str) -> str:
    level = raw.lower()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unsupported log level '{raw}'; expected one of {', '.join(LOG_LEVELS)}.")
    return level


def parse_ttl(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw == "":
        return DEFAULT_FINISHED_GAME_TTL
    if raw.lower() == "none":
        return None
    value = float(raw)
    if value < 0:
        raise ValueError(f"Finished game TTL must be non-negative, got {value}.")
    return value


@dataclass(frozen=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    finished_game_ttl: Optional[float] = DEFAULT_FINISHED_GAME_TTL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("CHECKERS_HOST", cls.host),
            port=int(env.get("CHECKERS_PORT", cls.port)),
            log_level=parse_log_level(env.get("CHECKERS_LOG_LEVEL", cls.log_level)),
            finished_game_ttl=parse_ttl(env.get("CHECKERS_FINISHED_TTL")),
        )
