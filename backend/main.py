from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from server.app import create_app
from server.config import LOG_LEVELS, ServerSettings, parse_ttl


def parse_args(defaults: ServerSettings, argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="Run the checkers session server.")
	parser.add_argument("--host", default=defaults.host, help="Bind host for the server.")
	parser.add_argument("--port", type=int, default=defaults.port, help="Port for the server.")
	parser.add_argument(
		"--log-level",
		type=str.lower,
		choices=LOG_LEVELS,
		default=defaults.log_level,
		help="Log level for the app and uvicorn.",
	)
	parser.add_argument(
		"--finished-ttl",
		type=parse_ttl,
		default=defaults.finished_game_ttl,
		help="Seconds a finished game stays queryable ('none' keeps them forever).",
	)
	return parser.parse_args(argv)


def main() -> None:
	args = parse_args(ServerSettings.from_env())
	settings = ServerSettings(
		host=args.host,
		port=args.port,
		log_level=args.log_level,
		finished_game_ttl=args.finished_ttl,
	)
	logging.basicConfig(
		level=settings.log_level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	uvicorn.run(
		create_app(settings),
		host=settings.host,
		port=settings.port,
		log_level=settings.log_level,
	)


if __name__ == "__main__":
	main()
