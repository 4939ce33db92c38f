from __future__ import annotations

import contextlib
import io
import sys
import unittest
from pathlib import Path


BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))


from main import parse_args  # noqa: E402
from server.app import create_app  # noqa: E402
from server.config import ServerSettings, parse_log_level, parse_ttl  # noqa: E402
from server.registry import DEFAULT_FINISHED_GAME_TTL  # noqa: E402


class ServerSettingsTests(unittest.TestCase):
    def test_defaults_without_environment(self) -> None:
        settings = ServerSettings.from_env({})
        self.assertEqual(settings.host, "0.0.0.0")
        self.assertEqual(settings.port, 8000)
        self.assertEqual(settings.log_level, "info")
        self.assertEqual(settings.finished_game_ttl, DEFAULT_FINISHED_GAME_TTL)

    def test_environment_overrides(self) -> None:
        settings = ServerSettings.from_env(
            {
                "CHECKERS_HOST": "127.0.0.1",
                "CHECKERS_PORT": "5001",
                "CHECKERS_LOG_LEVEL": "DEBUG",
                "CHECKERS_FINISHED_TTL": "none",
            }
        )
        self.assertEqual(settings, ServerSettings("127.0.0.1", 5001, "debug", None))

    def test_ttl_parsing(self) -> None:
        self.assertEqual(parse_ttl("12.5"), 12.5)
        self.assertIsNone(parse_ttl("None"))
        with self.assertRaises(ValueError):
            parse_ttl("-1")
        with self.assertRaises(ValueError):
            parse_ttl("soon")

    def test_log_level_must_suit_logging_and_uvicorn(self) -> None:
        self.assertEqual(parse_log_level("WARNING"), "warning")
        with self.assertRaises(ValueError):
            parse_log_level("trace")
        with self.assertRaises(ValueError):
            ServerSettings.from_env({"CHECKERS_LOG_LEVEL": "trace"})

    def test_cli_log_level_choices(self) -> None:
        args = parse_args(ServerSettings(), ["--log-level", "DEBUG", "--finished-ttl", "none"])
        self.assertEqual(args.log_level, "debug")
        self.assertIsNone(args.finished_ttl)
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_args(ServerSettings(), ["--log-level", "trace"])

    def test_app_uses_configured_ttl(self) -> None:
        app = create_app(ServerSettings(finished_game_ttl=42.0))
        self.assertEqual(app.state.registry.finished_game_ttl, 42.0)


if __name__ == "__main__":
    unittest.main()
