"""Session configuration for fakeartist.

Settings are read from environment variables by ``SessionConfig.from_env``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in {"1", "true", "yes", "on"}


@dataclass
class SessionConfig:
    """Configuration for a game session client.

    Attributes:
        server_url: Base URL of the game server.
        socketio_path: Path of the socket.io endpoint on the server.
        countdown_seconds: Ticks in the game-over countdown before redirecting.
        tick_interval: Seconds between countdown ticks.
        turn_notice_seconds: How long the "lifted the pen" notice stays visible.
        line_width: Stroke width in CSS pixels.
        background_color: Drawing surface background in hex format.
        debug: Enable debug level logging.
        json_logs: Output logs as JSON.
    """

    server_url: str = "http://localhost:4000"
    socketio_path: str = "socket.io"
    countdown_seconds: int = 10
    tick_interval: float = 1.0
    turn_notice_seconds: float = 3.0
    line_width: float = 1.0
    background_color: str = "#ffffff"
    debug: bool = False
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> SessionConfig:
        """Create settings from environment variables.

        Environment variables:
            FAKEARTIST_SERVER_URL: Game server URL (default: http://localhost:4000).
            FAKEARTIST_SOCKETIO_PATH: socket.io path (default: socket.io).
            FAKEARTIST_COUNTDOWN_SECONDS: Game-over countdown length (default: 10).
            FAKEARTIST_TICK_INTERVAL: Seconds per countdown tick (default: 1.0).
            FAKEARTIST_TURN_NOTICE_SECONDS: Turn notice duration (default: 3.0).
            FAKEARTIST_LINE_WIDTH: Stroke width in CSS pixels (default: 1.0).
            FAKEARTIST_DEBUG: Set to "true" for debug logging.
            FAKEARTIST_JSON_LOGS: Set to "true" for JSON log output.

        Returns:
            SessionConfig configured from environment.
        """
        return cls(
            server_url=os.environ.get("FAKEARTIST_SERVER_URL", "http://localhost:4000"),
            socketio_path=os.environ.get("FAKEARTIST_SOCKETIO_PATH", "socket.io"),
            countdown_seconds=int(os.environ.get("FAKEARTIST_COUNTDOWN_SECONDS", "10")),
            tick_interval=float(os.environ.get("FAKEARTIST_TICK_INTERVAL", "1.0")),
            turn_notice_seconds=float(os.environ.get("FAKEARTIST_TURN_NOTICE_SECONDS", "3.0")),
            line_width=float(os.environ.get("FAKEARTIST_LINE_WIDTH", "1.0")),
            debug=_env_bool("FAKEARTIST_DEBUG"),
            json_logs=_env_bool("FAKEARTIST_JSON_LOGS"),
        )
