"""fakeartist - client session engine for "A Fake Artist goes to New York".

Keeps a client in sync with the authoritative game server over socket.io and
renders the shared drawing.

Example:
    >>> from fakeartist import GameSession, new_session_code
    >>> async with GameSession(new_session_code()) as session:
    ...     await session.change_name("Ada")
"""

from __future__ import annotations

from fakeartist.core.config import SessionConfig
from fakeartist.core.logging import configure_logging
from fakeartist.core.models import ChatMessage, Curve, Game, GameOver, InGame, Lobby, Player, Point, Word
from fakeartist.core.types import EventName, GamePhase, Winner
from fakeartist.exceptions import (
    ChannelClosedError,
    FakeArtistError,
    InvalidSessionCodeError,
    MalformedEventError,
    PhaseError,
    PlayerNotFoundError,
    ProtocolDesyncError,
    TransportError,
)
from fakeartist.game.codes import decode_session_code, encode_session_id, new_session_code, next_session_code
from fakeartist.realtime.transport import LocalTransport, SocketIOTransport
from fakeartist.services.session import GameSession

__version__ = "0.1.0"

__all__ = [
    "ChannelClosedError",
    "ChatMessage",
    "Curve",
    "EventName",
    "FakeArtistError",
    "Game",
    "GameOver",
    "GamePhase",
    "GameSession",
    "InGame",
    "InvalidSessionCodeError",
    "LocalTransport",
    "Lobby",
    "MalformedEventError",
    "PhaseError",
    "Player",
    "PlayerNotFoundError",
    "Point",
    "ProtocolDesyncError",
    "SessionConfig",
    "SocketIOTransport",
    "TransportError",
    "Winner",
    "Word",
    "__version__",
    "configure_logging",
    "decode_session_code",
    "encode_session_id",
    "new_session_code",
    "next_session_code",
]
