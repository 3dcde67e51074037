"""Core domain models for fakeartist."""

from fakeartist.core.config import SessionConfig
from fakeartist.core.models import (
    ChatMessage,
    Curve,
    Game,
    GameOver,
    InGame,
    Lobby,
    Player,
    Point,
    Word,
    game_from_dict,
)
from fakeartist.core.types import EventName, GamePhase, Winner

__all__ = [
    "ChatMessage",
    "Curve",
    "EventName",
    "Game",
    "GameOver",
    "GamePhase",
    "InGame",
    "Lobby",
    "Player",
    "Point",
    "SessionConfig",
    "Winner",
    "Word",
    "game_from_dict",
]
