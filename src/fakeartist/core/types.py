"""Core type definitions for fakeartist."""

from __future__ import annotations

from enum import StrEnum


class GamePhase(StrEnum):
    """Top-level phase of a game, used as the ``state`` tag on the wire."""

    LOBBY = "Lobby"
    IN_GAME = "InGame"
    GAME_OVER = "GameOver"


class Winner(StrEnum):
    """Side that won a finished game."""

    FAKE_ARTIST = "FakeArtist"
    REAL_ARTISTS = "RealArtists"


class EventName(StrEnum):
    """Names of the events exchanged over the session channel.

    Several names are used in both directions with different payloads.
    """

    JOIN = "join"
    START_GAME = "start_game"
    CHANGE_NAME = "change_name"
    DRAW = "draw"
    DRAW_END = "draw_end"
    NEXT_TURN = "next_turn"
    VOTE_FAKE = "vote_fake"
    GAME_OVER = "game_over"
    CHAT_MSG = "chat_msg"

    # Transport signals
    CONNECT = "connect"
    DISCONNECT = "disconnect"
