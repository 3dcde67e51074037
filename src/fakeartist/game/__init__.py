"""Game state, deliberation and round transitions for fakeartist."""

from __future__ import annotations

from fakeartist.game.chat import ChatLog
from fakeartist.game.codes import (
    decode_session_code,
    encode_session_id,
    new_session_code,
    next_session_code,
    next_session_id,
)
from fakeartist.game.countdown import GameOverCountdown, is_winner
from fakeartist.game.store import GameStateStore, TurnNotice
from fakeartist.game.votes import VoteTally

__all__ = [
    "ChatLog",
    "GameOverCountdown",
    "GameStateStore",
    "TurnNotice",
    "VoteTally",
    "decode_session_code",
    "encode_session_id",
    "is_winner",
    "new_session_code",
    "next_session_code",
    "next_session_id",
]
