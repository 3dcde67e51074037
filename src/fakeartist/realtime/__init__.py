"""Real-time event channel for fakeartist.

This module provides the session channel, its transports, and the typed
messages exchanged with the game server.
"""

from __future__ import annotations

from fakeartist.realtime.channel import SessionChannel
from fakeartist.realtime.messages import (
    ChatAppend,
    DrawEcho,
    GameEnded,
    GameStarted,
    InboundEvent,
    JoinAck,
    NextTurn,
    OutboundMessage,
    RosterUpdate,
    VoteUpdate,
    decode_event,
)
from fakeartist.realtime.transport import LocalTransport, SocketIOTransport, TransportProtocol

__all__ = [
    "ChatAppend",
    "DrawEcho",
    "GameEnded",
    "GameStarted",
    "InboundEvent",
    "JoinAck",
    "LocalTransport",
    "NextTurn",
    "OutboundMessage",
    "RosterUpdate",
    "SessionChannel",
    "SocketIOTransport",
    "TransportProtocol",
    "VoteUpdate",
    "decode_event",
]
