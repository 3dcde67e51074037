"""Pytest configuration and fixtures for fakeartist tests."""

from __future__ import annotations

from uuid import UUID

import pytest

from fakeartist.core.config import SessionConfig
from fakeartist.core.models import InGame, Lobby, Player, Word
from fakeartist.game.codes import encode_session_id
from fakeartist.realtime.channel import SessionChannel
from fakeartist.realtime.transport import LocalTransport
from fakeartist.services.session import GameSession

SESSION_ID = UUID("6f1c2b9e-4a57-4d0e-9c1f-2b7a8e3d5c40")


# Player fixtures


@pytest.fixture
def alice() -> Player:
    """Create the first seated player."""
    return Player(id="alice", name="Alice", color="#ff0000")


@pytest.fixture
def bob() -> Player:
    """Create the second seated player."""
    return Player(id="bob", name="Bob", color="#00ff00")


@pytest.fixture
def carol() -> Player:
    """Create the third seated player."""
    return Player(id="carol", name="Carol", color="#0000ff")


@pytest.fixture
def players(alice: Player, bob: Player, carol: Player) -> list[Player]:
    """Seated players in turn order."""
    return [alice, bob, carol]


# Game fixtures


@pytest.fixture
def lobby(players: list[Player]) -> Lobby:
    """Create a lobby with three players."""
    return Lobby(players=list(players))


@pytest.fixture
def in_game(players: list[Player], carol: Player) -> InGame:
    """Create a game in progress where Carol is the fake artist and Alice draws."""
    return InGame(players=list(players), fake_artist=carol, word=Word(category="Animals", text="Cat"))


# Channel fixtures


@pytest.fixture
def transport() -> LocalTransport:
    """Create a fresh in-process transport."""
    return LocalTransport()


@pytest.fixture
async def channel(transport: LocalTransport) -> SessionChannel:
    """Create a connected channel over the local transport."""
    channel = SessionChannel(lambda: transport)
    await channel.connect()
    return channel


# Session fixtures


@pytest.fixture
def fast_config() -> SessionConfig:
    """Session configuration with timers that fire immediately."""
    return SessionConfig(countdown_seconds=3, tick_interval=0, turn_notice_seconds=0)


@pytest.fixture
def session_code() -> str:
    """Short code of a fixed session."""
    return encode_session_id(SESSION_ID)


@pytest.fixture
def session(session_code: str, fast_config: SessionConfig, transport: LocalTransport) -> GameSession:
    """Create an unopened session wired to the local transport."""
    return GameSession(session_code, config=fast_config, transport_factory=lambda: transport)
