"""Tests for the command line interface."""

from __future__ import annotations

from uuid import UUID

from click.testing import CliRunner

from fakeartist.cli import cli, describe_event
from fakeartist.core.models import ChatMessage, Player, Point
from fakeartist.game.codes import decode_session_code, encode_session_id, next_session_code
from fakeartist.realtime.messages import ChatAppend, DrawEcho
from fakeartist.services.session import GameSession


class TestCodeCommands:
    """Tests for the session code commands."""

    def test_new(self) -> None:
        """Test that new prints a decodable code."""
        result = CliRunner().invoke(cli, ["new"])
        assert result.exit_code == 0
        decode_session_code(result.output.strip())

    def test_next(self, session_code: str) -> None:
        """Test that next prints the play-again code."""
        result = CliRunner().invoke(cli, ["next", session_code])
        assert result.exit_code == 0
        assert result.output.strip() == next_session_code(session_code)

    def test_decode(self) -> None:
        """Test that decode prints the UUID."""
        session_id = UUID("6f1c2b9e-4a57-4d0e-9c1f-2b7a8e3d5c40")
        result = CliRunner().invoke(cli, ["decode", encode_session_id(session_id)])
        assert result.exit_code == 0
        assert result.output.strip() == str(session_id)

    def test_decode_invalid(self) -> None:
        """Test that an invalid code fails with a message."""
        result = CliRunner().invoke(cli, ["decode", "0OIl"])
        assert result.exit_code != 0
        assert "Invalid session code" in result.output


class TestDescribeEvent:
    """Tests for the watch output."""

    def test_chat(self, session: GameSession, alice: Player) -> None:
        """Test that chat lines show the author."""
        line = describe_event(session, ChatAppend(message=ChatMessage(author=alice, message="hi")))
        assert "Alice" in line
        assert "hi" in line

    def test_draw_is_quiet(self, session: GameSession) -> None:
        """Test that individual points are not printed."""
        assert describe_event(session, DrawEcho(point=Point(0, 0))) is None
