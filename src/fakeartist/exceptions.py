"""Custom exceptions for fakeartist."""

from __future__ import annotations

from typing import Any


class FakeArtistError(Exception):
    """Base exception class for all fakeartist errors."""


class ChannelClosedError(FakeArtistError):
    """Raised when an event is emitted without a live channel.

    Attributes:
        event: Name of the event that could not be sent.
    """

    def __init__(self, event: str) -> None:
        """Initialize the exception with the event name.

        Args:
            event: Name of the event that could not be sent.
        """
        self.event = event
        super().__init__(f"Cannot emit {event!r}: channel is not connected")


class TransportError(FakeArtistError):
    """Raised when the transport cannot establish a connection.

    Attributes:
        url: The server URL that could not be reached.
    """

    def __init__(self, url: str, message: str) -> None:
        """Initialize the exception.

        Args:
            url: The server URL that could not be reached.
            message: Description of the failure.
        """
        self.url = url
        super().__init__(f"Cannot connect to {url}: {message}")


class ProtocolDesyncError(FakeArtistError):
    """Raised when an inbound event implies an impossible game state.

    The local copy of the game can no longer be trusted. The only remedy is a
    full rejoin; the state is never clamped or repaired.

    Attributes:
        event: Name of the offending event, if known.
        reason: Human readable description of the inconsistency.
    """

    def __init__(self, reason: str, *, event: str | None = None) -> None:
        """Initialize the exception.

        Args:
            reason: Description of the inconsistency.
            event: Name of the offending event.
        """
        self.event = event
        self.reason = reason
        prefix = f"[{event}] " if event else ""
        super().__init__(f"{prefix}protocol desync: {reason}")


class MalformedEventError(ProtocolDesyncError):
    """Raised when an inbound payload cannot be decoded."""

    def __init__(self, reason: str, *, event: str | None = None, payload: Any = None) -> None:
        """Initialize the exception.

        Args:
            reason: Why the payload could not be decoded.
            event: Name of the offending event.
            payload: The raw payload.
        """
        self.detail = reason
        self.payload = payload
        super().__init__(f"malformed payload ({reason})", event=event)


class PhaseError(FakeArtistError):
    """Raised when an action is attempted in a phase that does not permit it.

    Attributes:
        action: The attempted action.
        phase: The phase the session was in.
    """

    def __init__(self, action: str, phase: str) -> None:
        """Initialize the exception.

        Args:
            action: The attempted action.
            phase: The phase the session was in.
        """
        self.action = action
        self.phase = phase
        super().__init__(f"Action {action!r} is not allowed during {phase}")


class PlayerNotFoundError(FakeArtistError):
    """Raised when an action names a player who is not seated in the game.

    Attributes:
        player_id: The unknown player id.
    """

    def __init__(self, player_id: str) -> None:
        """Initialize the exception with the player id.

        Args:
            player_id: The unknown player id.
        """
        self.player_id = player_id
        super().__init__(f"Player not found: {player_id}")


class InvalidSessionCodeError(FakeArtistError):
    """Raised when a short session code cannot be decoded.

    Attributes:
        code: The rejected code.
    """

    def __init__(self, code: str) -> None:
        """Initialize the exception with the rejected code.

        Args:
            code: The rejected code.
        """
        self.code = code
        super().__init__(f"Invalid session code: {code!r}")
