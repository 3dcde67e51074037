"""Session channel message types.

Inbound payloads are decoded into typed events by ``decode_event``. Outbound
messages know their event name and produce the payload sent on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias
from uuid import UUID

from fakeartist.core.models import ChatMessage, Game, GameOver, Player, Point, game_from_dict
from fakeartist.core.types import EventName
from fakeartist.exceptions import MalformedEventError

# Server -> Client


@dataclass
class JoinAck:
    """Reply to our own join: identity and full game state together."""

    participant_id: str
    game: Game


@dataclass
class RosterUpdate:
    """Another participant joined or renamed; only the roster changed."""

    players: list[Player] | None = None
    spectators: list[Player] | None = None


@dataclass
class GameStarted:
    """The lobby was started; carries the full in-game facet."""

    game: Game


@dataclass
class NextTurn:
    """The turn holder lifted the pen."""

    current_player_index: int
    is_last_turn: bool = False


@dataclass
class VoteUpdate:
    """Authoritative vote map after any participant voted."""

    votes: dict[str, str] = field(default_factory=dict)


@dataclass
class ChatAppend:
    """A chat message broadcast to the room."""

    message: ChatMessage


@dataclass
class GameEnded:
    """The vote completed and the game reached its terminal facet."""

    game: GameOver


@dataclass
class DrawEcho:
    """A point drawn by the turn holder on another client."""

    point: Point


InboundEvent: TypeAlias = JoinAck | RosterUpdate | GameStarted | NextTurn | VoteUpdate | ChatAppend | GameEnded | DrawEcho


def _decode_join(payload: Any) -> JoinAck | RosterUpdate:
    if not isinstance(payload, dict):
        raise MalformedEventError("expected an object", event=EventName.JOIN, payload=payload)
    participant_id = payload.get("current_player_id")
    game_state = payload.get("game_state")
    if participant_id is not None or game_state is not None:
        if participant_id is None or game_state is None:
            raise MalformedEventError("identity and game state must arrive together", event=EventName.JOIN, payload=payload)
        return JoinAck(participant_id=str(participant_id), game=game_from_dict(game_state))

    players = payload.get("players")
    spectators = payload.get("spectators")
    if players is None and spectators is None:
        raise MalformedEventError("join event carries neither state nor roster", event=EventName.JOIN, payload=payload)
    return RosterUpdate(
        players=[Player.from_dict(p) for p in players] if players is not None else None,
        spectators=[Player.from_dict(p) for p in spectators] if spectators is not None else None,
    )


def _decode_next_turn(payload: Any) -> NextTurn:
    if not isinstance(payload, dict) or "current_player_index" not in payload:
        raise MalformedEventError("missing current_player_index", event=EventName.NEXT_TURN, payload=payload)
    index = payload["current_player_index"]
    if not isinstance(index, int) or isinstance(index, bool):
        raise MalformedEventError("current_player_index is not an integer", event=EventName.NEXT_TURN, payload=payload)
    return NextTurn(current_player_index=index, is_last_turn=bool(payload.get("is_last_turn", False)))


def _decode_votes(payload: Any) -> VoteUpdate:
    votes = payload.get("votes") if isinstance(payload, dict) else None
    if not isinstance(votes, dict):
        raise MalformedEventError("missing votes map", event=EventName.VOTE_FAKE, payload=payload)
    return VoteUpdate(votes={str(voter): str(target) for voter, target in votes.items()})


def _decode_draw(payload: Any) -> DrawEcho:
    # The server wraps the point as {"position": {...}}; bare points are accepted too.
    if isinstance(payload, dict) and "position" in payload:
        payload = payload["position"]
    return DrawEcho(point=Point.from_dict(payload))


def _decode_game_over(payload: Any) -> GameEnded:
    game = game_from_dict(payload)
    if not isinstance(game, GameOver):
        raise MalformedEventError(f"expected GameOver, got {game.phase}", event=EventName.GAME_OVER, payload=payload)
    return GameEnded(game=game)


def decode_event(event: str, payload: Any) -> InboundEvent:
    """Decode a raw inbound event into its typed representation.

    Args:
        event: The event name.
        payload: The JSON-decoded payload.

    Returns:
        The typed inbound event.

    Raises:
        MalformedEventError: If the event is unknown or the payload is malformed.
    """
    try:
        match event:
            case EventName.JOIN:
                return _decode_join(payload)
            case EventName.START_GAME:
                return GameStarted(game=game_from_dict(payload))
            case EventName.NEXT_TURN:
                return _decode_next_turn(payload)
            case EventName.VOTE_FAKE:
                return _decode_votes(payload)
            case EventName.CHAT_MSG:
                return ChatAppend(message=ChatMessage.from_dict(payload))
            case EventName.GAME_OVER:
                return _decode_game_over(payload)
            case EventName.DRAW:
                return _decode_draw(payload)
    except MalformedEventError as exc:
        if exc.event is None:
            raise MalformedEventError(exc.detail, event=event, payload=exc.payload) from exc
        raise
    raise MalformedEventError("unknown inbound event", event=event, payload=payload)


# Client -> Server


@dataclass
class JoinMessage:
    """Request to join the session identified by ``session_id``."""

    session_id: UUID
    event = EventName.JOIN

    def payload(self) -> str:
        """Wire payload."""
        return str(self.session_id)


@dataclass
class StartGameMessage:
    """Request to leave the lobby and start drawing."""

    event = EventName.START_GAME

    def payload(self) -> dict[str, Any]:
        """Wire payload."""
        return {}


@dataclass
class ChangeNameMessage:
    """Rename the local player while in the lobby."""

    name: str
    event = EventName.CHANGE_NAME

    def payload(self) -> str:
        """Wire payload."""
        return self.name


@dataclass
class DrawMessage:
    """A normalized point of the local stroke."""

    point: Point
    event = EventName.DRAW

    def payload(self) -> dict[str, float]:
        """Wire payload."""
        return self.point.to_dict()


@dataclass
class DrawEndMessage:
    """The local player lifted the pen."""

    event = EventName.DRAW_END

    def payload(self) -> dict[str, Any]:
        """Wire payload."""
        return {}


@dataclass
class VoteMessage:
    """Accuse ``target`` of being the fake artist."""

    target: Player
    event = EventName.VOTE_FAKE

    def payload(self) -> dict[str, Any]:
        """Wire payload."""
        return {"target": self.target.to_dict()}


@dataclass
class ChatMessageOut:
    """A chat line typed by the local player."""

    text: str
    event = EventName.CHAT_MSG

    def payload(self) -> str:
        """Wire payload."""
        return self.text


OutboundMessage: TypeAlias = (
    JoinMessage | StartGameMessage | ChangeNameMessage | DrawMessage | DrawEndMessage | VoteMessage | ChatMessageOut
)
