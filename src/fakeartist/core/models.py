"""Core domain models for the fakeartist game aggregate.

The game is a tagged union of three facets (``Lobby``, ``InGame`` and
``GameOver``). Each model converts to and from the JSON-compatible dictionaries
used on the wire; decoding failures raise ``MalformedEventError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from fakeartist.core.types import GamePhase, Winner
from fakeartist.exceptions import MalformedEventError


def _require(data: Any, key: str) -> Any:
    """Return ``data[key]`` or raise ``MalformedEventError``."""
    if not isinstance(data, dict):
        raise MalformedEventError(f"expected an object, got {type(data).__name__}", payload=data)
    try:
        return data[key]
    except KeyError:
        raise MalformedEventError(f"missing field {key!r}", payload=data) from None


@dataclass
class Player:
    """A participant in a session.

    Attributes:
        id: Server-assigned identifier, stable for the session.
        name: Display name.
        color: Stroke color in CSS hex format.
    """

    id: str
    name: str = "Anonymous"
    color: str = "#000000"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: Any) -> Player:
        """Build a player from its wire representation."""
        return cls(
            id=str(_require(data, "id")),
            name=str(data.get("name", "Anonymous")),
            color=str(data.get("color", "#000000")),
        )


@dataclass
class Word:
    """The secret word of a round.

    Attributes:
        category: Category shown to every player.
        text: The word itself, hidden from the fake artist in the UI.
    """

    category: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"category": self.category, "text": self.text}

    @classmethod
    def from_dict(cls, data: Any) -> Word:
        """Build a word from its wire representation."""
        return cls(category=str(_require(data, "category")), text=str(_require(data, "text")))


@dataclass
class Point:
    """A point normalized to the drawing surface.

    Attributes:
        x: Horizontal position as a fraction of the surface width.
        y: Vertical position as a fraction of the surface height.
    """

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Any) -> Point:
        """Build a point from its wire representation."""
        try:
            return cls(x=float(_require(data, "x")), y=float(_require(data, "y")))
        except (TypeError, ValueError) as exc:
            raise MalformedEventError(f"bad coordinate: {exc}", payload=data) from exc


@dataclass
class Curve:
    """One continuous stroke by a single author.

    Attributes:
        author: The player who drew the stroke.
        points: Points in drawing order.
    """

    author: Player
    points: list[Point] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"author": self.author.to_dict(), "points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: Any) -> Curve:
        """Build a curve from its wire representation."""
        return cls(
            author=Player.from_dict(_require(data, "author")),
            points=[Point.from_dict(p) for p in _require(data, "points")],
        )


@dataclass
class ChatMessage:
    """A chat line.

    Attributes:
        author: The sender.
        message: Message text.
    """

    author: Player
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"author": self.author.to_dict(), "message": self.message}

    @classmethod
    def from_dict(cls, data: Any) -> ChatMessage:
        """Build a chat message from its wire representation."""
        return cls(author=Player.from_dict(_require(data, "author")), message=str(_require(data, "message")))


def _players(data: Any, key: str) -> list[Player]:
    if not isinstance(data, dict):
        raise MalformedEventError(f"expected an object, got {type(data).__name__}", payload=data)
    value = data.get(key) or []
    if not isinstance(value, list):
        raise MalformedEventError(f"field {key!r} is not a list", payload=data)
    return [Player.from_dict(p) for p in value]


@dataclass
class Lobby:
    """Pre-game facet: players gather and pick names.

    Attributes:
        players: Seated players, at most ``MAX_PLAYERS``.
        spectators: Participants watching without a seat.
    """

    MAX_PLAYERS = 6

    players: list[Player] = field(default_factory=list)
    spectators: list[Player] = field(default_factory=list)

    phase = GamePhase.LOBBY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "state": self.phase.value,
            "players": [p.to_dict() for p in self.players],
            "spectators": [p.to_dict() for p in self.spectators],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Lobby:
        """Build a lobby from its wire representation."""
        return cls(players=_players(data, "players"), spectators=_players(data, "spectators"))


@dataclass
class InGame:
    """Drawing and deliberation facet.

    Attributes:
        players: Players in turn order.
        fake_artist: The player drawing without knowing the word.
        word: The secret word.
        current_player_index: Index of the turn holder in ``players``.
        spectators: Participants who joined after the game started.
        votes: Map of voter id to accused player id.
        chat: Chat messages in arrival order.
        curves: Strokes already on the canvas when this facet was sent.
        current_round: Server round counter, if provided.
        max_rounds: Server round limit, if provided.
    """

    players: list[Player]
    fake_artist: Player
    word: Word
    current_player_index: int = 0
    spectators: list[Player] = field(default_factory=list)
    votes: dict[str, str] = field(default_factory=dict)
    chat: list[ChatMessage] = field(default_factory=list)
    curves: list[Curve] = field(default_factory=list)
    current_round: int | None = None
    max_rounds: int | None = None

    phase = GamePhase.IN_GAME

    @property
    def turn_holder(self) -> Player:
        """The player currently entitled to draw."""
        return self.players[self.current_player_index]

    def find_player(self, player_id: str) -> Player | None:
        """Look up a seated player by id."""
        return next((p for p in self.players if p.id == player_id), None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result: dict[str, Any] = {
            "state": self.phase.value,
            "players": [p.to_dict() for p in self.players],
            "spectators": [p.to_dict() for p in self.spectators],
            "fake_artist": self.fake_artist.to_dict(),
            "word": self.word.to_dict(),
            "current_player_index": self.current_player_index,
            "votes": dict(self.votes),
            "chat": [m.to_dict() for m in self.chat],
            "curves": [c.to_dict() for c in self.curves],
        }
        if self.current_round is not None:
            result["current_round"] = self.current_round
        if self.max_rounds is not None:
            result["max_rounds"] = self.max_rounds
        return result

    @classmethod
    def from_dict(cls, data: Any) -> InGame:
        """Build an in-game facet from its wire representation."""
        votes = data.get("votes") or {}
        if not isinstance(votes, dict):
            raise MalformedEventError("field 'votes' is not an object", payload=data)
        curves = [Curve.from_dict(c) for c in data.get("curves") or []]
        # The server keeps the stroke in progress apart from finished ones.
        if data.get("current_curve"):
            curves.append(Curve.from_dict(data["current_curve"]))
        try:
            index = int(_require(data, "current_player_index"))
        except (TypeError, ValueError) as exc:
            raise MalformedEventError("bad current_player_index", payload=data) from exc
        return cls(
            players=_players(data, "players"),
            spectators=_players(data, "spectators"),
            fake_artist=Player.from_dict(_require(data, "fake_artist")),
            word=Word.from_dict(_require(data, "word")),
            current_player_index=index,
            votes={str(k): str(v) for k, v in votes.items()},
            chat=[ChatMessage.from_dict(m) for m in data.get("chat") or []],
            curves=curves,
            current_round=data.get("current_round"),
            max_rounds=data.get("max_rounds"),
        )


@dataclass
class GameOver:
    """Terminal facet.

    Attributes:
        fake_artist: The player who was the fake artist.
        winner: The winning side.
        players: Players at the end of the game, if the server sent them.
    """

    fake_artist: Player
    winner: Winner
    players: list[Player] = field(default_factory=list)

    phase = GamePhase.GAME_OVER

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "state": self.phase.value,
            "fake_artist": self.fake_artist.to_dict(),
            "winner": self.winner.value,
            "players": [p.to_dict() for p in self.players],
        }

    @classmethod
    def from_dict(cls, data: Any) -> GameOver:
        """Build a game-over facet from its wire representation."""
        try:
            winner = Winner(_require(data, "winner"))
        except ValueError as exc:
            raise MalformedEventError(f"unknown winner {data.get('winner')!r}", payload=data) from exc
        return cls(
            fake_artist=Player.from_dict(_require(data, "fake_artist")),
            winner=winner,
            players=_players(data, "players"),
        )


Game: TypeAlias = Lobby | InGame | GameOver

_FACETS: dict[str, type[Lobby] | type[InGame] | type[GameOver]] = {
    GamePhase.LOBBY.value: Lobby,
    GamePhase.IN_GAME.value: InGame,
    GamePhase.GAME_OVER.value: GameOver,
}


def game_from_dict(data: Any) -> Game:
    """Decode a full game from its wire representation.

    Args:
        data: Dictionary tagged with a ``state`` field.

    Returns:
        The matching facet.

    Raises:
        MalformedEventError: If the tag is unknown or a field is missing.
    """
    tag = _require(data, "state")
    facet = _FACETS.get(tag)
    if facet is None:
        raise MalformedEventError(f"unknown game state {tag!r}", payload=data)
    return facet.from_dict(data)
