"""Client copy of the game aggregate.

``GameStateStore.apply`` folds authoritative server events into the current
game. Every transition yields a new facet; the previous value is never
mutated. Events that would produce an impossible state raise
``ProtocolDesyncError`` instead of being repaired.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, assert_never

import structlog

from fakeartist.core.models import GameOver, InGame, Lobby
from fakeartist.exceptions import ProtocolDesyncError
from fakeartist.realtime.messages import (
    ChatAppend,
    DrawEcho,
    GameEnded,
    GameStarted,
    JoinAck,
    NextTurn,
    RosterUpdate,
    VoteUpdate,
)

if TYPE_CHECKING:
    from fakeartist.core.models import Game, Player
    from fakeartist.core.types import GamePhase
    from fakeartist.realtime.messages import InboundEvent

logger = structlog.get_logger(__name__)


@dataclass
class TurnNotice:
    """Transient "lifted the pen" notice shown between turns.

    Attributes:
        previous: The player whose turn just ended.
        current: The new turn holder.
    """

    previous: Player
    current: Player


def check_in_game(game: InGame, *, event: str | None = None) -> InGame:
    """Validate the invariants of an in-game facet.

    Args:
        game: The facet to validate.
        event: Name of the event that produced it, for error reporting.

    Returns:
        The same facet.

    Raises:
        ProtocolDesyncError: If the turn index or the votes reference players
            that do not exist.
    """
    if not 0 <= game.current_player_index < len(game.players):
        msg = f"current_player_index {game.current_player_index} outside {len(game.players)} players"
        raise ProtocolDesyncError(msg, event=event)
    player_ids = {p.id for p in game.players}
    for voter, target in game.votes.items():
        if voter not in player_ids or target not in player_ids:
            raise ProtocolDesyncError(f"vote {voter} -> {target} references an unknown player", event=event)
    return game


class GameStateStore:
    """Holds the canonical client copy of the game.

    Attributes:
        game: Current facet, None until the join handshake completes.
        participant_id: Local participant id assigned by the server.
        turn_notice: Notice to display after a turn change, if any.
        deliberating: Whether voting is open, from the last turn onward.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self.game: Game | None = None
        self.participant_id: str | None = None
        self.turn_notice: TurnNotice | None = None
        self.deliberating = False

    @property
    def phase(self) -> GamePhase | None:
        """Phase of the current game, None before join."""
        return self.game.phase if self.game is not None else None

    @property
    def local_player(self) -> Player | None:
        """The local participant, if seated in the current game."""
        if self.participant_id is None or self.game is None:
            return None
        return next((p for p in self.game.players if p.id == self.participant_id), None)

    def require_joined(self, event: str) -> Game:
        """Return the current game or raise if the join has not completed."""
        if self.game is None:
            raise ProtocolDesyncError("event received before join completed", event=event)
        return self.game

    def require_in_game(self, event: str) -> InGame:
        """Return the current game if it is in progress, otherwise raise."""
        game = self.require_joined(event)
        if not isinstance(game, InGame):
            raise ProtocolDesyncError(f"event is only valid in game, current phase is {game.phase}", event=event)
        return game

    def apply(self, event: InboundEvent) -> Game:
        """Apply one authoritative event.

        Args:
            event: Decoded inbound event.

        Returns:
            The new current game.

        Raises:
            ProtocolDesyncError: If the event is inconsistent with the current state.
        """
        match event:
            case JoinAck(participant_id=participant_id, game=game):
                if isinstance(game, InGame):
                    check_in_game(game, event="join")
                self.participant_id = participant_id
                self.game = game
                self.turn_notice = None
                # A late joiner arriving mid-vote can only tell from the votes.
                self.deliberating = isinstance(game, InGame) and bool(game.votes)
            case RosterUpdate():
                self.game = self._merge_roster(self.require_joined("join"), event)
            case GameStarted(game=game):
                self.require_joined("start_game")
                if isinstance(game, InGame):
                    check_in_game(game, event="start_game")
                self.game = game
                self.turn_notice = None
                self.deliberating = False
            case NextTurn():
                self.game = self._next_turn(self.require_in_game("next_turn"), event)
            case VoteUpdate(votes=votes):
                game = self.require_in_game("vote_fake")
                if not game.players:
                    raise ProtocolDesyncError("vote update for a game without players", event="vote_fake")
                self.game = check_in_game(replace(game, votes=dict(votes)), event="vote_fake")
            case ChatAppend(message=message):
                game = self.require_joined("chat_msg")
                if isinstance(game, InGame):
                    self.game = replace(game, chat=[*game.chat, message])
                else:
                    logger.debug("Dropping chat message outside game", phase=game.phase)
            case GameEnded(game=game):
                self.require_joined("game_over")
                self.game = game
                self.turn_notice = None
                self.deliberating = False
            case DrawEcho():
                # Points feed the curve model, not the aggregate.
                self.require_in_game("draw")
            case _:
                assert_never(event)
        return self.game

    def _merge_roster(self, game: Game, event: RosterUpdate) -> Game:
        match game:
            case Lobby():
                if event.players is None:
                    return game
                if len(event.players) > Lobby.MAX_PLAYERS:
                    logger.warning("Lobby roster exceeds seat count", players=len(event.players))
                return replace(game, players=list(event.players))
            case InGame():
                merged = replace(
                    game,
                    players=list(event.players) if event.players is not None else game.players,
                    spectators=list(event.spectators) if event.spectators is not None else game.spectators,
                )
                return check_in_game(merged, event="join")
            case GameOver():
                logger.debug("Ignoring roster update after game over")
                return game
            case _:
                assert_never(game)

    def _next_turn(self, game: InGame, event: NextTurn) -> InGame:
        previous = game.turn_holder
        updated = check_in_game(replace(game, current_player_index=event.current_player_index), event="next_turn")
        if self.deliberating:
            self.turn_notice = None
        else:
            self.turn_notice = TurnNotice(previous=previous, current=updated.turn_holder)
        if event.is_last_turn:
            self.deliberating = True
        logger.debug(
            "Turn passed",
            previous=previous.id,
            current=updated.turn_holder.id,
            is_last_turn=event.is_last_turn,
        )
        return updated

    def clear_notice(self) -> None:
        """Dismiss the transient turn notice."""
        self.turn_notice = None

    def reset(self) -> None:
        """Forget the game but keep the participant id for a rejoin."""
        self.game = None
        self.turn_notice = None
        self.deliberating = False
