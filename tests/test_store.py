"""Tests for the game state store."""

from __future__ import annotations

from dataclasses import replace

import pytest

from fakeartist.core.models import ChatMessage, GameOver, InGame, Lobby, Player, Point
from fakeartist.core.types import GamePhase, Winner
from fakeartist.exceptions import ProtocolDesyncError
from fakeartist.game.store import GameStateStore, TurnNotice
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


@pytest.fixture
def store() -> GameStateStore:
    """Create an empty store."""
    return GameStateStore()


@pytest.fixture
def playing(store: GameStateStore, in_game: InGame) -> GameStateStore:
    """Store joined as Alice into a game in progress."""
    store.apply(JoinAck(participant_id="alice", game=in_game))
    return store


class TestJoin:
    """Tests for the join handshake."""

    def test_join_sets_identity_and_game_together(self, store: GameStateStore, lobby: Lobby) -> None:
        """Test that the acknowledgement sets identity and state at once."""
        store.apply(JoinAck(participant_id="bob", game=lobby))
        assert store.participant_id == "bob"
        assert store.phase == GamePhase.LOBBY
        assert store.local_player is not None
        assert store.local_player.name == "Bob"

    def test_events_before_join_desync(self, store: GameStateStore) -> None:
        """Test that game events before the handshake are a desync."""
        with pytest.raises(ProtocolDesyncError):
            store.apply(NextTurn(current_player_index=0))
        with pytest.raises(ProtocolDesyncError):
            store.apply(RosterUpdate(players=[]))

    def test_late_join_during_vote(self, store: GameStateStore, in_game: InGame) -> None:
        """Test that joining a game with votes enters deliberation."""
        store.apply(JoinAck(participant_id="bob", game=replace(in_game, votes={"alice": "carol"})))
        assert store.deliberating

    def test_join_with_bad_index(self, store: GameStateStore, in_game: InGame) -> None:
        """Test that an inconsistent snapshot is rejected and nothing is stored."""
        with pytest.raises(ProtocolDesyncError):
            store.apply(JoinAck(participant_id="alice", game=replace(in_game, current_player_index=3)))
        assert store.game is None
        assert store.participant_id is None


class TestRoster:
    """Tests for roster updates."""

    def test_lobby_roster(self, store: GameStateStore, lobby: Lobby) -> None:
        """Test that lobby players are replaced."""
        store.apply(JoinAck(participant_id="alice", game=lobby))
        store.apply(RosterUpdate(players=[Player(id="alice", name="Ada")]))
        assert [p.name for p in store.game.players] == ["Ada"]

    def test_lobby_roster_does_not_mutate_previous(self, store: GameStateStore, lobby: Lobby) -> None:
        """Test that the previous facet is left untouched."""
        store.apply(JoinAck(participant_id="alice", game=lobby))
        before = store.game
        store.apply(RosterUpdate(players=[]))
        assert len(before.players) == 3
        assert store.game is not before

    def test_in_game_spectator_merge(self, playing: GameStateStore) -> None:
        """Test that spectators joining mid-game keep the seated players."""
        playing.apply(RosterUpdate(spectators=[Player(id="dave")]))
        assert [p.id for p in playing.game.players] == ["alice", "bob", "carol"]
        assert [p.id for p in playing.game.spectators] == ["dave"]

    def test_in_game_roster_shrinking_below_turn_desyncs(self, store: GameStateStore, in_game: InGame) -> None:
        """Test that a roster leaving the turn index dangling is a desync."""
        store.apply(JoinAck(participant_id="alice", game=replace(in_game, current_player_index=2)))
        with pytest.raises(ProtocolDesyncError):
            store.apply(RosterUpdate(players=in_game.players[:2]))

    def test_game_over_ignores_roster(self, store: GameStateStore, carol: Player) -> None:
        """Test that roster updates after the game are ignored."""
        over = GameOver(fake_artist=carol, winner=Winner.FAKE_ARTIST)
        store.apply(JoinAck(participant_id="alice", game=over))
        store.apply(RosterUpdate(players=[]))
        assert store.game is over


class TestTurns:
    """Tests for turn progression."""

    def test_turn_index_stays_in_range(self, playing: GameStateStore) -> None:
        """Test that every accepted next_turn leaves a valid turn holder."""
        for index in [1, 2, 0, 1, 2]:
            game = playing.apply(NextTurn(current_player_index=index))
            assert 0 <= game.current_player_index < len(game.players)

    def test_next_turn_leaves_chat_and_votes(self, store: GameStateStore, in_game: InGame, bob: Player) -> None:
        """Test that a turn change only moves the index."""
        chat = [ChatMessage(author=bob, message="hm")]
        store.apply(JoinAck(participant_id="alice", game=replace(in_game, chat=chat, votes={"bob": "alice"})))
        game = store.apply(NextTurn(current_player_index=1, is_last_turn=False))
        assert game.current_player_index == 1
        assert game.chat == chat
        assert game.votes == {"bob": "alice"}

    def test_out_of_range_turn_is_rejected(self, playing: GameStateStore) -> None:
        """Test that an impossible index is not clamped."""
        before = playing.game
        with pytest.raises(ProtocolDesyncError) as exc_info:
            playing.apply(NextTurn(current_player_index=3))
        assert exc_info.value.event == "next_turn"
        assert playing.game is before

    def test_negative_turn_is_rejected(self, playing: GameStateStore) -> None:
        """Test that a negative index is not wrapped around."""
        with pytest.raises(ProtocolDesyncError):
            playing.apply(NextTurn(current_player_index=-1))

    def test_turn_notice(self, playing: GameStateStore, alice: Player, bob: Player) -> None:
        """Test that a turn change records who lifted the pen."""
        playing.apply(NextTurn(current_player_index=1))
        assert playing.turn_notice == TurnNotice(previous=alice, current=bob)
        playing.clear_notice()
        assert playing.turn_notice is None

    def test_last_turn_opens_deliberation(self, playing: GameStateStore, alice: Player, carol: Player) -> None:
        """Test that the last turn opens voting and still announces its holder."""
        playing.apply(NextTurn(current_player_index=2, is_last_turn=True))
        assert playing.deliberating
        assert playing.turn_notice == TurnNotice(previous=alice, current=carol)

    def test_no_notice_once_voting(self, playing: GameStateStore) -> None:
        """Test that turn changes after the last turn raise no notice."""
        playing.apply(NextTurn(current_player_index=2, is_last_turn=True))
        playing.apply(NextTurn(current_player_index=0, is_last_turn=False))
        assert playing.deliberating
        assert playing.turn_notice is None

    def test_next_turn_in_lobby_desyncs(self, store: GameStateStore, lobby: Lobby) -> None:
        """Test that turn changes outside a game are a desync."""
        store.apply(JoinAck(participant_id="alice", game=lobby))
        with pytest.raises(ProtocolDesyncError):
            store.apply(NextTurn(current_player_index=0))

    def test_draw_in_lobby_desyncs(self, store: GameStateStore, lobby: Lobby) -> None:
        """Test that drawing outside a game is a desync."""
        store.apply(JoinAck(participant_id="alice", game=lobby))
        with pytest.raises(ProtocolDesyncError):
            store.apply(DrawEcho(point=Point(0.5, 0.5)))


class TestVotes:
    """Tests for vote updates."""

    def test_votes_replace_the_map(self, playing: GameStateStore) -> None:
        """Test that the broadcast map replaces the local one."""
        playing.apply(VoteUpdate(votes={"alice": "carol"}))
        playing.apply(VoteUpdate(votes={"bob": "alice"}))
        assert playing.game.votes == {"bob": "alice"}

    def test_vote_for_unknown_player(self, playing: GameStateStore) -> None:
        """Test that votes referencing strangers are a desync."""
        with pytest.raises(ProtocolDesyncError):
            playing.apply(VoteUpdate(votes={"alice": "zed"}))

    def test_vote_outside_game(self, store: GameStateStore, lobby: Lobby) -> None:
        """Test that votes in the lobby are a desync."""
        store.apply(JoinAck(participant_id="alice", game=lobby))
        with pytest.raises(ProtocolDesyncError):
            store.apply(VoteUpdate(votes={}))


class TestChatAndEnd:
    """Tests for chat and game end."""

    def test_chat_appends(self, playing: GameStateStore, bob: Player) -> None:
        """Test that chat messages are kept in arrival order."""
        playing.apply(ChatAppend(message=ChatMessage(author=bob, message="one")))
        playing.apply(ChatAppend(message=ChatMessage(author=bob, message="two")))
        assert [m.message for m in playing.game.chat] == ["one", "two"]

    def test_chat_in_lobby_is_dropped(self, store: GameStateStore, lobby: Lobby, bob: Player) -> None:
        """Test that lobby chat does not change the game."""
        store.apply(JoinAck(participant_id="alice", game=lobby))
        store.apply(ChatAppend(message=ChatMessage(author=bob, message="hi")))
        assert store.game == lobby

    def test_game_started(self, store: GameStateStore, lobby: Lobby, in_game: InGame) -> None:
        """Test that start_game replaces the lobby with the full game."""
        store.apply(JoinAck(participant_id="alice", game=lobby))
        store.apply(GameStarted(game=in_game))
        assert store.phase == GamePhase.IN_GAME
        assert not store.deliberating

    def test_game_ended(self, playing: GameStateStore, carol: Player) -> None:
        """Test that game_over moves to the terminal facet."""
        playing.apply(NextTurn(current_player_index=0, is_last_turn=True))
        playing.apply(GameEnded(game=GameOver(fake_artist=carol, winner=Winner.REAL_ARTISTS)))
        assert playing.phase == GamePhase.GAME_OVER
        assert not playing.deliberating

    def test_reset_keeps_identity(self, playing: GameStateStore) -> None:
        """Test that reset forgets the game only."""
        playing.reset()
        assert playing.game is None
        assert playing.participant_id == "alice"
