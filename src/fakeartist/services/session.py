"""Game session: the explicit handle that wires every component together.

One ``GameSession`` owns one channel for one session code. Entering the
session connects, registers every inbound listener and joins; leaving runs a
single teardown path that cancels timers, releases listeners and closes the
channel, whatever the exit reason.

Example:
    >>> async with GameSession(new_session_code()) as session:
    ...     session.resize(800, 450, pixel_ratio=2)
    ...     await session.start_game()
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Any

import structlog

from fakeartist.core.config import SessionConfig
from fakeartist.core.logging import bind_session_context, clear_session_context
from fakeartist.core.models import GameOver, InGame, Lobby
from fakeartist.core.types import EventName, GamePhase
from fakeartist.drawing.curves import CurveModel
from fakeartist.drawing.surface import DrawingSurface
from fakeartist.drawing.turns import TurnController
from fakeartist.exceptions import PhaseError, PlayerNotFoundError, ProtocolDesyncError
from fakeartist.game.chat import ChatLog
from fakeartist.game.codes import decode_session_code
from fakeartist.game.countdown import GameOverCountdown, is_winner
from fakeartist.game.store import GameStateStore
from fakeartist.game.votes import VoteTally
from fakeartist.realtime.channel import SessionChannel, TransportFactory
from fakeartist.realtime.messages import (
    ChangeNameMessage,
    ChatAppend,
    ChatMessageOut,
    DrawEcho,
    GameEnded,
    GameStarted,
    JoinAck,
    JoinMessage,
    NextTurn,
    RosterUpdate,
    StartGameMessage,
    VoteMessage,
    VoteUpdate,
    decode_event,
)
from fakeartist.realtime.transport import SocketIOTransport

if TYPE_CHECKING:
    from fakeartist.core.models import Game, Player
    from fakeartist.realtime.messages import InboundEvent

logger = structlog.get_logger(__name__)

INBOUND_EVENTS = (
    EventName.JOIN,
    EventName.START_GAME,
    EventName.NEXT_TURN,
    EventName.DRAW,
    EventName.VOTE_FAKE,
    EventName.GAME_OVER,
    EventName.CHAT_MSG,
)


class GameSession:
    """Client session for one game room.

    Attributes:
        session_code: Public short code of the room.
        session_id: UUID the code encodes.
        config: Session configuration.
        channel: The session channel.
        store: Canonical client copy of the game.
        curves: Strokes of the current round.
        surface: Rendered drawing.
        turns: Gesture handling for the local turn holder.
        chat: Chat messages in arrival order.
        tally: Vote groupings, available while in game.
        countdown: Game-over countdown, once the game has ended.
        desync: The inconsistency that halted the session, if any.
    """

    def __init__(
        self,
        session_code: str,
        *,
        config: SessionConfig | None = None,
        transport_factory: TransportFactory | None = None,
        on_event: Callable[[InboundEvent], Any] | None = None,
        on_desync: Callable[[ProtocolDesyncError], Any] | None = None,
        on_tick: Callable[[int], Any] | None = None,
        on_redirect: Callable[[str], Any] | None = None,
    ) -> None:
        """Initialize a session that is not yet connected.

        Args:
            session_code: Public short code of the room.
            config: Session configuration; defaults to ``SessionConfig()``.
            transport_factory: Builds the transport; defaults to socket.io.
            on_event: Called after each inbound event has been applied.
            on_desync: Called when the session detects a protocol desync.
            on_tick: Called with the remaining game-over countdown ticks.
            on_redirect: Called with the next session code when the countdown ends.

        Raises:
            InvalidSessionCodeError: If ``session_code`` cannot be decoded.
        """
        self.session_code = session_code
        self.session_id = decode_session_code(session_code)
        self.config = config or SessionConfig()
        self.channel = SessionChannel(transport_factory or self._socketio_factory)
        self.store = GameStateStore()
        self.curves = CurveModel()
        self.surface = DrawingSurface(
            self.curves,
            line_width=self.config.line_width,
            background_color=self.config.background_color,
        )
        self.turns = TurnController(self.store, self.curves, self.surface, self.channel)
        self.chat = ChatLog()
        self.tally: VoteTally | None = None
        self.countdown: GameOverCountdown | None = None
        self.desync: ProtocolDesyncError | None = None
        self._on_event = on_event
        self._on_desync = on_desync
        self._on_tick = on_tick
        self._on_redirect = on_redirect
        self._countdown_task: asyncio.Task | None = None
        self._notice_timer: asyncio.TimerHandle | None = None
        self._open = False

    def _socketio_factory(self) -> SocketIOTransport:
        return SocketIOTransport(self.config.server_url, socketio_path=self.config.socketio_path)

    # Lifecycle

    async def __aenter__(self) -> GameSession:
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.leave()

    async def open(self) -> None:
        """Connect, subscribe every inbound listener and join the room."""
        self._open = True
        bind_session_context(self.session_code)
        try:
            await self.channel.connect()
            for event in INBOUND_EVENTS:
                self.channel.subscribe(event, partial(self._handle, event))
            await self.channel.send(JoinMessage(session_id=self.session_id))
        except Exception:
            await self.leave()
            raise
        logger.info("Joining session", session_id=str(self.session_id))

    async def leave(self) -> None:
        """Tear the session down. Safe to call more than once."""
        if not self._open:
            return
        self._open = False
        self._cancel_timers()
        try:
            await self.channel.disconnect()
        finally:
            logger.info("Left session")
            clear_session_context()

    async def rejoin(self) -> None:
        """Drop all local state and run a fresh join handshake.

        This is the only way out of a protocol desync.
        """
        await self.leave()
        self.store.reset()
        self.curves.clear()
        self.chat.clear()
        self.tally = None
        self.countdown = None
        self.desync = None
        self.turns.halted = False
        self.turns.reset_stroke()
        self.surface.replay()
        await self.open()

    def _cancel_timers(self) -> None:
        if self._notice_timer is not None:
            self._notice_timer.cancel()
            self._notice_timer = None
        task = self._countdown_task
        self._countdown_task = None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        # The countdown may be leaving the session from its own redirect callback.
        if task is not current:
            task.cancel()

    # Derived state

    @property
    def connected(self) -> bool:
        return self.channel.connected

    @property
    def game(self) -> Game | None:
        return self.store.game

    @property
    def participant_id(self) -> str | None:
        return self.store.participant_id

    @property
    def won(self) -> bool | None:
        """Whether the local participant won; None until the game is over."""
        game = self.store.game
        if not isinstance(game, GameOver):
            return None
        return is_winner(game, self.store.participant_id)

    def resize(self, css_width: float, css_height: float, pixel_ratio: float = 1.0) -> None:
        """Resize the drawing surface and replay every curve."""
        self.surface.resize(css_width, css_height, pixel_ratio)

    # Inbound events

    def _handle(self, event: str, payload: Any = None, *_extra: Any) -> None:
        if self.desync is not None:
            logger.debug("Ignoring event after desync", event=event)
            return
        try:
            decoded = decode_event(event, payload)
            self.store.apply(decoded)
            self._fan_out(decoded)
        except ProtocolDesyncError as exc:
            self._fail(exc)
            return
        if self._on_event is not None:
            self._on_event(decoded)

    def _fan_out(self, event: InboundEvent) -> None:  # noqa: C901
        game = self.store.game
        match event:
            case JoinAck():
                bind_session_context(self.session_code, self.store.participant_id)
                logger.info("Joined session", phase=str(self.store.phase))
                self._load_snapshot(game)
            case GameStarted():
                self.turns.reset_stroke()
                self._load_snapshot(game)
            case RosterUpdate() | VoteUpdate():
                self.tally = VoteTally.from_game(game) if isinstance(game, InGame) else None
            case NextTurn():
                self.turns.reset_stroke()
                if self.store.turn_notice is not None:
                    self._schedule_notice_expiry()
            case DrawEcho(point=point):
                author = self.store.require_in_game("draw").turn_holder
                self.curves.add_point(point, author)
                self.surface.paint_segment(point, author.color)
            case ChatAppend(message=message):
                if isinstance(game, InGame):
                    self.chat.append(message)
            case GameEnded():
                self.turns.reset_stroke()
                self.tally = None
                self._start_countdown()

    def _load_snapshot(self, game: Game | None) -> None:
        match game:
            case InGame():
                self.curves.load(game.curves)
                self.chat.load(game.chat)
                self.tally = VoteTally.from_game(game)
            case Lobby():
                self.curves.clear()
                self.chat.clear()
                self.tally = None
            case GameOver():
                self.tally = None
                self._start_countdown()
        self.surface.replay()

    def _fail(self, exc: ProtocolDesyncError) -> None:
        self.desync = exc
        self.turns.halted = True
        self.turns.reset_stroke()
        self._cancel_timers()
        logger.error("Protocol desync, rejoin required", event=exc.event, reason=exc.reason)
        if self._on_desync is not None:
            self._on_desync(exc)

    def _schedule_notice_expiry(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, turn notice stays until the next event")
            return
        if self._notice_timer is not None:
            self._notice_timer.cancel()
        self._notice_timer = loop.call_later(self.config.turn_notice_seconds, self.store.clear_notice)

    def _start_countdown(self) -> None:
        if self._countdown_task is not None and not self._countdown_task.done():
            return
        self.countdown = GameOverCountdown(
            self.session_code,
            seconds=self.config.countdown_seconds,
            interval=self.config.tick_interval,
            on_tick=self._on_tick,
            on_redirect=self._on_redirect,
        )
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running loop, game-over countdown not started")
            return
        self._countdown_task = loop.create_task(self.countdown.run())
        self._countdown_task.add_done_callback(self._countdown_done)

    def _countdown_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            logger.debug("Game-over countdown cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Game-over countdown failed", error=str(exc), exc_info=exc)

    # Outbound actions

    def _require_phase(self, action: str, *phases: GamePhase) -> Game:
        if self.desync is not None:
            raise self.desync
        game = self.store.game
        if game is None or game.phase not in phases:
            raise PhaseError(action, str(game.phase) if game is not None else "join")
        return game

    async def start_game(self) -> None:
        """Ask the server to start the game. Lobby only."""
        self._require_phase("start_game", GamePhase.LOBBY)
        await self.channel.send(StartGameMessage())

    async def change_name(self, name: str) -> None:
        """Rename the local player. Lobby only."""
        self._require_phase("change_name", GamePhase.LOBBY)
        await self.channel.send(ChangeNameMessage(name=name))

    async def send_chat(self, text: str) -> bool:
        """Send a chat line. In game only; blank lines are not sent.

        Returns:
            True if the message was sent.
        """
        self._require_phase("chat_msg", GamePhase.IN_GAME)
        if not text.strip():
            return False
        await self.channel.send(ChatMessageOut(text=text))
        return True

    async def vote(self, target: Player | str) -> None:
        """Accuse a player of being the fake artist. Deliberation only.

        The local tally is not touched; it changes when the server broadcasts
        the updated votes.

        Args:
            target: The accused player or their id.

        Raises:
            PhaseError: If the drawing is not over yet.
            PlayerNotFoundError: If the target is not seated in the game.
        """
        game = self._require_phase("vote_fake", GamePhase.IN_GAME)
        if not self.store.deliberating:
            raise PhaseError("vote_fake", "drawing")
        target_id = target if isinstance(target, str) else target.id
        player = game.find_player(target_id) if isinstance(game, InGame) else None
        if player is None:
            raise PlayerNotFoundError(target_id)
        await self.channel.send(VoteMessage(target=player))
