"""Game-over outcome and the "play again" countdown."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import structlog

from fakeartist.core.types import Winner
from fakeartist.game.codes import next_session_code

if TYPE_CHECKING:
    from fakeartist.core.models import GameOver

logger = structlog.get_logger(__name__)

DEFAULT_COUNTDOWN_SECONDS = 10


def is_fake_artist(game: GameOver, participant_id: str | None) -> bool:
    """Whether the local participant was the fake artist."""
    return participant_id is not None and game.fake_artist.id == participant_id


def is_winner(game: GameOver, participant_id: str | None) -> bool:
    """Whether the local participant is on the winning side.

    Args:
        game: The terminal facet.
        participant_id: Local participant id.

    Returns:
        True if the local participant won.
    """
    return (game.winner == Winner.FAKE_ARTIST) == is_fake_artist(game, participant_id)


class GameOverCountdown:
    """Fixed countdown that ends by redirecting to the next session.

    The next session code is derived up front, so every participant computes
    the same destination.

    Attributes:
        session_code: Code of the finished session.
        next_code: Code of the session to redirect to.
        seconds_left: Remaining ticks.
    """

    def __init__(
        self,
        session_code: str,
        *,
        seconds: int = DEFAULT_COUNTDOWN_SECONDS,
        interval: float = 1.0,
        on_tick: Callable[[int], Any] | None = None,
        on_redirect: Callable[[str], Awaitable[Any] | Any] | None = None,
    ) -> None:
        """Initialize the countdown.

        Args:
            session_code: Code of the finished session.
            seconds: Number of ticks before redirecting.
            interval: Seconds per tick.
            on_tick: Called with the remaining ticks after each tick.
            on_redirect: Called with the next session code when the countdown ends.
        """
        self.session_code = session_code
        self.next_code = next_session_code(session_code)
        self.seconds_left = seconds
        self.interval = interval
        self._on_tick = on_tick
        self._on_redirect = on_redirect

    async def run(self) -> str:
        """Tick down to zero, then redirect.

        Returns:
            The next session code.
        """
        while self.seconds_left > 0:
            await asyncio.sleep(self.interval)
            self.seconds_left -= 1
            if self._on_tick is not None:
                self._on_tick(self.seconds_left)

        logger.info("Countdown finished", next_code=self.next_code)
        if self._on_redirect is not None:
            result = self._on_redirect(self.next_code)
            if inspect.isawaitable(result):
                await result
        return self.next_code
