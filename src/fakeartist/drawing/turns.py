"""Turn authority and pointer-to-point translation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from fakeartist.core.models import InGame, Point
from fakeartist.realtime.messages import DrawEndMessage, DrawMessage

if TYPE_CHECKING:
    from fakeartist.drawing.curves import CurveModel
    from fakeartist.drawing.surface import DrawingSurface
    from fakeartist.game.store import GameStateStore
    from fakeartist.realtime.channel import SessionChannel

logger = structlog.get_logger(__name__)


@dataclass
class Rect:
    """Displayed bounds of the drawing surface, in CSS pixels.

    Attributes:
        left: Left edge in pointer coordinates.
        top: Top edge in pointer coordinates.
        width: Displayed width.
        height: Displayed height.
    """

    left: float
    top: float
    width: float
    height: float


def normalize_pointer(client_x: float, client_y: float, rect: Rect, backing_size: tuple[int, int]) -> Point:
    """Convert raw pointer coordinates to a normalized point.

    The pointer position is first scaled from displayed size to backing-store
    pixels, then divided by the backing size.

    Args:
        client_x: Pointer x in page coordinates.
        client_y: Pointer y in page coordinates.
        rect: Displayed bounds of the surface.
        backing_size: Backing store (width, height) in device pixels.

    Returns:
        Point normalized to [0, 1] on each axis.
    """
    backing_width, backing_height = backing_size
    scale_x = backing_width / rect.width
    scale_y = backing_height / rect.height
    x = (client_x - rect.left) * scale_x
    y = (client_y - rect.top) * scale_y
    return Point(x=x / backing_width, y=y / backing_height)


class TurnController:
    """Turns pointer gestures into strokes for the local turn holder.

    Gestures from anyone but the turn holder are ignored, never queued. The
    holder of the last turn keeps the pen while voting is already open.
    """

    def __init__(
        self,
        store: GameStateStore,
        curves: CurveModel,
        surface: DrawingSurface,
        channel: SessionChannel,
    ) -> None:
        self._store = store
        self._curves = curves
        self._surface = surface
        self._channel = channel
        self.stroke_active = False
        self.halted = False

    def is_my_turn(self) -> bool:
        """Whether the local participant currently holds the pen."""
        game = self._store.game
        if self.halted or not self._channel.connected or not isinstance(game, InGame):
            return False
        return self._store.participant_id == game.turn_holder.id

    def press(self) -> bool:
        """Begin a stroke.

        Returns:
            True if a stroke was started.
        """
        if not self.is_my_turn():
            return False
        self.stroke_active = True
        return True

    async def move(self, client_x: float, client_y: float, rect: Rect) -> Point | None:
        """Extend the active stroke to the pointer position.

        Args:
            client_x: Pointer x in page coordinates.
            client_y: Pointer y in page coordinates.
            rect: Displayed bounds of the surface.

        Returns:
            The normalized point drawn, or None if the gesture was ignored.
        """
        if not self.stroke_active or not self.is_my_turn():
            return None
        if rect.width <= 0 or rect.height <= 0 or self._surface.size == (0, 0):
            logger.debug("Ignoring move on an unsized surface")
            return None
        author = self._store.require_in_game("draw").turn_holder
        point = normalize_pointer(client_x, client_y, rect, self._surface.size)
        self._curves.add_point(point, author)
        self._surface.paint_segment(point, author.color)
        await self._channel.send(DrawMessage(point=point))
        return point

    async def release(self) -> bool:
        """End the active stroke and hand the pen back to the server.

        Returns:
            True if a draw-end was emitted.
        """
        if not self.stroke_active:
            return False
        if not self.is_my_turn():
            self.reset_stroke()
            return False
        self.reset_stroke()
        await self._channel.send(DrawEndMessage())
        return True

    def reset_stroke(self) -> None:
        """End any active stroke locally without notifying the server."""
        self.stroke_active = False
        self._surface.lift_pen()
