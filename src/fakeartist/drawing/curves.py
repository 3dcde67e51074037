"""Multi-author stroke reconstruction from incremental point events."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from fakeartist.core.models import Curve

if TYPE_CHECKING:
    from fakeartist.core.models import Player, Point


class CurveModel:
    """Append-only list of curves for the current round.

    A player draws exactly one line per turn, so a change of author is the
    only stroke boundary: points from the same author extend the last curve,
    and a different author starts a new one.
    """

    def __init__(self) -> None:
        self._curves: list[Curve] = []

    def add_point(self, point: Point, author: Player) -> Curve:
        """Add a point drawn by ``author``.

        Args:
            point: Normalized point.
            author: The player drawing it.

        Returns:
            The curve the point was appended to.
        """
        if not self._curves or self._curves[-1].author.id != author.id:
            self._curves.append(Curve(author=author, points=[point]))
        else:
            self._curves[-1].points.append(point)
        return self._curves[-1]

    def load(self, curves: list[Curve]) -> None:
        """Replace the model with a server snapshot, e.g. on a late join."""
        self._curves = [Curve(author=c.author, points=list(c.points)) for c in curves]

    def clear(self) -> None:
        """Drop every curve."""
        self._curves.clear()

    @property
    def curves(self) -> tuple[Curve, ...]:
        return tuple(self._curves)

    @property
    def last(self) -> Curve | None:
        return self._curves[-1] if self._curves else None

    def __iter__(self) -> Iterator[Curve]:
        return iter(self._curves)

    def __len__(self) -> int:
        return len(self._curves)
