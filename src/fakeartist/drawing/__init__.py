"""Shared drawing: stroke model, rendering and turn handling."""

from __future__ import annotations

from fakeartist.drawing.curves import CurveModel
from fakeartist.drawing.surface import DrawingSurface
from fakeartist.drawing.turns import Rect, TurnController, normalize_pointer

__all__ = [
    "CurveModel",
    "DrawingSurface",
    "Rect",
    "TurnController",
    "normalize_pointer",
]
