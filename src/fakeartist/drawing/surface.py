"""Raster rendering of the shared drawing using Pillow."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import structlog
from PIL import Image, ImageColor, ImageDraw

if TYPE_CHECKING:
    from fakeartist.core.models import Curve, Point
    from fakeartist.drawing.curves import CurveModel

logger = structlog.get_logger(__name__)


class DrawingSurface:
    """Resizable canvas that renders a ``CurveModel``.

    The backing store is sized in device pixels (CSS size times pixel ratio).
    ``replay`` is the single source of rendering truth: it clears the store
    and strokes every curve from scratch, so identical curves at an identical
    size always give identical pixels. ``paint_segment`` is a fast path that
    extends the current stroke without a full replay; any divergence it
    introduces disappears at the next replay.
    """

    def __init__(
        self,
        curves: CurveModel,
        *,
        line_width: float = 1.0,
        background_color: str = "#ffffff",
    ) -> None:
        """Initialize an unsized surface.

        Args:
            curves: The model to render.
            line_width: Stroke width in CSS pixels.
            background_color: Background color in hex format.
        """
        self._curves = curves
        self._line_width = line_width
        self._background = ImageColor.getrgb(background_color)
        self._image: Image.Image | None = None
        self._draw: ImageDraw.ImageDraw | None = None
        self._anchor: Point | None = None
        self.pixel_ratio = 1.0

    @property
    def size(self) -> tuple[int, int]:
        """Backing store size in device pixels; (0, 0) when unsized."""
        return self._image.size if self._image is not None else (0, 0)

    @property
    def anchor(self) -> Point | None:
        """Last point painted by the fast path."""
        return self._anchor

    def resize(self, css_width: float, css_height: float, pixel_ratio: float = 1.0) -> None:
        """Rebuild the backing store for a new displayed size and replay.

        Args:
            css_width: Displayed width.
            css_height: Displayed height.
            pixel_ratio: Device pixels per CSS pixel.
        """
        width = round(css_width * pixel_ratio)
        height = round(css_height * pixel_ratio)
        self.pixel_ratio = pixel_ratio
        if width <= 0 or height <= 0:
            logger.warning("Surface has no area", width=width, height=height)
            self._image = None
            self._draw = None
            return
        self._image = Image.new("RGB", (width, height), self._background)
        self._draw = ImageDraw.Draw(self._image)
        logger.debug("Surface resized", width=width, height=height, pixel_ratio=pixel_ratio)
        self.replay()

    def replay(self) -> None:
        """Clear the backing store and stroke every curve."""
        if self._image is None or self._draw is None:
            logger.debug("Skipping replay: surface not sized")
            return
        self._draw.rectangle([(0, 0), self._image.size], fill=self._background)
        for curve in self._curves:
            self._stroke(curve)

    def paint_segment(self, point: Point, color: str) -> None:
        """Extend the current stroke from the anchor to ``point``.

        Args:
            point: Normalized point just added.
            color: Author color.
        """
        anchor = self._anchor
        self._anchor = point
        if self._draw is None:
            logger.debug("Skipping segment: surface not sized")
            return
        if anchor is None:
            return
        fill = self._parse_color(color)
        if fill is None:
            return
        self._draw.line([self._denormalize(anchor), self._denormalize(point)], fill=fill, width=self._stroke_width)

    def lift_pen(self) -> None:
        """End the fast-path stroke."""
        self._anchor = None

    def snapshot(self) -> Image.Image | None:
        """Copy of the current backing store."""
        return self._image.copy() if self._image is not None else None

    def to_png(self) -> bytes | None:
        """Encode the backing store as PNG bytes."""
        if self._image is None:
            return None
        buffer = io.BytesIO()
        self._image.save(buffer, format="PNG")
        return buffer.getvalue()

    @property
    def _stroke_width(self) -> int:
        return max(1, round(self._line_width * self.pixel_ratio))

    def _denormalize(self, point: Point) -> tuple[float, float]:
        width, height = self.size
        return (point.x * width, point.y * height)

    def _parse_color(self, color: str) -> tuple[int, ...] | None:
        try:
            return ImageColor.getrgb(color)
        except ValueError:
            logger.warning("Skipping paint with unknown color", color=color)
            return None

    def _stroke(self, curve: Curve) -> None:
        # A single point draws nothing, as on an HTML canvas.
        if len(curve.points) < 2 or self._draw is None:
            return
        fill = self._parse_color(curve.author.color)
        if fill is None:
            return
        self._draw.line([self._denormalize(p) for p in curve.points], fill=fill, width=self._stroke_width)
