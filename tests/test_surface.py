"""Tests for rendering the shared drawing."""

from __future__ import annotations

from fakeartist.core.models import Curve, Player, Point
from fakeartist.drawing.curves import CurveModel
from fakeartist.drawing.surface import DrawingSurface

WHITE = (255, 255, 255)


def _diagonal(author: Player) -> list[Curve]:
    return [Curve(author=author, points=[Point(0.0, 0.0), Point(0.5, 0.5), Point(1.0, 1.0)])]


class TestReplay:
    """Tests for deterministic replay."""

    def test_same_curves_same_pixels(self, alice: Player, bob: Player) -> None:
        """Test that two surfaces replaying the same curves are identical."""
        curves = [*_diagonal(alice), Curve(author=bob, points=[Point(0.1, 0.9), Point(0.9, 0.1)])]
        images = []
        for _ in range(2):
            model = CurveModel()
            model.load(curves)
            surface = DrawingSurface(model)
            surface.resize(120, 80, pixel_ratio=2)
            images.append(surface.snapshot())

        assert images[0].size == (240, 160)
        assert images[0].tobytes() == images[1].tobytes()

    def test_incremental_paint_matches_replay(self, alice: Player) -> None:
        """Test that replay after incremental painting gives the replayed image."""
        model = CurveModel()
        live = DrawingSurface(model)
        live.resize(100, 100)
        for point in _diagonal(alice)[0].points:
            model.add_point(point, alice)
            live.paint_segment(point, alice.color)
        live.replay()

        fresh_model = CurveModel()
        fresh_model.load(_diagonal(alice))
        fresh = DrawingSurface(fresh_model)
        fresh.resize(100, 100)

        assert live.snapshot().tobytes() == fresh.snapshot().tobytes()

    def test_resize_preserves_geometry(self, alice: Player) -> None:
        """Test that a resize redraws at the new size using normalized points."""
        model = CurveModel()
        model.load([Curve(author=alice, points=[Point(0.0, 0.5), Point(1.0, 0.5)])])
        surface = DrawingSurface(model)
        surface.resize(100, 50)
        surface.resize(200, 100)

        image = surface.snapshot()
        assert image.size == (200, 100)
        assert image.getpixel((100, 50)) == (255, 0, 0)
        assert image.getpixel((100, 10)) == WHITE

    def test_single_point_draws_nothing(self, alice: Player) -> None:
        """Test that a one-point curve leaves the surface blank."""
        model = CurveModel()
        model.add_point(Point(0.5, 0.5), alice)
        surface = DrawingSurface(model)
        surface.resize(10, 10)
        assert surface.snapshot().getcolors() == [(100, WHITE)]


class TestEdgeCases:
    """Tests for unsized surfaces and bad input."""

    def test_unsized_surface_skips_paint(self, alice: Player) -> None:
        """Test that painting before sizing is a no-op."""
        surface = DrawingSurface(CurveModel())
        surface.paint_segment(Point(0, 0), alice.color)
        surface.paint_segment(Point(1, 1), alice.color)
        surface.replay()
        assert surface.size == (0, 0)
        assert surface.snapshot() is None
        assert surface.to_png() is None

    def test_zero_area_resize(self) -> None:
        """Test that a zero-area resize drops the backing store."""
        surface = DrawingSurface(CurveModel())
        surface.resize(100, 100)
        surface.resize(0, 100)
        assert surface.size == (0, 0)

    def test_unknown_color_is_skipped(self) -> None:
        """Test that a curve with an unparsable color is not painted."""
        model = CurveModel()
        model.load(_diagonal(Player(id="x", color="not-a-color")))
        surface = DrawingSurface(model)
        surface.resize(10, 10)
        assert surface.snapshot().getcolors() == [(100, WHITE)]

    def test_lift_pen_breaks_the_segment(self, alice: Player) -> None:
        """Test that lifting the pen starts the next segment fresh."""
        surface = DrawingSurface(CurveModel())
        surface.resize(10, 10)
        surface.paint_segment(Point(0, 0), alice.color)
        surface.lift_pen()
        assert surface.anchor is None
        surface.paint_segment(Point(1, 1), alice.color)
        assert surface.snapshot().getcolors() == [(100, WHITE)]

    def test_png(self, alice: Player) -> None:
        """Test PNG export of a sized surface."""
        model = CurveModel()
        model.load(_diagonal(alice))
        surface = DrawingSurface(model)
        surface.resize(32, 32)
        assert surface.to_png().startswith(b"\x89PNG")
