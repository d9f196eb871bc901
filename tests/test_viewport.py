"""Tests for the view/model transform."""

from __future__ import annotations

import pytest

from circletree.config import ZOOM_FACTOR
from circletree.model.geometry_primitives import Point
from circletree.model.viewport import Viewport


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(center=Point(100.0, 100.0), scale=50.0)


class TestTransform:
    def test_to_view_space_flips_y(self, viewport: Viewport):
        assert viewport.to_view_space(Point(1.0, 1.0)) == Point(150.0, 50.0)

    def test_to_model_space(self, viewport: Viewport):
        p = viewport.to_model_space(Point(150.0, 50.0))
        assert (p.x, p.y) == pytest.approx((1.0, 1.0))

    def test_round_trip(self, viewport: Viewport):
        model = Point(-0.3, 0.7)
        back = viewport.to_model_space(viewport.to_view_space(model))
        assert (back.x, back.y) == pytest.approx((model.x, model.y))

    def test_lengths(self, viewport: Viewport):
        assert viewport.to_model_length(10.0) == pytest.approx(0.2)

    def test_fit(self):
        vp = Viewport.fit(800.0, 600.0)
        assert vp.center == Point(400.0, 300.0)
        assert vp.scale == pytest.approx(1600.0)


class TestZoom:
    @pytest.mark.parametrize("delta, factor", [(120.0, ZOOM_FACTOR), (-120.0, 1.0 / ZOOM_FACTOR)])
    def test_scale(self, viewport: Viewport, delta: float, factor: float):
        viewport.zoom(Point(0.0, 0.0), delta)
        assert viewport.scale == pytest.approx(50.0 * factor)

    @pytest.mark.parametrize("delta", [120.0, -120.0])
    def test_point_under_cursor_stays(self, viewport: Viewport, delta: float):
        cursor = Point(130.0, 80.0)
        before = viewport.to_model_space(cursor)
        viewport.zoom(cursor, delta)
        after = viewport.to_model_space(cursor)
        assert (after.x, after.y) == pytest.approx((before.x, before.y))
