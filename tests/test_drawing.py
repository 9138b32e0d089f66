"""Tests for the world-to-screen mapping."""

import pytest

from fibspiral.drawing import ScreenMapping, draw_spiral, spiral_rectangles
from fibspiral.geometry import Point2D
from fibspiral.renderers import Renderer
from fibspiral.spiral import Extent, compute_extent, get_fibonacci_points


def test_mapping_fits_extent_into_window():
    mapping = ScreenMapping.from_extent(Extent(-1, 4, -2, 6), 500, 800)
    assert mapping == ScreenMapping(xoffset=1, yoffset=6, xscale=100, yscale=100)


def test_flat_extent_keeps_unit_scale():
    mapping = ScreenMapping.from_extent(Extent(2, 2, 3, 3), 640, 480)
    assert (mapping.xscale, mapping.yscale) == (1.0, 1.0)


def test_rect_uses_points_as_diagonal():
    mapping = ScreenMapping(xoffset=1, yoffset=6, xscale=100, yscale=100)
    # world y is flipped: (4, 1) and (-1, 6) span the whole window
    upper_left, lower_right = mapping.rect(Point2D(-1, 6), Point2D(4, 1))
    assert upper_left == pytest.approx((0, 0))
    assert lower_right == pytest.approx((500, 500))


def test_rect_corners_in_either_order():
    mapping = ScreenMapping(xoffset=1, yoffset=6, xscale=100, yscale=100)
    assert mapping.rect(Point2D(4, 1), Point2D(-1, 6)) == pytest.approx(
        mapping.rect(Point2D(-1, 6), Point2D(4, 1))
    )


def test_rectangles_walk_from_last_point(fibonacci_samples):
    points = get_fibonacci_points(fibonacci_samples)
    mapping = ScreenMapping.from_extent(compute_extent(points), 500, 800)
    rects = spiral_rectangles(points, mapping)

    assert len(rects) == len(points) - 1
    assert rects[0][0] == pytest.approx((0, 0), abs=1e-3)
    assert rects[0][1] == pytest.approx((500, 500), abs=1e-3)
    # last pair is (points[1], points[0]) = ((0, 1), (1, 0))
    assert rects[-1][0] == pytest.approx((100, 500), abs=1e-3)
    assert rects[-1][1] == pytest.approx((200, 600), abs=1e-3)


def test_no_rectangles_without_points():
    assert spiral_rectangles([], ScreenMapping(0, 0, 1, 1)) == []
    assert spiral_rectangles([Point2D(1, 0)], ScreenMapping(0, 0, 1, 1)) == []


def test_draw_spiral_fills_one_frame(recorder, fibonacci_samples):
    points = get_fibonacci_points(fibonacci_samples)
    assert draw_spiral(recorder, points, compute_extent(points), 500, 800)
    assert recorder.frame_sizes == [(500, 800)]
    assert len(recorder.last_frame) == 5


def test_draw_spiral_with_nothing_to_draw(recorder):
    assert not draw_spiral(recorder, [], None, 500, 800)
    assert recorder.frames == []


class _BrokenRenderer(Renderer):
    def begin_frame(self, width, height):
        raise RuntimeError("no context")


def test_draw_spiral_reports_renderer_errors(fibonacci_samples):
    points = get_fibonacci_points(fibonacci_samples)
    assert not draw_spiral(_BrokenRenderer(), points, compute_extent(points), 500, 800)
