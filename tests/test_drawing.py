import math

import pytest

from pixelbatch.drawing import ShapeDrawing
from pixelbatch.primitives import Color, Rect, Vec2

RED = Color(255, 0, 0, 255)
BLUE = Color(0, 0, 255, 255)


class Recorder(ShapeDrawing):
    def __init__(self):
        self.tris = []
        self.quads = []

    def tri(self, pos0, pos1, pos2, color, tex_coords=None):
        self.tris.append(((pos0, pos1, pos2), color))

    def quad(self, pos0, pos1, pos2, pos3, color, tex_coords=None):
        self.quads.append(((pos0, pos1, pos2, pos3), color))


def close(a, b):
    return a.x == pytest.approx(b.x, abs=1e-6) and a.y == pytest.approx(b.y, abs=1e-6)


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        ShapeDrawing()


def test_line_with_equal_ends_draws_nothing():
    r = Recorder()
    r.line(Vec2(3, 3), Vec2(3, 3), 2, RED)
    assert r.quads == [] and r.tris == []


def test_line_is_offset_by_half_thickness_and_fades():
    r = Recorder()
    r.line(Vec2(0, 0), Vec2(10, 0), 2, RED, BLUE)
    assert len(r.quads) == 1
    points, colors = r.quads[0]
    assert all(abs(p.y) == pytest.approx(1) for p in points)
    assert colors == (RED, BLUE, BLUE, RED)


def test_rect_uses_rect_corners():
    r = Recorder()
    rect = Rect(1, 2, 3, 4)
    r.rect(rect, RED)
    assert r.quads == [((rect.top_left(), rect.top_right(), rect.bottom_right(), rect.bottom_left()), RED)]


def test_rect_line_thick_fills():
    r = Recorder()
    r.rect_line(Rect(0, 0, 4, 4), 5, RED)
    assert len(r.quads) == 1


def test_rect_line_thin_stays_inside():
    r = Recorder()
    rect = Rect(0, 0, 10, 8)
    r.rect_line(rect, 1, RED)
    assert len(r.quads) == 4
    for points, _ in r.quads:
        for p in points:
            assert 0 <= p.x <= rect.w and 0 <= p.y <= rect.h


def test_rect_rounded_zero_radius_is_plain_rect():
    r = Recorder()
    r.rect_rounded(Rect(0, 0, 10, 10), 0, 4, RED)
    assert len(r.quads) == 1 and r.tris == []


def test_rect_rounded_draws_corners_and_centre():
    r = Recorder()
    steps = 3
    r.rect_rounded(Rect(0, 0, 20, 10), 2, steps, RED)
    assert len(r.tris) == 4 * steps
    assert len(r.quads) == 5


def test_rect_rounded_rejects_wrong_corner_count():
    r = Recorder()
    with pytest.raises(ValueError):
        r.rect_rounded(Rect(0, 0, 10, 10), (1, 2), 3, RED)


def test_rect_rounded_line_zero_radius_is_rect_line():
    r = Recorder()
    r.rect_rounded_line(Rect(0, 0, 10, 10), 0, 4, 1, RED)
    assert len(r.quads) == 4 and r.tris == []


def test_circle_points_lie_on_radius_and_close():
    r = Recorder()
    center, radius, steps = Vec2(5, 5), 3.0, 8
    r.circle(center, radius, steps, RED, BLUE)
    assert len(r.tris) == steps
    for (a, b, c), colors in r.tris:
        assert (a - center).length() == pytest.approx(radius)
        assert (b - center).length() == pytest.approx(radius)
        assert c == center
        assert colors == (BLUE, BLUE, RED)
    assert close(r.tris[-1][0][1], r.tris[0][0][0])


def test_circle_line_ring_radii():
    r = Recorder()
    center, radius, thickness, steps = Vec2(0, 0), 4.0, 1.0, 6
    r.circle_line(center, radius, thickness, steps, RED)
    assert len(r.quads) == steps and r.tris == []
    for (inner, outer, outer2, inner2), _ in r.quads:
        assert inner.length() == pytest.approx(radius - thickness)
        assert outer.length() == pytest.approx(radius)
        assert outer2.length() == pytest.approx(radius)
        assert inner2.length() == pytest.approx(radius - thickness)


def test_circle_line_thick_fills():
    r = Recorder()
    r.circle_line(Vec2(0, 0), 2.0, 3.0, 5, RED)
    assert len(r.tris) == 5 and r.quads == []


def test_semi_circle_ends_at_end_angle():
    r = Recorder()
    center = Vec2(1, 1)
    r.semi_circle(center, 0.0, math.pi / 2, 2.0, 4, RED)
    assert len(r.tris) == 4
    assert close(r.tris[0][0][0], center + Vec2.from_angle(0.0, 2.0))
    assert close(r.tris[-1][0][1], center + Vec2.from_angle(math.pi / 2, 2.0))


def test_semi_circle_line_uses_quads():
    r = Recorder()
    r.semi_circle_line(Vec2(0, 0), 0.0, math.pi / 2, 3.0, 5, 1.0, RED)
    assert len(r.quads) == 5 and r.tris == []


def test_bezier_line_segment_count_and_collinear():
    r = Recorder()
    steps = 5
    r.bezier_line(Vec2(0, 0), Vec2(5, 0), Vec2(10, 0), steps, 2, RED)
    assert len(r.quads) == steps
    for points, _ in r.quads:
        assert all(abs(p.y) == pytest.approx(1) for p in points)


def test_cubic_bezier_line_ends_at_end_point():
    r = Recorder()
    end = Vec2(10, 10)
    r.cubic_bezier_line(Vec2(0, 0), Vec2(0, 10), Vec2(10, 0), end, 4, 2, RED)
    assert len(r.quads) == 4
    points, _ = r.quads[-1]
    mid_end = (points[1] + points[2]) * 0.5
    assert close(mid_end, end)


def test_quad_line_outer_corners():
    r = Recorder()
    r.quad_line(Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10), 1, RED)
    assert len(r.quads) == 4
    outer = [q[0][0] for q in r.quads]
    expected = [Vec2(-1, -1), Vec2(11, -1), Vec2(11, 11), Vec2(-1, 11)]
    assert all(close(a, b) for a, b in zip(outer, expected))


def test_tri_line_shares_corners():
    r = Recorder()
    r.tri_line(Vec2(0, 0), Vec2(10, 0), Vec2(5, 8), 1, RED)
    assert len(r.quads) == 3
    for i, (points, _) in enumerate(r.quads):
        following = r.quads[(i + 1) % 3][0]
        assert close(points[3], following[0])
        assert all(math.isfinite(p.x) and math.isfinite(p.y) for p in points)


def test_arrow_head_angle_matches_source_point():
    by_angle = Recorder()
    by_point = Recorder()
    tip = Vec2(10, 0)
    by_angle.arrow_head(tip, 0.0, 4, RED)
    by_point.arrow_head(tip, Vec2(0, 0), 4, RED)
    assert len(by_angle.tris) == 1
    for a, b in zip(by_angle.tris[0][0], by_point.tris[0][0]):
        assert close(a, b)
    a, b, c = by_point.tris[0][0]
    assert (a - b).length() == pytest.approx(4)
    assert (b - c).length() == pytest.approx(4)