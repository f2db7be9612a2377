"""Shape drawing built on top of two primitives: coloured triangles and quads."""

from __future__ import annotations

import abc
import math
from numbers import Real
from typing import Optional, Sequence, Tuple, Union

from .primitives import DOWN, LEFT, RIGHT, UP, Color, Rect, Vec2, angle_diff

Colors = Union[Color, Sequence[Color]]
PerCorner = Union[float, Sequence[float]]


def _intersection(p0: Vec2, p1: Vec2, q0: Vec2, q1: Vec2) -> Vec2:
    """Where the line through p0, p1 meets the line through q0, q1.

    Parallel lines have no single meeting point; ``p1`` is used then.
    """
    aa = p1 - p0
    bb = q0 - q1
    cc = q0 - p0
    denominator = aa.y * bb.x - aa.x * bb.y
    if denominator == 0:
        return p1
    t = (bb.x * cc.y - bb.y * cc.x) / denominator
    return Vec2(p0.x + t * (p1.x - p0.x), p0.y + t * (p1.y - p0.y))


def _corners(value, name: str) -> Tuple:
    """Spread a single value over the four corners (tl, tr, br, bl)."""
    if isinstance(value, Real):
        return (value,) * 4
    values = tuple(value)
    if len(values) != 4:
        raise ValueError(f"{name} needs one value or four (top-left, top-right, bottom-right, bottom-left)")
    return values


def _clamp_radius(radius: float, rect: Rect) -> float:
    return min(min(max(0.0, radius), rect.w / 2.0), rect.h / 2.0)


class ShapeDrawing(abc.ABC):
    """Lines, rectangles, circles and arrows made of triangles and quads.

    Subclasses supply :meth:`tri` and :meth:`quad`; every shape here is
    emitted through those two calls as untextured geometry.
    """

    @abc.abstractmethod
    def tri(self, pos0: Vec2, pos1: Vec2, pos2: Vec2, color: Colors,
            tex_coords: Optional[Sequence[Vec2]] = None) -> None:
        """Draw a triangle; ``color`` is one colour or one per corner."""

    @abc.abstractmethod
    def quad(self, pos0: Vec2, pos1: Vec2, pos2: Vec2, pos3: Vec2, color: Colors,
             tex_coords: Optional[Sequence[Vec2]] = None) -> None:
        """Draw a quad; ``color`` is one colour or one per corner."""

    def line(self, start: Vec2, end: Vec2, thickness: float, color: Color,
             end_color: Optional[Color] = None) -> None:
        """A straight line, optionally fading from ``color`` to ``end_color``."""
        if start.x == end.x and start.y == end.y:
            return
        if end_color is None:
            end_color = color
        normal = (end - start).normal()
        perp = Vec2(normal.y, -normal.x) * (thickness * 0.5)
        self.quad(start + perp, end + perp, end - perp, start - perp,
                  (color, end_color, end_color, color))

    def bezier_line(self, start: Vec2, control: Vec2, end: Vec2, steps: int,
                    thickness: float, color: Color) -> None:
        """A quadratic Bezier curve made of ``steps`` straight segments."""
        prev = start
        for i in range(1, steps):
            at = Vec2.lerp_bezier(start, control, end, t=i / steps)
            self.line(prev, at, thickness, color)
            prev = at
        self.line(prev, end, thickness, color)

    def cubic_bezier_line(self, start: Vec2, control_a: Vec2, control_b: Vec2, end: Vec2,
                          steps: int, thickness: float, color: Color) -> None:
        """A cubic Bezier curve made of ``steps`` straight segments."""
        prev = start
        for i in range(1, steps):
            at = Vec2.lerp_bezier(start, control_a, control_b, end, t=i / steps)
            self.line(prev, at, thickness, color)
            prev = at
        self.line(prev, end, thickness, color)

    def tri_line(self, a: Vec2, b: Vec2, c: Vec2, thickness: float, color: Color) -> None:
        """The outline of a triangle."""
        off_ab = ((b - a) / (a - b).length()).turn_left() * thickness
        off_bc = ((c - b) / (b - c).length()).turn_left() * thickness
        off_ca = ((a - c) / (c - a).length()).turn_left() * thickness

        aa = _intersection(c + off_ca, a + off_ca, a + off_ab, b + off_ab)
        bb = _intersection(a + off_ab, b + off_ab, b + off_bc, c + off_bc)
        cc = _intersection(b + off_bc, c + off_bc, c + off_ca, a + off_ca)

        self.quad(aa, a, b, bb, color)
        self.quad(bb, b, c, cc, color)
        self.quad(cc, c, a, aa, color)

    def rect(self, rect: Rect, color: Color) -> None:
        """A filled rectangle."""
        self.quad(rect.top_left(), rect.top_right(), rect.bottom_right(), rect.bottom_left(), color)

    def rect_line(self, rect: Rect, thickness: float, color: Color) -> None:
        """The outline of a rectangle; filled if the thickness covers it."""
        t = thickness
        if t >= rect.w or t >= rect.h:
            self.rect(rect, color)
            return
        x, y, w, h = rect.x, rect.y, rect.w, rect.h
        self.quad(Vec2(x, y), Vec2(x + w - t, y), Vec2(x + w - t, y + t), Vec2(x, y + t), color)
        self.quad(Vec2(x + w - t, y), Vec2(x + w, y), Vec2(x + w, y + h - t),
                  Vec2(x + w - t, y + h - t), color)
        self.quad(Vec2(x + t, y + h - t), Vec2(x + w, y + h - t), Vec2(x + w, y + h),
                  Vec2(x, y + h), color)
        self.quad(Vec2(x, y + t), Vec2(x + t, y + t), Vec2(x + t, y + h - t), Vec2(x, y + h), color)

    def rect_rounded(self, rect: Rect, radii: PerCorner, steps: Union[int, Sequence[int]],
                     color: Color) -> None:
        """A filled rectangle with rounded corners.

        ``radii`` and ``steps`` are one value or four, ordered top-left,
        top-right, bottom-right, bottom-left.
        """
        rtl, rtr, rbr, rbl = (_clamp_radius(r, rect) for r in _corners(radii, "radii"))
        stl, str_, sbr, sbl = _corners(steps, "steps")

        if rtl <= 0 and rtr <= 0 and rbr <= 0 and rbl <= 0:
            self.rect(rect, color)
            return

        tl = Rect(rect.x, rect.y, rtl, rtl)
        tr = Rect(rect.x + rect.w - rtr, rect.y, rtr, rtr)
        bl = Rect(rect.x, rect.y + rect.h - rbl, rbl, rbl)
        br = Rect(rect.x + rect.w - rbr, rect.y + rect.h - rbr, rbr, rbr)

        self.semi_circle(tl.bottom_right(), UP, LEFT, rtl, stl, color)
        self.semi_circle(tr.bottom_left(), UP, RIGHT, rtr, str_, color)
        self.semi_circle(bl.top_right(), DOWN, LEFT, rbl, sbl, color)
        self.semi_circle(br.top_left(), DOWN, RIGHT, rbr, sbr, color)

        self.quad(tl.top_right(), tr.top_left(), tr.bottom_left(), tl.bottom_right(), color)
        self.quad(tr.bottom_left(), tr.bottom_right(), br.top_right(), br.top_left(), color)
        self.quad(bl.top_right(), br.top_left(), br.bottom_left(), bl.bottom_right(), color)
        self.quad(tl.bottom_left(), tl.bottom_right(), bl.top_right(), bl.top_left(), color)
        self.quad(tl.bottom_right(), tr.bottom_left(), br.top_left(), bl.top_right(), color)

    def rect_rounded_line(self, rect: Rect, radii: PerCorner, steps: Union[int, Sequence[int]],
                          thickness: float, color: Color) -> None:
        """The outline of a rectangle with rounded corners."""
        rtl, rtr, rbr, rbl = (_clamp_radius(r, rect) for r in _corners(radii, "radii"))
        stl, str_, sbr, sbl = _corners(steps, "steps")
        t = thickness
        r = rect

        if rtl <= 0 and rtr <= 0 and rbr <= 0 and rbl <= 0:
            self.rect_line(r, t, color)
            return

        self.semi_circle_line(Vec2(r.x + rtl, r.y + rtl), UP, LEFT, rtl, stl, t, color)
        self.semi_circle_line(Vec2(r.x + r.w - rtr, r.y + rtr), UP, UP + math.tau * 0.25,
                              rtr, str_, t, color)
        self.semi_circle_line(Vec2(r.x + rbl, r.y + r.h - rbl), DOWN, LEFT, rbl, sbl, t, color)
        self.semi_circle_line(Vec2(r.x + r.w - rbr, r.y + r.h - rbr), DOWN, RIGHT, rbr, sbr, t, color)

        if r.h > rtl + rbl:
            self.rect(Rect(r.x, r.y + rtl, t, r.h - rtl - rbl), color)
        if r.h > rtr + rbr:
            self.rect(Rect(r.x + r.w - t, r.y + rtr, t, r.h - rtr - rbr), color)
        if r.w > rtl + rtr:
            self.rect(Rect(r.x + rtl, r.y, r.w - rtl - rtr, t), color)
        if r.w > rbl + rbr:
            self.rect(Rect(r.x + rbl, r.y + r.h - t, r.w - rbl - rbr, t), color)

    def semi_circle(self, center: Vec2, start_radians: float, end_radians: float, radius: float,
                    steps: int, center_color: Color, edge_color: Optional[Color] = None) -> None:
        """A filled circle slice turning the short way from start to end."""
        if edge_color is None:
            edge_color = center_color
        add = angle_diff(start_radians, end_radians)
        last = Vec2.from_angle(start_radians, radius)
        for i in range(1, steps + 1):
            following = Vec2.from_angle(start_radians + add * (i / steps), radius)
            self.tri(center + last, center + following, center,
                     (edge_color, edge_color, center_color))
            last = following

    def semi_circle_line(self, center: Vec2, start_radians: float, end_radians: float,
                         radius: float, steps: int, thickness: float, color: Color) -> None:
        """The arc of a circle slice; filled if the thickness covers the radius."""
        if thickness >= radius:
            self.semi_circle(center, start_radians, end_radians, radius, steps, color, color)
            return
        add = angle_diff(start_radians, end_radians)
        inner_radius = radius - thickness
        last_inner = Vec2.from_angle(start_radians, inner_radius)
        last_outer = Vec2.from_angle(start_radians, radius)
        for i in range(1, steps + 1):
            angle = start_radians + add * (i / steps)
            next_inner = Vec2.from_angle(angle, inner_radius)
            next_outer = Vec2.from_angle(angle, radius)
            self.quad(center + last_inner, center + last_outer, center + next_outer,
                      center + next_inner, color)
            last_inner, last_outer = next_inner, next_outer

    def circle(self, center: Vec2, radius: float, steps: int, center_color: Color,
               outer_color: Optional[Color] = None) -> None:
        """A filled circle, optionally shaded from the centre to the edge."""
        if outer_color is None:
            outer_color = center_color
        last = Vec2(center.x + radius, center.y)
        for i in range(1, steps + 1):
            radians = (i / steps) * math.tau
            following = Vec2(center.x + math.cos(radians) * radius,
                             center.y + math.sin(radians) * radius)
            self.tri(last, following, center, (outer_color, outer_color, center_color))
            last = following

    def circle_line(self, center: Vec2, radius: float, thickness: float, steps: int,
                    color: Color) -> None:
        """The ring of a circle; filled if the thickness covers the radius."""
        if thickness >= radius:
            self.circle(center, radius, steps, color)
            return
        inner_radius = radius - thickness
        last_inner = Vec2(center.x + inner_radius, center.y)
        last_outer = Vec2(center.x + radius, center.y)
        for i in range(1, steps + 1):
            radians = (i / steps) * math.tau
            nx, ny = math.cos(radians), math.sin(radians)
            next_inner = Vec2(center.x + nx * inner_radius, center.y + ny * inner_radius)
            next_outer = Vec2(center.x + nx * radius, center.y + ny * radius)
            self.quad(last_inner, last_outer, next_outer, next_inner, color)
            last_inner, last_outer = next_inner, next_outer

    def quad_line(self, a: Vec2, b: Vec2, c: Vec2, d: Vec2, thickness: float,
                  color: Color) -> None:
        """The outline of a quad."""
        off_ab = ((b - a) / (a - b).length()).turn_left() * thickness
        off_bc = ((c - b) / (b - c).length()).turn_left() * thickness
        off_cd = ((d - c) / (c - d).length()).turn_left() * thickness
        off_da = ((a - d) / (d - a).length()).turn_left() * thickness

        aa = _intersection(d + off_da, a + off_da, a + off_ab, b + off_ab)
        bb = _intersection(a + off_ab, b + off_ab, b + off_bc, c + off_bc)
        cc = _intersection(b + off_bc, c + off_bc, c + off_cd, d + off_cd)
        dd = _intersection(c + off_cd, d + off_cd, d + off_da, a + off_da)

        self.quad(aa, a, b, bb, color)
        self.quad(bb, b, c, cc, color)
        self.quad(cc, c, d, dd, color)
        self.quad(dd, d, a, aa, color)

    def arrow_head(self, point: Vec2, source: Union[Vec2, float], side_len: float,
                   color: Color) -> None:
        """An equilateral arrow head at ``point``.

        ``source`` is the point the arrow comes from, or the direction it
        points in, in radians.
        """
        if not isinstance(source, Vec2):
            source = point - Vec2.from_angle(float(source))
        height = math.sqrt(side_len * side_len - (side_len / 2) ** 2)
        direction = (point - source).normal()
        perp = direction.perpendicular()
        base = point - direction * height
        half = perp * (side_len / 2)
        self.tri(point, base + half, base - half, color)