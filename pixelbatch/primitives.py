"""Small value types used throughout drawing: colours, vectors, rectangles, 2D affine matrices."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import ClassVar, Optional, Union

# Screen-space directions as angles (y grows downwards).
RIGHT = 0.0
LEFT = math.pi
UP = -math.pi / 2
DOWN = math.pi / 2


def angle_diff(start: float, end: float) -> float:
    """Shortest signed angle, in radians, that turns ``start`` into ``end``."""
    return (end - start + math.pi) % math.tau - math.pi


@dataclass(frozen=True)
class Color:
    """An 8-bit-per-channel RGBA colour."""

    WHITE: ClassVar["Color"]
    BLACK: ClassVar["Color"]
    TRANSPARENT: ClassVar["Color"]

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b, self.a):
            if not 0 <= channel <= 255:
                raise ValueError(f"colour channel out of range: {channel}")

    def __bytes__(self) -> bytes:
        return bytes((self.r, self.g, self.b, self.a))


Color.WHITE = Color(255, 255, 255, 255)
Color.BLACK = Color(0, 0, 0, 255)
Color.TRANSPARENT = Color(0, 0, 0, 0)


@dataclass(frozen=True)
class Vec2:
    """A 2D vector or point."""

    ZERO: ClassVar["Vec2"]

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vec2":
        return Vec2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def normal(self) -> "Vec2":
        """Unit vector in the same direction; the zero vector stays zero."""
        if self.x == 0 and self.y == 0:
            return Vec2()
        size = self.length()
        return Vec2(self.x / size, self.y / size)

    def turn_left(self) -> "Vec2":
        """Rotated a quarter turn to the left in screen space."""
        return Vec2(self.y, -self.x)

    def perpendicular(self) -> "Vec2":
        """Rotated a quarter turn to the right in screen space."""
        return Vec2(-self.y, self.x)

    @classmethod
    def from_angle(cls, radians: float, length: float = 1.0) -> "Vec2":
        """Vector of the given length pointing along ``radians``."""
        return cls(math.cos(radians) * length, math.sin(radians) * length)

    @classmethod
    def lerp_bezier(
        cls, a: "Vec2", b: "Vec2", c: "Vec2", d: Optional["Vec2"] = None, t: float = 0.0
    ) -> "Vec2":
        """Point on a quadratic (a, b, c) or, with ``d``, cubic Bezier curve at ``t``."""

        def lerp(p: Vec2, q: Vec2) -> Vec2:
            return p + (q - p) * t

        def quadratic(p: Vec2, q: Vec2, r: Vec2) -> Vec2:
            return lerp(lerp(p, q), lerp(q, r))

        if d is None:
            return quadratic(a, b, c)
        return lerp(quadratic(a, b, c), quadratic(b, c, d))


Vec2.ZERO = Vec2()


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle: position plus width and height."""

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    def top_left(self) -> Vec2:
        return Vec2(self.x, self.y)

    def top_right(self) -> Vec2:
        return Vec2(self.x + self.w, self.y)

    def bottom_left(self) -> Vec2:
        return Vec2(self.x, self.y + self.h)

    def bottom_right(self) -> Vec2:
        return Vec2(self.x + self.w, self.y + self.h)

    def translate(self, offset: Vec2) -> "Rect":
        """The same rectangle moved by ``offset``."""
        return replace(self, x=self.x + offset.x, y=self.y + offset.y)

    def __add__(self, offset: Vec2) -> "Rect":
        return self.translate(offset)

    def __sub__(self, offset: Vec2) -> "Rect":
        return self.translate(-offset)

    def overlap_rect(self, other: "Rect") -> "Rect":
        """Intersection with ``other``; an axis without overlap has zero position and size."""
        x = y = w = h = 0
        if self.x + self.w >= other.x and self.x < other.x + other.w:
            x = max(self.x, other.x)
            w = min(self.x + self.w, other.x + other.w) - x
        if self.y + self.h >= other.y and self.y < other.y + other.h:
            y = max(self.y, other.y)
            h = min(self.y + self.h, other.y + other.h) - y
        return Rect(x, y, w, h)


@dataclass(frozen=True)
class Mat3x2:
    """2D affine transform applied to row vectors: ``a @ b`` applies ``a`` first, then ``b``."""

    m11: float = 1.0
    m12: float = 0.0
    m21: float = 0.0
    m22: float = 1.0
    m31: float = 0.0
    m32: float = 0.0

    @classmethod
    def identity(cls) -> "Mat3x2":
        return cls()

    @classmethod
    def create_translation(cls, position: Vec2) -> "Mat3x2":
        return cls(1.0, 0.0, 0.0, 1.0, position.x, position.y)

    @classmethod
    def create_scale(cls, scale: Union[float, Vec2]) -> "Mat3x2":
        if isinstance(scale, Vec2):
            return cls(scale.x, 0.0, 0.0, scale.y, 0.0, 0.0)
        return cls(scale, 0.0, 0.0, scale, 0.0, 0.0)

    @classmethod
    def create_rotation(cls, radians: float) -> "Mat3x2":
        c = math.cos(radians)
        s = math.sin(radians)
        return cls(c, s, -s, c, 0.0, 0.0)

    @classmethod
    def create_transform(
        cls, position: Vec2, origin: Vec2, scale: Vec2, rotation: float
    ) -> "Mat3x2":
        """Move ``origin`` to zero, scale, rotate, then move to ``position``."""
        matrix = cls()
        if origin.x != 0 or origin.y != 0:
            matrix = cls.create_translation(-origin)
        if scale.x != 1 or scale.y != 1:
            matrix = matrix @ cls.create_scale(scale)
        if rotation != 0:
            matrix = matrix @ cls.create_rotation(rotation)
        if position.x != 0 or position.y != 0:
            matrix = matrix @ cls.create_translation(position)
        return matrix

    def __matmul__(self, rhs: "Mat3x2") -> "Mat3x2":
        return Mat3x2(
            self.m11 * rhs.m11 + self.m12 * rhs.m21,
            self.m11 * rhs.m12 + self.m12 * rhs.m22,
            self.m21 * rhs.m11 + self.m22 * rhs.m21,
            self.m21 * rhs.m12 + self.m22 * rhs.m22,
            self.m31 * rhs.m11 + self.m32 * rhs.m21 + rhs.m31,
            self.m31 * rhs.m12 + self.m32 * rhs.m22 + rhs.m32,
        )

    def transform_point(self, x: float, y: float) -> Vec2:
        """Apply the transform to the point (x, y)."""
        return Vec2(
            x * self.m11 + y * self.m21 + self.m31,
            x * self.m12 + y * self.m22 + self.m32,
        )