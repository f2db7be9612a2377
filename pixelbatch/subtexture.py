"""A rectangular view into a texture, as used for sprites in an atlas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from .primitives import Rect, Vec2

Quad = Tuple[Vec2, Vec2, Vec2, Vec2]


def _zero_quad() -> Quad:
    return (Vec2(), Vec2(), Vec2(), Vec2())


@dataclass
class Subtexture:
    """Texture region ``source`` drawn inside ``frame`` (padding around trimmed images).

    ``draw_coords`` and ``tex_coords`` are recomputed by :meth:`update`.
    """

    texture: Optional[Any] = None
    source: Optional[Rect] = None
    frame: Optional[Rect] = None
    draw_coords: Quad = field(default_factory=_zero_quad, init=False)
    tex_coords: Quad = field(default_factory=_zero_quad, init=False)

    def __post_init__(self) -> None:
        if self.source is None:
            if self.texture is not None:
                self.source = Rect(0, 0, float(self.texture.width), float(self.texture.height))
            else:
                self.source = Rect()
        if self.frame is None:
            self.frame = Rect(0, 0, self.source.w, self.source.h)
        self.update()

    def width(self) -> float:
        """Width of the full (untrimmed) image."""
        return self.frame.w

    def height(self) -> float:
        """Height of the full (untrimmed) image."""
        return self.frame.h

    def update(self) -> None:
        """Recompute the quad's drawing offsets and texture coordinates."""
        left = -self.frame.x
        top = -self.frame.y
        right = left + self.source.w
        bottom = top + self.source.h
        self.draw_coords = (Vec2(left, top), Vec2(right, top), Vec2(right, bottom), Vec2(left, bottom))

        if self.texture is not None:
            uvx = 1.0 / float(self.texture.width)
            uvy = 1.0 / float(self.texture.height)
            u0 = self.source.x * uvx
            v0 = self.source.y * uvy
            u1 = (self.source.x + self.source.w) * uvx
            v1 = (self.source.y + self.source.h) * uvy
            self.tex_coords = (Vec2(u0, v0), Vec2(u1, v0), Vec2(u1, v1), Vec2(u0, v1))

    def crop_info(self, clip: Rect) -> Tuple[Rect, Rect]:
        """Source and frame rectangles of this subtexture cropped to ``clip``."""
        source = (clip + self.source.top_left() + self.frame.top_left()).overlap_rect(self.source)
        frame = Rect(
            min(0.0, self.frame.x + clip.x),
            min(0.0, self.frame.y + clip.y),
            clip.w,
            clip.h,
        )
        return source, frame

    def crop(self, clip: Rect) -> "Subtexture":
        """A new subtexture showing only ``clip`` of this one."""
        source, frame = self.crop_info(clip)
        return Subtexture(self.texture, source, frame)