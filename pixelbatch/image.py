"""RGBA pixel images with PNG and JPEG loading and saving."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Union

from PIL import Image as _PILImage
from PIL import UnidentifiedImageError

from . import log
from .primitives import Rect, Vec2

BYTES_PER_PIXEL = 4

SaveTarget = Union[str, "os.PathLike[str]", BinaryIO]


@dataclass
class Image:
    """A width x height block of RGBA pixels stored row by row."""

    width: int = 0
    height: int = 0
    pixels: Optional[bytearray] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("image width and height must not be negative")
        size = self.width * self.height * BYTES_PER_PIXEL
        if self.pixels is None:
            self.pixels = bytearray(size)
        else:
            self.pixels = bytearray(self.pixels)
            if len(self.pixels) != size:
                raise ValueError("pixel data does not match the image size")

    @classmethod
    def load(cls, path: Union[str, "os.PathLike[str]"]) -> "Image":
        """Read a PNG or JPEG file."""
        with open(path, "rb") as stream:
            return cls.from_stream(stream)

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "Image":
        """Read a PNG or JPEG image from a binary stream."""
        readable = getattr(stream, "readable", None)
        if readable is not None and not readable():
            raise ValueError("unable to load image as the stream is not readable")
        try:
            with _PILImage.open(stream, formats=("PNG", "JPEG")) as source:
                rgba = source.convert("RGBA")
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError("the stream's data is not a valid image") from exc
        return cls(rgba.width, rgba.height, rgba.tobytes())

    def premultiply(self) -> None:
        """Multiply the colour channels by alpha, in place."""
        px = self.pixels
        for i in range(0, len(px), BYTES_PER_PIXEL):
            alpha = px[i + 3]
            px[i] = px[i] * alpha // 255
            px[i + 1] = px[i + 1] * alpha // 255
            px[i + 2] = px[i + 2] * alpha // 255

    def set_pixels(self, rect: Rect, data: bytes) -> None:
        """Copy ``rect.w`` x ``rect.h`` RGBA pixels from ``data`` into ``rect``."""
        x, y, w, h = int(rect.x), int(rect.y), int(rect.w), int(rect.h)
        if x < 0 or y < 0 or w < 0 or h < 0 or x + w > self.width or y + h > self.height:
            raise ValueError("rectangle lies outside the image")
        row = w * BYTES_PER_PIXEL
        view = memoryview(data).cast("B")
        if len(view) < row * h:
            raise ValueError("not enough pixel data for the rectangle")
        for line in range(h):
            to = (x + (y + line) * self.width) * BYTES_PER_PIXEL
            self.pixels[to:to + row] = view[line * row:(line + 1) * row]

    def get_pixels(self, dest: bytearray, dest_pos: Vec2, dest_size: Vec2, source_rect: Rect) -> None:
        """Copy ``source_rect`` of this image into ``dest`` (``dest_size`` pixels) at ``dest_pos``.

        The rectangle is clamped to this image and to the room left in the destination.
        """
        sx, sy = int(source_rect.x), int(source_rect.y)
        sw, sh = int(source_rect.w), int(source_rect.h)
        dx, dy = int(dest_pos.x), int(dest_pos.y)
        dw, dh = int(dest_size.x), int(dest_size.y)

        sx = max(sx, 0)
        sy = max(sy, 0)
        if sx + sw > self.width:
            sw = self.width - sx
        if sy + sh > self.height:
            sh = self.height - sy
        sw = min(sw, dw - dx)
        sh = min(sh, dh - dy)
        if sw <= 0 or sh <= 0:
            return

        row = sw * BYTES_PER_PIXEL
        for line in range(sh):
            to = (dx + (dy + line) * dw) * BYTES_PER_PIXEL
            start = (sx + (sy + line) * self.width) * BYTES_PER_PIXEL
            if to < 0 or to + row > len(dest):
                raise ValueError("destination buffer is too small")
            dest[to:to + row] = self.pixels[start:start + row]

    def get_sub_image(self, source_rect: Rect) -> "Image":
        """A new image holding the pixels inside ``source_rect``."""
        img = Image(int(source_rect.w), int(source_rect.h))
        self.get_pixels(img.pixels, Vec2(0, 0), Vec2(img.width, img.height), source_rect)
        return img

    def save_png(self, target: SaveTarget) -> bool:
        """Write as an uncompressed PNG to a path or binary stream."""
        return self._save(target, "PNG", compress_level=0)

    def save_jpg(self, target: SaveTarget, quality: int) -> bool:
        """Write as JPEG; ``quality`` is clamped to 1..100."""
        if quality < 1 or quality > 100:
            log.warn(f"jpg quality value should be between 1 and 100; input was {quality}")
            quality = min(max(quality, 1), 100)
        return self._save(target, "JPEG", quality=quality)

    def _save(self, target: SaveTarget, fmt: str, **options: int) -> bool:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("image width and height must be larger than 0")
        picture = _PILImage.frombytes("RGBA", (self.width, self.height), bytes(self.pixels))
        if fmt == "JPEG":
            picture = picture.convert("RGB")
        if not isinstance(target, (str, os.PathLike)):
            writable = getattr(target, "writable", None)
            if writable is not None and not writable():
                log.error("Cannot save Image, the Stream is not writable")
                return False
        picture.save(target, format=fmt, **options)
        return True