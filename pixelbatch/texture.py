"""CPU-side 2D textures holding pixel data in a fixed format."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

from .image import Image


class TextureFormat(enum.Enum):
    """Pixel layout of a texture."""

    NONE = 0
    R = 1
    RG = 2
    RGBA = 3
    DEPTH_STENCIL = 4

    @property
    def bytes_per_pixel(self) -> int:
        """Size of one texel in bytes."""
        return _BYTES_PER_PIXEL[self]


_BYTES_PER_PIXEL = {
    TextureFormat.NONE: 0,
    TextureFormat.R: 1,
    TextureFormat.RG: 2,
    TextureFormat.RGBA: 4,
    TextureFormat.DEPTH_STENCIL: 4,
}


@dataclass(eq=False)
class Texture:
    """A width x height texture; its data has no row padding."""

    width: int
    height: int
    format: TextureFormat = TextureFormat.RGBA
    is_framebuffer: bool = False
    _data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("texture width and height must be larger than 0")
        if self.format is TextureFormat.NONE:
            raise ValueError("invalid texture format")
        self._data = bytearray(self._size())

    def _size(self) -> int:
        return self.width * self.height * self.format.bytes_per_pixel

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        texture_format: TextureFormat = TextureFormat.RGBA,
        data: Optional[bytes] = None,
    ) -> "Texture":
        """Create a texture, optionally filled with ``data`` covering the whole texture."""
        texture = cls(width, height, texture_format)
        if data is not None:
            texture.set_data(data)
        return texture

    @classmethod
    def from_image(cls, image: Image) -> "Texture":
        """Create an RGBA texture holding a copy of the image's pixels."""
        return cls.create(image.width, image.height, TextureFormat.RGBA, image.pixels)

    def set_data(self, data: bytes) -> None:
        """Replace the texture contents; ``data`` must match the texture's size and format."""
        raw = bytes(data)
        if len(raw) != self._size():
            raise ValueError("texture data does not match the texture size and format")
        self._data[:] = raw

    def get_data(self) -> bytes:
        """A copy of the texture contents."""
        return bytes(self._data)