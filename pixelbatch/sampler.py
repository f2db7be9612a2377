"""Texture sampling state."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TextureFilter(enum.Enum):
    """Texel interpolation; NONE leaves the driver default."""

    NONE = 0
    LINEAR = 1
    NEAREST = 2


class TextureWrap(enum.Enum):
    """Behaviour outside the texture; NONE leaves the driver default."""

    NONE = 0
    CLAMP = 1
    REPEAT = 2


@dataclass(frozen=True)
class TextureSampler:
    """Filter and wrap modes applied while rendering."""

    filter: TextureFilter = TextureFilter.LINEAR
    wrap_x: TextureWrap = TextureWrap.REPEAT
    wrap_y: TextureWrap = TextureWrap.REPEAT