"""Blend state used when drawing."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar


class BlendOp(enum.Enum):
    ADD = 0
    SUBTRACT = 1
    REVERSE_SUBTRACT = 2
    MIN = 3
    MAX = 4


class BlendFactor(enum.Enum):
    ZERO = 0
    ONE = 1
    SRC_COLOR = 2
    ONE_MINUS_SRC_COLOR = 3
    DST_COLOR = 4
    ONE_MINUS_DST_COLOR = 5
    SRC_ALPHA = 6
    ONE_MINUS_SRC_ALPHA = 7
    DST_ALPHA = 8
    ONE_MINUS_DST_ALPHA = 9
    CONSTANT_COLOR = 10
    ONE_MINUS_CONSTANT_COLOR = 11
    CONSTANT_ALPHA = 12
    ONE_MINUS_CONSTANT_ALPHA = 13
    SRC_ALPHA_SATURATE = 14
    SRC1_COLOR = 15
    ONE_MINUS_SRC1_COLOR = 16
    SRC1_ALPHA = 17
    ONE_MINUS_SRC1_ALPHA = 18


class BlendMask(enum.IntFlag):
    NONE = 0
    RED = 1
    GREEN = 2
    BLUE = 4
    ALPHA = 8
    RGB = RED | GREEN | BLUE
    RGBA = RED | GREEN | BLUE | ALPHA


@dataclass(frozen=True)
class BlendMode:
    """Colour and alpha blend equations, write mask and constant colour."""

    NORMAL: ClassVar["BlendMode"]
    SUBTRACT: ClassVar["BlendMode"]

    color_op: BlendOp
    color_src: BlendFactor
    color_dst: BlendFactor
    alpha_op: BlendOp
    alpha_src: BlendFactor
    alpha_dst: BlendFactor
    mask: BlendMask = BlendMask.RGBA
    rgba: int = 0xFFFFFFFF

    @classmethod
    def uniform(cls, op: BlendOp, src: BlendFactor, dst: BlendFactor) -> "BlendMode":
        """Same equation for colour and alpha, full mask, white constant."""
        return cls(op, src, dst, op, src, dst)


BlendMode.NORMAL = BlendMode(
    BlendOp.ADD,
    BlendFactor.ONE,
    BlendFactor.ONE_MINUS_SRC_ALPHA,
    BlendOp.ADD,
    BlendFactor.ONE,
    BlendFactor.ONE_MINUS_SRC_ALPHA,
    BlendMask.RGBA,
    0xFFFFFFFF,
)

BlendMode.SUBTRACT = BlendMode(
    BlendOp.REVERSE_SUBTRACT,
    BlendFactor.ONE,
    BlendFactor.ONE,
    BlendOp.ADD,
    BlendFactor.ONE,
    BlendFactor.ONE,
    BlendMask.RGBA,
    0xFFFFFFFF,
)