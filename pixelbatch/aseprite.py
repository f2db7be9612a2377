"""Reader for Aseprite sprite files, compositing each frame's visible cels."""

from __future__ import annotations

import enum
import os
import struct
import zlib
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, List, Optional, Union

from . import log
from .image import BYTES_PER_PIXEL, Image
from .primitives import Color, Vec2

HEADER_MAGIC = 0xA5E0
FRAME_MAGIC = 0xF1FA

CHUNK_LAYER = 0x2004
CHUNK_CEL = 0x2005
CHUNK_FRAME_TAGS = 0x2018
CHUNK_PALETTE = 0x2019
CHUNK_USER_DATA = 0x2020
CHUNK_SLICE = 0x2022

_CEL_RAW = 0
_CEL_LINKED = 1
_CEL_DEFLATE = 2


class AsepriteError(ValueError):
    """The data is not a valid Aseprite file."""


class ColorDepth(enum.IntEnum):
    """Bytes per pixel of the sprite."""

    INDEXED = 1
    GRAYSCALE = 2
    RGBA = 4


class LayerFlags(enum.IntFlag):
    NONE = 0
    VISIBLE = 1
    EDITABLE = 2
    LOCK_MOVEMENT = 4
    BACKGROUND = 8
    PREFER_LINKED_CELS = 16
    COLLAPSED = 32
    REFERENCE = 64


class LayerType(enum.IntEnum):
    NORMAL = 0
    GROUP = 1


class LoopDirection(enum.IntEnum):
    FORWARD = 0
    REVERSE = 1
    PING_PONG = 2


@dataclass
class UserData:
    text: str = ""
    color: Color = Color.WHITE


@dataclass
class Layer:
    flags: LayerFlags
    type: LayerType
    child_level: int
    blend_mode: int
    alpha: int
    name: str
    userdata: UserData = field(default_factory=UserData)

    @property
    def visible(self) -> bool:
        return bool(self.flags & LayerFlags.VISIBLE)


@dataclass
class Cel:
    layer_index: int
    x: int
    y: int
    alpha: int
    image: Image = field(default_factory=Image)
    linked_frame_index: int = -1
    userdata: UserData = field(default_factory=UserData)


@dataclass
class Frame:
    duration: int
    image: Image
    cels: List[Cel] = field(default_factory=list)


@dataclass
class Tag:
    name: str
    from_frame: int
    to_frame: int
    loops: LoopDirection
    color: Color


@dataclass
class Slice:
    name: str
    frame: int
    origin: Vec2
    width: int
    height: int
    has_pivot: bool = False
    pivot: Vec2 = Vec2.ZERO
    userdata: UserData = field(default_factory=UserData)


@dataclass
class Aseprite:
    """A parsed sprite: layers, frames with composited images, tags, slices and palette."""

    mode: ColorDepth = ColorDepth.RGBA
    width: int = 0
    height: int = 0
    layers: List[Layer] = field(default_factory=list)
    frames: List[Frame] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    slices: List[Slice] = field(default_factory=list)
    palette: List[Color] = field(default_factory=list)

    @classmethod
    def load(cls, path: Union[str, "os.PathLike[str]"]) -> "Aseprite":
        """Read an Aseprite file from disk."""
        with open(path, "rb") as stream:
            return cls.parse(stream)

    @classmethod
    def parse(cls, stream: BinaryIO) -> "Aseprite":
        """Read an Aseprite file from a binary stream."""
        readable = getattr(stream, "readable", None)
        if readable is not None and not readable():
            raise AsepriteError("stream is not readable")
        return _Parser(stream).run()


_U8 = struct.Struct("<B")
_I8 = struct.Struct("<b")
_U16 = struct.Struct("<H")
_I16 = struct.Struct("<h")
_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")


class _Reader:
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def read(self, size: int) -> bytes:
        data = self._stream.read(size) if size > 0 else b""
        if data is None or len(data) != size:
            raise AsepriteError("unexpected end of data")
        return data

    def _value(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self.read(fmt.size))[0]

    def u8(self) -> int:
        return self._value(_U8)

    def i8(self) -> int:
        return self._value(_I8)

    def u16(self) -> int:
        return self._value(_U16)

    def i16(self) -> int:
        return self._value(_I16)

    def u32(self) -> int:
        return self._value(_U32)

    def i32(self) -> int:
        return self._value(_I32)

    def string(self) -> str:
        return self.read(self.u16()).decode("utf-8", errors="replace")

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, position: int) -> None:
        self._stream.seek(position)

    def skip(self, count: int) -> None:
        self.seek(self.tell() + count)


def _mul_un8(a: int, b: int) -> int:
    t = a * b + 0x80
    return ((t >> 8) + t) >> 8


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return q if a >= 0 else -q


class _Parser:
    def __init__(self, stream: BinaryIO) -> None:
        self.reader = _Reader(stream)
        self.sprite = Aseprite()
        self.last_userdata: Optional[UserData] = None
        self.handlers: Dict[int, Callable[[int, int], None]] = {
            CHUNK_LAYER: self._layer,
            CHUNK_CEL: self._cel,
            CHUNK_PALETTE: self._palette,
            CHUNK_USER_DATA: self._user_data,
            CHUNK_FRAME_TAGS: self._tags,
            CHUNK_SLICE: self._slice,
        }

    def run(self) -> Aseprite:
        r, sprite = self.reader, self.sprite
        r.u32()  # file size
        if r.u16() != HEADER_MAGIC:
            raise AsepriteError("file is not a valid Aseprite file")
        frame_count = r.u16()
        sprite.width = r.u16()
        sprite.height = r.u16()
        depth = r.u16()
        try:
            sprite.mode = ColorDepth(depth // 8)
        except ValueError:
            raise AsepriteError(f"unsupported colour depth {depth}") from None
        r.u32()  # flags
        r.u16()  # speed (deprecated)
        r.u32()
        r.u32()
        r.u8()  # transparent palette entry
        r.skip(3)
        r.u16()  # number of colours
        r.i8()  # pixel width
        r.i8()  # pixel height
        r.skip(92)

        sprite.frames = [Frame(0, Image(sprite.width, sprite.height)) for _ in range(frame_count)]
        for index in range(frame_count):
            self._frame(index)
        return sprite

    def _frame(self, index: int) -> None:
        r = self.reader
        start = r.tell()
        end = start + r.u32()
        if r.u16() != FRAME_MAGIC:
            raise AsepriteError("file is not a valid Aseprite file")
        old_chunk_count = r.u16()
        self.sprite.frames[index].duration = r.u16()
        r.skip(2)
        new_chunk_count = r.u32()
        chunks = new_chunk_count if old_chunk_count == 0xFFFF else old_chunk_count

        for _ in range(chunks):
            chunk_start = r.tell()
            chunk_end = chunk_start + r.u32()
            handler = self.handlers.get(r.u16())
            if handler is not None:
                handler(index, chunk_end)
            r.seek(chunk_end)
        r.seek(end)

    def _layer(self, frame_index: int, chunk_end: int) -> None:
        r = self.reader
        flags = LayerFlags(r.u16())
        layer_type = r.u16()
        try:
            kind = LayerType(layer_type)
        except ValueError:
            raise AsepriteError(f"unknown layer type {layer_type}") from None
        child_level = r.u16()
        r.u16()  # width
        r.u16()  # height
        blend_mode = r.u16()
        alpha = r.u8()
        r.skip(3)
        layer = Layer(flags, kind, child_level, blend_mode, alpha, r.string())
        self.sprite.layers.append(layer)
        self.last_userdata = layer.userdata

    def _cel(self, frame_index: int, chunk_end: int) -> None:
        r, sprite = self.reader, self.sprite
        frame = sprite.frames[frame_index]
        cel = Cel(r.u16(), r.i16(), r.i16(), r.u8())
        frame.cels.append(cel)

        cel_type = r.u16()
        r.skip(7)

        if cel_type in (_CEL_RAW, _CEL_DEFLATE):
            width = r.u16()
            height = r.u16()
            mode = int(sprite.mode)
            count = width * height * mode
            capacity = width * height * BYTES_PER_PIXEL
            if cel_type == _CEL_RAW:
                raw = r.read(count)
            else:
                compressed = r.read(max(chunk_end - r.tell(), 0))
                try:
                    raw = zlib.decompress(compressed)[:capacity]
                except zlib.error as exc:
                    raise AsepriteError("unable to parse Aseprite file") from exc
            raw = raw.ljust(capacity, b"\0")[:capacity]

            if sprite.mode is ColorDepth.GRAYSCALE:
                src = raw[:width * height * 2]
                raw = b"".join(bytes((v, v, v, a)) for v, a in zip(src[0::2], src[1::2]))
            elif sprite.mode is ColorDepth.INDEXED:
                src = raw[:width * height]
                try:
                    raw = b"".join(bytes(sprite.palette[i]) for i in src)
                except IndexError:
                    raise AsepriteError("palette index out of range") from None
            cel.image = Image(width, height, raw)
        elif cel_type == _CEL_LINKED:
            cel.linked_frame_index = r.u16()

        if not 0 <= cel.layer_index < len(sprite.layers):
            raise AsepriteError(f"cel refers to missing layer {cel.layer_index}")
        if sprite.layers[cel.layer_index].visible:
            self._render_cel(cel, frame)

        self.last_userdata = cel.userdata

    def _palette(self, frame_index: int, chunk_end: int) -> None:
        r, palette = self.reader, self.sprite.palette
        r.u32()  # size
        start = r.u32()
        end = r.u32()
        r.skip(8)
        count = end - start + 1
        palette.extend([Color.TRANSPARENT] * max(count, 0))
        for p in range(count):
            has_name = r.u16()
            color = Color(*r.read(4))
            index = start + p
            if index >= len(palette):
                palette.extend([Color.TRANSPARENT] * (index + 1 - len(palette)))
            palette[index] = color
            if has_name & 0xF000:
                r.skip(r.u16())

    def _user_data(self, frame_index: int, chunk_end: int) -> None:
        if self.last_userdata is None:
            return
        r = self.reader
        flags = r.u32()
        if flags & 1:
            self.last_userdata.text = r.string()
        if flags & 2:
            self.last_userdata.color = Color(*r.read(4))

    def _tags(self, frame_index: int, chunk_end: int) -> None:
        r = self.reader
        count = r.u16()
        r.skip(8)
        for _ in range(count):
            start = r.u16()
            end = r.u16()
            loop = r.u8()
            try:
                loops = LoopDirection(loop)
            except ValueError:
                raise AsepriteError(f"unknown loop direction {loop}") from None
            r.skip(8)
            red, green, blue = r.read(3)
            r.skip(1)
            self.sprite.tags.append(Tag(r.string(), start, end, loops, Color(red, green, blue, 255)))

    def _slice(self, frame_index: int, chunk_end: int) -> None:
        r = self.reader
        count = r.u32()
        flags = r.u32()
        r.u32()  # reserved
        name = r.string()
        for _ in range(count):
            frame = r.u32()
            origin = Vec2(r.i32(), r.i32())
            width = r.u32()
            height = r.u32()
            if flags & 1:
                r.skip(16)  # nine-slice centre, not kept
            piece = Slice(name, frame, origin, width, height)
            if flags & 2:
                piece.has_pivot = True
                piece.pivot = Vec2(r.i32(), r.i32())
            self.sprite.slices.append(piece)
            self.last_userdata = piece.userdata

    def _render_cel(self, cel: Cel, frame: Frame) -> None:
        sprite = self.sprite
        layer = sprite.layers[cel.layer_index]

        source = cel
        visited = set()
        while source.linked_frame_index >= 0:
            if id(source) in visited or source.linked_frame_index >= len(sprite.frames):
                raise AsepriteError("linked cel cannot be resolved")
            visited.add(id(source))
            linked = next(
                (c for c in sprite.frames[source.linked_frame_index].cels
                 if c.layer_index == source.layer_index),
                None,
            )
            if linked is None:
                raise AsepriteError("linked cel cannot be resolved")
            source = linked

        opacity = _mul_un8(source.alpha, layer.alpha) & 0xFF
        if opacity <= 0:
            return
        if layer.blend_mode != 0:
            log.error("Aseprite blendmodes aren't implemented")
            return

        src = source.image.pixels
        src_x, src_y = source.x, source.y
        src_w, src_h = source.image.width, source.image.height
        dst = frame.image.pixels
        dst_w, dst_h = frame.image.width, frame.image.height

        left = max(0, src_x)
        right = min(dst_w, src_x + src_w)
        top = max(0, src_y)
        bottom = min(dst_h, src_y + src_h)

        for dx in range(left, right):
            sx = dx - src_x
            for dy in range(top, bottom):
                sy = dy - src_y
                s = (sx + sy * src_w) * BYTES_PER_PIXEL
                d = (dx + dy * dst_w) * BYTES_PER_PIXEL
                src_a = src[s + 3]
                if src_a == 0:
                    continue
                dst_a = dst[d + 3]
                sa = _mul_un8(src_a, opacity)
                ra = dst_a + sa - _mul_un8(dst_a, sa)
                if ra == 0:
                    continue
                for c in range(3):
                    dst[d + c] = (dst[d + c] + _trunc_div((src[s + c] - dst[d + c]) * sa, ra)) & 0xFF
                dst[d + 3] = ra & 0xFF