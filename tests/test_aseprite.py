import io
import struct
import zlib

import pytest

from pixelbatch.aseprite import (
    Aseprite,
    AsepriteError,
    ColorDepth,
    LayerFlags,
    LayerType,
    LoopDirection,
)
from pixelbatch.primitives import Color, Vec2

RED = bytes([255, 0, 0, 255])
GREEN = bytes([0, 255, 0, 255])
BLUE = bytes([0, 0, 255, 255])


def chunk(ctype, payload):
    return struct.pack("<IH", 6 + len(payload), ctype) + payload


def frame(chunks, duration=100):
    body = b"".join(chunks)
    header = struct.pack("<IHHHHI", 16 + len(body), 0xF1FA, len(chunks), duration, 0, len(chunks))
    return header + body


def sprite_file(frames, width, height, depth=32):
    header = (
        struct.pack("<IHHHHH", 0, 0xA5E0, len(frames), width, height, depth)
        + struct.pack("<IHIIB", 0, 100, 0, 0, 0)
        + bytes(3)
        + struct.pack("<Hbb", 0, 1, 1)
        + bytes(92)
    )
    return header + b"".join(frames)


def name_bytes(name):
    raw = name.encode()
    return struct.pack("<H", len(raw)) + raw


def layer_chunk(name="Layer", flags=1, alpha=255, blend=0):
    payload = struct.pack("<HHHHHHB", flags, 0, 0, 0, 0, blend, alpha) + bytes(3) + name_bytes(name)
    return chunk(0x2004, payload)


def cel_chunk(cel_type, body, layer=0, x=0, y=0, alpha=255):
    return chunk(0x2005, struct.pack("<HhhBH", layer, x, y, alpha, cel_type) + bytes(7) + body)


def raw_cel(w, h, pixels, **kw):
    return cel_chunk(0, struct.pack("<HH", w, h) + pixels, **kw)


def deflate_cel(w, h, pixels, **kw):
    return cel_chunk(2, struct.pack("<HH", w, h) + zlib.compress(pixels), **kw)


def linked_cel(frame_index, **kw):
    return cel_chunk(1, struct.pack("<H", frame_index), **kw)


def palette_chunk(colors):
    payload = struct.pack("<III", len(colors), 0, len(colors) - 1) + bytes(8)
    payload += b"".join(struct.pack("<H", 0) + c for c in colors)
    return chunk(0x2019, payload)


def parse(data):
    return Aseprite.parse(io.BytesIO(data))


def test_header_fields():
    sprite = parse(sprite_file([], 7, 5))
    assert (sprite.width, sprite.height) == (7, 5)
    assert sprite.mode is ColorDepth.RGBA
    assert sprite.frames == []


def test_bad_magic():
    data = bytearray(sprite_file([], 1, 1))
    data[4] = 0
    with pytest.raises(AsepriteError):
        parse(bytes(data))


def test_bad_frame_magic():
    data = bytearray(sprite_file([frame([])], 1, 1))
    data[128 + 4] = 0
    with pytest.raises(AsepriteError):
        parse(bytes(data))


def test_unsupported_depth():
    with pytest.raises(AsepriteError):
        parse(sprite_file([], 1, 1, depth=24))


def test_truncated():
    data = sprite_file([frame([layer_chunk(), raw_cel(2, 2, RED * 4)])], 2, 2)
    with pytest.raises(AsepriteError):
        parse(data[:-5])


def test_raw_cel_composited():
    pixels = RED + GREEN + BLUE + RED
    sprite = parse(sprite_file([frame([layer_chunk("Base"), raw_cel(2, 2, pixels)], duration=120)], 2, 2))
    assert sprite.layers[0].name == "Base"
    assert sprite.layers[0].type is LayerType.NORMAL
    assert sprite.layers[0].flags & LayerFlags.VISIBLE
    assert sprite.frames[0].duration == 120
    assert bytes(sprite.frames[0].cels[0].image.pixels) == pixels
    assert bytes(sprite.frames[0].image.pixels) == pixels


def test_deflate_matches_raw():
    pixels = GREEN + BLUE + RED + GREEN
    raw = parse(sprite_file([frame([layer_chunk(), raw_cel(2, 2, pixels)])], 2, 2))
    packed = parse(sprite_file([frame([layer_chunk(), deflate_cel(2, 2, pixels)])], 2, 2))
    assert bytes(packed.frames[0].image.pixels) == bytes(raw.frames[0].image.pixels)


def test_invalid_deflate():
    body = struct.pack("<HH", 1, 1) + b"not zlib data"
    with pytest.raises(AsepriteError):
        parse(sprite_file([frame([layer_chunk(), cel_chunk(2, body)])], 1, 1))


def test_hidden_layer_not_drawn():
    sprite = parse(sprite_file([frame([layer_chunk(flags=0), raw_cel(1, 1, RED)])], 1, 1))
    assert not sprite.layers[0].visible
    assert bytes(sprite.frames[0].cels[0].image.pixels) == RED
    assert bytes(sprite.frames[0].image.pixels) == bytes(4)


def test_cel_offset():
    sprite = parse(sprite_file([frame([layer_chunk(), raw_cel(1, 1, RED, x=1, y=1)])], 2, 2))
    pixels = bytes(sprite.frames[0].image.pixels)
    assert pixels[12:16] == RED
    assert pixels[:12] == bytes(12)


def test_negative_offset():
    sprite = parse(sprite_file([frame([layer_chunk(), raw_cel(2, 1, RED + BLUE, x=-1)])], 1, 1))
    assert sprite.frames[0].cels[0].x == -1
    assert bytes(sprite.frames[0].image.pixels) == BLUE


def test_linked_cel():
    frames = [
        frame([layer_chunk(), raw_cel(1, 1, GREEN)]),
        frame([linked_cel(0)]),
    ]
    sprite = parse(sprite_file(frames, 1, 1))
    assert sprite.frames[1].cels[0].linked_frame_index == 0
    assert bytes(sprite.frames[1].image.pixels) == bytes(sprite.frames[0].image.pixels)


def test_grayscale_cel():
    sprite = parse(sprite_file([frame([layer_chunk(), raw_cel(2, 1, bytes([10, 200, 20, 255]))])], 2, 1, depth=16))
    assert sprite.mode is ColorDepth.GRAYSCALE
    assert bytes(sprite.frames[0].cels[0].image.pixels) == bytes([10, 10, 10, 200, 20, 20, 20, 255])


def test_indexed_cel():
    chunks = [palette_chunk([RED, GREEN]), layer_chunk(), raw_cel(2, 1, bytes([1, 0]))]
    sprite = parse(sprite_file([frame(chunks)], 2, 1, depth=8))
    assert sprite.mode is ColorDepth.INDEXED
    assert sprite.palette == [Color(*RED), Color(*GREEN)]
    assert bytes(sprite.frames[0].cels[0].image.pixels) == GREEN + RED


def test_indexed_out_of_palette():
    chunks = [palette_chunk([RED]), layer_chunk(), raw_cel(1, 1, bytes([5]))]
    with pytest.raises(AsepriteError):
        parse(sprite_file([frame(chunks)], 1, 1, depth=8))


def test_user_data_on_layer():
    payload = struct.pack("<I", 3) + name_bytes("note") + bytes([1, 2, 3, 4])
    sprite = parse(sprite_file([frame([layer_chunk(), chunk(0x2020, payload)])], 1, 1))
    assert sprite.layers[0].userdata.text == "note"
    assert sprite.layers[0].userdata.color == Color(1, 2, 3, 4)


def test_tags():
    payload = struct.pack("<H", 1) + bytes(8)
    payload += struct.pack("<HHB", 0, 3, 2) + bytes(8) + bytes([9, 8, 7]) + bytes(1) + name_bytes("walk")
    sprite = parse(sprite_file([frame([chunk(0x2018, payload)])], 1, 1))
    tag = sprite.tags[0]
    assert (tag.name, tag.from_frame, tag.to_frame) == ("walk", 0, 3)
    assert tag.loops is LoopDirection.PING_PONG
    assert tag.color == Color(9, 8, 7, 255)


def test_slices_with_pivot():
    payload = struct.pack("<III", 1, 2, 0) + name_bytes("hitbox")
    payload += struct.pack("<IiiII", 0, -2, 3, 4, 5) + struct.pack("<ii", 1, 2)
    sprite = parse(sprite_file([frame([chunk(0x2022, payload)])], 1, 1))
    piece = sprite.slices[0]
    assert piece.name == "hitbox"
    assert piece.origin == Vec2(-2, 3)
    assert (piece.width, piece.height) == (4, 5)
    assert piece.has_pivot and piece.pivot == Vec2(1, 2)


def test_load_from_file(tmp_path):
    path = tmp_path / "sprite.ase"
    path.write_bytes(sprite_file([frame([layer_chunk(), raw_cel(1, 1, BLUE)])], 1, 1))
    sprite = Aseprite.load(path)
    assert bytes(sprite.frames[0].image.pixels) == BLUE