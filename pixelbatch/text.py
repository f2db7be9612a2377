"""UTF-8 helpers and byte-wise string utilities."""

from __future__ import annotations

import string
from typing import Iterable, List, Optional

_SPACE = " \t\n\v\f\r"
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_SURROGATE_MIN = 0xD800
_SURROGATE_MAX = 0xDBFF


def _byte(data: bytes, index: int) -> int:
    # Bytes past the end read as the terminating zero.
    return data[index] if 0 <= index < len(data) else 0


def utf8_at(data: bytes, index: int) -> int:
    """Decode the UTF-8 codepoint whose lead byte is at ``index``."""
    if not 0 <= index < len(data):
        raise IndexError("index out of range")
    t = data[index]
    index += 1
    if t < 128:
        return t

    charcode = 0
    high_bit_mask = (1 << 6) - 1
    high_bit_shift = 0
    total_bits = 0
    while (t & 0xC0) == 0xC0:
        t = (t << 1) & 0xFF
        total_bits += 6
        high_bit_mask >>= 1
        high_bit_shift += 1
        charcode = (charcode << 6) | (_byte(data, index) & 0x3F)
        index += 1
    charcode |= ((t >> high_bit_shift) & high_bit_mask) << total_bits
    return charcode


def utf8_length(data: bytes, index: int) -> int:
    """Number of bytes in the UTF-8 sequence starting at ``index``."""
    c = _byte(data, index)
    if (c & 0xFE) == 0xFC:
        return 6
    if (c & 0xFC) == 0xF8:
        return 5
    if (c & 0xF8) == 0xF0:
        return 4
    if (c & 0xF0) == 0xE0:
        return 3
    if (c & 0xE0) == 0xC0:
        return 2
    return 1


def encode_codepoint(codepoint: int) -> bytes:
    """Encode a codepoint as one to four UTF-8 bytes."""
    c = codepoint & 0xFFFFFFFF
    if c < 0x80:
        return bytes([c])
    if c < 0x800:
        return bytes([(c >> 6) | 0xC0, (c & 0x3F) | 0x80])
    if c < 0x10000:
        return bytes([(c >> 12) | 0xE0, ((c >> 6) & 0x3F) | 0x80, (c & 0x3F) | 0x80])
    return bytes([
        ((c >> 18) | 0xF0) & 0xFF,
        ((c >> 12) & 0x3F) | 0x80,
        ((c >> 6) & 0x3F) | 0x80,
        (c & 0x3F) | 0x80,
    ])


def _unit(value: int, swap_endian: bool) -> int:
    value &= 0xFFFF
    if swap_endian:
        value = ((value & 0xFF) << 8) | ((value & 0xFF00) >> 8)
    return value


def decode_utf16(units: Iterable[int], swap_endian: bool = False) -> bytes:
    """Convert 16-bit UTF-16 code units to UTF-8 bytes."""
    out = bytearray()
    it = iter(units)
    for unit in it:
        cp = _unit(unit, swap_endian)
        if _SURROGATE_MIN <= cp <= _SURROGATE_MAX:
            try:
                trail = _unit(next(it), swap_endian)
            except StopIteration:
                raise ValueError("truncated UTF-16 surrogate pair") from None
            cp = (cp << 10) + trail + 0x10000 - (_SURROGATE_MIN << 10) - 0xDC00
        out += encode_codepoint(cp)
    return bytes(out)


def trim(text: str) -> str:
    """Strip leading and trailing whitespace, always keeping at least one character."""
    if not text:
        return text
    s, e = 0, len(text) - 1
    while text[s] in _SPACE and s != e:
        s += 1
    while text[e] in _SPACE and s != e:
        e -= 1
    return text[s:e + 1]


def _fold(text: str, ignore_case: bool) -> str:
    return text.translate(_ASCII_LOWER) if ignore_case else text


def starts_with(text: str, prefix: str, ignore_case: bool = False) -> bool:
    """True if ``text`` begins with a non-empty ``prefix``."""
    if not prefix or len(prefix) > len(text):
        return False
    return _fold(text, ignore_case).startswith(_fold(prefix, ignore_case))


def ends_with(text: str, suffix: str, ignore_case: bool = False) -> bool:
    """True if ``text`` ends with a non-empty ``suffix``."""
    if not suffix or len(suffix) > len(text):
        return False
    return _fold(text, ignore_case).endswith(_fold(suffix, ignore_case))


def contains(text: str, needle: str, ignore_case: bool = False) -> bool:
    """True if a non-empty ``needle`` occurs in ``text``."""
    if not needle or len(needle) > len(text):
        return False
    return _fold(needle, ignore_case) in _fold(text, ignore_case)


def substr(text: str, start: int, end: Optional[int] = None) -> str:
    """Clamped substring; a negative ``end`` counts back from the end."""
    length = len(text)
    start = min(max(start, 0), length)
    if end is None:
        return text[start:]
    if end < 0:
        end = length + end
    if end < start:
        end = start
    if end > length:
        end = length
    return text[start:end]


def split(text: str, separator: str) -> List[str]:
    """Split on ``separator``; a leading separator and a trailing empty part are kept out."""
    result: List[str] = []
    last = 0
    for index, ch in enumerate(text[1:], start=1):
        if ch == separator:
            result.append(substr(text, last, index))
            last = index + 1
    stop = max(len(text), 1)
    if last < stop:
        result.append(substr(text, last, stop))
    return result