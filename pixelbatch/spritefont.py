"""Bitmap fonts: per-codepoint glyph subtextures, advances and kerning."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple, Union

from .primitives import Vec2
from .subtexture import Subtexture
from .text import utf8_at, utf8_length

Text = Union[str, bytes]

_NEWLINE = 0x0A


@dataclass(frozen=True)
class CharRange:
    """An inclusive range of codepoints to build a font for."""

    start: int = 0
    end: int = 0

    @classmethod
    def single(cls, codepoint: int) -> "CharRange":
        """A range covering one codepoint."""
        return cls(codepoint, codepoint)


ASCII: Tuple[CharRange, ...] = (CharRange(32, 128),)


@dataclass
class Character:
    """A glyph: its image, horizontal advance and drawing offset."""

    subtexture: Subtexture = field(default_factory=Subtexture)
    advance: float = 0.0
    offset: Vec2 = field(default_factory=Vec2)


def _as_bytes(text: Text) -> bytes:
    return text.encode("utf-8") if isinstance(text, str) else bytes(text)


def _codepoints(data: bytes, start: int = 0) -> Iterator[Tuple[int, int]]:
    """Yield (byte index, codepoint) pairs from ``start``."""
    index = start
    while index < len(data):
        yield index, utf8_at(data, index)
        index += utf8_length(data, index)


@dataclass
class SpriteFont:
    """Glyph metrics and images used to measure and draw text."""

    name: str = ""
    size: float = 0.0
    ascent: float = 0.0
    descent: float = 0.0
    line_gap: float = 0.0
    textures: List[Any] = field(default_factory=list)
    _characters: Dict[int, Character] = field(default_factory=dict, repr=False)
    _kerning: Dict[Tuple[int, int], float] = field(default_factory=dict, repr=False)

    def height(self) -> float:
        """Height of one line, without the gap."""
        return self.ascent - self.descent

    def line_height(self) -> float:
        """Distance between consecutive baselines."""
        return self.ascent - self.descent + self.line_gap

    def width_of(self, text: Text) -> float:
        """Width of the widest line of ``text``."""
        data = _as_bytes(text)
        width = 0.0
        line_width = 0.0
        last = 0
        for index, codepoint in _codepoints(data):
            if codepoint == _NEWLINE:
                line_width = 0.0
                continue
            line_width += self[codepoint].advance
            if index > 0:
                line_width += self.get_kerning(last, codepoint)
            width = max(width, line_width)
            last = codepoint
        return width

    def width_of_line(self, text: Text, start: int = 0) -> float:
        """Width of the line beginning at byte offset ``start``."""
        data = _as_bytes(text)
        if start < 0 or start >= len(data):
            return 0.0
        width = 0.0
        last = 0
        for index, codepoint in _codepoints(data, start):
            if codepoint == _NEWLINE:
                return width
            width += self[codepoint].advance
            if index > 0:
                width += self.get_kerning(last, codepoint)
            last = codepoint
        return width

    def height_of(self, text: Text) -> float:
        """Height taken by all lines of ``text``."""
        data = _as_bytes(text)
        if not data:
            return 0.0
        lines = 1 + sum(1 for _, codepoint in _codepoints(data) if codepoint == _NEWLINE)
        return lines * self.line_height() - self.line_gap

    def get_kerning(self, first: int, second: int) -> float:
        """Extra advance between two codepoints, zero if none is set."""
        return self._kerning.get((first, second), 0.0)

    def set_kerning(self, first: int, second: int, value: float) -> None:
        """Set the kerning of a pair; zero removes it."""
        if value == 0:
            self._kerning.pop((first, second), None)
        else:
            self._kerning[(first, second)] = value

    def get_character(self, codepoint: int) -> Character:
        """The character for ``codepoint``, adding an empty one if it is missing."""
        return self._characters.setdefault(codepoint, Character())

    def __getitem__(self, codepoint: int) -> Character:
        """The character for ``codepoint``; a fresh empty one if missing (not stored)."""
        character = self._characters.get(codepoint)
        return character if character is not None else Character()

    def __setitem__(self, codepoint: int, character: Character) -> None:
        self._characters[codepoint] = character

    def __contains__(self, codepoint: object) -> bool:
        return codepoint in self._characters

    def dispose(self) -> None:
        """Drop all textures, characters, kerning and the name."""
        self.textures.clear()
        self._characters.clear()
        self._kerning.clear()
        self.name = ""