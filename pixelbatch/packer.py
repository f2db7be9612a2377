"""Texture atlas packing with transparent-border trimming."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .image import BYTES_PER_PIXEL, Image
from .primitives import Rect


@dataclass
class PackerEntry:
    """One packed image: where it landed and how it was trimmed."""

    id: int
    frame: Rect
    page: int = 0
    empty: bool = True
    packed: Rect = field(default_factory=Rect)
    pixels: bytes = field(default=b"", repr=False)


@dataclass
class _Node:
    x: int
    y: int
    w: int
    h: int
    used: bool = False
    right: Optional["_Node"] = None
    down: Optional["_Node"] = None

    def find(self, w: int, h: int) -> Optional["_Node"]:
        if self.used:
            found = self.right.find(w, h)
            if found is not None:
                return found
            return self.down.find(w, h)
        if w <= self.w and h <= self.h:
            return self
        return None


class Packer:
    """Collects images and packs them into one or more atlas pages."""

    def __init__(self, max_size: int = 8192, spacing: int = 1, power_of_two: bool = True,
                 padding: int = 1) -> None:
        self.max_size = max_size
        self.spacing = spacing
        self.power_of_two = power_of_two
        self.padding = padding
        self.pages: List[Image] = []
        self._entries: List[PackerEntry] = []
        self._dirty = False

    def add(self, entry_id: int, image: Image, source: Optional[Rect] = None) -> None:
        """Queue ``source`` (default: all) of ``image`` for packing."""
        if source is None:
            source = Rect(0, 0, image.width, image.height)
        self._add_entry(entry_id, image.width, image.height, image.pixels, source)

    def add_pixels(self, entry_id: int, width: int, height: int, pixels: bytes) -> None:
        """Queue raw RGBA pixels of the given size for packing."""
        self._add_entry(entry_id, width, height, pixels, Rect(0, 0, width, height))

    def _add_entry(self, entry_id: int, w: int, h: int, pixels: bytes, source: Rect) -> None:
        self._dirty = True
        sx, sy, sw, sh = int(source.x), int(source.y), int(source.w), int(source.h)
        entry = PackerEntry(entry_id, Rect(0, 0, sw, sh))

        def opaque(x: int, y: int) -> bool:
            return pixels[(x + y * w) * BYTES_PER_PIXEL + 3] > 0

        top = next((y for y in range(sy, sy + sh)
                    if any(opaque(x, y) for x in range(sx, sx + sw))), sy)
        left = next((x for x in range(sx, sx + sw)
                     if any(opaque(x, y) for y in range(top, sy + sh))), sx)
        right = next((x + 1 for x in range(sx + sw - 1, left - 1, -1)
                      if any(opaque(x, y) for y in range(top, sy + sh))), sx)
        bottom = next((y + 1 for y in range(sy + sh - 1, top - 1, -1)
                       if any(opaque(x, y) for x in range(left, right))), sy)

        if right > left and bottom > top:
            entry.empty = False
            entry.frame = Rect(sx - left, sy - top, sw, sh)
            entry.packed = Rect(0, 0, right - left, bottom - top)
            row = (right - left) * BYTES_PER_PIXEL
            view = memoryview(pixels).cast("B")
            entry.pixels = b"".join(
                bytes(view[(left + y * w) * BYTES_PER_PIXEL:(left + y * w) * BYTES_PER_PIXEL + row])
                for y in range(top, bottom)
            )

        self._entries.append(entry)

    def entries(self) -> List[PackerEntry]:
        """All queued entries in the order they were added."""
        return list(self._entries)

    def pack(self) -> None:
        """Lay out every entry on pages, rebuilding ``pages``; no-op if nothing changed."""
        if not self._dirty:
            return
        self._dirty = False
        self.pages = []
        if not self._entries:
            return

        pad = self.padding
        extra = pad * 2 + self.spacing
        sources = sorted(self._entries, key=lambda e: e.packed.w * e.packed.h, reverse=True)
        largest = sources[0].packed
        if largest.w + pad * 2 > self.max_size or largest.h + pad * 2 > self.max_size:
            raise ValueError("source image is larger than the maximum atlas size")

        count = len(sources)
        packed = 0
        page = 0
        while packed < count:
            if sources[packed].empty:
                packed += 1
                continue

            start = packed
            first = sources[start].packed
            root = _Node(0, 0, int(first.w) + extra, int(first.h) + extra)

            while packed < count:
                entry = sources[packed]
                if entry.empty:
                    packed += 1
                    continue

                w = int(entry.packed.w) + extra
                h = int(entry.packed.h) + extra
                node = root.find(w, h)

                if node is None:
                    can_grow_down = w <= root.w and root.h + h < self.max_size
                    can_grow_right = h <= root.h and root.w + w < self.max_size
                    should_grow_right = can_grow_right and root.h >= root.w + w
                    should_grow_down = can_grow_down and root.w >= root.h + h
                    if can_grow_down or can_grow_right:
                        if should_grow_right or (not should_grow_down and can_grow_right):
                            node = _Node(root.w, 0, w, root.h)
                            root = _Node(0, 0, root.w + w, root.h, True, node, root)
                        else:
                            node = _Node(0, root.h, root.w, h)
                            root = _Node(0, 0, root.w, root.h + h, True, root, node)

                if node is None:
                    break

                node.used = True
                node.down = _Node(node.x, node.y + h, node.w, node.h - h)
                node.right = _Node(node.x + w, node.y, node.w - w, h)
                entry.packed = Rect(node.x + pad, node.y + pad, entry.packed.w, entry.packed.h)
                packed += 1

            if self.power_of_two:
                page_w = page_h = 2
                while page_w < root.w:
                    page_w *= 2
                while page_h < root.h:
                    page_h *= 2
            else:
                page_w, page_h = root.w, root.h

            atlas = Image(page_w, page_h)
            for entry in sources[start:packed]:
                entry.page = page
                if entry.empty:
                    continue
                dst = entry.packed
                if pad > 0:
                    atlas.set_pixels(Rect(dst.x - pad, dst.y, dst.w, dst.h), entry.pixels)
                    atlas.set_pixels(Rect(dst.x + pad, dst.y, dst.w, dst.h), entry.pixels)
                    atlas.set_pixels(Rect(dst.x, dst.y - pad, dst.w, dst.h), entry.pixels)
                    atlas.set_pixels(Rect(dst.x, dst.y + pad, dst.w, dst.h), entry.pixels)
                atlas.set_pixels(dst, entry.pixels)
            self.pages.append(atlas)
            page += 1

    def clear(self) -> None:
        """Forget all entries and pages."""
        self.pages = []
        self._entries = []
        self._dirty = False