"""A 2D sprite batcher that gathers shapes, textures and text into draw calls."""

from __future__ import annotations

import enum
import functools
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from .blend import BlendMode
from .drawing import ShapeDrawing
from .material import Material
from .mesh import IndexFormat, Mesh, VertexAttribute, VertexFormat, VertexType
from .primitives import Color, Mat3x2, Rect, Vec2
from .renderpass import RenderPass
from .sampler import TextureSampler
from .shader import Shader, ShaderData, ShaderType, UniformInfo, UniformType
from .spritefont import SpriteFont
from .subtexture import Subtexture
from .text import utf8_at, utf8_length

Colors = Union[Color, Sequence[Color]]

_NEWLINE = 0x0A

VERTEX_FORMAT = VertexFormat(
    (
        VertexAttribute(0, VertexType.FLOAT2, False),
        VertexAttribute(1, VertexType.FLOAT2, False),
        VertexAttribute(2, VertexType.UBYTE4, True),
        VertexAttribute(3, VertexType.UBYTE4, True),
    )
)

_VERTEX_PROGRAM = """#version 330
uniform mat4 u_matrix;
layout(location=0) in vec2 in_pos;
layout(location=1) in vec2 in_uv;
layout(location=2) in vec4 in_col;
layout(location=3) in vec4 in_mode;
out vec2 frag_uv;
out vec4 frag_col;
out vec4 frag_mode;
void main() {
    gl_Position = u_matrix * vec4(in_pos, 0.0, 1.0);
    frag_uv = in_uv;
    frag_col = in_col;
    frag_mode = in_mode;
}
"""

_FRAGMENT_PROGRAM = """#version 330
uniform sampler2D u_texture;
in vec2 frag_uv;
in vec4 frag_col;
in vec4 frag_mode;
out vec4 out_col;
void main() {
    vec4 texel = texture(u_texture, frag_uv);
    out_col = frag_mode.x * texel * frag_col
            + frag_mode.y * texel.a * frag_col
            + frag_mode.z * frag_col;
}
"""


@functools.lru_cache(maxsize=None)
def _default_shader() -> Shader:
    both = ShaderType.VERTEX | ShaderType.FRAGMENT
    return Shader.create(
        ShaderData(_VERTEX_PROGRAM, _FRAGMENT_PROGRAM),
        (
            UniformInfo("u_matrix", UniformType.MAT4X4, ShaderType.VERTEX),
            UniformInfo("u_texture", UniformType.TEXTURE2D, both),
            UniformInfo("u_texture_sampler", UniformType.SAMPLER2D, both),
        ),
    )


def ortho_matrix(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> Tuple[float, ...]:
    """Orthographic projection as 16 floats, row by row (m11 .. m44)."""
    return (
        2.0 / (right - left), 0.0, 0.0, 0.0,
        0.0, 2.0 / (top - bottom), 0.0, 0.0,
        0.0, 0.0, 1.0 / (near - far), 0.0,
        (left + right) / (left - right), (top + bottom) / (bottom - top), near / (near - far), 1.0,
    )


class ColorMode(enum.Enum):
    """How textures are coloured when drawn."""

    NORMAL = 0
    WASH = 1


class TextAlign(enum.IntFlag):
    """Where text sits relative to its position."""

    CENTER = 0
    LEFT = 1 << 1
    RIGHT = 1 << 2
    TOP = 1 << 3
    BOTTOM = 1 << 4
    TOP_LEFT = (1 << 3) | (1 << 1)
    TOP_RIGHT = (1 << 3) | (1 << 2)
    BOTTOM_LEFT = (1 << 4) | (1 << 1)
    BOTTOM_RIGHT = (1 << 4) | (1 << 2)


@dataclass(frozen=True)
class Vertex:
    """One batched vertex; mult, wash and fill select how the colour is applied."""

    pos: Vec2
    tex: Vec2
    col: Color
    mult: int
    wash: int
    fill: int


@dataclass
class DrawBatch:
    """A run of elements sharing the same render state."""

    layer: int = 0
    offset: int = 0
    elements: int = 0
    material: Optional[Material] = None
    blend: BlendMode = BlendMode.NORMAL
    texture: Optional[Any] = None
    sampler: TextureSampler = field(default_factory=TextureSampler)
    flip_vertically: bool = False
    scissor: Rect = field(default_factory=lambda: Rect(0, 0, -1, -1))


def _expand_colors(color: Colors, count: int) -> Tuple[Color, ...]:
    if isinstance(color, Color):
        return (color,) * count
    colors = tuple(color)
    if len(colors) == 1:
        return colors * count
    if len(colors) != count:
        raise ValueError(f"expected 1 or {count} colours, got {len(colors)}")
    return colors


class Batch(ShapeDrawing):
    """Collects geometry with a matrix stack and state stacks, split into draw batches."""

    def __init__(self, origin_bottom_left: bool = False) -> None:
        self.matrix_uniform = "u_matrix"
        self.default_sampler = TextureSampler()
        self.origin_bottom_left = origin_bottom_left
        self._default_material: Optional[Material] = None
        self._mesh: Optional[Mesh] = None
        self.clear()

    # -- state stacks --------------------------------------------------

    def _insert_batch(self) -> None:
        self._batches.insert(self._batch_insert, replace(self._batch))
        self._batch_insert += 1
        self._batch.offset += self._batch.elements
        self._batch.elements = 0

    def _set_state(self, name: str, value: Any, same: bool) -> None:
        if self._batch.elements > 0 and not same:
            self._insert_batch()
        setattr(self._batch, name, value)

    def push_matrix(self, matrix: Mat3x2, absolute: bool = False) -> None:
        """Transform all following drawing by ``matrix`` (on top of the current one unless absolute)."""
        self._matrix_stack.append(self._matrix)
        self._matrix = matrix if absolute else matrix @ self._matrix

    def pop_matrix(self) -> Mat3x2:
        """Restore the previous matrix and return the one that was in use."""
        was = self._matrix
        self._matrix = self._matrix_stack.pop()
        return was

    def peek_matrix(self) -> Mat3x2:
        return self._matrix

    def push_scissor(self, scissor: Rect) -> None:
        """Clip following drawing to a screen-space rectangle."""
        self._scissor_stack.append(self._batch.scissor)
        self._set_state("scissor", scissor, scissor == self._batch.scissor)

    def pop_scissor(self) -> Rect:
        was = self._batch.scissor
        scissor = self._scissor_stack.pop()
        self._set_state("scissor", scissor, scissor == self._batch.scissor)
        return was

    def peek_scissor(self) -> Rect:
        return self._batch.scissor

    def push_blend(self, blend: BlendMode) -> None:
        self._blend_stack.append(self._batch.blend)
        self._set_state("blend", blend, blend == self._batch.blend)

    def pop_blend(self) -> BlendMode:
        was = self._batch.blend
        blend = self._blend_stack.pop()
        self._set_state("blend", blend, blend == self._batch.blend)
        return was

    def peek_blend(self) -> BlendMode:
        return self._batch.blend

    def push_material(self, material: Optional[Material]) -> None:
        """Draw with ``material``; its values are read at render time, not copied."""
        self._material_stack.append(self._batch.material)
        self._set_state("material", material, material is self._batch.material)

    def pop_material(self) -> Optional[Material]:
        was = self._batch.material
        material = self._material_stack.pop()
        self._set_state("material", material, material is self._batch.material)
        return was

    def peek_material(self) -> Optional[Material]:
        return self._batch.material

    def _move_to_layer(self, layer: int) -> None:
        self._insert_batch()
        insert = 0
        while insert < len(self._batches) and self._batches[insert].layer >= layer:
            insert += 1
        self._batch.layer = layer
        self._batch_insert = insert

    def push_layer(self, layer: int) -> None:
        self._layer_stack.append(self._batch.layer)
        if layer != self._batch.layer:
            self._move_to_layer(layer)

    def pop_layer(self) -> int:
        was = self._batch.layer
        layer = self._layer_stack.pop()
        if layer != was:
            self._move_to_layer(layer)
        return was

    def peek_layer(self) -> int:
        return self._batch.layer

    def _apply_color_mode(self) -> None:
        self._tex_mult = 255 if self._color_mode is ColorMode.NORMAL else 0
        self._tex_wash = 255 if self._color_mode is ColorMode.WASH else 0

    def push_color_mode(self, mode: ColorMode) -> None:
        self._color_mode_stack.append(self._color_mode)
        self._color_mode = mode
        self._apply_color_mode()

    def pop_color_mode(self) -> ColorMode:
        was = self._color_mode
        self._color_mode = self._color_mode_stack.pop()
        self._apply_color_mode()
        return was

    def peek_color_mode(self) -> ColorMode:
        return self._color_mode

    def set_texture(self, texture: Optional[Any]) -> None:
        """Use ``texture`` for following textured drawing."""
        current = self._batch.texture
        if self._batch.elements > 0 and texture is not current and current is not None:
            self._insert_batch()
        if self._batch.texture is not texture:
            self._batch.texture = texture
            self._batch.flip_vertically = bool(
                self.origin_bottom_left
                and texture is not None
                and getattr(texture, "is_framebuffer", False)
            )

    def set_sampler(self, sampler: TextureSampler) -> None:
        if self._batch.elements > 0 and sampler != self._batch.sampler:
            self._insert_batch()
        self._batch.sampler = sampler

    # -- rendering -----------------------------------------------------

    def draw_batches(self) -> List[DrawBatch]:
        """The batches in the order they are rendered, the open one included if not empty."""
        current = self._batch
        ordered: List[DrawBatch] = []
        for i, stored in enumerate(self._batches):
            if self._batch_insert == i and current.elements > 0:
                ordered.append(replace(current))
            ordered.append(replace(stored))
        if self._batch_insert == len(self._batches) and current.elements > 0:
            ordered.append(replace(current))
        return ordered

    def render(
        self,
        renderer: Callable[[RenderPass], Any],
        width: float,
        height: float,
        matrix: Optional[Sequence[float]] = None,
    ) -> List[RenderPass]:
        """Send every batch to ``renderer`` as a render pass on a width x height target.

        ``matrix`` is 16 floats, row by row; by default an orthographic
        projection with the origin at the top left. Returns the passes rendered.
        """
        if (not self._batches and self._batch.elements <= 0) or not self._indices:
            return []

        if matrix is None:
            values = ortho_matrix(0.0, float(width), float(height), 0.0, 0.01, 1000.0)
        else:
            values = tuple(float(v) for v in matrix)
            if len(values) != 16:
                raise ValueError("the projection matrix needs 16 values")

        if self._mesh is None:
            self._mesh = Mesh()
        if self._default_material is None:
            self._default_material = Material(_default_shader())

        self._mesh.index_data(IndexFormat.UINT32, self._indices)
        self._mesh.vertex_data(VERTEX_FORMAT, self._vertices)

        template = RenderPass(target=None, mesh=self._mesh)
        draw_size = Vec2(float(width), float(height))
        rendered = []
        for draw in self.draw_batches():
            result = self._render_single(template, draw, values, renderer, draw_size)
            if result is not None:
                rendered.append(result)
        return rendered

    def _render_single(
        self,
        template: RenderPass,
        draw: DrawBatch,
        matrix: Tuple[float, ...],
        renderer: Callable[[RenderPass], Any],
        draw_size: Vec2,
    ) -> Optional[RenderPass]:
        material = draw.material if draw.material is not None else self._default_material
        material.set_texture(0, draw.texture)
        material.set_sampler(0, draw.sampler)
        material.set_value(self.matrix_uniform, matrix)
        render_pass = replace(
            template,
            material=material,
            blend=draw.blend,
            has_scissor=draw.scissor.w >= 0 and draw.scissor.h >= 0,
            scissor=draw.scissor,
            index_start=draw.offset * 3,
            index_count=draw.elements * 3,
        )
        return render_pass.perform(renderer, draw_size)

    def clear(self) -> None:
        """Drop all geometry and reset every stack and state."""
        self._matrix = Mat3x2.identity()
        self._color_mode = ColorMode.NORMAL
        self._tex_mult = 255
        self._tex_wash = 0
        self._vertices: List[Vertex] = []
        self._indices: List[int] = []
        self._batch = DrawBatch(sampler=self.default_sampler)
        self._matrix_stack: List[Mat3x2] = []
        self._scissor_stack: List[Rect] = []
        self._blend_stack: List[BlendMode] = []
        self._material_stack: List[Optional[Material]] = []
        self._color_mode_stack: List[ColorMode] = []
        self._layer_stack: List[int] = []
        self._batches: List[DrawBatch] = []
        self._batch_insert = 0

    def dispose(self) -> None:
        """Clear the batch and release its mesh and default material."""
        self.clear()
        self._default_material = None
        self._mesh = None

    # -- geometry ------------------------------------------------------

    def _push(
        self,
        positions: Tuple[Vec2, ...],
        color: Colors,
        tex_coords: Optional[Sequence[Vec2]],
        pattern: Tuple[int, ...],
    ) -> None:
        count = len(positions)
        colors = _expand_colors(color, count)
        if tex_coords is None:
            texs: Tuple[Vec2, ...] = (Vec2.ZERO,) * count
            mult, wash, fill = 0, 0, 255
        else:
            texs = tuple(tex_coords)
            if len(texs) != count:
                raise ValueError(f"expected {count} texture coordinates, got {len(texs)}")
            mult, wash, fill = self._tex_mult, self._tex_wash, 0

        base = len(self._vertices)
        self._batch.elements += count - 2
        self._indices.extend(base + i for i in pattern)

        matrix = self._matrix
        flip = self._batch.flip_vertically
        for pos, tex, col in zip(positions, texs, colors):
            self._vertices.append(
                Vertex(
                    matrix.transform_point(pos.x, pos.y),
                    Vec2(tex.x, 1.0 - tex.y if flip else tex.y),
                    col,
                    mult,
                    wash,
                    fill,
                )
            )

    def tri(self, pos0: Vec2, pos1: Vec2, pos2: Vec2, color: Colors,
            tex_coords: Optional[Sequence[Vec2]] = None) -> None:
        """A triangle, textured with the current texture when ``tex_coords`` is given."""
        self._push((pos0, pos1, pos2), color, tex_coords, (0, 1, 2))

    def quad(self, pos0: Vec2, pos1: Vec2, pos2: Vec2, pos3: Vec2, color: Colors,
             tex_coords: Optional[Sequence[Vec2]] = None) -> None:
        """A quad, textured with the current texture when ``tex_coords`` is given."""
        self._push((pos0, pos1, pos2, pos3), color, tex_coords, (0, 1, 2, 0, 2, 3))

    def tex(
        self,
        texture: Union[Any, Subtexture],
        position: Vec2 = Vec2.ZERO,
        color: Color = Color.WHITE,
        origin: Optional[Vec2] = None,
        scale: Optional[Vec2] = None,
        rotation: float = 0.0,
        clip: Optional[Rect] = None,
    ) -> None:
        """Draw a texture or subtexture, optionally clipped and transformed."""
        transformed = origin is not None or scale is not None or rotation != 0 or clip is not None
        if isinstance(texture, Subtexture):
            if clip is not None:
                texture = texture.crop(clip)
            if not transformed:
                self._subtexture_quad(texture, position, color)
                return
            self.push_matrix(self._transform(position, origin, scale, rotation))
            try:
                self._subtexture_quad(texture, Vec2.ZERO, color)
            finally:
                self.pop_matrix()
            return

        unit = (Vec2(0, 0), Vec2(1, 0), Vec2(1, 1), Vec2(0, 1))
        if not transformed:
            self.set_texture(texture)
            w, h = texture.width, texture.height
            x, y = position.x, position.y
            self.quad(Vec2(x, y), Vec2(x + w, y), Vec2(x + w, y + h), Vec2(x, y + h), color, unit)
            return

        self.push_matrix(self._transform(position, origin, scale, rotation))
        try:
            self.set_texture(texture)
            tw, th = texture.width, texture.height
            if clip is None:
                w, h, tex_coords = tw, th, unit
            else:
                w, h = clip.w, clip.h
                u0, u1 = clip.x / tw, (clip.x + clip.w) / tw
                v0, v1 = clip.y / th, (clip.y + clip.h) / th
                tex_coords = (Vec2(u0, v0), Vec2(u1, v0), Vec2(u1, v1), Vec2(u0, v1))
            self.quad(Vec2(0, 0), Vec2(w, 0), Vec2(w, h), Vec2(0, h), color, tex_coords)
        finally:
            self.pop_matrix()

    @staticmethod
    def _transform(position: Vec2, origin: Optional[Vec2], scale: Optional[Vec2],
                   rotation: float) -> Mat3x2:
        return Mat3x2.create_transform(
            position,
            origin if origin is not None else Vec2.ZERO,
            scale if scale is not None else Vec2(1.0, 1.0),
            rotation,
        )

    def _subtexture_quad(self, sub: Subtexture, position: Vec2, color: Color) -> None:
        corners = tuple(position + c for c in sub.draw_coords)
        if sub.texture is None:
            self.quad(*corners, color)
        else:
            self.set_texture(sub.texture)
            self.quad(*corners, color, sub.tex_coords)

    def str(
        self,
        font: SpriteFont,
        text: Union[str, bytes],
        position: Vec2,
        color: Color = Color.WHITE,
        align: TextAlign = TextAlign.TOP_LEFT,
        size: Optional[float] = None,
    ) -> None:
        """Draw UTF-8 text with ``font``, scaled to ``size`` (the font's own size by default)."""
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        if size is None:
            size = font.size

        def line_x(start: int) -> float:
            if (align & TextAlign.LEFT) == TextAlign.LEFT:
                return 0.0
            if (align & TextAlign.RIGHT) == TextAlign.RIGHT:
                return -font.width_of_line(data, start)
            return -font.width_of_line(data, start) * 0.5

        self.push_matrix(Mat3x2.create_scale(size / font.size) @ Mat3x2.create_translation(position))
        try:
            x = line_x(0)
            if (align & TextAlign.TOP) == TextAlign.TOP:
                y = font.ascent + font.descent
            elif (align & TextAlign.BOTTOM) == TextAlign.BOTTOM:
                y = font.height() - font.height_of(data)
            else:
                y = (font.ascent + font.descent + font.height() - font.height_of(data)) * 0.5

            last = 0
            index = 0
            while index < len(data):
                if data[index] == _NEWLINE:
                    y += font.line_height()
                    x = line_x(index + 1)
                    last = 0
                    index += 1
                    continue

                codepoint = utf8_at(data, index)
                character = font[codepoint]
                if character.subtexture.texture is not None:
                    at = Vec2(x, y) + character.offset
                    if index > 0 and data[index - 1] != _NEWLINE:
                        at = at + Vec2(font.get_kerning(last, codepoint), 0.0)
                    self.tex(character.subtexture, at, color)

                x += character.advance
                index += utf8_length(data, index)
                last = codepoint
        finally:
            self.pop_matrix()

    def vertices(self) -> Tuple[Vertex, ...]:
        """All vertices added so far."""
        return tuple(self._vertices)

    def indices(self) -> Tuple[int, ...]:
        """All indices added so far, three per triangle."""
        return tuple(self._indices)