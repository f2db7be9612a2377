# pixelbatch

pixelbatch is a small 2D rendering toolkit that runs on the CPU. It collects
shapes, textures and text into vertex and index lists, grouped into runs that
share the same draw state. A renderer that you supply can then draw those runs.
It also packs images into texture atlases, measures text with sprite fonts and
reads Aseprite files. Smaller helpers cover forward-slash paths, UTF-8 text,
frame timing and logging.

## Installation

```
pip install pixelbatch
```

The test suite needs the `test` extra:

```
pip install "pixelbatch[test]"
pytest
```

## Modules

- `pixelbatch.batch`
  - `Batch` keeps stacks for matrices, scissor rectangles, blend modes,
    materials, layers and `ColorMode`.
  - `tri`, `quad`, `tex` (textures and `Subtexture`s, optionally clipped,
    scaled and rotated) and `str` (text drawn with a `SpriteFont`, placed
    with `TextAlign`) add geometry.
  - A new `DrawBatch` run starts whenever the draw state changes.
  - `vertices()` and `indices()` return the geometry, and `draw_batches()`
    returns the runs in render order.
  - `render(renderer, width, height, matrix=None)` builds one `RenderPass`
    per run. It hands each pass to `renderer`, a callable, and returns the
    passes. When no matrix is given it uses an orthographic projection with
    the origin at the top left.
- `pixelbatch.drawing`: `ShapeDrawing` is the base class of `Batch`. It draws
  the following through `tri` and `quad`:
  - lines, quadratic and cubic Bézier lines
  - rectangles: filled, outlined and rounded
  - circles and semicircles, filled or outlined
  - triangle and quad outlines
  - arrow heads
- `pixelbatch.primitives`: `Color`, `Vec2`, `Rect`, `Mat3x2` (combined with
  `a @ b`, where `a` is applied first) and `angle_diff`.
- `pixelbatch.image`: `Image` is an RGBA pixel buffer. It can:
  - load PNG or JPEG from a path or stream
  - save PNG or JPEG, using Pillow
  - premultiply alpha
  - copy pixels in and out of rectangles
- `pixelbatch.packer`: `Packer` trims transparent borders and packs images
  into atlas `pages`, with padding, spacing and optional power-of-two page
  sizes. `entries()` reports where each image landed.
- `pixelbatch.subtexture`: `Subtexture` is a region of a texture. It keeps
  draw and texture coordinates and supports `crop`.
- `pixelbatch.spritefont`: `SpriteFont` holds `Character` entries and kerning
  pairs. `width_of`, `width_of_line` and `height_of` measure text.
- `pixelbatch.aseprite`: `Aseprite.load(path)` and `Aseprite.parse(stream)`
  read these parts of a sprite file:
  - layers, frames and cels
  - tags, slices and the palette
  - user data

  Each visible cel is composited into its frame's `Image`. Invalid data raises
  `AsepriteError`.
- Render data:
  - `pixelbatch.texture`: `Texture`, `TextureFormat`
  - `pixelbatch.mesh`: `Mesh`, `VertexFormat`, `VertexAttribute`
  - `pixelbatch.shader`: `Shader.create` checks that the programs are present
    and that uniform names are unique.
  - `pixelbatch.material`: `Material` stores uniform values, textures and
    samplers.
  - `pixelbatch.renderpass`: `RenderPass.perform` trims the index and instance
    counts and clamps the viewport and scissor before it calls the renderer.
- `pixelbatch.blend`, `pixelbatch.sampler`: `BlendMode` (`NORMAL`,
  `SUBTRACT`) and `TextureSampler`.
- `pixelbatch.paths`: `normalize`, `join`, `get_file_name`,
  `get_file_name_no_ext`, `get_path_no_ext`, `get_directory_name`,
  `get_path_after`.
- `pixelbatch.text`: UTF-8 decoding and encoding, UTF-16 to UTF-8
  conversion, and string helpers such as `trim`, `split` and `substr`.
- `pixelbatch.timing`: the `Clock` state, plus `on_interval`, `on_time` and
  `between_interval`.
- `pixelbatch.log`: `info`, `warn` and `error`. They print to stdout, or go
  to a handler installed with `set_handler`.

## Example

```python
from pixelbatch.batch import Batch
from pixelbatch.primitives import Color, Vec2
from pixelbatch.paths import join, get_file_name_no_ext

batch = Batch()
batch.quad(Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10), Color(255, 0, 0, 255))
print(len(batch.vertices()), len(batch.indices()))  # 4 6

drawn = []
passes = batch.render(drawn.append, 320, 180)
print(len(passes), passes[0].index_count)  # 1 6

print(join("assets/sprites", "../fonts/main.ttf"))  # assets/fonts/main.ttf
print(get_file_name_no_ext("assets/player.ase"))    # player
```

Reading an Aseprite file:

```python
from pixelbatch.aseprite import Aseprite

sprite = Aseprite.load("player.ase")
for tag in sprite.tags:
    print(tag.name, tag.from_frame, tag.to_frame)
```

## What it does not do

- It opens no window and uses no graphics API. `Batch.render` and
  `RenderPass.perform` only give validated `RenderPass` objects to the
  callable you pass in, and drawing them is up to you.
- Textures, meshes and shaders are plain data held in memory. Shader source is
  not compiled, and the uniforms are whatever you list.
- It does not load TrueType fonts. A `SpriteFont` is filled in by hand, by
  setting characters, subtextures and kerning.
- There is no application loop, input handling or file-system layer. The
  `paths` module works on path strings only.