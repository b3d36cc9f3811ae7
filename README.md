# quadui

An immediate-mode user interface toolkit. Each frame you describe the widgets
you want. quadui keeps their state across frames by id, lays them out, reports
mouse interaction and turns them into batched textured quads.

## Modules

- `quadui.atlas`: `QuadtreeAtlas`, a quadtree rectangle packer over a
  single-channel bitmap. Regions are rounded up to multiples of 4 pixels.
  `insert` returns an `AtlasNode`, or `None` when the atlas is full. `blit`
  copies pixels into a node's region.
- `quadui.font`: `Font` rasterises glyphs for each pixel size through a
  `GlyphProvider` and packs them into an `AtlasTexture`. Each atlas starts at
  256×256 and doubles in size when it is full.
  - `PillowProvider` reads TrueType files with Pillow. `Font.from_file(path)`
    uses it.
  - Before `glyph`, `atlas` or `metrics` is called, `Font.set_size` must select
    a size. Otherwise `LookupError` is raised.
  - `Font.measure(text)` returns the width of the text, including kerning, and
    the line height.
- `quadui.renderer`: `Renderer` collects `RenderBox` quads as `Vertex`
  records.
  - It uses at most 4096 quads by default and 32 textures per frame. Going over
    either limit raises `OverflowError`.
  - `draw_text` queues one quad per character from a `Font`'s atlas.
  - `end()` returns the frame's vertices.
  - `renderer.textures` maps each vertex's `texture_index` to its texture. Index
    0 is `None`, a plain white texture.
  - `quad_indices` and `ortho_projection` supply the matching index list and
    projection matrix.
- `quadui.widget`: the tree and input types.
  - Tree: `Widget`, `WidgetFlags`, `Axis`, `TextAlign`, `StyleDefaults`.
  - Sizing: `Size`, built with `size_pixels`, `size_text`, `size_children` or
    `size_parent`. `strictness` 1 means the size never shrinks.
  - Input: `Mouse`, `ButtonState`, `MouseButton`, `Signal`.
- `quadui.layout`: the sizing and positioning passes, run together by
  `layout(root)`.
  - When children overflow their parent, the non-strict part of each child
    shrinks.
  - An overflow that cannot be absorbed is logged as a warning on the
    `quadui.layout` logger.
- `quadui.context`: `UIContext`, the per-frame driver, with its style stacks
  (`StyleStack`) and `parse_text`.
- `quadui.widgets`: ready-made `column`, `row`, `spacer`, `text`, `checkbox`
  and `slider`.
- `quadui.app`: the demo (`build_frame`, `DemoState`, `FrameClock`, `main`).

## Use

```python
from quadui.context import UIContext
from quadui.font import Font
from quadui.renderer import Renderer
from quadui.widget import Axis, Mouse, StyleDefaults, size_children
from quadui.widgets import checkbox, column, slider, text

font = Font.from_file("RobotoMono-Regular.ttf")
ui = UIContext(
    StyleDefaults(
        width=size_children(1.0),
        height=size_children(1.0),
        bg=(1.0, 1.0, 1.0, 1.0),
        fg=(1.0, 1.0, 1.0, 1.0),
        font=font,
        font_size=24,
        flow=Axis.VERTICAL,
    )
)
renderer = Renderer()
enabled = False
volume = 5.0

ui.begin(800, 600, Mouse())
with column(ui):
    text(ui, "Hello")
    _, enabled = checkbox(ui, "enabled", enabled)
    _, volume = slider(ui, "volume", volume, 0.0, 10.0)
ui.end()

renderer.begin(800, 600)
ui.draw(renderer)
vertices = renderer.end()
```

### Frames and input

Layout runs in `ui.end()`. A widget with the same id in the next frame starts
from the position and size computed in this one. `ui.signal(widget)` tests the
mouse against that position and size.

- A widget becomes focused when it is pressed while nothing else has focus.
- Focus is released once the left button is no longer pressed.
- `checkbox` and `slider` return the widget together with the updated value.

### Widget text and ids

A widget's text may carry an id marker.

- `"Close##close_button"` shows `Close` and is tracked by the whole string.
- With `###`, the part from `###` onwards becomes the id.
- Widgets with empty text, or whose id was already used in the same frame, are
  not kept between frames.
- Widgets not created for two frames are forgotten.

### Style stacks

The style stacks are `width`, `height`, `bg`, `fg`, `font`, `font_size`,
`flow`, `parent`, `fixed_x`, `fixed_y` and `text_align`.

- `ui.push(name, value)` pushes a value and `ui.pop(name)` removes it.
- `ui.next(name, value)` sets a value for the next read only.
- `ui.top(name)` reads the current value.
- `ui.parent(widget)` is a context manager that makes new widgets its
  children.

## Demo

With a display available, run:

```
quadui-demo --font path/to/font.ttf
```

The window has a top bar with a button, a checkbox, a slider and a frame
counter, and a draggable window that the button opens. Without `--font`, the
demo looks for `assets/Roboto_Mono/static/RobotoMono-Regular.ttf` relative to
the current directory. No font is bundled.

## What it does not do

The renderer produces vertex data only. quadui has no GPU drawing of its own.
The demo composites each frame's quads in software with Pillow and shows the
resulting image in a pyglet window.

Mouse scroll and the middle and right buttons are recorded in `Mouse`, but no
widget uses them. There is no keyboard input.

## Tests

```
pip install -e .[test]
pytest
```