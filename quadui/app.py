"""Demo application: a top bar with controls and a draggable window."""

from __future__ import annotations

import argparse
import copy
import sys
import time
from dataclasses import dataclass

from PIL import Image

from quadui.context import UIContext
from quadui.font import Font
from quadui.renderer import Renderer
from quadui.widget import (
    Axis,
    Mouse,
    MouseButton,
    StyleDefaults,
    TextAlign,
    Vec2,
    Widget,
    WidgetFlags,
    size_children,
    size_parent,
    size_pixels,
    size_text,
)
from quadui.widgets import checkbox, column, row, slider, spacer, text

DEFAULT_FONT = "assets/Roboto_Mono/static/RobotoMono-Regular.ttf"
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600


@dataclass
class DemoState:
    """State the demo keeps between frames."""

    show_window: bool = False
    window_pos: Vec2 = (128.0, 128.0)
    slider_value: float = 0.0


@dataclass
class FrameClock:
    """Measures frame time and counts frames per second."""

    last: float = 0.0
    frames: int = 0
    timer: float = 0.0
    fps: int = 0

    def tick(self, now: float) -> float:
        """Advance to ``now`` and return the time since the previous tick."""
        dt = now - self.last
        self.last = now
        self.frames += 1
        self.timer += dt
        if self.timer >= 1.0:
            self.fps = self.frames
            self.frames = 0
            self.timer = 0.0
        return dt


def _top_bar(ui: UIContext, state: DemoState, fps: int, dt: float) -> Widget:
    ui.next("bg", (0.1, 0.1, 0.1, 1.0))
    ui.next("width", size_parent(1.0, 1.0))
    ui.next("height", size_children(1.0))
    ui.next("flow", Axis.HORIZONTAL)
    container = ui.widget("container", WidgetFlags.DRAW_BACKGROUND)
    with ui.parent(container):
        spacer(ui, size_pixels(16.0, 1.0))
        with column(ui):
            spacer(ui, size_pixels(16.0, 1.0))

            font_size = ui.top("font_size")
            ui.next("width", size_pixels(font_size * 6.0, 1.0))
            ui.next("height", size_pixels(font_size * 2.0, 1.0))
            ui.next("bg", (0.75, 0.2, 0.2, 1.0))
            ui.next("text_align", TextAlign.CENTER)
            button = ui.widget(
                "Show Window", WidgetFlags.DRAW_BACKGROUND | WidgetFlags.DRAW_TEXT
            )
            signal = ui.signal(button)
            if signal.hovered:
                button.bg = (0.5, 0.2, 0.2, 1.0)
            if signal.pressed:
                button.bg = (0.2, 0.2, 0.5, 1.0)
            if signal.clicked:
                state.show_window = True

            spacer(ui, size_pixels(8.0, 1.0))
            with row(ui):
                text(ui, "Window toggle: ")
                _, state.show_window = checkbox(ui, "show-window-checkbox", state.show_window)

            spacer(ui, size_pixels(8.0, 1.0))
            with row(ui):
                text(ui, f"Slider({state.slider_value:.2f}): ")
                _, state.slider_value = slider(ui, "slidervalue", state.slider_value, 5.0, 10.0)

            spacer(ui, size_pixels(16.0, 1.0))

        spacer(ui, size_parent(1.0, 0.0))
        ui.push("width", size_text(1.0))
        ui.push("height", size_text(1.0))
        spacer(ui, size_parent(1.0, 0.0))

        ui.next("width", size_children(1.0))
        ui.next("height", size_children(1.0))
        with column(ui):
            ui.widget(f"FPS: {fps}", WidgetFlags.DRAW_TEXT)
            ui.widget(f"Delta Time: {dt:.4f}", WidgetFlags.DRAW_TEXT)
        spacer(ui, size_pixels(16.0, 1.0))

        ui.pop("width")
        ui.pop("height")
    return container


def _draggable_window(ui: UIContext, state: DemoState) -> None:
    ui.next("bg", (0.2, 0.2, 0.3, 1.0))
    ui.next("width", size_pixels(128.0, 1.0))
    ui.next("height", size_pixels(128.0, 1.0))
    ui.next("fixed_x", state.window_pos[0])
    ui.next("fixed_y", state.window_pos[1])
    ui.next("text_align", TextAlign.CENTER)
    window = ui.widget(
        "Drag me!##window",
        WidgetFlags.DRAW_BACKGROUND | WidgetFlags.FLOATING | WidgetFlags.DRAW_TEXT,
    )
    with ui.parent(window):
        ui.next("bg", (0.0, 0.0, 0.0, 0.5))
        ui.next("width", size_parent(1.0, 1.0))
        ui.next("height", size_pixels(32.0, 1.0))
        ui.next("flow", Axis.HORIZONTAL)
        drag_bar = ui.widget("##dragbar", WidgetFlags.DRAW_BACKGROUND)
        signal = ui.signal(drag_bar)
        if signal.focused:
            x, y = state.window_pos
            state.window_pos = (x + signal.drag[0], y + signal.drag[1])
        with ui.parent(drag_bar):
            ui.next("height", size_parent(1.0, 1.0))
            spacer(ui, size_parent(1.0, 0.0))

            ui.next("width", size_text(1.0))
            ui.next("height", size_parent(1.0, 1.0))
            close = ui.widget("X##close_button", WidgetFlags.DRAW_TEXT)
            if ui.signal(close).clicked:
                state.show_window = False

            spacer(ui, size_pixels(8.0, 1.0))


def build_frame(ui: UIContext, state: DemoState, fps: int, dt: float) -> Widget:
    """Build the demo's widgets between ``ui.begin`` and ``ui.end``; returns the top bar."""
    container = _top_bar(ui, state, fps, dt)
    if state.show_window:
        _draggable_window(ui, state)
    return container


def _rasterize(renderer: Renderer, width: int, height: int) -> Image.Image:
    """Draw the renderer's queued quads onto an RGBA image."""
    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 255))
    atlases: dict[int, Image.Image] = {}
    vertices = iter(renderer.vertices)
    for top_left, top_right, bottom_left, bottom_right in zip(vertices, vertices, vertices, vertices):
        left = round(top_left.pos[0])
        top = round(-top_left.pos[1])
        quad_w = round(top_right.pos[0] - top_left.pos[0])
        quad_h = round(top_left.pos[1] - bottom_left.pos[1])
        if quad_w <= 0 or quad_h <= 0:
            continue
        x0, y0 = max(left, 0), max(top, 0)
        x1, y1 = min(left + quad_w, width), min(top + quad_h, height)
        if x0 >= x1 or y0 >= y1:
            continue

        r, g, b, a = (round(min(max(c, 0.0), 1.0) * 255) for c in top_left.color)
        texture = renderer.textures[top_left.texture_index]
        if texture is None:
            mask = Image.new("L", (quad_w, quad_h), 255)
        else:
            atlas = atlases.get(id(texture))
            if atlas is None:
                atlas = Image.frombytes("L", (texture.width, texture.height), bytes(texture.pixels))
                atlases[id(texture)] = atlas
            (u0, v0), (u1, v1) = top_left.uv, bottom_right.uv
            box = (
                round(u0 * texture.width),
                round(v0 * texture.height),
                round(u1 * texture.width),
                round(v1 * texture.height),
            )
            if box[2] <= box[0] or box[3] <= box[1]:
                continue
            mask = atlas.crop(box).resize((quad_w, quad_h))
        if a < 255:
            mask = mask.point(lambda p, alpha=a: p * alpha // 255)

        layer = Image.new("RGBA", (quad_w, quad_h), (r, g, b, 0))
        layer.putalpha(mask)
        layer = layer.crop((x0 - left, y0 - top, x1 - left, y1 - top))
        canvas.alpha_composite(layer, dest=(x0, y0))
    return canvas


def _run(font: Font) -> None:
    import pyglet
    from pyglet.window import mouse as pyglet_mouse

    window = pyglet.window.Window(WINDOW_WIDTH, WINDOW_HEIGHT, "quadui", resizable=False)
    buttons = {
        pyglet_mouse.LEFT: MouseButton.LEFT,
        pyglet_mouse.MIDDLE: MouseButton.MIDDLE,
        pyglet_mouse.RIGHT: MouseButton.RIGHT,
    }
    mouse = Mouse()

    def move(x: float, y: float) -> None:
        ratio = window.get_pixel_ratio()
        pos = (x * ratio, (window.height - y) * ratio)
        dx, dy = pos[0] - mouse.pos[0], pos[1] - mouse.pos[1]
        mouse.pos = pos
        mouse.pos_delta = (mouse.pos_delta[0] + dx, mouse.pos_delta[1] + dy)

    def set_button(button: int, down: bool) -> None:
        index = buttons.get(button)
        if index is not None:
            mouse.buttons[index].pressed = down
            mouse.buttons[index].clicked = down

    @window.event
    def on_mouse_press(x, y, button, modifiers):
        set_button(button, True)

    @window.event
    def on_mouse_release(x, y, button, modifiers):
        set_button(button, False)

    @window.event
    def on_mouse_motion(x, y, dx, dy):
        move(x, y)

    @window.event
    def on_mouse_drag(x, y, dx, dy, pressed, modifiers):
        move(x, y)

    @window.event
    def on_mouse_scroll(x, y, scroll_x, scroll_y):
        mouse.scroll += scroll_y

    ui = UIContext(
        StyleDefaults(
            width=size_children(1.0),
            height=size_children(1.0),
            bg=(1.0, 1.0, 1.0, 1.0),
            fg=(1.0, 1.0, 1.0, 1.0),
            font=font,
            font_size=24,
            flow=Axis.VERTICAL,
            text_align=TextAlign.LEFT,
        )
    )
    renderer = Renderer()
    state = DemoState()
    clock = FrameClock(last=time.perf_counter())

    while not window.has_exit:
        dt = clock.tick(time.perf_counter())
        screen_w, screen_h = window.get_framebuffer_size()

        mouse.pos_delta = (0.0, 0.0)
        mouse.scroll = 0.0
        for button_state in mouse.buttons:
            button_state.clicked = False
        window.dispatch_events()
        if window.has_exit:
            break

        ui.begin(screen_w, screen_h, copy.deepcopy(mouse))
        build_frame(ui, state, clock.fps, dt)
        ui.end()

        renderer.begin(screen_w, screen_h)
        ui.draw(renderer)
        renderer.end()

        frame = _rasterize(renderer, screen_w, screen_h)
        window.clear()
        pyglet.image.ImageData(
            screen_w, screen_h, "RGBA", frame.tobytes(), pitch=-screen_w * 4
        ).blit(0, 0, width=window.width, height=window.height)
        window.flip()

    window.close()


def main(argv: list[str] | None = None) -> int:
    """Open the demo window; returns the process exit status."""
    parser = argparse.ArgumentParser(prog="quadui", description="Immediate-mode UI demo.")
    parser.add_argument("--font", default=DEFAULT_FONT, help="TrueType font to render text with")
    args = parser.parse_args(argv)

    try:
        font = Font.from_file(args.font)
    except (OSError, ValueError) as exc:
        print(f"quadui: {exc}", file=sys.stderr)
        return 1

    _run(font)
    return 0


if __name__ == "__main__":
    sys.exit(main())