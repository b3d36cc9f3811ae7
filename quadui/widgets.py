"""Composite widgets built from the UI context: layout groups, text, checkbox, slider."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from quadui.context import UIContext
from quadui.renderer import RenderBox, Renderer
from quadui.widget import (
    Axis,
    Size,
    Vec2,
    Vec4,
    Widget,
    WidgetFlags,
    size_pixels,
    size_text,
)

CHECKBOX_SIZE = 32.0
CHECKBOX_FILL = 0.6
SLIDER_WIDTH = 128.0
SLIDER_HEIGHT = 16.0
_BAR_THICKNESS = 2.0

_CHECKBOX_BG: Vec4 = (0.2, 0.2, 0.2, 1.0)
_CHECK_COLOR: Vec4 = (0.75, 0.75, 0.75, 1.0)
_SLIDER_BG: Vec4 = (0.5, 0.5, 0.5, 0.5)
_BAR_COLOR: Vec4 = (0.3, 0.3, 0.3, 1.0)
_FILL_COLOR: Vec4 = (0.75, 0.75, 0.75, 1.0)


@contextmanager
def _group(ui: UIContext, flow: Axis) -> Iterator[Widget]:
    ui.next("flow", flow)
    widget = ui.widget("", WidgetFlags.NONE)
    with ui.parent(widget):
        yield widget


def column(ui: UIContext):
    """Context manager: widgets created inside are stacked vertically."""
    return _group(ui, Axis.VERTICAL)


def row(ui: UIContext):
    """Context manager: widgets created inside are laid out horizontally."""
    return _group(ui, Axis.HORIZONTAL)


def spacer(ui: UIContext, size: Size) -> Widget:
    """Empty widget taking ``size`` along the current parent's flow axis."""
    flow = ui.top("parent").flow
    if flow == Axis.HORIZONTAL:
        ui.next("width", size)
        ui.next("height", size_pixels(0.0, 0.0))
    else:
        ui.next("width", size_pixels(0.0, 0.0))
        ui.next("height", size)
    return ui.widget("", WidgetFlags.NONE)


def text(ui: UIContext, label: str) -> Widget:
    """Widget showing ``label``, sized to fit it."""
    ui.next("width", size_text(1.0))
    ui.next("height", size_text(1.0))
    return ui.widget(label, WidgetFlags.DRAW_TEXT)


def checkbox(ui: UIContext, widget_id: str, value: bool) -> tuple[Widget, bool]:
    """A clickable box; returns the widget and the value after this frame's input."""
    ui.next("width", size_pixels(CHECKBOX_SIZE, 1.0))
    ui.next("height", size_pixels(CHECKBOX_SIZE, 1.0))
    ui.next("bg", _CHECKBOX_BG)
    widget = ui.widget(widget_id, WidgetFlags.DRAW_BACKGROUND | WidgetFlags.INTERACTIVE)

    if ui.signal(widget).clicked:
        value = not value

    checked = value

    def render(target: Widget, renderer: Renderer) -> None:
        if not checked:
            return
        width, height = target.computed_size
        fill_w, fill_h = width * CHECKBOX_FILL, height * CHECKBOX_FILL
        x, y = target.computed_absolute_position
        renderer.draw(
            RenderBox(
                pos=(x + (width - fill_w) / 2.0, y + (height - fill_h) / 2.0),
                size=(fill_w, fill_h),
                color=_CHECK_COLOR,
            )
        )

    widget.equip_render_func(render)
    return widget, value


@dataclass(frozen=True)
class _Rect:
    pos: Vec2
    size: Vec2
    color: Vec4


def slider(
    ui: UIContext, widget_id: str, value: float, minimum: float, maximum: float
) -> tuple[Widget, float]:
    """A horizontal slider with a draggable knob; returns the widget and the new value."""
    if maximum <= minimum:
        raise ValueError(f"slider range is empty: {minimum} .. {maximum}")

    ui.next("width", size_pixels(SLIDER_WIDTH, 1.0))
    ui.next("height", size_pixels(SLIDER_HEIGHT, 1.0))
    ui.next("bg", _SLIDER_BG)
    widget = ui.widget(f"{widget_id}-container", WidgetFlags.NONE)

    x, y = widget.computed_absolute_position
    width, height = widget.computed_size
    knob = height

    bar = _Rect(
        pos=(x + knob / 2.0, y + height / 2.0 - _BAR_THICKNESS / 2.0),
        size=(width - knob, _BAR_THICKNESS),
        color=_BAR_COLOR,
    )
    fill_width = bar.size[0] * (value - minimum) / (maximum - minimum)
    fill = _Rect(pos=bar.pos, size=(fill_width, _BAR_THICKNESS), color=_FILL_COLOR)

    ui.next("width", size_pixels(knob, 1.0))
    ui.next("height", size_pixels(knob, 1.0))
    ui.next("fixed_x", x + fill_width)
    ui.next("fixed_y", y)
    knob_widget = ui.widget(
        f"{widget_id}-nob",
        WidgetFlags.DRAW_BACKGROUND | WidgetFlags.FLOATING | WidgetFlags.INTERACTIVE,
    )

    if ui.signal(knob_widget).focused and width > 0.0:
        value += ui.mouse.pos_delta[0] / width * (maximum - minimum)
    value = min(max(value, minimum), maximum)

    def render(_: Widget, renderer: Renderer) -> None:
        for rect in (bar, fill):
            renderer.draw(RenderBox(pos=rect.pos, size=rect.size, color=rect.color))

    widget.equip_render_func(render)
    return widget, value