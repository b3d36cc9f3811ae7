"""Immediate-mode UI context: style stacks, widget identity, input and drawing."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Union

from quadui.layout import layout
from quadui.renderer import RenderBox, Renderer
from quadui.widget import (
    Mouse,
    MouseButton,
    Signal,
    StyleDefaults,
    TextAlign,
    Widget,
    WidgetFlags,
    size_pixels,
)

ROOT_ID = "(root_container)"

STYLE_STACKS = (
    "width",
    "height",
    "bg",
    "fg",
    "font",
    "font_size",
    "flow",
    "parent",
    "fixed_x",
    "fixed_y",
    "text_align",
)


def parse_text(text: str) -> tuple[str, str]:
    """Split widget text into ``(id, display_text)``.

    Anything from ``##`` on is hidden from the display text; from ``###`` on,
    only that tail is used as the id.  A marker needs at least one character
    after it to count.
    """
    display = text
    widget_id = text
    hidden = text.find("##", 0, len(text) - 1)
    if hidden >= 0:
        display = text[:hidden]
    tail = text.find("###", 0, len(text) - 1)
    if tail >= 0:
        widget_id = text[tail:]
    return widget_id, display


class StyleStack:
    """A stack of style values; values set with ``next`` last for one read."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: list[tuple[Any, bool]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, value: Any) -> None:
        self._entries.append((value, False))

    def next(self, value: Any) -> None:
        self._entries.append((value, True))

    def pop(self) -> Any:
        if len(self._entries) < 2:
            raise IndexError(f"too many pops on the {self.name} stack")
        return self._entries.pop()[0]

    def top(self) -> Any:
        if not self._entries:
            raise IndexError(f"all {self.name} values have been popped off the style stack")
        value, pop_next = self._entries[-1]
        if pop_next:
            self._entries.pop()
        return value

    def clear(self) -> None:
        self._entries.clear()


_FocusKey = Union[str, Widget]


def _focus_key(widget: Widget) -> _FocusKey:
    return widget.id if widget.id else widget


class UIContext:
    """Builds a widget tree each frame and keeps state between frames by id."""

    def __init__(self, defaults: StyleDefaults) -> None:
        self.defaults = defaults
        self.current_frame = 0
        self.mouse = Mouse()
        self.root = Widget(id=ROOT_ID, flags=WidgetFlags.FLOATING)
        self._stacks = {name: StyleStack(name) for name in STYLE_STACKS}
        self._widgets: dict[str, Widget] = {}
        self._focused: _FocusKey | None = None

    def _stack(self, name: str) -> StyleStack:
        try:
            return self._stacks[name]
        except KeyError:
            raise KeyError(f"unknown style stack '{name}'") from None

    def begin(self, width: int, height: int, mouse: Mouse) -> None:
        """Start a frame for a container of the given size."""
        self.root = Widget(
            id=ROOT_ID,
            flags=WidgetFlags.FLOATING,
            size=(size_pixels(float(width), 1.0), size_pixels(float(height), 1.0)),
        )
        self.mouse = mouse
        if not mouse.buttons[MouseButton.LEFT].pressed:
            self._focused = None

        for stack in self._stacks.values():
            stack.clear()
        defaults = self.defaults
        self.push("width", defaults.width)
        self.push("height", defaults.height)
        self.push("bg", defaults.bg)
        self.push("fg", defaults.fg)
        self.push("font", defaults.font)
        self.push("font_size", defaults.font_size)
        self.push("flow", defaults.flow)
        self.push("parent", self.root)
        self.push("fixed_x", 0.0)
        self.push("fixed_y", 0.0)
        self.push("text_align", defaults.text_align)

    def end(self) -> None:
        """Finish the frame: lay out the tree and forget widgets not used."""
        self.current_frame += 1
        layout(self.root)
        stale = [
            widget_id
            for widget_id, widget in self._widgets.items()
            if widget.last_touched + 2 <= self.current_frame
        ]
        for widget_id in stale:
            del self._widgets[widget_id]

    def draw(self, renderer: Renderer) -> None:
        """Queue the whole tree on ``renderer``, parents before children."""
        self._draw(renderer, self.root)

    def _draw(self, renderer: Renderer, widget: Widget) -> None:
        if widget.flags & WidgetFlags.DRAW_BACKGROUND:
            renderer.draw(
                RenderBox(
                    pos=tuple(widget.computed_absolute_position),
                    size=tuple(widget.computed_size),
                    color=widget.bg,
                )
            )

        if widget.flags & WidgetFlags.DRAW_TEXT:
            font = widget.font
            if font is None:
                raise ValueError(f"widget '{widget.id}' draws text but has no font")
            font.set_size(widget.font_size)
            metrics = font.metrics()
            x, y = widget.computed_absolute_position
            width, height = widget.computed_size
            if widget.text_align is TextAlign.CENTER:
                x += width / 2.0 - font.measure(widget.text)[0] / 2.0
            elif widget.text_align is TextAlign.RIGHT:
                x += width - font.measure(widget.text)[0]
            # Centre the line vertically.
            y += height / 2.0 - (metrics.ascent - metrics.descent) / 2.0
            renderer.draw_text((x, y), widget.text, font, widget.fg)

        if widget.render_func is not None:
            widget.render_func(widget, renderer)

        for child in widget.children():
            self._draw(renderer, child)

    def widget(self, text: str, flags: WidgetFlags = WidgetFlags.NONE) -> Widget:
        """Create this frame's widget for ``text`` under the current parent."""
        widget_id, display = parse_text(text)

        previous = self._widgets.get(widget_id) if widget_id else None
        if previous is not None and previous.last_touched == self.current_frame:
            # The id is already used this frame: the duplicate gets no identity.
            widget_id = ""
            previous = None

        parent = self.top("parent")
        widget = Widget(
            id=widget_id,
            text=display,
            flags=WidgetFlags(flags),
            last_touched=self.current_frame,
            size=(self.top("width"), self.top("height")),
            bg=self.top("bg"),
            fg=self.top("fg"),
            font=self.top("font"),
            font_size=self.top("font_size"),
            flow=self.top("flow"),
            text_align=self.top("text_align"),
        )
        if previous is not None:
            widget.computed_absolute_position = list(previous.computed_absolute_position)
            widget.computed_size = list(previous.computed_size)
        if widget_id:
            self._widgets[widget_id] = widget

        if widget.flags & WidgetFlags.FLOATING_X:
            widget.computed_absolute_position[0] = float(self.top("fixed_x"))
        if widget.flags & WidgetFlags.FLOATING_Y:
            widget.computed_absolute_position[1] = float(self.top("fixed_y"))

        parent.add_child(widget)
        return widget

    def signal(self, widget: Widget) -> Signal:
        """Interaction state of ``widget`` against the current mouse."""
        mx, my = self.mouse.pos
        left, top = widget.computed_absolute_position
        right = left + widget.computed_size[0]
        bottom = top + widget.computed_size[1]

        button = self.mouse.buttons[MouseButton.LEFT]
        hovered = left < mx < right and top < my < bottom
        pressed = hovered and button.pressed
        if pressed and self._focused is None:
            self._focused = _focus_key(widget)
        focused = self._focused is not None and self._focused == _focus_key(widget)
        clicked = hovered and button.clicked
        drag = self.mouse.pos_delta if focused else (0.0, 0.0)
        return Signal(
            hovered=hovered,
            pressed=pressed,
            clicked=clicked,
            focused=focused,
            drag=drag,
        )

    def push(self, name: str, value: Any) -> None:
        self._stack(name).push(value)

    def pop(self, name: str) -> Any:
        return self._stack(name).pop()

    def next(self, name: str, value: Any) -> None:
        """Set ``name`` for the next widget only."""
        self._stack(name).next(value)

    def top(self, name: str) -> Any:
        return self._stack(name).top()

    @contextmanager
    def parent(self, widget: Widget) -> Iterator[Widget]:
        """Make ``widget`` the parent of widgets created inside the block."""
        self.push("parent", widget)
        try:
            yield widget
        finally:
            self.pop("parent")