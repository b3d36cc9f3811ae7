"""Widget tree types, sizing rules, style defaults and input state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from quadui.font import Font
    from quadui.renderer import Renderer

Vec2 = tuple[float, float]
Vec4 = tuple[float, float, float, float]


class WidgetFlags(enum.IntFlag):
    NONE = 0
    DRAW_TEXT = 1 << 0
    DRAW_BACKGROUND = 1 << 1
    FLOATING_X = 1 << 2
    FLOATING_Y = 1 << 3
    FLOATING = FLOATING_X | FLOATING_Y
    # Consumes interaction events and can generate signals.
    INTERACTIVE = 1 << 4


class Axis(enum.IntEnum):
    HORIZONTAL = 0
    VERTICAL = 1


class SizeKind(enum.Enum):
    PIXELS = enum.auto()
    TEXT = enum.auto()
    CHILDREN = enum.auto()
    PARENT = enum.auto()


@dataclass(frozen=True)
class Size:
    """How a widget is sized on one axis; ``strictness`` 1 means it never shrinks."""

    kind: SizeKind = SizeKind.PIXELS
    value: float = 0.0
    strictness: float = 0.0


def size_pixels(value: float, strictness: float) -> Size:
    return Size(SizeKind.PIXELS, value, strictness)


def size_text(strictness: float) -> Size:
    return Size(SizeKind.TEXT, 0.0, strictness)


def size_children(strictness: float) -> Size:
    return Size(SizeKind.CHILDREN, 0.0, strictness)


def size_parent(value: float, strictness: float) -> Size:
    return Size(SizeKind.PARENT, value, strictness)


class TextAlign(enum.Enum):
    LEFT = enum.auto()
    CENTER = enum.auto()
    RIGHT = enum.auto()


class MouseButton(enum.IntEnum):
    LEFT = 0
    MIDDLE = 1
    RIGHT = 2


@dataclass
class ButtonState:
    pressed: bool = False
    clicked: bool = False


def _buttons() -> list[ButtonState]:
    return [ButtonState() for _ in MouseButton]


@dataclass
class Mouse:
    """Mouse state for one frame; ``buttons`` is indexed by MouseButton."""

    buttons: list[ButtonState] = field(default_factory=_buttons)
    pos: Vec2 = (0.0, 0.0)
    pos_delta: Vec2 = (0.0, 0.0)
    scroll: float = 0.0


@dataclass(frozen=True)
class Signal:
    hovered: bool = False
    pressed: bool = False
    clicked: bool = False
    focused: bool = False
    drag: Vec2 = (0.0, 0.0)


@dataclass
class StyleDefaults:
    """Bottom values of every style stack."""

    width: Size
    height: Size
    bg: Vec4
    fg: Vec4
    font: Optional[Font]
    font_size: int
    flow: Axis = Axis.VERTICAL
    text_align: TextAlign = TextAlign.LEFT


RenderFunc = Callable[["Widget", "Renderer"], None]


def _zero_vec() -> list[float]:
    return [0.0, 0.0]


@dataclass(eq=False)
class Widget:
    """A node of the UI tree; computed vectors are ``[x, y]`` indexed by Axis."""

    id: str = ""
    text: str = ""
    flags: WidgetFlags = WidgetFlags.NONE
    parent: Optional[Widget] = None
    size: tuple[Size, Size] = (Size(), Size())
    computed_relative_position: list[float] = field(default_factory=_zero_vec)
    computed_absolute_position: list[float] = field(default_factory=_zero_vec)
    computed_size: list[float] = field(default_factory=_zero_vec)
    last_touched: int = 0
    render_func: Optional[RenderFunc] = None
    bg: Vec4 = (0.0, 0.0, 0.0, 0.0)
    fg: Vec4 = (0.0, 0.0, 0.0, 0.0)
    font: Optional[Font] = None
    font_size: int = 0
    flow: Axis = Axis.HORIZONTAL
    text_align: TextAlign = TextAlign.LEFT
    _children: list[Widget] = field(default_factory=list, init=False, repr=False)

    def children(self) -> tuple[Widget, ...]:
        """The children in the order they were added."""
        return tuple(self._children)

    def add_child(self, child: Widget) -> None:
        """Append ``child`` as the last child and make this widget its parent."""
        if child is self:
            raise ValueError("a widget cannot be its own child")
        child.parent = self
        self._children.append(child)

    def equip_render_func(self, func: Optional[RenderFunc]) -> None:
        """Set a callback drawn after the widget's own background and text."""
        self.render_func = func

    def is_floating(self, axis: Axis) -> bool:
        """Whether the widget is positioned freely on ``axis``."""
        return bool(self.flags & (WidgetFlags.FLOATING_X << Axis(axis)))