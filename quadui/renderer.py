"""Batched quad renderer that builds vertex data for textured boxes and text."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from quadui.font import Font

Vec2 = tuple[float, float]
Vec4 = tuple[float, float, float, float]
Mat4 = tuple[tuple[float, float, float, float], ...]

MAX_QUADS = 4096
MAX_TEXTURES = 32

# Corner offsets of a unit quad: top-left, top-right, bottom-left, bottom-right.
_CORNERS: tuple[Vec2, ...] = ((0.0, 0.0), (1.0, 0.0), (0.0, -1.0), (1.0, -1.0))
_DEFAULT_UV: tuple[Vec2, Vec2] = ((0.0, 0.0), (1.0, 1.0))


@dataclass(frozen=True)
class Vertex:
    pos: Vec2
    uv: Vec2
    color: Vec4
    texture_index: int


@dataclass(frozen=True)
class RenderBox:
    """A box to draw; ``texture`` None means plain colour, ``uv`` None the full texture."""

    pos: Vec2
    size: Vec2
    color: Vec4
    texture: Any = None
    uv: tuple[Vec2, Vec2] | None = None


def quad_indices(quad_count: int) -> list[int]:
    """Triangle indices for ``quad_count`` quads of four vertices each."""
    if quad_count < 0:
        raise ValueError(f"quad count must not be negative, got {quad_count}")
    indices: list[int] = []
    for base in range(0, quad_count * 4, 4):
        indices.extend((base, base + 1, base + 2, base + 2, base + 3, base + 1))
    return indices


def ortho_projection(
    left: float, right: float, top: float, bottom: float, near: float, far: float
) -> Mat4:
    """Orthographic projection matrix as four columns."""
    width, height, depth = right - left, top - bottom, far - near
    if width == 0 or height == 0 or depth == 0:
        raise ValueError("projection volume must not be empty")
    return (
        (2.0 / width, 0.0, 0.0, 0.0),
        (0.0, 2.0 / height, 0.0, 0.0),
        (0.0, 0.0, -2.0 / depth, 0.0),
        (-(right + left) / width, -(top + bottom) / height, -(far + near) / depth, 1.0),
    )


class Renderer:
    """Collects quads for one frame; texture slot 0 is a plain white texture."""

    def __init__(self, max_quads: int = MAX_QUADS) -> None:
        if max_quads <= 0:
            raise ValueError(f"max_quads must be positive, got {max_quads}")
        self.max_quads = max_quads
        self.vertices: list[Vertex] = []
        self.textures: list[Any] = [None]
        self.projection: Mat4 = ortho_projection(-1.0, 1.0, 1.0, -1.0, 1.0, -1.0)
        self.indices = quad_indices(max_quads)

    @property
    def quad_count(self) -> int:
        return len(self.vertices) // 4

    def begin(self, screen_width: int, screen_height: int) -> None:
        """Start a frame for a screen of the given pixel size."""
        if screen_width <= 0 or screen_height <= 0:
            raise ValueError(f"screen size must be positive, got {screen_width}x{screen_height}")
        zoom = screen_height / 2.0
        aspect = screen_width / screen_height
        a, b, c, d = ortho_projection(-aspect * zoom, aspect * zoom, zoom, -zoom, 1.0, -1.0)
        # Move the origin to the top-left corner of the screen.
        self.projection = (a, b, c, (d[0] - 1.0, d[1] + 1.0, d[2], d[3]))
        self.vertices = []
        self.textures = [None]

    def _texture_index(self, texture: Any) -> int:
        if texture is None:
            return 0
        for index, known in enumerate(self.textures[1:], start=1):
            if known is texture:
                return index
        if len(self.textures) >= MAX_TEXTURES:
            raise OverflowError(f"more than {MAX_TEXTURES} textures in one frame")
        self.textures.append(texture)
        return len(self.textures) - 1

    def draw(self, box: RenderBox) -> None:
        """Queue one box, in screen pixels with y growing downwards."""
        if self.quad_count >= self.max_quads:
            raise OverflowError(f"more than {self.max_quads} quads in one frame")
        texture_index = self._texture_index(box.texture)
        (left, top), (right, bottom) = box.uv if box.uv is not None else _DEFAULT_UV
        uvs = ((left, top), (right, top), (left, bottom), (right, bottom))
        x, y = box.pos[0], -box.pos[1]
        width, height = box.size
        for (cx, cy), uv in zip(_CORNERS, uvs):
            self.vertices.append(
                Vertex(
                    pos=(cx * width + x, cy * height + y),
                    uv=uv,
                    color=box.color,
                    texture_index=texture_index,
                )
            )

    def draw_text(self, pos: Vec2, text: str, font: Font, color: Vec4) -> None:
        """Queue one quad per character of ``text``, top-left at ``pos``."""
        metrics = font.metrics()
        x, y = pos[0], pos[1] + metrics.ascent
        atlas = font.atlas()
        for index, char in enumerate(text):
            glyph = font.glyph(char)
            self.draw(
                RenderBox(
                    pos=(math.floor(x + glyph.offset[0]), math.floor(y + glyph.offset[1])),
                    size=glyph.size,
                    color=color,
                    texture=atlas,
                    uv=glyph.uv,
                )
            )
            x += glyph.advance
            if index < len(text) - 1:
                x += font.kerning(char, text[index + 1])

    def end(self) -> list[Vertex]:
        """Finish the frame and return its vertices, ready for upload."""
        return list(self.vertices)