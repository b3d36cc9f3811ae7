"""Fonts rasterised on demand into per-size glyph atlases."""

from __future__ import annotations

import io
import itertools
import math
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace

from PIL import Image, ImageDraw, ImageFont

from quadui.atlas import QuadtreeAtlas

Vec2 = tuple[float, float]
UVs = tuple[Vec2, Vec2]

INITIAL_ATLAS_SIZE = 256


@dataclass(frozen=True)
class Glyph:
    """A glyph as seen by the renderer; ``uv`` is (top-left, bottom-right)."""

    size: Vec2
    offset: Vec2
    advance: float
    uv: UVs = ((0.0, 0.0), (0.0, 0.0))


@dataclass(frozen=True)
class FontMetrics:
    ascent: float
    descent: float
    linegap: float


@dataclass(frozen=True)
class ProviderGlyph:
    """A rasterised glyph as produced by a glyph provider."""

    bitmap: bytes
    bitmap_size: tuple[int, int]
    size: Vec2
    offset: Vec2
    advance: float


class GlyphProvider(ABC):
    """Source of glyph bitmaps and metrics for one font face."""

    @abstractmethod
    def glyph_index(self, codepoint: int) -> int: ...

    @abstractmethod
    def glyph(self, glyph_index: int, size: int) -> ProviderGlyph: ...

    @abstractmethod
    def metrics(self, size: int) -> FontMetrics: ...

    @abstractmethod
    def kerning(self, left_glyph: int, right_glyph: int, size: int) -> float: ...


class PillowProvider(GlyphProvider):
    """Glyph provider rendering TrueType fonts through Pillow.

    ``size`` is a pixel height: ascent plus descent of the font at that size.
    Glyph indices are the codepoints themselves.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = os.fspath(path)
        with open(self._path, "rb") as handle:
            self._data = handle.read()
        self._fonts: dict[int, ImageFont.FreeTypeFont] = {}
        try:
            ImageFont.truetype(io.BytesIO(self._data), 16)
        except OSError as exc:
            raise ValueError(f"cannot load font '{self._path}': {exc}") from exc

    def _font(self, size: int) -> ImageFont.FreeTypeFont:
        font = self._fonts.get(size)
        if font is None:
            probe = ImageFont.truetype(io.BytesIO(self._data), size)
            ascent, descent = probe.getmetrics()
            total = ascent + descent
            em = max(1, round(size * size / total)) if total > 0 else size
            font = probe if em == size else ImageFont.truetype(io.BytesIO(self._data), em)
            self._fonts[size] = font
        return font

    def glyph_index(self, codepoint: int) -> int:
        return codepoint

    def glyph(self, glyph_index: int, size: int) -> ProviderGlyph:
        font = self._font(size)
        char = chr(glyph_index)
        advance = math.floor(font.getlength(char))
        x0, y0, x1, y1 = font.getbbox(char, anchor="ls")
        width, height = max(0, x1 - x0), max(0, y1 - y0)
        if width and height:
            image = Image.new("L", (width, height), 0)
            ImageDraw.Draw(image).text((-x0, -y0), char, fill=255, font=font, anchor="ls")
            bitmap = image.tobytes()
        else:
            width = height = 0
            bitmap = b""
        return ProviderGlyph(
            bitmap=bitmap,
            bitmap_size=(width, height),
            size=(float(width), float(height)),
            offset=(float(x0), float(y0)),
            advance=float(advance),
        )

    def metrics(self, size: int) -> FontMetrics:
        font = self._font(size)
        ascent, descent = font.getmetrics()
        linegap = max(0, font.font.height - ascent - descent)
        return FontMetrics(ascent=float(ascent), descent=float(-descent), linegap=float(linegap))

    def kerning(self, left_glyph: int, right_glyph: int, size: int) -> float:
        font = self._font(size)
        left, right = chr(left_glyph), chr(right_glyph)
        kern = font.getlength(left + right) - font.getlength(left) - font.getlength(right)
        return float(math.floor(kern))


_texture_ids = itertools.count(1)


@dataclass(eq=False)
class AtlasTexture:
    """Single-channel texture holding the packed glyphs of one font size.

    ``generation`` increases whenever the pixels change.
    """

    atlas: QuadtreeAtlas
    id: int = field(default_factory=lambda: next(_texture_ids))
    generation: int = 0

    @property
    def width(self) -> int:
        return self.atlas.width

    @property
    def height(self) -> int:
        return self.atlas.height

    @property
    def pixels(self) -> bytearray:
        return self.atlas.bitmap


def calculate_uvs(pos: tuple[int, int], size: tuple[int, int], atlas_size: tuple[int, int]) -> UVs:
    """Normalised (top-left, bottom-right) texture coordinates of a region."""
    x, y = pos
    w, h = size
    aw, ah = atlas_size
    return ((x / aw, y / ah), ((x + w) / aw, (y + h) / ah))


@dataclass
class _GlyphEntry:
    glyph: Glyph
    bitmap: bytes
    bitmap_size: tuple[int, int]


@dataclass
class _SizedFont:
    size: int
    texture: AtlasTexture
    metrics: FontMetrics
    glyphs: dict[int, _GlyphEntry] = field(default_factory=dict)


def _codepoint(char: int | str) -> int:
    return ord(char) if isinstance(char, str) else char


class Font:
    """A font face with one glyph atlas per pixel size."""

    def __init__(self, provider: GlyphProvider) -> None:
        self._provider = provider
        self._sizes: dict[int, _SizedFont] = {}
        self.size = 0

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> Font:
        return cls(PillowProvider(path))

    def set_size(self, size: int) -> None:
        """Select the current size, creating its atlas on first use."""
        self.size = size
        if size not in self._sizes:
            self._sizes[size] = _SizedFont(
                size=size,
                texture=AtlasTexture(QuadtreeAtlas(INITIAL_ATLAS_SIZE, INITIAL_ATLAS_SIZE)),
                metrics=self._provider.metrics(size),
            )

    def _current(self) -> _SizedFont:
        try:
            return self._sizes[self.size]
        except KeyError:
            raise LookupError(f"font of size {self.size} hasn't been created") from None

    def glyph(self, codepoint: int | str) -> Glyph:
        sized = self._current()
        index = self._provider.glyph_index(_codepoint(codepoint))
        entry = sized.glyphs.get(index)
        if entry is not None:
            return entry.glyph

        raster = self._provider.glyph(index, sized.size)
        bitmap = bytes(raster.bitmap)
        width, height = raster.bitmap_size
        node = sized.texture.atlas.insert(width, height)
        while node is None:
            self._expand(sized)
            node = sized.texture.atlas.insert(width, height)

        atlas = sized.texture.atlas
        atlas.blit(node, bitmap, width, height)
        sized.texture.generation += 1

        glyph = Glyph(
            size=raster.size,
            offset=raster.offset,
            advance=raster.advance,
            uv=calculate_uvs(node.pos, (int(raster.size[0]), int(raster.size[1])), atlas.size),
        )
        sized.glyphs[index] = _GlyphEntry(glyph, bitmap, raster.bitmap_size)
        return glyph

    def _expand(self, sized: _SizedFont) -> None:
        width = sized.texture.width * 2
        height = sized.texture.height * 2
        while True:
            packer = QuadtreeAtlas(width, height)
            placed = [(entry, packer.insert(*entry.bitmap_size)) for entry in sized.glyphs.values()]
            if all(node is not None for _, node in placed):
                break
            width *= 2
            height *= 2

        for entry, node in placed:
            packer.blit(node, entry.bitmap, *entry.bitmap_size)
            entry.glyph = replace(entry.glyph, uv=calculate_uvs(node.pos, node.size, packer.size))

        sized.texture.atlas = packer
        sized.texture.generation += 1

    def atlas(self) -> AtlasTexture:
        return self._current().texture

    def metrics(self) -> FontMetrics:
        return self._current().metrics

    def kerning(self, left: int | str, right: int | str) -> float:
        left_glyph = self._provider.glyph_index(_codepoint(left))
        right_glyph = self._provider.glyph_index(_codepoint(right))
        return float(self._provider.kerning(left_glyph, right_glyph, self.size))

    def measure(self, text: str) -> Vec2:
        """Width and height of ``text`` at the current size."""
        metrics = self.metrics()
        width = 0.0
        for char, following in itertools.zip_longest(text, text[1:]):
            width += self.glyph(char).advance
            if following is not None:
                width += self.kerning(char, following)
        return (width, metrics.ascent - metrics.descent)