import pytest

from quadui.font import (
    Font,
    FontMetrics,
    GlyphProvider,
    PillowProvider,
    ProviderGlyph,
    calculate_uvs,
)

KERN_AV = -2.0


class FakeProvider(GlyphProvider):
    def __init__(self, side=6, advance=7.0):
        self.side = side
        self.advance = advance
        self.glyph_calls = []

    def glyph_index(self, codepoint):
        return codepoint

    def glyph(self, glyph_index, size):
        self.glyph_calls.append((glyph_index, size))
        s = self.side
        return ProviderGlyph(
            bitmap=bytes([glyph_index % 256]) * (s * s),
            bitmap_size=(s, s),
            size=(float(s), float(s)),
            offset=(1.0, -float(s)),
            advance=self.advance,
        )

    def metrics(self, size):
        return FontMetrics(ascent=float(size), descent=-float(size) / 4, linegap=0.0)

    def kerning(self, left_glyph, right_glyph, size):
        return KERN_AV if (left_glyph, right_glyph) == (ord("A"), ord("V")) else 0.0


def make_font(**kwargs):
    provider = FakeProvider(**kwargs)
    font = Font(provider)
    font.set_size(24)
    return font, provider


def test_calculate_uvs_scales_by_atlas():
    (u0, v0), (u1, v1) = calculate_uvs((64, 32), (32, 64), (256, 128))
    assert u0 * 256 == 64 and v0 * 128 == 32
    assert u1 * 256 == 64 + 32 and v1 * 128 == 32 + 64


def test_glyph_requires_size():
    font = Font(FakeProvider())
    with pytest.raises(LookupError):
        font.glyph("A")
    with pytest.raises(LookupError):
        font.metrics()
    with pytest.raises(LookupError):
        font.atlas()


def test_glyph_is_cached():
    font, provider = make_font()
    first = font.glyph("A")
    second = font.glyph(ord("A"))
    assert first == second
    assert provider.glyph_calls == [(ord("A"), 24)]


def test_glyph_fields_come_from_provider():
    font, provider = make_font(side=8, advance=9.0)
    glyph = font.glyph("B")
    assert glyph.size == (8.0, 8.0)
    assert glyph.advance == 9.0
    assert glyph.offset == (1.0, -8.0)


def test_glyph_pixels_land_at_uv():
    font, _ = make_font(side=6)
    glyph = font.glyph("C")
    atlas = font.atlas()
    x = round(glyph.uv[0][0] * atlas.width)
    y = round(glyph.uv[0][1] * atlas.height)
    assert (glyph.uv[1][0] - glyph.uv[0][0]) * atlas.width == pytest.approx(6)
    for row in range(6):
        start = x + (y + row) * atlas.width
        assert atlas.pixels[start:start + 6] == bytes([ord("C")]) * 6


def test_atlas_expands_and_keeps_glyphs():
    font, _ = make_font(side=100)
    initial = font.atlas()
    initial_width = initial.width
    chars = "ABCDEFGHIJ"
    for ch in chars:
        font.glyph(ch)
    atlas = font.atlas()
    assert atlas is initial
    assert atlas.width > initial_width
    assert atlas.width == atlas.height
    for ch in chars:
        glyph = font.glyph(ch)
        for u, v in glyph.uv:
            assert 0.0 <= u <= 1.0 and 0.0 <= v <= 1.0
        x = round(glyph.uv[0][0] * atlas.width)
        y = round(glyph.uv[0][1] * atlas.height)
        for row in (0, 99):
            start = x + (y + row) * atlas.width
            assert atlas.pixels[start:start + 100] == bytes([ord(ch)]) * 100


def test_each_size_has_its_own_atlas():
    font, _ = make_font()
    small = font.atlas()
    font.set_size(48)
    large = font.atlas()
    assert small.id != large.id
    assert font.metrics().ascent == 48.0
    font.set_size(24)
    assert font.atlas() is small


def test_kerning_uses_current_size():
    font, _ = make_font()
    assert font.kerning("A", "V") == KERN_AV
    assert font.kerning("V", "A") == 0.0


def test_measure_sums_advances_and_kerning():
    font, provider = make_font(advance=7.0)
    width, height = font.measure("AV")
    metrics = font.metrics()
    assert width == 2 * provider.advance + KERN_AV
    assert height == metrics.ascent - metrics.descent


def test_measure_empty_string():
    font, _ = make_font()
    width, height = font.measure("")
    assert width == 0.0
    assert height == font.metrics().ascent - font.metrics().descent


def test_generation_increases_on_new_glyph():
    font, _ = make_font()
    before = font.atlas().generation
    font.glyph("Z")
    after = font.atlas().generation
    font.glyph("Z")
    assert after > before
    assert font.atlas().generation == after


def test_pillow_provider_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        PillowProvider(tmp_path / "missing.ttf")


def test_pillow_provider_invalid_data(tmp_path):
    path = tmp_path / "broken.ttf"
    path.write_bytes(b"this is not a font file at all")
    with pytest.raises(ValueError):
        Font.from_file(path)