import pytest

from quadui.font import Font, FontMetrics, GlyphProvider, ProviderGlyph
from quadui.renderer import (
    MAX_TEXTURES,
    RenderBox,
    Renderer,
    ortho_projection,
    quad_indices,
)

WHITE = (1.0, 1.0, 1.0, 1.0)
ADVANCE = 5.0
OFFSET = (1.0, -3.0)
ASCENT = 8.0


class FakeProvider(GlyphProvider):
    def glyph_index(self, codepoint):
        return codepoint

    def glyph(self, glyph_index, size):
        return ProviderGlyph(
            bitmap=bytes(16), bitmap_size=(4, 4), size=(4.0, 4.0),
            offset=OFFSET, advance=ADVANCE,
        )

    def metrics(self, size):
        return FontMetrics(ascent=ASCENT, descent=-2.0, linegap=0.0)

    def kerning(self, left_glyph, right_glyph, size):
        return 0.0


def apply(matrix, x, y):
    return tuple(
        sum(matrix[col][row] * v for col, v in enumerate((x, y, 0.0, 1.0)))
        for row in range(2)
    )


def test_quad_indices_pattern():
    assert quad_indices(2) == [0, 1, 2, 2, 3, 1, 4, 5, 6, 6, 7, 5]


def test_quad_indices_length_and_negative():
    assert len(quad_indices(10)) == 60
    with pytest.raises(ValueError):
        quad_indices(-1)


def test_ortho_rejects_empty_volume():
    with pytest.raises(ValueError):
        ortho_projection(1.0, 1.0, 1.0, -1.0, 1.0, -1.0)


def test_begin_maps_screen_corners():
    renderer = Renderer()
    renderer.begin(800, 600)
    assert apply(renderer.projection, 0.0, 0.0) == pytest.approx((-1.0, 1.0))
    assert apply(renderer.projection, 800.0, -600.0) == pytest.approx((1.0, -1.0))


def test_begin_rejects_bad_size():
    with pytest.raises(ValueError):
        Renderer().begin(0, 600)


def test_draw_box_vertices():
    renderer = Renderer()
    renderer.begin(100, 100)
    renderer.draw(RenderBox(pos=(10.0, 20.0), size=(4.0, 6.0), color=WHITE))
    verts = renderer.end()
    assert len(verts) == 4
    assert verts[0].pos == (10.0, -20.0)
    assert verts[3].pos == (10.0 + 4.0, -20.0 - 6.0)
    assert verts[0].uv == (0.0, 0.0)
    assert verts[3].uv == (1.0, 1.0)
    assert all(v.texture_index == 0 and v.color == WHITE for v in verts)


def test_draw_custom_uv():
    renderer = Renderer()
    uv = ((0.25, 0.5), (0.75, 1.0))
    renderer.draw(RenderBox(pos=(0.0, 0.0), size=(1.0, 1.0), color=WHITE, uv=uv))
    verts = renderer.end()
    assert [v.uv for v in verts] == [(0.25, 0.5), (0.75, 0.5), (0.25, 1.0), (0.75, 1.0)]


def test_texture_slots_reused_and_assigned():
    renderer = Renderer()
    first, second = object(), object()
    for texture in (first, first, second):
        renderer.draw(RenderBox(pos=(0.0, 0.0), size=(1.0, 1.0), color=WHITE, texture=texture))
    indices = [v.texture_index for v in renderer.end()[::4]]
    assert indices == [1, 1, 2]
    assert renderer.textures == [None, first, second]


def test_too_many_textures():
    renderer = Renderer()
    for _ in range(MAX_TEXTURES - 1):
        renderer.draw(RenderBox(pos=(0.0, 0.0), size=(1.0, 1.0), color=WHITE, texture=object()))
    with pytest.raises(OverflowError):
        renderer.draw(RenderBox(pos=(0.0, 0.0), size=(1.0, 1.0), color=WHITE, texture=object()))


def test_quad_limit_and_reset():
    renderer = Renderer(max_quads=1)
    box = RenderBox(pos=(0.0, 0.0), size=(1.0, 1.0), color=WHITE)
    renderer.draw(box)
    with pytest.raises(OverflowError):
        renderer.draw(box)
    renderer.begin(10, 10)
    assert renderer.quad_count == 0
    renderer.draw(box)
    assert renderer.quad_count == 1


def test_draw_text_places_glyphs():
    font = Font(FakeProvider())
    font.set_size(16)
    renderer = Renderer()
    renderer.draw_text((0.0, 0.0), "ab", font, WHITE)
    verts = renderer.end()
    assert len(verts) == 8
    assert verts[0].pos == (OFFSET[0], -(ASCENT + OFFSET[1]))
    assert verts[4].pos[0] - verts[0].pos[0] == ADVANCE
    assert {v.texture_index for v in verts} == {1}
    assert renderer.textures[1] is font.atlas()