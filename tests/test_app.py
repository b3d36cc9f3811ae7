from quadui.app import DemoState, FrameClock, build_frame, main
from quadui.context import UIContext
from quadui.font import Font, FontMetrics, GlyphProvider, ProviderGlyph
from quadui.renderer import Renderer
from quadui.widget import (
    Axis,
    ButtonState,
    Mouse,
    MouseButton,
    StyleDefaults,
    size_children,
)


class FixedProvider(GlyphProvider):
    def glyph_index(self, codepoint):
        return codepoint

    def glyph(self, glyph_index, size):
        return ProviderGlyph(
            bitmap=bytes(32),
            bitmap_size=(4, 8),
            size=(4.0, 8.0),
            offset=(0.0, -8.0),
            advance=10.0,
        )

    def metrics(self, size):
        return FontMetrics(ascent=8.0, descent=-2.0, linegap=0.0)

    def kerning(self, left_glyph, right_glyph, size):
        return 0.0


def make_ui():
    defaults = StyleDefaults(
        width=size_children(1.0),
        height=size_children(1.0),
        bg=(1.0, 1.0, 1.0, 1.0),
        fg=(1.0, 1.0, 1.0, 1.0),
        font=Font(FixedProvider()),
        font_size=24,
        flow=Axis.VERTICAL,
    )
    return UIContext(defaults)


def walk(widget):
    yield widget
    for child in widget.children():
        yield from walk(child)


def run_frame(ui, state, mouse, fps=0, dt=0.0):
    ui.begin(800, 600, mouse)
    container = build_frame(ui, state, fps, dt)
    ui.end()
    return container


def pressed_mouse(pos, clicked=False, delta=(0.0, 0.0)):
    mouse = Mouse(pos=pos, pos_delta=delta)
    mouse.buttons[MouseButton.LEFT] = ButtonState(pressed=True, clicked=clicked)
    return mouse


def test_frame_clock_counts_frames_per_second():
    clock = FrameClock(last=0.0)
    dts = [clock.tick(t) for t in (0.25, 0.5, 0.75)]
    assert dts == [0.25, 0.25, 0.25]
    assert clock.fps == 0
    clock.tick(1.0)
    assert clock.fps == 4
    assert clock.frames == 0
    assert clock.timer == 0.0


def test_build_frame_without_window_has_only_top_bar():
    ui = make_ui()
    container = run_frame(ui, DemoState(), Mouse(), fps=7, dt=0.5)
    assert ui.root.children() == (container,)
    assert container.id == "container"
    texts = [w.text for w in walk(container)]
    assert "FPS: 7" in texts
    assert "Delta Time: 0.5000" in texts
    assert "Show Window" in texts


def test_build_frame_with_window_adds_floating_window():
    ui = make_ui()
    run_frame(ui, DemoState(show_window=True), Mouse())
    window = ui.root.children()[1]
    assert window.text == "Drag me!"
    assert window.id == "Drag me!##window"
    assert window.computed_absolute_position == [128.0, 128.0]


def test_clicking_show_window_button_opens_window():
    ui = make_ui()
    state = DemoState()
    run_frame(ui, state, Mouse())
    assert state.show_window is False
    run_frame(ui, state, pressed_mouse((40.0, 30.0), clicked=True))
    assert state.show_window is True


def test_dragging_bar_moves_window():
    ui = make_ui()
    state = DemoState(show_window=True)
    run_frame(ui, state, Mouse())
    run_frame(ui, state, pressed_mouse((200.0, 150.0), delta=(10.0, 5.0)))
    assert state.window_pos == (138.0, 133.0)
    assert state.show_window is True


def test_slider_value_is_clamped_into_range():
    ui = make_ui()
    state = DemoState()
    run_frame(ui, state, Mouse())
    assert state.slider_value == 5.0


def test_frame_can_be_drawn():
    ui = make_ui()
    run_frame(ui, DemoState(show_window=True), Mouse())
    renderer = Renderer()
    renderer.begin(800, 600)
    ui.draw(renderer)
    vertices = renderer.end()
    assert len(vertices) == renderer.quad_count * 4
    assert renderer.quad_count > 0


def test_main_reports_missing_font(tmp_path):
    assert main(["--font", str(tmp_path / "missing.ttf")]) == 1