"""Tests for drawing primitives and panels onto a canvas."""

import numpy as np
import pytest

cv2 = pytest.importorskip("cv2")

import config  # noqa: E402
from guidance import DrawPrimitive, PrimitiveKind, frame_primitives  # noqa: E402
from stroke_engine import GuidanceMode, LetterSession, Line, generate  # noqa: E402
from ui_renderer import UIRenderer  # noqa: E402

WHITE = (255, 255, 255)


@pytest.fixture
def renderer():
    return UIRenderer(200, 100)


class TestUIRenderer:
    """Tests for primitive drawing."""

    def test_new_canvas_is_background(self, renderer) -> None:
        canvas = renderer.new_canvas()

        assert canvas.shape == (100, 200, 3)
        assert tuple(canvas[0, 0]) == config.UI_COLORS["background"]

    def test_dot_is_filled(self, renderer) -> None:
        canvas = np.zeros((100, 200, 3), dtype=np.uint8)
        dot = DrawPrimitive(PrimitiveKind.DOT, np.array([[50.0, 50.0]]), WHITE, radius=5)

        renderer.draw_primitives(canvas, [dot])

        assert tuple(canvas[50, 50]) == WHITE
        assert tuple(canvas[50, 80]) == (0, 0, 0)

    def test_solid_path(self, renderer) -> None:
        canvas = np.zeros((100, 200, 3), dtype=np.uint8)
        path = DrawPrimitive(PrimitiveKind.PATH, np.array([[10.0, 20.0], [190.0, 20.0]]),
                             WHITE, width=3)

        renderer.draw_primitives(canvas, [path])

        assert tuple(canvas[20, 100]) == WHITE

    def test_dashed_path_has_gaps(self, renderer) -> None:
        canvas = np.zeros((100, 200, 3), dtype=np.uint8)
        path = DrawPrimitive(PrimitiveKind.PATH, np.array([[0.0, 50.0], [200.0, 50.0]]),
                             WHITE, width=3, dash=(10, 10))

        renderer.draw_primitives(canvas, [path])

        assert tuple(canvas[50, 5]) == WHITE
        assert tuple(canvas[50, 15]) == (0, 0, 0)
        assert tuple(canvas[50, 25]) == WHITE

    def test_single_point_path_draws_blob(self, renderer) -> None:
        canvas = np.zeros((100, 200, 3), dtype=np.uint8)
        path = DrawPrimitive(PrimitiveKind.PATH, np.array([[40.0, 40.0]]), WHITE, width=10)

        renderer.draw_primitives(canvas, [path])

        assert tuple(canvas[40, 40]) == WHITE

    def test_alpha_blends_with_canvas(self, renderer) -> None:
        canvas = np.zeros((100, 200, 3), dtype=np.uint8)
        dot = DrawPrimitive(PrimitiveKind.DOT, np.array([[50.0, 50.0]]), (200, 200, 200),
                            radius=8, alpha=0.5)

        renderer.draw_primitives(canvas, [dot])

        assert tuple(canvas[50, 50]) == (100, 100, 100)

    def test_full_frame_draws(self) -> None:
        renderer = UIRenderer(320, 240)
        from stroke_engine import CoordinateMapper

        mapper = CoordinateMapper(320, 240)
        session = LetterSession.from_strokes([generate(Line((20, 10), (20, 90)))])
        canvas = renderer.new_canvas()

        prims = frame_primitives(session, GuidanceMode.GHOST_PLUS, 0.3, mapper, now=1.0)
        renderer.draw_primitives(canvas, prims)

        assert (canvas != np.array(config.UI_COLORS["background"], dtype=np.uint8)).any()


class TestPanels:
    """Tests for text panels; they should draw without raising."""

    def test_menu(self) -> None:
        renderer = UIRenderer()
        canvas = renderer.new_canvas()

        renderer.draw_menu(canvas, config.DEFAULT_WORDS, 3)

        assert canvas.shape == (config.WINDOW_HEIGHT, config.WINDOW_WIDTH, 3)

    def test_word_progress_empty_word(self, renderer) -> None:
        canvas = renderer.new_canvas()
        before = canvas.copy()

        renderer.draw_word_progress(canvas, "", 0)

        assert np.array_equal(canvas, before)

    def test_message_and_indicator(self) -> None:
        renderer = UIRenderer()
        canvas = renderer.new_canvas()
        before = canvas.copy()

        renderer.draw_message(canvas, "Great job. The word is cat. Way to go")
        renderer.draw_mode_indicator(canvas, "strict")
        renderer.draw_hand_cursor(canvas, (100.0, 100.0), pinching=True)

        assert not np.array_equal(canvas, before)
