"""Tests for pointer densification."""

import math

import pytest

from input_sampler import InputSampler, interpolate
from stroke_engine import GuidanceMode, Line, StrokeTracker, generate


class TestInterpolate:
    """Tests for the interpolation helper."""

    def test_steps_follow_travel_distance(self) -> None:
        points = interpolate((0, 0), (0, 23), 5)

        assert len(points) == 5  # ceil(23 / 5)
        assert points[-1] == (0, 23)

    def test_points_are_evenly_spaced(self) -> None:
        points = interpolate((0, 0), (30, 40), 5)

        gaps = [math.hypot(b[0] - a[0], b[1] - a[1])
                for a, b in zip([(0, 0)] + points, points)]
        assert gaps == pytest.approx([5.0] * 10)

    def test_no_movement_gives_no_points(self) -> None:
        assert interpolate((7, 7), (7, 7), 5) == []


class TestInputSampler:
    """Tests for pointer down / move / up handling."""

    def test_down_checks_the_touched_point(self) -> None:
        seen = []
        sampler = InputSampler(seen.append)

        sampler.pointer_down(10, 20)

        assert seen == [(10.0, 20.0)]
        assert sampler.drawing

    def test_move_feeds_intermediate_points_then_final(self) -> None:
        seen = []
        sampler = InputSampler(seen.append, step=5)
        sampler.pointer_down(0, 0)

        sampler.pointer_move(0, 10)

        assert seen == [(0.0, 0.0), (0.0, 5.0), (0.0, 10.0)]

    def test_move_without_down_is_ignored(self) -> None:
        seen = []
        sampler = InputSampler(seen.append)

        sampler.pointer_move(50, 50)

        assert seen == []

    def test_up_stops_drawing(self) -> None:
        seen = []
        sampler = InputSampler(seen.append)
        sampler.pointer_down(0, 0)
        sampler.pointer_move(3, 4)

        sampler.pointer_up()
        sampler.pointer_move(100, 100)

        assert len(seen) == 2
        assert not sampler.drawing
        assert sampler.current_stroke == []

    def test_current_stroke_keeps_raw_positions(self) -> None:
        sampler = InputSampler(lambda p: None)
        sampler.pointer_down(0, 0)
        sampler.pointer_move(20, 0)
        sampler.pointer_move(20, 20)

        assert sampler.current_stroke == [(0.0, 0.0), (20.0, 0.0), (20.0, 20.0)]

    def test_fast_swipe_does_not_skip_targets(self, mapper) -> None:
        tracker = StrokeTracker(mapper)
        tracker.load([generate(Line((10, 50), (90, 50)))])
        sampler = InputSampler(lambda p: tracker.check_point(p, GuidanceMode.STRICT))
        start = mapper.to_pixels((10, 50))
        end = mapper.to_pixels((90, 50))

        # One raw move covering the whole stroke
        sampler.pointer_down(*start)
        sampler.pointer_move(*end)

        assert tracker.session.states[0].done

    def test_lifting_pointer_keeps_progress(self, mapper) -> None:
        tracker = StrokeTracker(mapper)
        tracker.load([generate(Line((10, 50), (90, 50)))])
        sampler = InputSampler(lambda p: tracker.check_point(p, GuidanceMode.STRICT))
        sampler.pointer_down(*mapper.to_pixels((10, 50)))
        sampler.pointer_move(*mapper.to_pixels((40, 50)))
        progress = tracker.session.states[0].progress_index

        sampler.pointer_up()

        assert progress > 0
        assert tracker.session.states[0].progress_index == progress
