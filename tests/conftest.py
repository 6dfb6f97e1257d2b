"""Shared fixtures: a controllable clock and recording audio collaborators."""

import random

import pytest

from glyphs import GlyphDictionary
from sequencer import Scheduler, WordSequencer
from stroke_engine import CoordinateMapper, StrokeTracker


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class RecordingAudio:
    def __init__(self):
        self.letters = []

    def play_letter_audio(self, char):
        self.letters.append(char)


class RecordingNarrator(RecordingAudio):
    """Accepts speech and keeps the completion callback for the test to fire."""

    def __init__(self, available: bool = True):
        super().__init__()
        self.available = available
        self.spoken = []
        self.callbacks = []

    def speak(self, text, on_done):
        self.spoken.append(text)
        self.callbacks.append(on_done)
        return self.available


HI_PACK = {
    "H": [{"type": "line", "start": [20, 0], "end": [20, 100]}],
    "i": [{"type": "line", "start": [50, 50], "end": [50, 100]}],
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mapper():
    return CoordinateMapper(960, 720)


@pytest.fixture
def wide_mapper():
    # Neighbouring samples land further apart than the hit radius
    return CoordinateMapper(2000, 2500)


@pytest.fixture
def make_sequencer(clock, mapper):
    def factory(pack=None, **kwargs):
        glyphs = GlyphDictionary(packs=[pack if pack is not None else HI_PACK],
                                 include_builtin=False)
        kwargs.setdefault("rng", random.Random(7))
        return WordSequencer(glyphs, StrokeTracker(mapper), Scheduler(clock), **kwargs)

    return factory


def trace_letter(sequencer):
    """Walk every stroke of the active letter point by point."""
    mapper = sequencer.tracker.mapper
    for stroke in list(sequencer.session.strokes):
        for x, y in mapper.to_pixels_array(stroke):
            sequencer.handle_point((x, y))


@pytest.fixture
def trace():
    return trace_letter


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def narrator():
    return RecordingNarrator()
