"""
Stroke Geometry & Tracing Engine
- Expands declarative stroke instructions into sample points
- Maps the 0-100 letter plane to device pixels
- Tracks traced progress per stroke with tolerance-based matching
"""

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

import config

logger = logging.getLogger(__name__)


class Point(NamedTuple):
    x: float
    y: float


class GuidanceMode(str, enum.Enum):
    """Hint policy. Only LOOSE changes matching (stroke order is relaxed)."""

    OFF = "off"
    LOOSE = "loose"
    GHOST_PLUS = "ghost_plus"
    STRICT = "strict"

    @classmethod
    def parse(cls, value) -> "GuidanceMode":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


# ===============================
# Stroke Instructions
# ===============================

class ArcDirection(str, enum.Enum):
    CW = "cw"
    CCW = "ccw"


@dataclass(frozen=True)
class Line:
    start: Tuple[float, float]
    end: Tuple[float, float]


@dataclass(frozen=True)
class Arc:
    """Elliptical arc. Angles in degrees, measured in the y-down plane."""

    center: Tuple[float, float]
    radius_x: float
    radius_y: float
    start_angle: float
    end_angle: float
    direction: ArcDirection = ArcDirection.CW


@dataclass(frozen=True)
class Composite:
    parts: Tuple["StrokeInstruction", ...]

    def __post_init__(self):
        object.__setattr__(self, "parts", tuple(self.parts))
        if not self.parts:
            raise ValueError("composite stroke needs at least one part")


@dataclass(frozen=True)
class Points:
    """Pre-expanded stroke, used as authored."""

    points: Tuple[Tuple[float, float], ...]

    def __post_init__(self):
        object.__setattr__(
            self, "points", tuple((float(x), float(y)) for x, y in self.points)
        )
        if not self.points:
            raise ValueError("pre-expanded stroke needs at least one point")


StrokeInstruction = Union[Line, Arc, Composite, Points]


# ===============================
# Geometry Generator
# ===============================

def generate(instruction: StrokeInstruction,
             density: float = config.STROKE_DENSITY) -> np.ndarray:
    """
    Expand an instruction into an (n, 2) array of plane points, n >= 2.
    Points run along the stroke's traversal direction.
    """
    pts = _generate(instruction, density)
    if len(pts) < 2:
        pts = np.vstack([pts, pts[-1:]])
    return pts


def _generate(instruction: StrokeInstruction, density: float) -> np.ndarray:
    if isinstance(instruction, Line):
        return _line_points(instruction, density)
    if isinstance(instruction, Arc):
        return _arc_points(instruction, density)
    if isinstance(instruction, Composite):
        return np.vstack([_generate(part, density) for part in instruction.parts])
    if isinstance(instruction, Points):
        return np.asarray(instruction.points, dtype=np.float64).reshape(-1, 2)
    raise TypeError(f"Unknown stroke instruction: {instruction!r}")


def _step_count(length: float, density: float) -> int:
    # At least one step so degenerate input still yields both endpoints
    if not math.isfinite(length) or not math.isfinite(density) or density <= 0:
        logger.warning("Cannot sample stroke of length %r at density %r", length, density)
        return 1
    return max(1, int(math.ceil(length / density)))


def _line_points(line: Line, density: float) -> np.ndarray:
    start = np.asarray(line.start, dtype=np.float64)
    end = np.asarray(line.end, dtype=np.float64)
    steps = _step_count(float(np.linalg.norm(end - start)), density)
    t = np.linspace(0.0, 1.0, steps + 1)[:, None]
    return start + (end - start) * t


def _arc_points(arc: Arc, density: float) -> np.ndarray:
    is_ccw = ArcDirection(arc.direction) is ArcDirection.CCW
    delta = arc.end_angle - arc.start_angle
    sweep = abs(delta)
    if sweep == 0 and is_ccw:
        # Zero ccw sweep is authored shorthand for a full circle
        sweep = 360.0
        delta = -360.0

    # Mean radius stands in for the true elliptic arc length
    mean_radius = (abs(arc.radius_x) + abs(arc.radius_y)) / 2.0
    steps = _step_count(sweep / 180.0 * math.pi * mean_radius, density)

    factors = np.linspace(0.0, 1.0, steps + 1)
    if is_ccw:
        factors = factors[::-1]
    theta = np.radians(arc.start_angle + delta * factors)
    cx, cy = arc.center
    pts = np.column_stack([
        cx + arc.radius_x * np.cos(theta),
        cy + arc.radius_y * np.sin(theta),
    ])
    if is_ccw:
        pts = pts[::-1]
    return pts


# ===============================
# Coordinate Mapper
# ===============================

def letter_box(width: float, height: float) -> Tuple[float, float, float, float]:
    """Centered letter box (offset_x, offset_y, box_w, box_h) for a viewport."""
    width = max(float(width), config.MIN_VIEWPORT_PX)
    height = max(float(height), config.MIN_VIEWPORT_PX)

    box_w = width - 2 * config.LETTER_PADDING_PX
    box_h = box_w / config.LETTER_ASPECT_RATIO
    if box_h > height - config.LETTER_VERTICAL_MARGIN_PX:
        box_h = height - config.LETTER_VERTICAL_MARGIN_PX
        box_w = box_h * config.LETTER_ASPECT_RATIO

    return (width - box_w) / 2, (height - box_h) / 2, box_w, box_h


def to_pixels(point: Sequence[float], width: float, height: float) -> Point:
    """Map a plane point (0-100 per axis) into viewport pixels."""
    x0, y0, box_w, box_h = letter_box(width, height)
    return Point(x0 + point[0] / 100.0 * box_w, y0 + point[1] / 100.0 * box_h)


class CoordinateMapper:
    """to_pixels bound to the current viewport; shared by renderer and tracker."""

    def __init__(self, width: float = config.WINDOW_WIDTH,
                 height: float = config.WINDOW_HEIGHT):
        self.resize(width, height)

    def resize(self, width: float, height: float):
        self.width = width
        self.height = height
        self.offset_x, self.offset_y, self.box_w, self.box_h = letter_box(width, height)

    def to_pixels(self, point: Sequence[float]) -> Point:
        return Point(self.offset_x + point[0] / 100.0 * self.box_w,
                     self.offset_y + point[1] / 100.0 * self.box_h)

    def to_pixels_array(self, pts: np.ndarray) -> np.ndarray:
        pts = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
        scale = np.array([self.box_w, self.box_h]) / 100.0
        return pts * scale + np.array([self.offset_x, self.offset_y])

    def to_plane(self, pixel: Sequence[float]) -> Point:
        return Point((pixel[0] - self.offset_x) / self.box_w * 100.0,
                     (pixel[1] - self.offset_y) / self.box_h * 100.0)


# ===============================
# Stroke Tracker
# ===============================

@dataclass
class StrokeState:
    progress_index: int = 0
    done: bool = False


@dataclass
class LetterSession:
    """Strokes of the loaded letter and their parallel progress states."""

    strokes: List[np.ndarray]
    states: List[StrokeState] = field(default_factory=list)
    completion_reported: bool = False

    @classmethod
    def from_strokes(cls, strokes: Sequence[np.ndarray]) -> "LetterSession":
        arrays = [np.asarray(s, dtype=np.float64).reshape(-1, 2) for s in strokes]
        if not arrays:
            raise ValueError("a letter needs at least one stroke")
        for i, stroke in enumerate(arrays):
            if len(stroke) < 2:
                raise ValueError(f"stroke {i} has fewer than 2 points")
        return cls(strokes=arrays, states=[StrokeState() for _ in arrays])

    def first_pending(self) -> Optional[int]:
        for i, state in enumerate(self.states):
            if not state.done:
                return i
        return None

    def pending_indices(self) -> List[int]:
        return [i for i, state in enumerate(self.states) if not state.done]

    @property
    def is_complete(self) -> bool:
        return all(state.done for state in self.states)


class CheckResult(NamedTuple):
    advanced: bool
    letter_complete: bool


class StrokeTracker:
    """Advances stroke progress from input points given in device pixels."""

    def __init__(self, mapper: CoordinateMapper,
                 hit_radius: float = config.HIT_RADIUS_PX,
                 lookahead: int = config.MATCH_LOOKAHEAD):
        self.mapper = mapper
        self.hit_radius = hit_radius
        self.lookahead = lookahead
        self.session: Optional[LetterSession] = None

    def load(self, strokes: Sequence[np.ndarray]) -> LetterSession:
        self.session = LetterSession.from_strokes(strokes)
        return self.session

    def clear(self):
        self.session = None

    def reset(self):
        """Restart the loaded letter from scratch."""
        if self.session is not None:
            self.session = LetterSession.from_strokes(self.session.strokes)

    def active_stroke_index(self) -> Optional[int]:
        if self.session is None:
            return None
        return self.session.first_pending()

    def check_point(self, position: Sequence[float], mode) -> CheckResult:
        session = self.session
        if session is None:
            return CheckResult(False, False)

        if GuidanceMode.parse(mode) is GuidanceMode.LOOSE:
            indices = session.pending_indices()
        else:
            first = session.first_pending()
            indices = [] if first is None else [first]

        advanced = False
        for idx in indices:
            if self._advance(idx, position):
                advanced = True

        letter_complete = False
        if session.is_complete and not session.completion_reported:
            session.completion_reported = True
            letter_complete = True
        return CheckResult(advanced, letter_complete)

    def _advance(self, idx: int, position: Sequence[float]) -> bool:
        stroke = self.session.strokes[idx]
        state = self.session.states[idx]
        p = state.progress_index
        last = min(p + self.lookahead, len(stroke) - 1)

        targets = self.mapper.to_pixels_array(stroke[p:last + 1])
        dists = np.hypot(targets[:, 0] - position[0], targets[:, 1] - position[1])
        hits = np.flatnonzero(dists < self.hit_radius)
        if hits.size == 0:
            return False

        state.progress_index = max(state.progress_index, p + int(hits[0]) + 1)
        if state.progress_index >= len(stroke):
            state.progress_index = len(stroke)
            state.done = True
            logger.debug("Stroke %d done", idx)
        return True
