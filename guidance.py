"""
Guidance & Frame Composition
- Hint geometry per guidance mode (faint path, ghost dot, pulsing target)
- Full per-frame draw list: paper lines, guides, traced ink, hints, particles
- Everything here is computed from state; nothing here mutates the tracker
"""

import enum
import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

import config
from stroke_engine import CoordinateMapper, GuidanceMode, LetterSession

Color = Tuple[int, int, int]


class PrimitiveKind(str, enum.Enum):
    PATH = "path"
    DOT = "dot"


@dataclass
class DrawPrimitive:
    """One thing for the renderer to draw, already in pixel coordinates."""

    kind: PrimitiveKind
    points: np.ndarray
    color: Color
    width: float = 1.0
    radius: float = 0.0
    alpha: float = 1.0
    dash: Optional[Tuple[int, int]] = None
    outline: Optional[Color] = None
    role: str = ""


def _path(points, color, width, role, dash=None, alpha=1.0) -> DrawPrimitive:
    return DrawPrimitive(PrimitiveKind.PATH, np.asarray(points, dtype=np.float64),
                         color, width=width, dash=dash, alpha=alpha, role=role)


def _dot(center, color, radius, role, alpha=1.0, outline=None, width=1.0) -> DrawPrimitive:
    return DrawPrimitive(PrimitiveKind.DOT, np.asarray([center], dtype=np.float64),
                         color, radius=radius, alpha=alpha, outline=outline,
                         width=width, role=role)


# ===============================
# Animation timing
# ===============================

class GhostClock:
    """Repeating 0..1 phase for the ghost dot, driven by elapsed time."""

    def __init__(self, cycle: float = config.GHOST_CYCLE_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.cycle = cycle
        self.clock = clock
        self.start_time = clock()

    def phase(self, now: Optional[float] = None) -> float:
        if now is None:
            now = self.clock()
        return ((now - self.start_time) % self.cycle) / self.cycle

    def reset(self):
        self.start_time = self.clock()


def pulse_radius(now: float) -> float:
    """Pulsing marker radius; follows wall-clock time, not frame count."""
    return config.PULSE_BASE_RADIUS_PX + math.sin(
        now * 1000.0 / config.PULSE_PERIOD_MS) * config.PULSE_AMPLITUDE_PX


def ghost_position(pts: np.ndarray, phase: float) -> np.ndarray:
    """Point at fraction `phase` of the way through a stroke's samples."""
    phase = phase % 1.0
    float_idx = phase * (len(pts) - 1)
    idx = int(math.floor(float_idx))
    if idx >= len(pts) - 1:
        return pts[-1].copy()
    t = float_idx - idx
    return pts[idx] + (pts[idx + 1] - pts[idx]) * t


# ===============================
# Guidance Engine
# ===============================

def render(session: Optional[LetterSession], mode, phase: float,
           mapper: CoordinateMapper, now: Optional[float] = None) -> List[DrawPrimitive]:
    """
    Hint primitives for the current letter.

    off        -> nothing
    loose      -> faint path for every unfinished stroke
    strict     -> faint path for every stroke + pulsing marker on the next target point
    ghost_plus -> strict + a ghost dot sweeping the active stroke
    """
    mode = GuidanceMode.parse(mode)
    if session is None or mode is GuidanceMode.OFF:
        return []

    active = session.first_pending()
    if active is None:
        return []

    if mode is GuidanceMode.LOOSE:
        guided = session.pending_indices()
    else:
        guided = range(len(session.strokes))

    prims = []
    for idx in guided:
        prims.extend(guide_path(mapper.to_pixels_array(session.strokes[idx])))

    if mode is GuidanceMode.LOOSE:
        return prims

    pts = mapper.to_pixels_array(session.strokes[active])
    if mode is GuidanceMode.GHOST_PLUS:
        prims.append(_dot(ghost_position(pts, phase), config.UI_COLORS["ghost"],
                          config.GHOST_RADIUS_PX, "ghost", alpha=config.GHOST_ALPHA))

    if now is None:
        now = time.time()
    target = pts[session.states[active].progress_index]
    prims.append(_dot(target, config.UI_COLORS["pulse"], pulse_radius(now), "pulse",
                      outline=config.UI_COLORS["pulse_outline"], width=2))
    return prims


def guide_path(pts: np.ndarray) -> List[DrawPrimitive]:
    """Wide light band with a thin dashed centre line."""
    return [
        _path(pts, config.UI_COLORS["guide_band"], config.GUIDE_BAND_WIDTH, "guide"),
        _path(pts, config.UI_COLORS["guide_center"], config.GUIDE_CENTER_WIDTH,
              "guide", dash=config.GUIDE_DASH),
    ]


def paper_lines(mapper: CoordinateMapper) -> List[DrawPrimitive]:
    """Top line, dashed midline and baseline across the whole viewport."""
    prims = []
    for plane_y, color, dash in ((0, "paper_line", None),
                                 (50, "paper_mid", config.PAPER_MID_DASH),
                                 (100, "paper_line", None)):
        y = mapper.to_pixels((0, plane_y)).y
        prims.append(_path([(0, y), (mapper.width, y)], config.UI_COLORS[color],
                           config.PAPER_LINE_WIDTH, "paper", dash=dash))
    return prims


def ink_paths(session: Optional[LetterSession], mapper: CoordinateMapper) -> List[DrawPrimitive]:
    """Traced part of each stroke, up to its progress index."""
    if session is None:
        return []
    prims = []
    for stroke, state in zip(session.strokes, session.states):
        if state.progress_index > 0:
            pts = mapper.to_pixels_array(stroke[:state.progress_index])
            prims.append(_path(pts, config.UI_COLORS["ink"], config.INK_WIDTH, "ink"))
    return prims


def frame_primitives(session: Optional[LetterSession], mode, phase: float,
                     mapper: CoordinateMapper, now: Optional[float] = None,
                     user_stroke: Optional[Sequence[Tuple[float, float]]] = None,
                     particles: Optional["ParticleBurst"] = None) -> List[DrawPrimitive]:
    """Everything the renderer needs for one frame, back to front."""
    hints = render(session, mode, phase, mapper, now)
    prims = paper_lines(mapper)
    prims.extend(p for p in hints if p.role == "guide")
    prims.extend(ink_paths(session, mapper))
    prims.extend(p for p in hints if p.role != "guide")
    if user_stroke and len(user_stroke) >= 2:
        prims.append(_path(user_stroke, config.UI_COLORS["user_stroke"],
                           config.USER_STROKE_WIDTH, "user"))
    if particles is not None:
        prims.extend(particles.primitives())
    return prims


# ===============================
# Celebration particles
# ===============================

@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: float
    color: Color


class ParticleBurst:
    """Confetti burst for word completion. Stepped once per frame."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.particles: List[Particle] = []

    @property
    def active(self) -> bool:
        return bool(self.particles)

    def spawn(self, x: float, y: float, count: int = config.PARTICLE_COUNT):
        colors = config.UI_COLORS["particles"]
        for _ in range(count):
            vx, vy = (self.rng.random(2) - 0.5) * config.PARTICLE_SPEED
            color = colors[int(self.rng.integers(len(colors)))]
            self.particles.append(Particle(x, y, float(vx), float(vy), 1.0, color))

    def step(self):
        for p in self.particles:
            p.x += p.vx
            p.y += p.vy
            p.life -= config.PARTICLE_DECAY
            p.vy += config.PARTICLE_GRAVITY
        self.particles = [p for p in self.particles if p.life > 0]

    def clear(self):
        self.particles = []

    def primitives(self) -> List[DrawPrimitive]:
        return [_dot((p.x, p.y), p.color, config.PARTICLE_RADIUS_PX, "particle",
                     alpha=max(0.0, min(1.0, p.life)))
                for p in self.particles]
