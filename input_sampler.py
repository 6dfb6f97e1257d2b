"""
Pointer input sampling
- Turns pointer down / move / up into a dense stream of checked points
- Interpolates between raw samples so fast swipes can't skip a target
"""

import math
from typing import Callable, List, Optional, Tuple

import config

PixelPoint = Tuple[float, float]


class InputSampler:
    """Feeds every densified pointer position to `on_point` in order."""

    def __init__(self, on_point: Callable[[PixelPoint], object],
                 step: float = config.INTERPOLATION_STEP_PX):
        self.on_point = on_point
        self.step = step
        self.drawing = False
        self.last_pos: Optional[PixelPoint] = None
        # Raw polyline of the current gesture, for drawing live ink
        self.current_stroke: List[PixelPoint] = []

    def pointer_down(self, x: float, y: float):
        self.drawing = True
        self.last_pos = (float(x), float(y))
        self.current_stroke = [self.last_pos]
        self.on_point(self.last_pos)

    def pointer_move(self, x: float, y: float):
        if not self.drawing:
            return
        new_pos = (float(x), float(y))
        if self.last_pos is not None:
            for point in interpolate(self.last_pos, new_pos, self.step):
                self.on_point(point)
        self.last_pos = new_pos
        self.current_stroke.append(new_pos)

    def pointer_up(self):
        """Stop drawing. Traced progress is kept."""
        self.drawing = False
        self.last_pos = None
        self.current_stroke = []


def interpolate(start: PixelPoint, end: PixelPoint, step: float) -> List[PixelPoint]:
    """Evenly spaced points from start (exclusive) to end (inclusive)."""
    dist = math.hypot(end[0] - start[0], end[1] - start[1])
    steps = int(math.ceil(dist / step))
    points = []
    for i in range(1, steps + 1):
        t = i / steps
        points.append((start[0] + (end[0] - start[0]) * t,
                       start[1] + (end[1] - start[1]) * t))
    return points
