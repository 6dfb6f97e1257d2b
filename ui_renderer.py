"""
UI and Rendering Layer
- Draws engine primitives onto an OpenCV canvas
- Word menu, progress strip, guidance indicator and celebration message
"""

import cv2
import numpy as np
from typing import List, Optional, Sequence, Tuple

import config
from guidance import DrawPrimitive, PrimitiveKind


class UIRenderer:
    """Main UI rendering class."""

    def __init__(self, width: int = config.WINDOW_WIDTH, height: int = config.WINDOW_HEIGHT):
        self.width = width
        self.height = height

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height

    def new_canvas(self) -> np.ndarray:
        canvas = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        canvas[:] = config.UI_COLORS["background"]
        return canvas

    # ----------------------------
    # Primitives
    # ----------------------------

    def draw_primitives(self, canvas: np.ndarray, primitives: Sequence[DrawPrimitive]) -> np.ndarray:
        """Draw primitives in order; later ones land on top."""
        for prim in primitives:
            if prim.alpha < 1.0:
                overlay = canvas.copy()
                self._draw_primitive(overlay, prim)
                cv2.addWeighted(overlay, prim.alpha, canvas, 1 - prim.alpha, 0, canvas)
            else:
                self._draw_primitive(canvas, prim)
        return canvas

    def _draw_primitive(self, canvas: np.ndarray, prim: DrawPrimitive):
        if prim.kind is PrimitiveKind.DOT:
            center = tuple(int(round(v)) for v in prim.points[0])
            radius = max(1, int(round(prim.radius)))
            cv2.circle(canvas, center, radius, prim.color, -1, cv2.LINE_AA)
            if prim.outline is not None:
                cv2.circle(canvas, center, radius, prim.outline,
                           max(1, int(prim.width)), cv2.LINE_AA)
            return

        pts = np.round(prim.points).astype(np.int32)
        thickness = max(1, int(round(prim.width)))
        if len(pts) == 1:
            # A single traced sample still shows as a round blob of ink
            center = (int(pts[0][0]), int(pts[0][1]))
            cv2.circle(canvas, center, max(1, thickness // 2), prim.color, -1, cv2.LINE_AA)
        elif prim.dash:
            self._draw_dashed(canvas, prim.points, prim.color, thickness, prim.dash)
        else:
            cv2.polylines(canvas, [pts], False, prim.color, thickness, cv2.LINE_AA)

    def _draw_dashed(self, canvas, points, color, thickness, dash: Tuple[int, int]):
        """Dashed polyline; the dash pattern carries across vertices."""
        on, off = dash
        period = on + off
        travelled = 0.0
        for i in range(len(points) - 1):
            p0 = np.asarray(points[i], dtype=np.float64)
            p1 = np.asarray(points[i + 1], dtype=np.float64)
            seg_len = float(np.linalg.norm(p1 - p0))
            if seg_len < 1e-9:
                continue
            direction = (p1 - p0) / seg_len
            s = 0.0
            while s < seg_len:
                phase = (travelled + s) % period
                if phase < on:
                    run = min(on - phase, seg_len - s)
                    a = np.round(p0 + direction * s).astype(int)
                    b = np.round(p0 + direction * (s + run)).astype(int)
                    cv2.line(canvas, (int(a[0]), int(a[1])), (int(b[0]), int(b[1])),
                             color, thickness, cv2.LINE_AA)
                else:
                    run = min(period - phase, seg_len - s)
                s += run
            travelled += seg_len

    # ----------------------------
    # Panels
    # ----------------------------

    def draw_word_progress(self, canvas: np.ndarray, word: str, letter_index: int,
                           y: int = 40) -> np.ndarray:
        """Letters of the word: done ones green, the active one highlighted."""
        if not word:
            return canvas
        spacing = 36
        x = self.width // 2 - (len(word) * spacing) // 2
        for i, char in enumerate(word):
            if i < letter_index:
                color = config.UI_COLORS["progress_done"]
            elif i == letter_index:
                color = config.UI_COLORS["progress_active"]
            else:
                color = config.UI_COLORS["text_dim"]
            cv2.putText(canvas, char, (x + i * spacing, y),
                        cv2.FONT_HERSHEY_SIMPLEX, 1.1, color, 2)
            if i == letter_index:
                cv2.line(canvas, (x + i * spacing, y + 8),
                         (x + i * spacing + 24, y + 8), color, 2)
        return canvas

    def draw_mode_indicator(self, canvas: np.ndarray, mode: str,
                            x: int = 20, y: int = None) -> np.ndarray:
        """Draw current guidance mode indicator."""
        if y is None:
            y = self.height - 20
        text = f"Guidance: {mode}   1:off 2:loose 3:ghost+ 4:strict  C:clear N:next M:menu Q:quit"
        cv2.putText(canvas, text, (x, y),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, config.UI_COLORS["text_dim"], 1)
        return canvas

    def draw_message(self, canvas: np.ndarray, message: Optional[str]) -> np.ndarray:
        """Celebration banner across the middle of the screen."""
        if not message:
            return canvas
        scale = 0.9
        (tw, th), _ = cv2.getTextSize(message, cv2.FONT_HERSHEY_SIMPLEX, scale, 2)
        x = max(10, (self.width - tw) // 2)
        y = self.height // 2
        overlay = canvas.copy()
        cv2.rectangle(overlay, (x - 20, y - th - 20), (x + tw + 20, y + 20),
                      config.UI_COLORS["message_bg"], -1)
        cv2.addWeighted(overlay, 0.85, canvas, 0.15, 0, canvas)
        cv2.putText(canvas, message, (x, y),
                    cv2.FONT_HERSHEY_SIMPLEX, scale, config.UI_COLORS["text"], 2)
        return canvas

    def draw_menu(self, canvas: np.ndarray, words: List[str], selected: int) -> np.ndarray:
        """Word picker grid."""
        cv2.putText(canvas, config.WINDOW_NAME, (self.width // 2 - 150, 70),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.5, config.UI_COLORS["ink"], 3)

        cols = 4
        cell_w = (self.width - 80) // cols
        cell_h = 50
        for i, word in enumerate(words):
            row, col = divmod(i, cols)
            x = 40 + col * cell_w
            y = 120 + row * cell_h
            if i == selected:
                cv2.rectangle(canvas, (x - 10, y - 32), (x + cell_w - 30, y + 12),
                              config.UI_COLORS["progress_active"], 2)
            cv2.putText(canvas, word, (x, y),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.9, config.UI_COLORS["text"], 2)

        hint = "[ / ] choose   ENTER start   Q quit"
        cv2.putText(canvas, hint, (40, self.height - 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, config.UI_COLORS["text_dim"], 1)
        return canvas

    def draw_hand_cursor(self, canvas: np.ndarray, position: Optional[Tuple[float, float]],
                         pinching: bool) -> np.ndarray:
        """Fingertip marker for camera input."""
        if position is None:
            return canvas
        center = (int(position[0]), int(position[1]))
        color = config.UI_COLORS["ink"] if pinching else config.UI_COLORS["text_dim"]
        radius = 8 if pinching else 12
        cv2.circle(canvas, center, radius, color, 2, cv2.LINE_AA)
        return canvas
