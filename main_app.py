"""
Letter Tracing - Main Application

Pick a word, then trace it one letter at a time on lined paper:
1. Mouse drag draws (or pinch thumb + index with --camera)
2. Guidance modes: off / loose / ghost_plus / strict (keys 1-4)
3. A finished word celebrates, then returns to the word menu
"""

import argparse
import logging
import sys
from typing import List, Optional

import cv2
import numpy as np

import config
from glyphs import GlyphDictionary
from guidance import GhostClock, ParticleBurst, frame_primitives
from input_sampler import InputSampler
from sequencer import ConsoleNarrator, Scheduler, SequencerState, WordSequencer
from stroke_engine import CoordinateMapper, GuidanceMode, StrokeTracker
from ui_renderer import UIRenderer

logger = logging.getLogger(__name__)

MODE_KEYS = {
    config.KEYBOARD_LAYOUT["mode_off"]: GuidanceMode.OFF,
    config.KEYBOARD_LAYOUT["mode_loose"]: GuidanceMode.LOOSE,
    config.KEYBOARD_LAYOUT["mode_ghost_plus"]: GuidanceMode.GHOST_PLUS,
    config.KEYBOARD_LAYOUT["mode_strict"]: GuidanceMode.STRICT,
}


# ===============================
# Application
# ===============================

class TracingApp:
    def __init__(
        self,
        words: Optional[List[str]] = None,
        glyphs: Optional[GlyphDictionary] = None,
        guidance_mode=config.DEFAULT_GUIDANCE_MODE,
        narrator=None,
        width: int = config.WINDOW_WIDTH,
        height: int = config.WINDOW_HEIGHT,
    ):
        self.mode = "menu"  # menu, tracing
        self.words = list(words or config.DEFAULT_WORDS)
        self.selected = 0

        self.glyphs = glyphs if glyphs is not None else GlyphDictionary.from_files(
            config.GLYPH_PACK_PATHS)
        self.mapper = CoordinateMapper(width, height)
        self.tracker = StrokeTracker(self.mapper)
        self.scheduler = Scheduler()
        self.particles = ParticleBurst()
        self.ghost = GhostClock()

        narrator = narrator if narrator is not None else ConsoleNarrator()
        self.sequencer = WordSequencer(
            self.glyphs,
            self.tracker,
            self.scheduler,
            audio=narrator,
            narrator=narrator,
            on_celebrate=self._celebrate,
            on_return_to_menu=self._return_to_menu,
            guidance_mode=guidance_mode,
        )
        self.sampler = InputSampler(self.sequencer.handle_point)
        self.renderer = UIRenderer(width, height)

        # Camera mode
        self.cap = None
        self.hand = None
        self.pinch = None

    # ----------------------------
    # Word Management
    # ----------------------------

    def start_word(self, word: str) -> bool:
        self.sampler.pointer_up()
        self.particles.clear()
        if not self.sequencer.start_word(word):
            return False
        self.mode = "tracing"
        self.ghost.reset()
        if word in self.words:
            self.selected = self.words.index(word)
        return True

    def next_word(self):
        self.selected = (self.selected + 1) % len(self.words)
        self.start_word(self.words[self.selected])

    def show_menu(self):
        """Leave the current word; any pending advance is dropped."""
        self.sequencer.abandon()
        self.sampler.pointer_up()
        self.mode = "menu"

    def _celebrate(self):
        center = self.mapper.to_pixels((50, 50))
        self.particles.spawn(center.x, center.y)

    def _return_to_menu(self):
        self.sampler.pointer_up()
        self.mode = "menu"

    def resize(self, width: int, height: int):
        if (width, height) == (self.mapper.width, self.mapper.height):
            return
        if width <= 0 or height <= 0:
            return
        logger.debug("Resized to %dx%d", width, height)
        self.mapper.resize(width, height)
        self.renderer.resize(width, height)

    # ----------------------------
    # Input Handling
    # ----------------------------

    def on_mouse(self, event, x, y, flags, param=None):
        """cv2 mouse callback -> pointer events."""
        if self.mode != "tracing":
            return
        if event == cv2.EVENT_LBUTTONDOWN:
            self.sampler.pointer_down(x, y)
        elif event == cv2.EVENT_MOUSEMOVE:
            self.sampler.pointer_move(x, y)
        elif event == cv2.EVENT_LBUTTONUP:
            self.sampler.pointer_up()

    def handle_key(self, key: int) -> bool:
        """Handle keyboard input. Returns False to quit."""
        char = chr(key) if 0 <= key < 256 else ""
        keys = config.KEYBOARD_LAYOUT

        if char == keys["quit"]:
            return False

        if self.mode == "menu":
            if char == keys["menu_prev"]:
                self.selected = (self.selected - 1) % len(self.words)
            elif char == keys["menu_next"]:
                self.selected = (self.selected + 1) % len(self.words)
            elif char in (keys["start"], "\n", " "):
                self.start_word(self.words[self.selected])
            return True

        if char in MODE_KEYS:
            self.sequencer.guidance_mode = MODE_KEYS[char]
            logger.info("Guidance mode: %s", self.sequencer.guidance_mode.value)
        elif char == keys["clear"]:
            self.sequencer.restart_letter()
        elif char == keys["next_word"]:
            self.next_word()
        elif char == keys["menu"]:
            self.show_menu()
        return True

    # ----------------------------
    # Frame
    # ----------------------------

    def step(self, now: Optional[float] = None):
        """Advance timers and animations by one frame."""
        self.scheduler.tick(now)
        self.particles.step()

    def render_frame(self, background: Optional[np.ndarray] = None) -> np.ndarray:
        if background is not None:
            canvas = cv2.addWeighted(background, 0.35, self.renderer.new_canvas(), 0.65, 0)
        else:
            canvas = self.renderer.new_canvas()

        if self.mode == "menu":
            self.renderer.draw_menu(canvas, self.words, self.selected)
            self.renderer.draw_primitives(canvas, self.particles.primitives())
            return canvas

        seq = self.sequencer
        prims = frame_primitives(
            seq.session,
            seq.guidance_mode,
            self.ghost.phase(),
            self.mapper,
            user_stroke=self.sampler.current_stroke,
            particles=self.particles,
        )
        self.renderer.draw_primitives(canvas, prims)
        self.renderer.draw_word_progress(canvas, seq.word or seq.last_word,
                                         seq.letter_index if seq.word else len(seq.last_word))
        self.renderer.draw_mode_indicator(canvas, seq.guidance_mode.value)
        if seq.state is SequencerState.WORD_COMPLETE:
            self.renderer.draw_message(canvas, seq.message)
        if self.pinch is not None:
            self.renderer.draw_hand_cursor(canvas, self.pinch.cursor, self.pinch.pinching)
        return canvas

    # ----------------------------
    # Main Loop
    # ----------------------------

    def _open_camera(self):
        from hand_input import HandLandmarkSource, PinchPointer

        self.cap = cv2.VideoCapture(config.CAMERA_INDEX)
        if not self.cap.isOpened():
            logger.error("Camera failed to initialize. Check camera permissions.")
            sys.exit(1)
        self.hand = HandLandmarkSource()
        self.pinch = PinchPointer(self.sampler)

    def _camera_frame(self) -> Optional[np.ndarray]:
        ret, frame = self.cap.read()
        if not ret:
            logger.warning("Failed to read frame")
            return None
        frame = cv2.flip(frame, 1)
        frame = cv2.resize(frame, (self.renderer.width, self.renderer.height))
        tip, thumb = self.hand.detect(frame)
        if self.mode == "tracing":
            self.pinch.update(tip, thumb, self.renderer.width, self.renderer.height)
        else:
            self.pinch.release()
        return frame

    def run(self, camera: bool = False):
        """Main application loop."""
        cv2.namedWindow(config.WINDOW_NAME, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(config.WINDOW_NAME, self.renderer.width, self.renderer.height)
        cv2.setMouseCallback(config.WINDOW_NAME, self.on_mouse)
        if camera:
            self._open_camera()

        delay = max(1, int(1000 / config.TARGET_FPS))
        running = True
        try:
            while running:
                _, _, w, h = cv2.getWindowImageRect(config.WINDOW_NAME)
                self.resize(w, h)

                background = self._camera_frame() if camera else None
                self.step()
                cv2.imshow(config.WINDOW_NAME, self.render_frame(background))

                key = cv2.waitKey(delay) & 0xFF
                if key != 255:
                    running = self.handle_key(key)
        finally:
            self.sequencer.abandon()
            if self.cap is not None:
                self.cap.release()
            if self.hand is not None:
                self.hand.close()
            cv2.destroyAllWindows()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Trace words letter by letter.")
    parser.add_argument("--word", help="start tracing this word right away")
    parser.add_argument("--guidance", default=config.DEFAULT_GUIDANCE_MODE,
                        choices=[m.value for m in GuidanceMode])
    parser.add_argument("--glyphs", nargs="*", default=list(config.GLYPH_PACK_PATHS),
                        help="extra JSON glyph packs, searched before the built-in one")
    parser.add_argument("--camera", action="store_true",
                        help="draw by pinching in front of the webcam")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=config.LOG_FORMAT)

    app = TracingApp(
        glyphs=GlyphDictionary.from_files(args.glyphs),
        guidance_mode=args.guidance,
    )
    if args.word:
        app.start_word(args.word)
    app.run(camera=args.camera)


if __name__ == "__main__":
    main()
