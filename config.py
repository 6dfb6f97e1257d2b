"""
Configuration file for the Letter Tracing game
Tune matching tolerance, timing, guidance and appearance here
"""

# ===============================
# WINDOW & DISPLAY
# ===============================

WINDOW_NAME = "Letter Tracing"
WINDOW_WIDTH = 960
WINDOW_HEIGHT = 720

# Frame rate for smooth animation (waitKey delay is derived from this)
TARGET_FPS = 60

# ===============================
# LETTER BOX (plane -> pixels)
# ===============================

# Letters live on a 0-100 plane, drawn into a box of width/height = 0.8
LETTER_ASPECT_RATIO = 0.8
LETTER_PADDING_PX = 20
# Vertical space kept free above + below the letter box
LETTER_VERTICAL_MARGIN_PX = 40

# Viewports smaller than this are clamped before mapping
MIN_VIEWPORT_PX = 50

# ===============================
# STROKE GEOMETRY
# ===============================

# Target spacing between generated sample points (plane units)
STROKE_DENSITY = 4.0

# ===============================
# STROKE MATCHING
# ===============================

# Input must land within this many device pixels of a target point
HIT_RADIUS_PX = 45.0

# Extra target points examined past the current progress index
MATCH_LOOKAHEAD = 2

# Pointer moves are densified to one check every N pixels of travel
INTERPOLATION_STEP_PX = 5.0

# Minimum fingertip movement to register while pinch-drawing
MOVE_THRESHOLD = 5

# ===============================
# TIMING (seconds)
# ===============================

# Pause after a letter is finished before the next one loads
SETTLE_DELAY_SECONDS = 1.0

# Pause after the word narration ends before returning to the menu
NARRATION_TAIL_SECONDS = 1.0

# Return to the menu after this long when no narration is available
WORD_FALLBACK_SECONDS = 3.0

# Upper bound on waiting for a narration callback that never comes
NARRATION_TIMEOUT_SECONDS = 15.0

# ===============================
# GUIDANCE
# ===============================

DEFAULT_GUIDANCE_MODE = "ghost_plus"

# One sweep of the ghost dot along the active stroke
GHOST_CYCLE_SECONDS = 1.1

GHOST_RADIUS_PX = 12
GHOST_ALPHA = 0.4

# Pulse radius = base + amplitude * sin(ms / period)
PULSE_BASE_RADIUS_PX = 10.0
PULSE_AMPLITUDE_PX = 3.0
PULSE_PERIOD_MS = 200.0

# Stroke thickness
GUIDE_BAND_WIDTH = 30
GUIDE_CENTER_WIDTH = 2
GUIDE_DASH = (10, 10)
INK_WIDTH = 25
USER_STROKE_WIDTH = 6
PAPER_LINE_WIDTH = 2
PAPER_MID_DASH = (15, 15)

# ===============================
# CELEBRATION
# ===============================

PARTICLE_COUNT = 30
PARTICLE_SPEED = 10.0      # velocity spread, pixels per frame
PARTICLE_GRAVITY = 0.2
PARTICLE_DECAY = 0.02
PARTICLE_RADIUS_PX = 5

DEFAULT_OPENINGS = ["Great job", "Awesome"]
DEFAULT_CLOSINGS = ["Way to go", "You did it"]

# ===============================
# UI Color scheme (B, G, R in OpenCV)
# ===============================

UI_COLORS = {
    "background": (255, 255, 255),
    "paper_line": (220, 196, 163),
    "paper_mid": (178, 183, 255),
    "guide_band": (224, 224, 224),
    "guide_center": (187, 187, 187),
    "ink": (226, 144, 74),
    "user_stroke": (120, 120, 120),
    "ghost": (34, 87, 255),
    "pulse": (34, 87, 255),
    "pulse_outline": (255, 255, 255),
    "text": (60, 60, 60),
    "text_dim": (150, 150, 150),
    "progress_done": (80, 175, 76),
    "progress_active": (34, 87, 255),
    "message_bg": (250, 240, 230),
    "particles": [(0, 255, 255), (0, 0, 255), (0, 255, 0), (255, 0, 0)],
}

# ===============================
# WORDS
# ===============================

DEFAULT_WORDS = [
    "Kenzie", "Jennie", "Wayne", "Mom", "Dad", "Tammy", "Phong", "Justin",
    "Linda", "Ed", "Toijee", "Wing", "Gina", "Jinwoo", "Oliver", "Gemma",
    "Cat", "Dog", "Love", "Hi", "Bye", "Butterfly", "Giraffe", "Elephant",
    "Rainbow", "Unicorn",
]

# Extra glyph packs (JSON) searched before the built-in pack
GLYPH_PACK_PATHS = []

# ===============================
# KEYBOARD LAYOUT
# ===============================

KEYBOARD_LAYOUT = {
    "mode_off": "1",
    "mode_loose": "2",
    "mode_ghost_plus": "3",
    "mode_strict": "4",
    "clear": "c",
    "next_word": "n",
    "menu": "m",
    "menu_prev": "[",
    "menu_next": "]",
    "start": "\r",
    "quit": "q",
}

# ===============================
# HAND INPUT (optional camera mode)
# ===============================

CAMERA_INDEX = 0
PINCH_THRESHOLD_NORM = 0.06
HAND_DETECTION_CONFIDENCE = 0.7
HAND_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

# ===============================
# LOGGING
# ===============================

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_config(key: str, default=None):
    """Get configuration value by key."""
    parts = key.split(".")
    obj = globals()

    for part in parts:
        if isinstance(obj, dict):
            obj = obj.get(part, default)
        else:
            return default

    return obj if obj is not None else default


if __name__ == "__main__":
    print("Letter Tracing Configuration")
    print("=" * 50)
    print(f"Window: {WINDOW_WIDTH}x{WINDOW_HEIGHT}")
    print(f"Stroke density: {STROKE_DENSITY}")
    print(f"Hit radius: {HIT_RADIUS_PX}px (lookahead {MATCH_LOOKAHEAD})")
    print(f"Settle delay: {SETTLE_DELAY_SECONDS}s")
    print(f"Guidance: {DEFAULT_GUIDANCE_MODE}")
