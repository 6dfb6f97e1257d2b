"""
Hand Input (camera mode)
- MediaPipe hand landmarker, single hand, VIDEO running mode
- Pinching thumb and index tips together acts as the pointer being down
- Fingertip motion becomes pointer down / move / up for the InputSampler
"""

import logging
import math
import os
import urllib.request
from typing import Optional, Tuple

import cv2
import numpy as np

import config
from input_sampler import InputSampler

logger = logging.getLogger(__name__)

INDEX_FINGER_TIP = 8
THUMB_TIP = 4

MODELS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "models")
MODEL_PATH = os.path.join(MODELS_DIR, "hand_landmarker.task")

NormPoint = Tuple[float, float]


class PinchPointer:
    """Single-pointer state machine over fingertip samples."""

    def __init__(self, sampler: InputSampler,
                 pinch_threshold: float = config.PINCH_THRESHOLD_NORM,
                 move_threshold: float = config.MOVE_THRESHOLD):
        self.sampler = sampler
        self.pinch_threshold = pinch_threshold
        self.move_threshold = move_threshold
        self.pinching = False
        self.prev_point: Optional[Tuple[float, float]] = None
        self.cursor: Optional[Tuple[float, float]] = None

    def update(self, tip: Optional[NormPoint], thumb: Optional[NormPoint],
               width: int, height: int):
        """Feed one frame. tip/thumb are normalized (0-1), None when no hand."""
        if tip is None or thumb is None:
            self.cursor = None
            self.release()
            return

        x, y = tip[0] * width, tip[1] * height
        self.cursor = (x, y)

        if math.hypot(tip[0] - thumb[0], tip[1] - thumb[1]) >= self.pinch_threshold:
            self.release()
            return

        if not self.pinching:
            self.pinching = True
            self.prev_point = (x, y)
            self.sampler.pointer_down(x, y)
        elif math.hypot(x - self.prev_point[0], y - self.prev_point[1]) > self.move_threshold:
            self.sampler.pointer_move(x, y)
            self.prev_point = (x, y)

    def release(self):
        if self.pinching:
            self.pinching = False
            self.prev_point = None
            self.sampler.pointer_up()


def ensure_model(path: str = MODEL_PATH, url: str = config.HAND_MODEL_URL) -> str:
    """Download the hand landmarker model on first use."""
    if not os.path.exists(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        logger.info("Downloading hand_landmarker model to %s", path)
        urllib.request.urlretrieve(url, path)
    return path


class HandLandmarkSource:
    """Webcam frames -> (index tip, thumb tip) in normalized coordinates."""

    def __init__(self, model_path: Optional[str] = None):
        import mediapipe as mp
        from mediapipe.tasks import python
        from mediapipe.tasks.python import vision

        self._mp = mp
        base_options = python.BaseOptions(model_asset_path=ensure_model(model_path or MODEL_PATH))
        options = vision.HandLandmarkerOptions(
            base_options=base_options,
            num_hands=1,
            min_hand_detection_confidence=config.HAND_DETECTION_CONFIDENCE,
            min_hand_presence_confidence=config.HAND_DETECTION_CONFIDENCE,
            running_mode=vision.RunningMode.VIDEO,
        )
        self.landmarker = vision.HandLandmarker.create_from_options(options)
        self.frame_count = 0

    def detect(self, frame: np.ndarray) -> Tuple[Optional[NormPoint], Optional[NormPoint]]:
        """Landmarks for a mirrored BGR frame."""
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=rgb)

        self.frame_count += 1
        result = self.landmarker.detect_for_video(image, self.frame_count * 33)
        if not result.hand_landmarks:
            return None, None

        hand = result.hand_landmarks[0]
        tip = hand[INDEX_FINGER_TIP]
        thumb = hand[THUMB_TIP]
        return (tip.x, tip.y), (thumb.x, thumb.y)

    def close(self):
        self.landmarker.close()
