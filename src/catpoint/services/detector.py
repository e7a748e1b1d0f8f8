"""
Cat detectors and image decoding.
"""

import logging
import random
from typing import Any, Optional

import cv2
import numpy as np

from .interfaces import SubjectDetector


logger = logging.getLogger(__name__)


class FakeCatDetector(SubjectDetector):
    """Stand-in classifier that answers at random.

    Used when no real classifier is wired in. Pass a seed for
    repeatable answers.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)
        self.frame_count = 0
        self.detection_count = 0

    def detect_subject(self, image: Any, confidence_threshold: float) -> bool:
        self.frame_count += 1
        cat = self._random.random() >= 0.5
        if cat:
            self.detection_count += 1
        logger.debug(
            "Frame %d: cat=%s (threshold %.1f%%)", self.frame_count, cat, confidence_threshold
        )
        return cat

    def get_stats(self) -> dict:
        return {
            "frame_count": self.frame_count,
            "detection_count": self.detection_count,
        }


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes (JPEG, PNG, ...) into a BGR frame.

    Raises:
        ValueError: if the bytes are empty or not a readable image
    """
    if not data:
        raise ValueError("Empty image")

    buffer = np.frombuffer(data, dtype=np.uint8)
    frame = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if frame is None:
        raise ValueError("Unreadable image data")
    return frame
