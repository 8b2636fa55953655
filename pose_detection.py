import logging
from typing import List, Optional

import cv2
import mediapipe as mp

from pose_types import Landmark, PoseLandmarkSet
from thresholds import DEFAULT_DETECTOR_CONFIG, DetectorConfig

logger = logging.getLogger(__name__)


def resize_to_fit(image_bgr, max_side: int):
    height, width = image_bgr.shape[:2]
    if width <= max_side and height <= max_side:
        return image_bgr
    scale = max_side / float(max(width, height))
    size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))
    logger.debug("Resizing image from %dx%d to %dx%d", width, height, size[0], size[1])
    return cv2.resize(image_bgr, size, interpolation=cv2.INTER_AREA)


class HolisticDetector:
    """MediaPipe Holistic on still images: 33 pose points plus the face mesh.

    The operating parameters are fixed for the lifetime of the detector.
    Whether a face mesh comes back decides which neck-tilt path runs.
    """

    def __init__(self, config: DetectorConfig = DEFAULT_DETECTOR_CONFIG):
        self.config = config
        self._mp_holistic = mp.solutions.holistic
        self._holistic = self._mp_holistic.Holistic(
            static_image_mode=True,
            model_complexity=config.model_complexity,
            smooth_landmarks=config.smooth_landmarks,
            enable_segmentation=False,
            refine_face_landmarks=config.refine_face_landmarks,
            min_detection_confidence=config.min_detection_confidence,
            min_tracking_confidence=config.min_tracking_confidence,
        )

    def detect(self, image_bgr) -> Optional[PoseLandmarkSet]:
        image_bgr = resize_to_fit(image_bgr, self.config.max_image_side)
        image_rgb = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
        results = self._holistic.process(image_rgb)

        if results.pose_landmarks is None:
            logger.warning("No pose landmarks detected in image")
            return None

        pose: List[Landmark] = [
            Landmark(lm.x, lm.y, lm.z, lm.visibility) for lm in results.pose_landmarks.landmark
        ]
        face = None
        if results.face_landmarks is not None:
            # Face mesh points carry no visibility score.
            face = [Landmark(lm.x, lm.y, lm.z) for lm in results.face_landmarks.landmark]
        logger.debug(
            "Detected %d pose landmarks, face mesh: %s",
            len(pose), f"{len(face)} points" if face is not None else "not found",
        )
        return PoseLandmarkSet.from_sequences(pose, face)

    def close(self) -> None:
        self._holistic.close()

    def __enter__(self) -> "HolisticDetector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
