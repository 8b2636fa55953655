from dataclasses import dataclass
from typing import Optional

from pose_types import Landmark


# Denominators and vector lengths below this are treated as zero.
MIN_DENOMINATOR = 1e-6


@dataclass(frozen=True)
class LandmarkThresholds:
    # A point is usable only when visibility is strictly greater than this.
    visibility_threshold: float = 0.5


@dataclass(frozen=True)
class AcromionThresholds:
    # Offsets are fractions of the shoulder width (distance between the two shoulder landmarks).
    lateral_ratio: float = 0.08
    vertical_ratio: float = 0.05
    # Normalized image units, used when the opposite shoulder is unusable.
    fallback_shoulder_width: float = 0.25
    # Weight pulled toward the mirrored opposite side, in [0, 0.5).
    stabilization_blend: float = 0.2

    def __post_init__(self):
        if not 0.0 <= self.stabilization_blend < 0.5:
            raise ValueError(f"stabilization_blend must be in [0, 0.5), got {self.stabilization_blend}")


@dataclass(frozen=True)
class ShoulderLevelThresholds:
    # Degrees of shoulder-line tilt tolerated during a pure neck tilt.
    tolerance_degrees: float = 5.0


@dataclass(frozen=True)
class DetectorConfig:
    model_complexity: int = 2
    smooth_landmarks: bool = True
    refine_face_landmarks: bool = True
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.7
    max_image_side: int = 1280
    detection_timeout_seconds: float = 5.0


DEFAULT_LANDMARK_THRESHOLDS = LandmarkThresholds()
DEFAULT_ACROMION_THRESHOLDS = AcromionThresholds()
DEFAULT_SHOULDER_LEVEL_THRESHOLDS = ShoulderLevelThresholds()
DEFAULT_DETECTOR_CONFIG = DetectorConfig()


def is_usable(lm: Optional[Landmark], thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS) -> bool:
    if lm is None or lm.visibility is None:
        return False
    return lm.visibility > thresholds.visibility_threshold
