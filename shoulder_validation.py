import logging
from dataclasses import dataclass
from typing import Optional

from angle_calculator import calculate_shoulder_angle
from measurement_errors import ShoulderCompensationDetected
from pose_types import ImageType, PoseLandmarkSet
from thresholds import (
    AcromionThresholds,
    DEFAULT_ACROMION_THRESHOLDS,
    DEFAULT_LANDMARK_THRESHOLDS,
    DEFAULT_SHOULDER_LEVEL_THRESHOLDS,
    LandmarkThresholds,
    ShoulderLevelThresholds,
)

logger = logging.getLogger(__name__)

LEVEL_MESSAGE = "Shoulders are level"
NOT_CHECKED_MESSAGE = "Shoulder level is not checked for the neutral image"


@dataclass(frozen=True)
class ShoulderLevelResult:
    is_valid: bool
    message: str
    shoulder_angle: Optional[float] = None


def compensation_message(angle: float, tolerance_degrees: float) -> str:
    return (
        f"Shoulders tilted {abs(angle):.1f}° (limit {tolerance_degrees:.1f}°). "
        "Keep your shoulders level and tilt only your neck."
    )


def validate_shoulder_level(
    landmarks: PoseLandmarkSet,
    image_type: Optional[ImageType] = None,
    thresholds: ShoulderLevelThresholds = DEFAULT_SHOULDER_LEVEL_THRESHOLDS,
    acromion_thresholds: AcromionThresholds = DEFAULT_ACROMION_THRESHOLDS,
    landmark_thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS,
) -> ShoulderLevelResult:
    if image_type is not None and ImageType(image_type) is ImageType.NEUTRAL:
        return ShoulderLevelResult(True, NOT_CHECKED_MESSAGE)

    # Raw polarity; only the magnitude matters for compensation.
    angle = calculate_shoulder_angle(
        landmarks, thresholds=acromion_thresholds, landmark_thresholds=landmark_thresholds
    )
    if abs(angle) > thresholds.tolerance_degrees:
        return ShoulderLevelResult(False, compensation_message(angle, thresholds.tolerance_degrees), angle)
    return ShoulderLevelResult(True, LEVEL_MESSAGE, angle)


def ensure_shoulder_level(
    landmarks: PoseLandmarkSet,
    image_type: ImageType,
    thresholds: ShoulderLevelThresholds = DEFAULT_SHOULDER_LEVEL_THRESHOLDS,
    acromion_thresholds: AcromionThresholds = DEFAULT_ACROMION_THRESHOLDS,
    landmark_thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS,
) -> ShoulderLevelResult:
    result = validate_shoulder_level(
        landmarks, image_type, thresholds, acromion_thresholds, landmark_thresholds
    )
    if not result.is_valid:
        logger.warning("Compensation detected on %s capture: %s", ImageType(image_type).value, result.message)
        raise ShoulderCompensationDetected(
            result.message,
            shoulder_angle=result.shoulder_angle,
            tolerance_degrees=thresholds.tolerance_degrees,
            image_type=ImageType(image_type).value,
        )
    return result
