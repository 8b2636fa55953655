"""Neck tilt, shoulder tilt and lateral flexion angles from landmark sets.

Sign conventions:
    - Neck tilt: deviation of the chin -> ear-centre axis from vertical,
      positive when the head tilts toward image +x (the subject's right tilt
      as seen by a front camera), negative the other way.
    - Shoulder tilt without an image type: positive when the shoulder line
      drops toward image +x, i.e. the LEFT_SHOULDER landmark (image right on
      an unmirrored front camera) sits lower. With a tilt image type the
      angle is reported so that a lean in the instructed direction is
      positive.
    - Lateral flexion: unsigned difference from the subject's neutral angle.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from acromion import estimate_acromion, stabilize_shoulders
from geometry import midpoint
from measurement_errors import (
    AcromionEstimationFailed,
    ChinLandmarkMissing,
    DegenerateGeometry,
    EarLandmarksMissing,
    EarLandmarksUnusable,
    LandmarkMissing,
    MouthLandmarksUnusable,
)
from pose_types import (
    FaceMeshIndex,
    ImageType,
    Landmark,
    PoseLandmark,
    PoseLandmarkSet,
    Point,
    Side,
)
from thresholds import (
    AcromionThresholds,
    DEFAULT_ACROMION_THRESHOLDS,
    DEFAULT_LANDMARK_THRESHOLDS,
    LandmarkThresholds,
    MIN_DENOMINATOR,
    is_usable,
)

logger = logging.getLogger(__name__)


class NeckTiltMethod(str, Enum):
    FACE_MESH = "face_mesh"
    POSE = "pose"


@dataclass(frozen=True)
class NeckTilt:
    angle: float
    method: NeckTiltMethod
    chin: Point
    ear_center: Point


def normalize_shoulder_angle(raw: float, image_type: Optional[ImageType] = None) -> float:
    if image_type is None:
        return raw
    image_type = ImageType(image_type)
    if image_type is ImageType.RIGHT_TILT and raw < 0:
        return -raw
    elif image_type is ImageType.LEFT_TILT and raw > 0:
        # Left shoulder already lower: reported as-is.
        return raw
    elif image_type is ImageType.LEFT_TILT and raw < 0:
        return -raw
    return raw


def calculate_shoulder_angle(
    landmarks: PoseLandmarkSet,
    image_type: Optional[ImageType] = None,
    thresholds: AcromionThresholds = DEFAULT_ACROMION_THRESHOLDS,
    landmark_thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS,
) -> float:
    try:
        left = estimate_acromion(landmarks, Side.LEFT, thresholds, landmark_thresholds)
        right = estimate_acromion(landmarks, Side.RIGHT, thresholds, landmark_thresholds)
    except LandmarkMissing as exc:
        raise AcromionEstimationFailed(f"Acromion estimation failed: {exc}") from exc

    stable = stabilize_shoulders(left, right, thresholds)
    dx = abs(stable.left.x - stable.right.x)
    dy = stable.left.y - stable.right.y
    if dx < MIN_DENOMINATOR:
        raise DegenerateGeometry("Shoulders are vertically aligned; shoulder slope is undefined")

    raw = math.degrees(math.atan(dy / dx))
    if image_type is not None:
        image_type = ImageType(image_type)
    degrees = normalize_shoulder_angle(raw, image_type)

    logger.debug(
        "Shoulder angle: stabilized left=(%.4f, %.4f) right=(%.4f, %.4f) raw=%.2f reported=%.2f image_type=%s",
        stable.left.x, stable.left.y, stable.right.x, stable.right.y, raw, degrees,
        image_type.value if image_type is not None else None,
    )
    return degrees


def _mean_point(points: Sequence[Landmark]) -> Point:
    coords = np.array([[p.x, p.y] for p in points])
    x, y = coords.mean(axis=0)
    return Point(float(x), float(y))


def _face_mesh_reference(landmarks: PoseLandmarkSet) -> tuple:
    chin = landmarks.face_point(FaceMeshIndex.CHIN_TIP)
    if chin is None:
        raise ChinLandmarkMissing("Chin tip face-mesh landmark was not detected")

    left_points: List[Landmark] = [
        p for p in (
            landmarks.face_point(FaceMeshIndex.LEFT_EAR_FRONT),
            landmarks.face_point(FaceMeshIndex.LEFT_EAR_TOP),
        ) if p is not None
    ]
    right_points: List[Landmark] = [
        p for p in (
            landmarks.face_point(FaceMeshIndex.RIGHT_EAR_FRONT),
            landmarks.face_point(FaceMeshIndex.RIGHT_EAR_TOP),
        ) if p is not None
    ]
    if not left_points or not right_points:
        raise EarLandmarksMissing("Ear face-mesh landmarks were not detected")

    ear_center = midpoint(_mean_point(left_points), _mean_point(right_points))
    return Point(chin.x, chin.y), ear_center


def _pose_reference(landmarks: PoseLandmarkSet, thresholds: LandmarkThresholds) -> tuple:
    mouth_left = landmarks.get(PoseLandmark.MOUTH_LEFT)
    mouth_right = landmarks.get(PoseLandmark.MOUTH_RIGHT)
    if not (is_usable(mouth_left, thresholds) and is_usable(mouth_right, thresholds)):
        raise MouthLandmarksUnusable("Mouth landmarks are missing or not visible enough to locate the chin")

    left_ear = landmarks.get(PoseLandmark.LEFT_EAR)
    right_ear = landmarks.get(PoseLandmark.RIGHT_EAR)
    if not (is_usable(left_ear, thresholds) and is_usable(right_ear, thresholds)):
        raise EarLandmarksUnusable("Ear landmarks are missing or not visible enough")

    return midpoint(mouth_left, mouth_right), midpoint(left_ear, right_ear)


def measure_neck_tilt(
    landmarks: PoseLandmarkSet,
    face_landmarks: Optional[Sequence[Optional[Landmark]]] = None,
    thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS,
) -> NeckTilt:
    if face_landmarks is not None:
        landmarks = PoseLandmarkSet.from_sequences(landmarks.pose, face_landmarks)

    if landmarks.has_face_mesh:
        method = NeckTiltMethod.FACE_MESH
        chin, ear_center = _face_mesh_reference(landmarks)
    else:
        method = NeckTiltMethod.POSE
        chin, ear_center = _pose_reference(landmarks, thresholds)

    dx = ear_center.x - chin.x
    # Image y grows downward; flip so the ears above the chin give dy > 0.
    dy = chin.y - ear_center.y
    angle = math.degrees(math.atan2(dx, dy))

    logger.debug(
        "Neck tilt (%s): chin=(%.4f, %.4f) ear_center=(%.4f, %.4f) angle=%.2f",
        method.value, chin.x, chin.y, ear_center.x, ear_center.y, angle,
    )
    return NeckTilt(angle=angle, method=method, chin=chin, ear_center=ear_center)


def calculate_neck_tilt_angle(
    landmarks: PoseLandmarkSet,
    face_landmarks: Optional[Sequence[Optional[Landmark]]] = None,
    thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS,
) -> float:
    return measure_neck_tilt(landmarks, face_landmarks, thresholds).angle


def calculate_lateral_flexion_angle(neutral_angle: float, tilt_angle: float) -> float:
    return abs(tilt_angle - neutral_angle)


def format_angle(degrees: float) -> str:
    """Render the magnitude of an angle as degrees, minutes and seconds.

    >>> format_angle(45.5)
    "45°30'"
    """
    total_seconds = int(round(abs(degrees) * 3600))
    deg, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if minutes == 0 and seconds == 0:
        return f"{deg}°"
    if seconds == 0:
        return f"{deg}°{minutes}'"
    return f"{deg}°{minutes}'{seconds}\""
