"""Acromion (shoulder tip) estimation from pose shoulder landmarks.

The detector's shoulder point sits on the joint centre, medial to and below
the bony acromion used for clinical shoulder-line measurement. The acromion is
placed by pushing the shoulder landmark outward and upward by fractions of the
shoulder width.
"""

import logging
from typing import NamedTuple

from measurement_errors import LandmarkMissing
from pose_types import PoseLandmark, PoseLandmarkSet, Point, Side, SHOULDER_BY_SIDE
from thresholds import (
    AcromionThresholds,
    DEFAULT_ACROMION_THRESHOLDS,
    DEFAULT_LANDMARK_THRESHOLDS,
    LandmarkThresholds,
    is_usable,
)

logger = logging.getLogger(__name__)


class ShoulderPair(NamedTuple):
    left: Point
    right: Point


def _outward_sign(landmarks: PoseLandmarkSet, side: Side, thresholds: LandmarkThresholds) -> float:
    shoulder = landmarks.get(SHOULDER_BY_SIDE[side])
    other = landmarks.get(SHOULDER_BY_SIDE[side.opposite])
    if is_usable(other, thresholds) and other.x != shoulder.x:
        return 1.0 if shoulder.x > other.x else -1.0

    nose = landmarks.get(PoseLandmark.NOSE)
    if is_usable(nose, thresholds) and nose.x != shoulder.x:
        return 1.0 if shoulder.x > nose.x else -1.0

    # Subject facing the camera: their left shoulder appears at larger x.
    return 1.0 if side is Side.LEFT else -1.0


def estimate_acromion(
    landmarks: PoseLandmarkSet,
    side: Side,
    thresholds: AcromionThresholds = DEFAULT_ACROMION_THRESHOLDS,
    landmark_thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS,
) -> Point:
    side = Side(side)
    shoulder = landmarks.get(SHOULDER_BY_SIDE[side])
    if not is_usable(shoulder, landmark_thresholds):
        raise LandmarkMissing(f"{side.value} shoulder landmark is missing or not visible enough")

    other = landmarks.get(SHOULDER_BY_SIDE[side.opposite])
    if is_usable(other, landmark_thresholds):
        width = abs(shoulder.x - other.x)
    else:
        width = thresholds.fallback_shoulder_width

    sign = _outward_sign(landmarks, side, landmark_thresholds)
    acromion = Point(
        shoulder.x + sign * thresholds.lateral_ratio * width,
        # Image y grows downward; the acromion sits above the joint centre.
        shoulder.y - thresholds.vertical_ratio * width,
    )
    logger.debug(
        "Acromion %s: shoulder=(%.4f, %.4f) estimate=(%.4f, %.4f)",
        side.value, shoulder.x, shoulder.y, acromion.x, acromion.y,
    )
    return acromion


def stabilize_shoulders(
    left: Point,
    right: Point,
    thresholds: AcromionThresholds = DEFAULT_ACROMION_THRESHOLDS,
) -> ShoulderPair:
    # Blend each side toward the other side's mirror image about the shared
    # vertical axis. With blend < 0.5 the height difference shrinks by a
    # factor of (1 - 2 * blend) but keeps its sign.
    blend = thresholds.stabilization_blend
    axis_x = (left.x + right.x) / 2.0

    mirrored_right = Point(2.0 * axis_x - right.x, right.y)
    mirrored_left = Point(2.0 * axis_x - left.x, left.y)

    stable_left = Point(
        (1.0 - blend) * left.x + blend * mirrored_right.x,
        (1.0 - blend) * left.y + blend * mirrored_right.y,
    )
    stable_right = Point(
        (1.0 - blend) * right.x + blend * mirrored_left.x,
        (1.0 - blend) * right.y + blend * mirrored_left.y,
    )
    return ShoulderPair(stable_left, stable_right)
