from typing import Dict, Optional

import pytest

from pose_types import (
    FACE_MESH_LANDMARK_COUNT,
    FaceMeshIndex,
    Landmark,
    POSE_LANDMARK_COUNT,
    PoseLandmark,
    PoseLandmarkSet,
)

VISIBLE = 0.9

# Front-facing subject, head upright, shoulders level.
NEUTRAL_POINTS = {
    PoseLandmark.NOSE: (0.50, 0.30),
    PoseLandmark.LEFT_EAR: (0.56, 0.30),
    PoseLandmark.RIGHT_EAR: (0.44, 0.30),
    PoseLandmark.MOUTH_LEFT: (0.52, 0.38),
    PoseLandmark.MOUTH_RIGHT: (0.48, 0.38),
    PoseLandmark.LEFT_SHOULDER: (0.65, 0.55),
    PoseLandmark.RIGHT_SHOULDER: (0.35, 0.55),
}

FACE_POINTS = {
    FaceMeshIndex.CHIN_TIP: (0.50, 0.40),
    FaceMeshIndex.LEFT_EAR_FRONT: (0.40, 0.30),
    FaceMeshIndex.LEFT_EAR_TOP: (0.42, 0.28),
    FaceMeshIndex.RIGHT_EAR_FRONT: (0.60, 0.30),
    FaceMeshIndex.RIGHT_EAR_TOP: (0.58, 0.28),
}


def _make_landmarks(points: Optional[Dict] = None, face=None, **overrides) -> PoseLandmarkSet:
    """Build a pose set from NEUTRAL_POINTS.

    ``overrides`` maps lower-case landmark names to a Landmark, an (x, y)
    tuple, or None.
    """
    pose = [Landmark(0.5, 0.8, 0.0, VISIBLE) for _ in range(POSE_LANDMARK_COUNT)]
    for name, (x, y) in {**NEUTRAL_POINTS, **(points or {})}.items():
        pose[name] = Landmark(x, y, 0.0, VISIBLE)
    for key, value in overrides.items():
        index = PoseLandmark[key.upper()]
        if value is None or isinstance(value, Landmark):
            pose[index] = value
        else:
            pose[index] = Landmark(value[0], value[1], 0.0, VISIBLE)
    return PoseLandmarkSet.from_sequences(pose, face)


def _make_face(points: Optional[Dict] = None, count: int = FACE_MESH_LANDMARK_COUNT, shift_ears: float = 0.0):
    face = [Landmark(0.5, 0.5) for _ in range(count)]
    merged = {**FACE_POINTS, **(points or {})}
    for index, value in merged.items():
        if index >= count:
            continue
        if value is None:
            face[index] = None
            continue
        x, y = value
        if index != FaceMeshIndex.CHIN_TIP:
            x += shift_ears
        face[index] = Landmark(x, y)
    return face


@pytest.fixture
def make_landmarks():
    return _make_landmarks


@pytest.fixture
def make_face():
    return _make_face


@pytest.fixture
def neutral_landmarks():
    return _make_landmarks()


@pytest.fixture
def right_tilt_landmarks():
    # Ear centre 0.04 to +x of the chin, 0.08 above it.
    return _make_landmarks(left_ear=(0.60, 0.30), right_ear=(0.48, 0.30))


@pytest.fixture
def left_tilt_landmarks():
    return _make_landmarks(left_ear=(0.52, 0.30), right_ear=(0.40, 0.30))


@pytest.fixture
def hiked_shoulder_landmarks():
    # Left shoulder 0.1 lower than the right one.
    return _make_landmarks(
        left_ear=(0.60, 0.30),
        right_ear=(0.48, 0.30),
        left_shoulder=(0.65, 0.60),
        right_shoulder=(0.35, 0.50),
    )
