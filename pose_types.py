from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np


POSE_LANDMARK_COUNT = 33
FACE_MESH_LANDMARK_COUNT = 468


@dataclass(frozen=True)
class Landmark:
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None

    def to_numpy(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])


@dataclass(frozen=True)
class Point:
    x: float
    y: float


class PoseLandmark(IntEnum):
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


class FaceMeshIndex(IntEnum):
    CHIN_TIP = 152
    # Two points per ear: tragus front and upper helix.
    LEFT_EAR_FRONT = 234
    LEFT_EAR_TOP = 127
    RIGHT_EAR_FRONT = 454
    RIGHT_EAR_TOP = 356


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class ImageType(str, Enum):
    NEUTRAL = "neutral"
    RIGHT_TILT = "right_tilt"
    LEFT_TILT = "left_tilt"

    @property
    def is_tilt(self) -> bool:
        return self is not ImageType.NEUTRAL


SHOULDER_BY_SIDE = {
    Side.LEFT: PoseLandmark.LEFT_SHOULDER,
    Side.RIGHT: PoseLandmark.RIGHT_SHOULDER,
}


@dataclass(frozen=True)
class PoseLandmarkSet:
    """Pose landmarks for one image, with the optional face mesh of the same frame.

    Points are addressed by ``PoseLandmark`` / ``FaceMeshIndex``. Entries may be
    ``None`` when the detector reported nothing for that point.
    """

    pose: Tuple[Optional[Landmark], ...]
    face: Optional[Tuple[Optional[Landmark], ...]] = None

    def __post_init__(self):
        if len(self.pose) != POSE_LANDMARK_COUNT:
            raise ValueError(
                f"Pose landmark set must hold {POSE_LANDMARK_COUNT} points, got {len(self.pose)}"
            )

    @classmethod
    def from_sequences(
        cls,
        pose: Sequence[Optional[Landmark]],
        face: Optional[Sequence[Optional[Landmark]]] = None,
    ) -> "PoseLandmarkSet":
        return cls(tuple(pose), tuple(face) if face is not None else None)

    def get(self, name: PoseLandmark) -> Optional[Landmark]:
        return self.pose[PoseLandmark(name)]

    def __getitem__(self, name: PoseLandmark) -> Optional[Landmark]:
        return self.get(name)

    def face_point(self, index: int) -> Optional[Landmark]:
        if self.face is None or index >= len(self.face):
            return None
        return self.face[index]

    @property
    def has_face_mesh(self) -> bool:
        return self.face is not None and len(self.face) >= FACE_MESH_LANDMARK_COUNT

    @property
    def is_empty(self) -> bool:
        return all(lm is None for lm in self.pose)


class LandmarkDetector(Protocol):
    def detect(self, image_bgr) -> Optional[PoseLandmarkSet]: ...
