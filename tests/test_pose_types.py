import pytest

from pose_types import ImageType, Landmark, PoseLandmark, PoseLandmarkSet, Side


def test_pose_set_requires_33_points():
    with pytest.raises(ValueError):
        PoseLandmarkSet.from_sequences([Landmark(0.5, 0.5)] * 32)


def test_points_are_addressed_by_name(neutral_landmarks):
    ear = neutral_landmarks[PoseLandmark.LEFT_EAR]
    assert (ear.x, ear.y) == (0.56, 0.30)
    assert neutral_landmarks.get(PoseLandmark.RIGHT_SHOULDER).x == 0.35


def test_face_mesh_presence(make_landmarks, make_face):
    assert not make_landmarks().has_face_mesh
    assert make_landmarks(face=make_face()).has_face_mesh
    assert not make_landmarks(face=make_face(count=467)).has_face_mesh


def test_face_point_out_of_range_is_none(make_landmarks, make_face):
    landmarks = make_landmarks(face=make_face(count=100))
    assert landmarks.face_point(152) is None


def test_empty_pose_set():
    assert PoseLandmarkSet.from_sequences([None] * 33).is_empty


def test_image_type_and_side_helpers():
    assert not ImageType.NEUTRAL.is_tilt
    assert ImageType.RIGHT_TILT.is_tilt
    assert ImageType("left_tilt") is ImageType.LEFT_TILT
    assert Side.LEFT.opposite is Side.RIGHT
