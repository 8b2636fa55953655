import math
import threading
import time

import pytest

import capture_session
from angle_calculator import calculate_shoulder_angle
from capture_session import (
    MeasurementSession,
    SessionState,
    analyze_capture,
    detect_landmarks,
)
from measurement_errors import NoLandmarksDetected, ShoulderCompensationDetected
from pose_types import ImageType

TILT = math.degrees(math.atan2(0.04, 0.08))


class FakeDetector:
    def __init__(self, results):
        self._results = list(results)
        self.calls = 0

    def detect(self, image_bgr):
        self.calls += 1
        return self._results.pop(0)


class SlowDetector:
    def detect(self, image_bgr):
        time.sleep(0.5)
        return None


class RaisingDetector:
    def detect(self, image_bgr):
        raise RuntimeError("graph failure")


class CountingSlowDetector:
    def __init__(self, delay=0.3):
        self._delay = delay
        self._lock = threading.Lock()
        self.running = 0
        self.max_running = 0

    def detect(self, image_bgr):
        with self._lock:
            self.running += 1
            self.max_running = max(self.max_running, self.running)
        time.sleep(self._delay)
        with self._lock:
            self.running -= 1
        return None


def test_detect_times_out():
    with pytest.raises(NoLandmarksDetected) as excinfo:
        detect_landmarks(SlowDetector(), object(), timeout_seconds=0.05)
    assert "0.05s" in str(excinfo.value)


def test_detector_exception_becomes_no_landmarks():
    with pytest.raises(NoLandmarksDetected) as excinfo:
        detect_landmarks(RaisingDetector(), object())
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_detect_without_pose_fails():
    with pytest.raises(NoLandmarksDetected):
        detect_landmarks(FakeDetector([None]), object())


def test_neutral_capture_skips_shoulder_check(hiked_shoulder_landmarks):
    measurement = analyze_capture(hiked_shoulder_landmarks, ImageType.NEUTRAL)
    assert measurement.shoulder_angle is None
    assert measurement.neck_angle == pytest.approx(TILT)


def test_tilt_capture_records_shoulder_angle(right_tilt_landmarks):
    measurement = analyze_capture(right_tilt_landmarks, ImageType.RIGHT_TILT)
    assert measurement.shoulder_angle == pytest.approx(0.0)
    assert measurement.neck_angle == pytest.approx(TILT)


def test_tilt_capture_with_compensation_is_rejected(hiked_shoulder_landmarks):
    with pytest.raises(ShoulderCompensationDetected):
        analyze_capture(hiked_shoulder_landmarks, ImageType.RIGHT_TILT)


def test_full_session(neutral_landmarks, right_tilt_landmarks, left_tilt_landmarks):
    session = MeasurementSession(FakeDetector([neutral_landmarks, right_tilt_landmarks, left_tilt_landmarks]))
    session.start()
    assert session.progress_text == "Step 1 / 3"

    for expected in (ImageType.NEUTRAL, ImageType.RIGHT_TILT, ImageType.LEFT_TILT):
        assert session.current_image_type is expected
        assert session.submit_image(object()) is not None

    assert session.state is SessionState.RESULT
    assert session.pending() == []
    assert session.report.right_angle == pytest.approx(TILT)
    assert session.report.left_angle == pytest.approx(TILT)


def test_failed_capture_returns_to_same_step(neutral_landmarks, hiked_shoulder_landmarks, right_tilt_landmarks):
    detector = FakeDetector([neutral_landmarks, hiked_shoulder_landmarks, right_tilt_landmarks])
    session = MeasurementSession(detector)
    session.start()
    session.submit_image(object())

    assert session.submit_image(object()) is None
    assert session.state is SessionState.CAPTURE
    assert session.current_image_type is ImageType.RIGHT_TILT
    assert isinstance(session.last_error, ShoulderCompensationDetected)
    assert ImageType.NEUTRAL in session.measurements

    assert session.submit_image(object()) is not None
    assert session.last_error is None
    assert session.current_image_type is ImageType.LEFT_TILT


def test_submit_outside_capture_state_fails(neutral_landmarks):
    session = MeasurementSession(FakeDetector([neutral_landmarks]))
    with pytest.raises(RuntimeError):
        session.submit_image(object())


def test_cancel_capture_steps_back(neutral_landmarks):
    session = MeasurementSession(FakeDetector([neutral_landmarks]))
    session.start()
    session.submit_image(object())

    session.cancel_capture()
    assert session.current_image_type is ImageType.NEUTRAL
    assert ImageType.NEUTRAL in session.measurements
    assert session.state is SessionState.CAPTURE

    session.cancel_capture()
    assert session.state is SessionState.INTRO


def test_reset_clears_everything(neutral_landmarks, right_tilt_landmarks, left_tilt_landmarks):
    session = MeasurementSession(FakeDetector([neutral_landmarks, right_tilt_landmarks, left_tilt_landmarks]))
    session.start()
    for _ in range(3):
        session.submit_image(object())

    session.reset()
    assert session.state is SessionState.INTRO
    assert session.report is None
    assert session.measurements == {}


def test_tilt_capture_normalizes_shoulder_sign(make_landmarks):
    landmarks = make_landmarks(
        left_ear=(0.60, 0.30),
        right_ear=(0.48, 0.30),
        left_shoulder=(0.65, 0.54),
        right_shoulder=(0.35, 0.56),
    )
    measurement = analyze_capture(landmarks, ImageType.RIGHT_TILT)
    assert measurement.shoulder_angle > 0
    assert measurement.shoulder_angle == pytest.approx(-calculate_shoulder_angle(landmarks))


def test_detector_exception_returns_to_capture_step():
    session = MeasurementSession(RaisingDetector())
    session.start()

    assert session.submit_image(object()) is None
    assert session.state is SessionState.CAPTURE
    assert session.current_image_type is ImageType.NEUTRAL
    assert isinstance(session.last_error, NoLandmarksDetected)
    session.close()


def test_unexpected_error_restores_capture_state(monkeypatch, neutral_landmarks):
    def broken(*args, **kwargs):
        raise ValueError("bad landmark set")

    monkeypatch.setattr(capture_session, "analyze_capture", broken)
    session = MeasurementSession(FakeDetector([neutral_landmarks]))
    session.start()

    with pytest.raises(ValueError):
        session.submit_image(object())
    assert session.state is SessionState.CAPTURE
    assert session.current_image_type is ImageType.NEUTRAL
    session.close()


def test_retry_after_timeout_does_not_overlap_detection():
    detector = CountingSlowDetector(delay=0.3)
    with MeasurementSession(detector, timeout_seconds=0.05) as session:
        session.start()
        assert session.submit_image(object()) is None
        assert isinstance(session.last_error, NoLandmarksDetected)
        assert session.submit_image(object()) is None
        assert session.state is SessionState.CAPTURE

    assert detector.max_running == 1
    assert detector.running == 0


def test_cancel_keeps_earlier_capture_until_replaced(neutral_landmarks, right_tilt_landmarks, left_tilt_landmarks):
    session = MeasurementSession(FakeDetector([neutral_landmarks, right_tilt_landmarks, left_tilt_landmarks]))
    session.start()
    session.submit_image(object())
    session.submit_image(object())
    first_right = session.measurements[ImageType.RIGHT_TILT]

    session.cancel_capture()
    assert session.current_image_type is ImageType.RIGHT_TILT
    assert session.measurements[ImageType.RIGHT_TILT] is first_right
    assert session.progress_text == "Step 2 / 3"

    session.submit_image(object())
    assert session.measurements[ImageType.RIGHT_TILT] is not first_right
    assert session.current_image_type is ImageType.LEFT_TILT
