"""Analyze step for one captured image, and the three-capture session around it.

The geometry functions hold no state. ``MeasurementSession`` only sequences
captures: neutral, then right tilt, then left tilt. A failed analyze step
discards that image and returns to its capture step, keeping earlier captures.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from enum import Enum
from typing import Dict, List, Optional

from angle_calculator import measure_neck_tilt, normalize_shoulder_angle
from diagnosis import CapturedMeasurement, DiagnosisReport, build_diagnosis_report
from measurement_errors import MeasurementError, NoLandmarksDetected
from pose_types import ImageType, LandmarkDetector, PoseLandmarkSet
from shoulder_validation import ensure_shoulder_level
from thresholds import (
    AcromionThresholds,
    DEFAULT_ACROMION_THRESHOLDS,
    DEFAULT_DETECTOR_CONFIG,
    DEFAULT_LANDMARK_THRESHOLDS,
    DEFAULT_SHOULDER_LEVEL_THRESHOLDS,
    LandmarkThresholds,
    ShoulderLevelThresholds,
)

logger = logging.getLogger(__name__)

CAPTURE_ORDER = (ImageType.NEUTRAL, ImageType.RIGHT_TILT, ImageType.LEFT_TILT)

CAPTURE_LABELS = {
    ImageType.NEUTRAL: "Neutral image",
    ImageType.RIGHT_TILT: "Right tilt image",
    ImageType.LEFT_TILT: "Left tilt image",
}

CAPTURE_INSTRUCTIONS = {
    ImageType.NEUTRAL: "Face the camera and look straight ahead.",
    ImageType.RIGHT_TILT: "Without moving your shoulders, tilt only your head to the right.",
    ImageType.LEFT_TILT: "Without moving your shoulders, tilt only your head to the left.",
}


class SessionState(str, Enum):
    INTRO = "intro"
    CAPTURE = "capture"
    ANALYZE = "analyze"
    RESULT = "result"


def detect_landmarks(
    detector: LandmarkDetector,
    image,
    timeout_seconds: float = DEFAULT_DETECTOR_CONFIG.detection_timeout_seconds,
    executor: Optional[ThreadPoolExecutor] = None,
) -> PoseLandmarkSet:
    """Run ``detector.detect`` and wait at most ``timeout_seconds`` for it.

    A timed-out call keeps running in its worker. Pass a single-worker
    ``executor`` that outlives the call so the next detection queues behind
    it instead of running alongside it.
    """
    owned = executor is None
    if owned:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="landmark_detect")
    try:
        future = executor.submit(detector.detect, image)
        try:
            landmarks = future.result(timeout=timeout_seconds)
        except FutureTimeoutError:
            future.cancel()
            raise NoLandmarksDetected(f"Landmark detection did not finish within {timeout_seconds:g}s")
        except Exception as exc:
            raise NoLandmarksDetected(f"Landmark detection failed: {exc}") from exc
    finally:
        if owned:
            executor.shutdown(wait=False)

    if landmarks is None or landmarks.is_empty:
        raise NoLandmarksDetected("No pose was detected. Try another image.")
    return landmarks


def analyze_capture(
    landmarks: PoseLandmarkSet,
    image_type: ImageType,
    landmark_thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS,
    acromion_thresholds: AcromionThresholds = DEFAULT_ACROMION_THRESHOLDS,
    shoulder_thresholds: ShoulderLevelThresholds = DEFAULT_SHOULDER_LEVEL_THRESHOLDS,
) -> CapturedMeasurement:
    image_type = ImageType(image_type)
    if landmarks is None or landmarks.is_empty:
        raise NoLandmarksDetected("No pose was detected. Try another image.")

    shoulder_angle = None
    if image_type.is_tilt:
        level = ensure_shoulder_level(
            landmarks, image_type, shoulder_thresholds, acromion_thresholds, landmark_thresholds
        )
        shoulder_angle = normalize_shoulder_angle(level.shoulder_angle, image_type)

    neck = measure_neck_tilt(landmarks, thresholds=landmark_thresholds)
    logger.info(
        "%s: neck angle %.1f° via %s", image_type.value, neck.angle, neck.method.value
    )
    return CapturedMeasurement(
        image_type=image_type,
        landmarks=landmarks,
        neck_angle=neck.angle,
        shoulder_angle=shoulder_angle,
        neck_method=neck.method,
    )


def analyze_image(
    detector: LandmarkDetector,
    image,
    image_type: ImageType,
    timeout_seconds: float = DEFAULT_DETECTOR_CONFIG.detection_timeout_seconds,
    executor: Optional[ThreadPoolExecutor] = None,
    **thresholds,
) -> CapturedMeasurement:
    landmarks = detect_landmarks(detector, image, timeout_seconds, executor)
    return analyze_capture(landmarks, image_type, **thresholds)


class MeasurementSession:
    def __init__(
        self,
        detector: LandmarkDetector,
        timeout_seconds: float = DEFAULT_DETECTOR_CONFIG.detection_timeout_seconds,
        landmark_thresholds: LandmarkThresholds = DEFAULT_LANDMARK_THRESHOLDS,
        acromion_thresholds: AcromionThresholds = DEFAULT_ACROMION_THRESHOLDS,
        shoulder_thresholds: ShoulderLevelThresholds = DEFAULT_SHOULDER_LEVEL_THRESHOLDS,
    ):
        self._detector = detector
        self._timeout_seconds = timeout_seconds
        # One worker: a detection that outlived its timeout blocks the next one.
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="landmark_detect")
        self._thresholds = {
            "landmark_thresholds": landmark_thresholds,
            "acromion_thresholds": acromion_thresholds,
            "shoulder_thresholds": shoulder_thresholds,
        }
        self.state = SessionState.INTRO
        self.current_image_type = ImageType.NEUTRAL
        self.measurements: Dict[ImageType, CapturedMeasurement] = {}
        self.report: Optional[DiagnosisReport] = None
        self.last_error: Optional[MeasurementError] = None

    def reset(self) -> None:
        self.state = SessionState.INTRO
        self.current_image_type = ImageType.NEUTRAL
        self.measurements = {}
        self.report = None
        self.last_error = None

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def start(self) -> None:
        self.reset()
        self.state = SessionState.CAPTURE

    @property
    def instruction(self) -> str:
        return CAPTURE_INSTRUCTIONS[self.current_image_type]

    @property
    def progress_text(self) -> str:
        step = CAPTURE_ORDER.index(self.current_image_type) + 1
        return f"Step {step} / {len(CAPTURE_ORDER)}"

    def submit_image(self, image) -> Optional[CapturedMeasurement]:
        """Analyze one image for the current capture step.

        Returns the measurement on success. On a measurement failure the image
        is discarded, ``last_error`` is set and the session stays on the same
        capture step.
        """
        if self.state is not SessionState.CAPTURE:
            raise RuntimeError(f"Cannot submit an image in state {self.state.value}")

        image_type = self.current_image_type
        self.state = SessionState.ANALYZE
        try:
            measurement = analyze_image(
                self._detector, image, image_type, self._timeout_seconds, self._executor,
                **self._thresholds,
            )
        except MeasurementError as exc:
            logger.warning("Analysis of %s image failed: %s", image_type.value, exc)
            self.last_error = exc
            self.measurements.pop(image_type, None)
            self.state = SessionState.CAPTURE
            return None
        except Exception:
            self.state = SessionState.CAPTURE
            raise

        self.last_error = None
        self.measurements[image_type] = measurement
        self._advance()
        return measurement

    def cancel_capture(self) -> None:
        self.measurements.pop(self.current_image_type, None)
        index = CAPTURE_ORDER.index(self.current_image_type)
        if index == 0:
            self.state = SessionState.INTRO
            return
        self.current_image_type = CAPTURE_ORDER[index - 1]
        self.state = SessionState.CAPTURE

    def _advance(self) -> None:
        index = CAPTURE_ORDER.index(self.current_image_type)
        if index + 1 < len(CAPTURE_ORDER):
            self.current_image_type = CAPTURE_ORDER[index + 1]
            self.state = SessionState.CAPTURE
            return
        self.report = build_diagnosis_report(self.measurements)
        self.state = SessionState.RESULT

    def pending(self) -> List[ImageType]:
        return [t for t in CAPTURE_ORDER if t not in self.measurements]
