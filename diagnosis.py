import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from angle_calculator import NeckTiltMethod, calculate_lateral_flexion_angle
from assessment import (
    AsymmetryCategory,
    FlexibilityCategory,
    asymmetry_difference,
    asymmetry_label,
    evaluate_asymmetry,
    evaluate_flexibility,
    flexibility_label,
    generate_recommendations,
)
from measurement_errors import IncompleteMeasurements
from pose_types import ImageType, PoseLandmarkSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapturedMeasurement:
    image_type: ImageType
    landmarks: PoseLandmarkSet
    neck_angle: Optional[float]
    shoulder_angle: Optional[float] = None
    neck_method: Optional[NeckTiltMethod] = None

    @property
    def face_landmarks(self):
        return self.landmarks.face


@dataclass(frozen=True)
class DiagnosisReport:
    neutral_angle: float
    right_tilt_angle: float
    left_tilt_angle: float
    right_angle: float
    left_angle: float
    right_flexibility: FlexibilityCategory
    left_flexibility: FlexibilityCategory
    asymmetry: AsymmetryCategory
    asymmetry_diff: float
    recommendations: Tuple[str, ...]
    right_shoulder_angle: Optional[float] = None
    left_shoulder_angle: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "neutral_angle": self.neutral_angle,
            "right_tilt_angle": self.right_tilt_angle,
            "left_tilt_angle": self.left_tilt_angle,
            "right_angle": self.right_angle,
            "left_angle": self.left_angle,
            "right_flexibility": self.right_flexibility.value,
            "right_flexibility_label": flexibility_label(self.right_flexibility),
            "left_flexibility": self.left_flexibility.value,
            "left_flexibility_label": flexibility_label(self.left_flexibility),
            "asymmetry": self.asymmetry.value,
            "asymmetry_label": asymmetry_label(self.asymmetry),
            "asymmetry_diff": self.asymmetry_diff,
            "recommendations": list(self.recommendations),
            "right_shoulder_angle": self.right_shoulder_angle,
            "left_shoulder_angle": self.left_shoulder_angle,
        }


MeasurementsInput = Union[Mapping[ImageType, CapturedMeasurement], Iterable[CapturedMeasurement]]


def _index_measurements(measurements: MeasurementsInput) -> Dict[ImageType, CapturedMeasurement]:
    if isinstance(measurements, Mapping):
        items = list(measurements.items())
    else:
        items = [(m.image_type, m) for m in measurements]

    indexed: Dict[ImageType, CapturedMeasurement] = {}
    for key, measurement in items:
        image_type = ImageType(key)
        if ImageType(measurement.image_type) is not image_type:
            raise ValueError(
                f"Measurement for {measurement.image_type} filed under {image_type.value}"
            )
        if image_type in indexed:
            raise ValueError(f"Duplicate measurement for {image_type.value}")
        indexed[image_type] = measurement
    return indexed


def _require(indexed: Dict[ImageType, CapturedMeasurement], image_type: ImageType) -> CapturedMeasurement:
    measurement = indexed.get(image_type)
    if measurement is None:
        raise IncompleteMeasurements(f"Missing {image_type.value} measurement")
    if measurement.neck_angle is None:
        raise IncompleteMeasurements(f"{image_type.value} measurement has no neck angle")
    if measurement.landmarks is None or measurement.landmarks.is_empty:
        raise IncompleteMeasurements(f"{image_type.value} measurement has no landmarks")
    return measurement


def build_diagnosis_report(measurements: MeasurementsInput) -> DiagnosisReport:
    indexed = _index_measurements(measurements)
    neutral = _require(indexed, ImageType.NEUTRAL)
    right = _require(indexed, ImageType.RIGHT_TILT)
    left = _require(indexed, ImageType.LEFT_TILT)

    right_angle = calculate_lateral_flexion_angle(neutral.neck_angle, right.neck_angle)
    left_angle = calculate_lateral_flexion_angle(neutral.neck_angle, left.neck_angle)

    right_flexibility = evaluate_flexibility(right_angle)
    left_flexibility = evaluate_flexibility(left_angle)
    asymmetry = evaluate_asymmetry(right_angle, left_angle)
    recommendations = generate_recommendations(
        right_flexibility,
        left_flexibility,
        asymmetry,
        right_angle,
        left_angle,
    )

    report = DiagnosisReport(
        neutral_angle=neutral.neck_angle,
        right_tilt_angle=right.neck_angle,
        left_tilt_angle=left.neck_angle,
        right_angle=right_angle,
        left_angle=left_angle,
        right_flexibility=right_flexibility,
        left_flexibility=left_flexibility,
        asymmetry=asymmetry,
        asymmetry_diff=asymmetry_difference(right_angle, left_angle),
        recommendations=tuple(recommendations),
        right_shoulder_angle=right.shoulder_angle,
        left_shoulder_angle=left.shoulder_angle,
    )
    logger.debug(
        "Diagnosis: right=%.1f (%s) left=%.1f (%s) diff=%.1f (%s)",
        right_angle, right_flexibility.value, left_angle, left_flexibility.value,
        report.asymmetry_diff, asymmetry.value,
    )
    return report
