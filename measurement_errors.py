from typing import Optional


class MeasurementError(Exception):
    """Base exception for a single failed measurement step"""
    pass


class LandmarkMissing(MeasurementError):
    """Raised when a required point is absent or below the visibility threshold"""
    pass


class MouthLandmarksUnusable(LandmarkMissing):
    pass


class EarLandmarksUnusable(LandmarkMissing):
    pass


class ChinLandmarkMissing(LandmarkMissing):
    pass


class EarLandmarksMissing(LandmarkMissing):
    pass


class AcromionEstimationFailed(MeasurementError):
    """Raised when one or both acromion points cannot be estimated"""
    pass


class DegenerateGeometry(MeasurementError):
    """Raised when a computation would divide by a near-zero denominator"""
    pass


class IncompleteMeasurements(MeasurementError):
    """Raised when a report is requested before all three captures succeeded"""
    pass


class NoLandmarksDetected(MeasurementError):
    """Raised when the detector returned nothing for an image, or timed out"""
    pass


class ShoulderCompensationDetected(MeasurementError):
    """A valid measurement rejected because the shoulders moved with the neck."""

    def __init__(
        self,
        message: str,
        shoulder_angle: float,
        tolerance_degrees: float,
        image_type: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.shoulder_angle = shoulder_angle
        self.tolerance_degrees = tolerance_degrees
        self.image_type = image_type
